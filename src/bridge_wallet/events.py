"""Listener registries with disposable subscription handles."""

from __future__ import annotations

import inspect
import logging
from collections import defaultdict
from collections.abc import Callable
from typing import Any

logger = logging.getLogger(__name__)

Listener = Callable[..., Any]


class Subscription:
    """Handle returned by ``on``; disposing it detaches the listener once."""

    def __init__(self, release: Callable[[], None]) -> None:
        self._release: Callable[[], None] | None = release

    @property
    def active(self) -> bool:
        return self._release is not None

    def dispose(self) -> None:
        release, self._release = self._release, None
        if release is not None:
            release()

    def __enter__(self) -> Subscription:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.dispose()


class EventEmitter:
    """Minimal event emitter accepting plain and coroutine listeners.

    Listeners run in registration order. Coroutine listeners are awaited
    before the next listener runs, so updates driven by one event never
    overlap.
    """

    def __init__(self) -> None:
        self._listeners: dict[str, list[Listener]] = defaultdict(list)

    def on(self, event: str, listener: Listener) -> Subscription:
        self._listeners[event].append(listener)
        return Subscription(lambda: self.remove_listener(event, listener))

    def remove_listener(self, event: str, listener: Listener) -> None:
        listeners = self._listeners.get(event)
        if listeners and listener in listeners:
            listeners.remove(listener)

    off = remove_listener

    def listener_count(self, event: str) -> int:
        return len(self._listeners.get(event, ()))

    async def emit(self, event: str, *args: Any) -> None:
        for listener in list(self._listeners.get(event, ())):
            result = listener(*args)
            if inspect.isawaitable(result):
                await result


def subscribe(source: Any, event: str, listener: Listener) -> Subscription:
    """Attach ``listener`` to an ``on``/``remove_listener`` source.

    Sources that already return a :class:`Subscription` from ``on`` are used
    as is; others are wrapped so callers always get a disposable handle.
    """
    handle = source.on(event, listener)
    if isinstance(handle, Subscription):
        return handle
    logger.debug("Wrapping %s listener of %s in a subscription", event, type(source).__name__)
    return Subscription(lambda: source.remove_listener(event, listener))
