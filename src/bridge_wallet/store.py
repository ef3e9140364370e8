"""State sink and session flag collaborators."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Protocol

from .types import ConnectionState, WalletName

logger = logging.getLogger(__name__)


class StateSink(Protocol):
    def update_wallet(self, state: ConnectionState) -> None: ...


class SessionFlags(Protocol):
    def get(self, key: str) -> bool: ...

    def set(self, key: str, value: bool) -> None: ...


class WalletStore:
    """Keep the latest published state per wallet and notify watchers."""

    def __init__(self) -> None:
        self._wallets: dict[WalletName, ConnectionState] = {}
        self._watchers: list[Callable[[ConnectionState], None]] = []

    def update_wallet(self, state: ConnectionState) -> None:
        self._wallets[state.name] = state
        logger.debug("Wallet %s updated: %s", state.name.value, state)
        for watcher in list(self._watchers):
            watcher(state)

    def get_wallet(self, name: WalletName) -> ConnectionState | None:
        return self._wallets.get(name)

    def watch(self, watcher: Callable[[ConnectionState], None]) -> None:
        self._watchers.append(watcher)


class InMemorySessionFlags:
    """Session-scoped boolean flags."""

    def __init__(self, initial: dict[str, bool] | None = None) -> None:
        self._flags = dict(initial or {})

    def get(self, key: str) -> bool:
        return self._flags.get(key, False)

    def set(self, key: str, value: bool) -> None:
        self._flags[key] = bool(value)
