"""Tests for listener registries and subscriptions."""

import asyncio

from bridge_wallet.events import EventEmitter, Subscription, subscribe


def test_subscription_dispose_is_idempotent() -> None:
    emitter = EventEmitter()
    subscription = emitter.on("ping", lambda: None)
    assert emitter.listener_count("ping") == 1

    subscription.dispose()
    subscription.dispose()

    assert not subscription.active
    assert emitter.listener_count("ping") == 0


def test_subscription_context_manager() -> None:
    emitter = EventEmitter()
    with emitter.on("ping", lambda: None):
        assert emitter.listener_count("ping") == 1
    assert emitter.listener_count("ping") == 0


def test_emit_awaits_async_listeners_in_order() -> None:
    emitter = EventEmitter()
    seen: list[str] = []

    async def slow(value: str) -> None:
        await asyncio.sleep(0)
        seen.append(f"slow:{value}")

    emitter.on("tick", slow)
    emitter.on("tick", lambda value: seen.append(f"fast:{value}"))

    asyncio.run(emitter.emit("tick", "a"))

    assert seen == ["slow:a", "fast:a"]


class LegacySource:
    def __init__(self) -> None:
        self.listeners: list = []

    def on(self, event, listener) -> None:
        self.listeners.append((event, listener))

    def remove_listener(self, event, listener) -> None:
        self.listeners.remove((event, listener))


def test_subscribe_wraps_sources_without_handles() -> None:
    source = LegacySource()

    def listener() -> None:
        pass

    subscription = subscribe(source, "accountsChanged", listener)

    assert isinstance(subscription, Subscription)
    assert source.listeners == [("accountsChanged", listener)]
    subscription.dispose()
    assert source.listeners == []
