"""Connection state tracking for an injected wallet."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import replace
from typing import Any

from web3 import Web3

from ..classifier import ErrorClassifier
from ..constants import (
    ACCOUNTS_CHANGED,
    CHAIN_CHANGED,
    ETH_ACCOUNTS,
    ETH_CHAIN_ID,
    ETH_REQUEST_ACCOUNTS,
)
from ..events import Subscription, subscribe
from ..registry import ChainApi, try_to_convert_address_to_hex
from ..store import SessionFlags, StateSink
from ..types import ChainId, ConnectionState
from .connections import WalletConnections

logger = logging.getLogger(__name__)


class ConnectionLifecycle:
    """Track presence, account and chain of a wallet and publish every change.

    This is the only writer of the wallet's :class:`ConnectionState`. Each
    transition computes every derived field first and then publishes the
    complete state once.
    """

    def __init__(
        self,
        connections: WalletConnections,
        *,
        state_sink: StateSink,
        session_flags: SessionFlags,
        chain_api: ChainApi,
        classifier: ErrorClassifier,
    ) -> None:
        self._connections = connections
        self._config = connections.config
        self._state_sink = state_sink
        self._session_flags = session_flags
        self._chain_api = chain_api
        self._classifier = classifier
        self._state = ConnectionState(name=self._config.wallet_name)
        self._lock = asyncio.Lock()
        self._ready = asyncio.Event()
        self._subscriptions: list[Subscription] = []

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def ready(self) -> bool:
        return self._ready.is_set()

    async def wait_ready(self) -> None:
        await self._ready.wait()

    async def start(self) -> None:
        """Detect the wallet, subscribe to its events and restore a session.

        The ready signal is set whatever happens so that dependents never
        wait on a broken wallet. Starting again while the provider
        listeners are attached does nothing.
        """

        if self._subscriptions:
            logger.debug("%s wallet already started", self._config.wallet_name.value)
            return

        try:
            if not self._connections.installed:
                logger.info("%s wallet is not installed", self._config.wallet_name.value)
                return

            async with self._lock:
                self._publish(replace(self._state, installed=True))

            provider = self._connections.provider
            self._subscriptions.append(
                subscribe(provider, ACCOUNTS_CHANGED, self._on_accounts_changed)
            )
            self._subscriptions.append(subscribe(provider, CHAIN_CHANGED, self._on_chain_changed))

            if self._session_flags.get(self._session_key):
                logger.info("Restoring %s wallet session", self._config.wallet_name.value)
                async with self._lock:
                    self._publish(await self._query_state())
        except Exception as exc:
            error = self._classifier.classify(exc)
            logger.warning(
                "Failed to initialise %s wallet: %s", self._config.wallet_name.value, error
            )
            raise error from exc
        finally:
            self._ready.set()

    async def connect(self) -> None:
        """Ask the wallet for account access and record the session."""

        try:
            await self._connections.request(ETH_REQUEST_ACCOUNTS)
            async with self._lock:
                self._publish(await self._query_state())
            self._session_flags.set(self._session_key, True)
        except Exception as exc:
            raise self._classifier.classify(exc) from exc

        logger.info(
            "Connected %s wallet address=%s chain=%s",
            self._config.wallet_name.value,
            self._state.address,
            self._state.chain_id,
        )

    def close(self) -> None:
        """Release the provider event subscriptions."""

        for subscription in self._subscriptions:
            subscription.dispose()
        self._subscriptions.clear()

    # ------------------------------------------------------------------
    # Provider events
    # ------------------------------------------------------------------
    async def _on_accounts_changed(self, accounts: Sequence[str] | None) -> None:
        try:
            async with self._lock:
                address, address_hex = self._derive_address(accounts)
                self._publish(
                    replace(
                        self._state,
                        address=address,
                        address_hex=address_hex,
                        connected=address is not None,
                    )
                )
        except Exception as exc:
            raise self._classifier.classify(exc) from exc

    async def _on_chain_changed(self, network: Any) -> None:
        try:
            async with self._lock:
                self._publish(replace(self._state, chain_id=self._map_network(network)))
        except Exception as exc:
            raise self._classifier.classify(exc) from exc

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    @property
    def _session_key(self) -> str:
        return self._config.session_key or self._config.wallet_name.value

    async def _query_state(self) -> ConnectionState:
        accounts = await self._connections.request(ETH_ACCOUNTS)
        address, address_hex = self._derive_address(accounts)
        network = await self._connections.request(ETH_CHAIN_ID)
        return replace(
            self._state,
            address=address,
            address_hex=address_hex,
            connected=address is not None,
            chain_id=self._map_network(network),
        )

    def _derive_address(self, accounts: Sequence[str] | None) -> tuple[str | None, str | None]:
        raw = accounts[0] if accounts else None
        if not raw:
            return None, None
        return Web3.to_checksum_address(raw), try_to_convert_address_to_hex(self._chain_api, raw)

    def _map_network(self, network: Any) -> ChainId | None:
        try:
            if isinstance(network, str):
                network_id = int(network, 0)
            else:
                network_id = int(network)
        except (TypeError, ValueError):
            logger.debug("Ignoring malformed network id %r", network)
            return None
        return self._config.network_chain_ids.get(network_id)

    def _publish(self, state: ConnectionState) -> None:
        self._state = state
        self._state_sink.update_wallet(state)
        logger.debug("Published wallet state %s", state)
