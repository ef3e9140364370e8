"""Wallet provider interface and its bridge into web3."""

from __future__ import annotations

import itertools
import logging
from collections.abc import Sequence
from typing import Any, Protocol

from web3 import AsyncHTTPProvider
from web3.providers import AsyncBaseProvider
from web3.types import RPCEndpoint, RPCResponse

from ..constants import ETH_ACCOUNTS, ETH_REQUEST_ACCOUNTS
from ..events import EventEmitter, Listener
from ..exceptions import WalletProviderError

logger = logging.getLogger(__name__)


class WalletProvider(Protocol):
    """EIP-1193 style provider injected by a wallet."""

    async def request(self, method: str, params: Sequence[Any] | None = None) -> Any: ...

    def on(self, event: str, listener: Listener) -> Any: ...

    def remove_listener(self, event: str, listener: Listener) -> None: ...


class InjectedWeb3Provider(AsyncBaseProvider):
    """Route web3 JSON-RPC requests through an injected wallet provider.

    Errors raised by the wallet propagate untouched so that they can be
    classified by the caller.
    """

    def __init__(self, wallet: WalletProvider) -> None:
        super().__init__()
        self._wallet = wallet
        self._ids = itertools.count(1)

    async def make_request(self, method: RPCEndpoint, params: Any) -> RPCResponse:
        result = await self._wallet.request(str(method), list(params or []))
        return {"jsonrpc": "2.0", "id": next(self._ids), "result": result}

    async def is_connected(self, show_traceback: bool = False) -> bool:
        return True


class JsonRpcWalletProvider(EventEmitter):
    """Wallet provider backed by a node's JSON-RPC endpoint.

    Intended for development nodes with unlocked accounts. Account and chain
    change events are never pushed by a node; hosts emit them through
    :meth:`emit` when they switch accounts or networks.
    """

    def __init__(self, endpoint_uri: str) -> None:
        super().__init__()
        self.endpoint_uri = endpoint_uri
        self._http = AsyncHTTPProvider(endpoint_uri)

    async def request(self, method: str, params: Sequence[Any] | None = None) -> Any:
        if method == ETH_REQUEST_ACCOUNTS:
            method = ETH_ACCOUNTS

        logger.debug("Provider request %s to %s", method, self.endpoint_uri)
        response = await self._http.make_request(RPCEndpoint(method), list(params or []))
        error = response.get("error")
        if error:
            if isinstance(error, dict):
                raise WalletProviderError(
                    str(error.get("message", "JSON-RPC error")),
                    code=error.get("code"),
                    data=error.get("data"),
                )
            raise WalletProviderError(str(error))
        return response.get("result")
