"""Shared web3 client and contract handles for one injected wallet."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from web3 import AsyncWeb3
from web3.contract import AsyncContract

from ..abi import CONTRACT_ABIS
from ..exceptions import WalletNotInstalledError
from ..types import ContractKind
from ..utils import to_checksum_hex_address
from .config import WalletAdapterConfig
from .provider import InjectedWeb3Provider, WalletProvider

logger = logging.getLogger(__name__)


class WalletConnections:
    """Own the single web3 client bound to a wallet provider.

    Every component of an adapter receives the same instance, so nothing
    reaches for a process-wide client.
    """

    def __init__(self, provider: WalletProvider | None, config: WalletAdapterConfig) -> None:
        self.config = config
        self._provider = provider
        self._web3: AsyncWeb3 | None = (
            AsyncWeb3(InjectedWeb3Provider(provider)) if provider is not None else None
        )
        self._contracts: dict[tuple[ContractKind, str], AsyncContract] = {}

    @property
    def installed(self) -> bool:
        return self._provider is not None

    @property
    def provider(self) -> WalletProvider:
        if self._provider is None:
            raise WalletNotInstalledError(self.config.wallet_name.value)
        return self._provider

    @property
    def web3(self) -> AsyncWeb3:
        if self._web3 is None:
            raise WalletNotInstalledError(self.config.wallet_name.value)
        return self._web3

    async def request(self, method: str, params: Sequence[Any] | None = None) -> Any:
        return await self.provider.request(method, list(params) if params is not None else None)

    def contract(self, kind: ContractKind, address: str) -> AsyncContract:
        """Return a cached contract handle for ``address`` (any hex form)."""

        checksum = to_checksum_hex_address(address)
        key = (kind, checksum)
        contract = self._contracts.get(key)
        if contract is None:
            contract = self.web3.eth.contract(address=checksum, abi=CONTRACT_ABIS[kind])
            self._contracts[key] = contract
            logger.debug("Created %s contract handle at %s", kind.value, checksum)
        return contract
