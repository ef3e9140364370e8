"""Read-only balance, allowance, supply and NFT approval queries."""

from __future__ import annotations

import logging

from ..classifier import ErrorClassifier
from ..exceptions import RegistryLookupError
from ..registry import ChainRegistry, TokenRegistry
from ..types import ContractKind
from ..utils import (
    decimal_to_integer,
    integer_to_decimal,
    is_native_token,
    same_address,
    to_checksum_hex_address,
)
from .connections import WalletConnections

logger = logging.getLogger(__name__)


class ContractQuery:
    """Read token state through the wallet's web3 client.

    Amounts come back as decimal strings scaled by the registry's precision
    for the token. ``None`` means the query does not apply to the native coin.
    """

    def __init__(
        self,
        connections: WalletConnections,
        *,
        token_registry: TokenRegistry,
        chain_registry: ChainRegistry,
        classifier: ErrorClassifier,
    ) -> None:
        self._connections = connections
        self._token_registry = token_registry
        self._chain_registry = chain_registry
        self._classifier = classifier

    async def get_balance(self, *, chain_id: int, address: str, token_hash: str) -> str:
        try:
            token = self._token_registry.get_token_basic(chain_id, token_hash)
            owner = to_checksum_hex_address(address)
            if is_native_token(token_hash):
                raw = await self._connections.web3.eth.get_balance(owner)
            else:
                contract = self._connections.contract(ContractKind.ERC20, token_hash)
                raw = await contract.functions.balanceOf(owner).call()
            return integer_to_decimal(raw, token.decimals)
        except Exception as exc:
            raise self._classifier.classify(exc) from exc

    async def get_allowance(
        self, *, chain_id: int, address: str, token_hash: str, spender: str
    ) -> str | None:
        try:
            token = self._token_registry.get_token_basic(chain_id, token_hash)
            if is_native_token(token_hash):
                return None
            contract = self._connections.contract(ContractKind.ERC20, token_hash)
            raw = await contract.functions.allowance(
                to_checksum_hex_address(address), to_checksum_hex_address(spender)
            ).call()
            return integer_to_decimal(raw, token.decimals)
        except Exception as exc:
            raise self._classifier.classify(exc) from exc

    async def get_total_supply(self, *, chain_id: int, token_hash: str) -> str | None:
        try:
            token = self._token_registry.get_token_basic(chain_id, token_hash)
            if is_native_token(token_hash):
                return None
            contract = self._connections.contract(ContractKind.ERC20, token_hash)
            raw = await contract.functions.totalSupply().call()
            return integer_to_decimal(raw, token.decimals)
        except Exception as exc:
            raise self._classifier.classify(exc) from exc

    async def get_nft_approved(self, *, from_chain_id: int, token_hash: str, token_id: str) -> bool:
        """Whether the chain's NFT lock proxy is approved to move ``token_id``."""

        try:
            chain = self._chain_registry.get_chain(from_chain_id)
            if not chain.nft_lock_contract_hash:
                raise RegistryLookupError(
                    f"Chain {from_chain_id} has no NFT lock contract", key=from_chain_id
                )
            contract = self._connections.contract(ContractKind.ERC721, token_hash)
            approved = await contract.functions.getApproved(
                int(decimal_to_integer(token_id, 0))
            ).call()
            logger.debug("Token %s #%s approved spender %s", token_hash, token_id, approved)
            return same_address(approved, chain.nft_lock_contract_hash)
        except Exception as exc:
            raise self._classifier.classify(exc) from exc
