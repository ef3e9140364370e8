"""Transaction submission for approve and lock calls."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from typing import Any

from eth_typing import HexStr

from ..classifier import ErrorClassifier
from ..constants import (
    CONFIRMATION,
    ERROR,
    ETH_SEND_TRANSACTION,
    NATIVE_DECIMALS,
    NFT_FEE_TOKEN_HASH,
    TRANSACTION_HASH,
)
from ..events import EventEmitter, Subscription, subscribe
from ..exceptions import RegistryLookupError, WalletProviderError
from ..registry import ChainApiRegistry, ChainRegistry, TokenRegistry
from ..types import ContractKind
from ..utils import (
    decimal_to_integer,
    is_native_token,
    serialise_receipt,
    to_checksum_hex_address,
    to_standard_hex,
)
from .connections import WalletConnections

logger = logging.getLogger(__name__)


class TransactionEmitter(EventEmitter):
    """Signals of one submission: ``transaction_hash``, ``confirmation``, ``error``."""

    def __init__(self) -> None:
        super().__init__()
        self.task: asyncio.Task[None] | None = None


async def confirm_later(emitter: Any) -> str:
    """Resolve with the transaction hash as soon as the emitter assigns one.

    An ``error`` before the hash rejects instead. Once either fires, every
    listener this call attached is disposed, the confirmation listener
    included, so later signals neither resolve twice nor accumulate.
    """

    future: asyncio.Future[str] = asyncio.get_running_loop().create_future()
    subscriptions: list[Subscription] = []

    def retire() -> None:
        for subscription in subscriptions:
            subscription.dispose()

    def on_hash(tx_hash: Any) -> None:
        retire()
        if not future.done():
            future.set_result(tx_hash)

    def on_error(error: Any) -> None:
        retire()
        if not future.done():
            if not isinstance(error, BaseException):
                error = WalletProviderError(str(error))
            future.set_exception(error)

    def on_confirmation(*_: Any) -> None:
        confirmation.dispose()

    confirmation = subscribe(emitter, CONFIRMATION, on_confirmation)
    subscriptions.append(subscribe(emitter, TRANSACTION_HASH, on_hash))
    subscriptions.append(subscribe(emitter, ERROR, on_error))
    subscriptions.append(confirmation)

    try:
        return await future
    finally:
        retire()


class TransactionSender:
    """Submit ``eth_sendTransaction`` through the wallet and emit its signals."""

    def __init__(self, connections: WalletConnections, *, receipt_timeout: float) -> None:
        self._connections = connections
        self._receipt_timeout = receipt_timeout

    def send(self, transaction: Mapping[str, Any]) -> TransactionEmitter:
        emitter = TransactionEmitter()
        # Dispatch starts at the caller's next await, after its listeners attach
        emitter.task = asyncio.ensure_future(self._dispatch(emitter, dict(transaction)))
        return emitter

    async def _dispatch(self, emitter: TransactionEmitter, transaction: dict[str, Any]) -> None:
        try:
            tx_hash = await self._connections.request(ETH_SEND_TRANSACTION, [transaction])
        except Exception as exc:
            await self._emit_error(emitter, exc)
            return

        await emitter.emit(TRANSACTION_HASH, tx_hash)

        # Receipts are only awaited for callers that still listen for them
        if not emitter.listener_count(CONFIRMATION):
            return

        try:
            receipt = await self._connections.web3.eth.wait_for_transaction_receipt(
                HexStr(tx_hash), timeout=self._receipt_timeout
            )
        except Exception as exc:
            await self._emit_error(emitter, exc)
            return

        await emitter.emit(CONFIRMATION, 1, serialise_receipt(receipt))

    async def _emit_error(self, emitter: TransactionEmitter, error: Exception) -> None:
        if not emitter.listener_count(ERROR):
            logger.warning("Unobserved transaction error: %s", error)
        await emitter.emit(ERROR, error)


class TransactionSubmitter:
    """Build approve/lock calls and return their hash without waiting for blocks."""

    def __init__(
        self,
        connections: WalletConnections,
        *,
        token_registry: TokenRegistry,
        chain_registry: ChainRegistry,
        chain_apis: ChainApiRegistry,
        classifier: ErrorClassifier,
        sender: TransactionSender | None = None,
    ) -> None:
        self._connections = connections
        self._token_registry = token_registry
        self._chain_registry = chain_registry
        self._chain_apis = chain_apis
        self._classifier = classifier
        self._sender = sender or TransactionSender(
            connections, receipt_timeout=connections.config.receipt_timeout
        )

    # ------------------------------------------------------------------
    # Public entry points
    # ------------------------------------------------------------------
    async def approve(
        self, *, chain_id: int, address: str, token_hash: str, spender: str, amount: str
    ) -> str:
        try:
            token = self._token_registry.get_token_basic(chain_id, token_hash)
            amount_int = int(decimal_to_integer(amount, token.decimals))
            contract = self._connections.contract(ContractKind.ERC20, token_hash)
            data = contract.encode_abi(
                "approve", args=[to_checksum_hex_address(spender), amount_int]
            )
            return await self._submit(
                sender=address, to=contract.address, data=data, value=0, action="approve"
            )
        except Exception as exc:
            raise self._classifier.classify(exc) from exc

    async def nft_approve(
        self, *, address: str, token_hash: str, spender: str, token_id: str
    ) -> str:
        try:
            token_int = int(decimal_to_integer(token_id, 0))
            contract = self._connections.contract(ContractKind.ERC721, token_hash)
            data = contract.encode_abi(
                "approve", args=[to_checksum_hex_address(spender), token_int]
            )
            return await self._submit(
                sender=address, to=contract.address, data=data, value=0, action="nft_approve"
            )
        except Exception as exc:
            raise self._classifier.classify(exc) from exc

    async def lock(
        self,
        *,
        from_chain_id: int,
        from_address: str,
        from_token_hash: str,
        to_chain_id: int,
        to_address: str,
        amount: str,
        fee: str,
    ) -> str:
        try:
            chain = self._chain_registry.get_chain(from_chain_id)
            token = self._token_registry.get_token_basic(from_chain_id, from_token_hash)
            to_address_hex = self._chain_apis.get_chain_api(to_chain_id).address_to_hex(to_address)

            amount_int = int(decimal_to_integer(amount, token.decimals))
            fee_decimals = NATIVE_DECIMALS if chain.nft_fee_name else token.decimals
            fee_int = int(decimal_to_integer(fee, fee_decimals))

            contract = self._connections.contract(ContractKind.LOCK, chain.lock_contract_hash)
            data = contract.encode_abi(
                "lock",
                args=[
                    to_checksum_hex_address(from_token_hash),
                    int(to_chain_id),
                    bytes.fromhex(to_address_hex),
                    amount_int,
                    fee_int,
                    0,
                ],
            )
            # Native coins travel as value; tokens move by allowance and only the fee is paid
            value = amount_int if is_native_token(from_token_hash) else fee_int
            return await self._submit(
                sender=from_address, to=contract.address, data=data, value=value, action="lock"
            )
        except Exception as exc:
            raise self._classifier.classify(exc) from exc

    async def nft_lock(
        self,
        *,
        from_chain_id: int,
        from_address: str,
        from_token_hash: str,
        to_chain_id: int,
        to_address: str,
        token_id: str,
        fee: str,
    ) -> str:
        try:
            chain = self._chain_registry.get_chain(from_chain_id)
            if not chain.nft_lock_contract_hash:
                raise RegistryLookupError(
                    f"Chain {from_chain_id} has no NFT lock contract", key=from_chain_id
                )
            to_address_hex = self._chain_apis.get_chain_api(to_chain_id).address_to_hex(to_address)

            token_int = int(decimal_to_integer(token_id, 0))
            fee_int = int(decimal_to_integer(fee, NATIVE_DECIMALS))

            contract = self._connections.contract(
                ContractKind.NFT_LOCK, chain.nft_lock_contract_hash
            )
            data = contract.encode_abi(
                "lock",
                args=[
                    to_checksum_hex_address(from_token_hash),
                    int(to_chain_id),
                    to_checksum_hex_address(to_address_hex),
                    token_int,
                    NFT_FEE_TOKEN_HASH,
                    fee_int,
                    0,
                ],
            )
            return await self._submit(
                sender=from_address,
                to=contract.address,
                data=data,
                value=fee_int,
                action="nft_lock",
            )
        except Exception as exc:
            raise self._classifier.classify(exc) from exc

    # ------------------------------------------------------------------
    # Internal workflow
    # ------------------------------------------------------------------
    async def _submit(self, *, sender: str, to: str, data: str, value: int, action: str) -> str:
        transaction = {
            "from": to_checksum_hex_address(sender),
            "to": to,
            "data": data,
            "value": hex(value),
        }
        logger.info("Dispatching %s via %s value=%s", action, to, value)
        tx_hash = to_standard_hex(await confirm_later(self._sender.send(transaction)))
        logger.info("Transaction sent for action=%s hash=%s", action, tx_hash)
        return tx_hash
