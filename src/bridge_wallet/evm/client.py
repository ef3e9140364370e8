"""Injected wallet adapter composing lifecycle, queries and submissions."""

from __future__ import annotations

import logging

from ..base import WalletAdapterBase
from ..classifier import ErrorClassifier
from ..registry import ChainApi, ChainApiRegistry, ChainRegistry, EthereumChainApi, TokenRegistry
from ..store import InMemorySessionFlags, SessionFlags, StateSink, WalletStore
from ..types import ConnectionState, TransactionStatus
from .config import WalletAdapterConfig
from .connections import WalletConnections
from .lifecycle import ConnectionLifecycle
from .provider import WalletProvider
from .queries import ContractQuery
from .status import TransactionStatusPoller
from .transactions import TransactionSender, TransactionSubmitter

logger = logging.getLogger(__name__)


class InjectedWalletAdapter(WalletAdapterBase):
    """Bridge wallet adapter for an EVM wallet injected into the host.

    ``provider`` is ``None`` when the wallet is not installed; the adapter then
    stays not-installed for its whole life and every chain operation fails
    with a classified error.
    """

    def __init__(
        self,
        provider: WalletProvider | None,
        *,
        token_registry: TokenRegistry,
        chain_registry: ChainRegistry,
        chain_apis: ChainApiRegistry | None = None,
        state_sink: StateSink | None = None,
        session_flags: SessionFlags | None = None,
        config: WalletAdapterConfig | None = None,
        classifier: ErrorClassifier | None = None,
        address_codec: ChainApi | None = None,
    ) -> None:
        config = (config or WalletAdapterConfig()).with_defaults()
        classifier = classifier or ErrorClassifier()

        self._config = config
        self._classifier = classifier
        self._connections = WalletConnections(provider, config)
        self._lifecycle = ConnectionLifecycle(
            self._connections,
            state_sink=state_sink or WalletStore(),
            session_flags=session_flags or InMemorySessionFlags(),
            chain_api=address_codec or EthereumChainApi(),
            classifier=classifier,
        )
        self._queries = ContractQuery(
            self._connections,
            token_registry=token_registry,
            chain_registry=chain_registry,
            classifier=classifier,
        )
        self._submitter = TransactionSubmitter(
            self._connections,
            token_registry=token_registry,
            chain_registry=chain_registry,
            chain_apis=chain_apis or ChainApiRegistry(),
            classifier=classifier,
            sender=TransactionSender(self._connections, receipt_timeout=config.receipt_timeout),
        )
        self._status = TransactionStatusPoller(self._connections, classifier=classifier)

    # ------------------------------------------------------------------
    # Connection management
    # ------------------------------------------------------------------
    @property
    def config(self) -> WalletAdapterConfig:
        return self._config

    @property
    def state(self) -> ConnectionState:
        return self._lifecycle.state

    @property
    def ready(self) -> bool:
        return self._lifecycle.ready

    async def wait_ready(self) -> None:
        await self._lifecycle.wait_ready()

    async def install(self) -> None:
        await self._lifecycle.start()

    async def connect(self) -> None:
        await self._lifecycle.connect()

    def close(self) -> None:
        self._lifecycle.close()
        logger.debug("Closed %s wallet adapter", self._config.wallet_name.value)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    async def get_balance(self, *, chain_id: int, address: str, token_hash: str) -> str:
        return await self._queries.get_balance(
            chain_id=chain_id, address=address, token_hash=token_hash
        )

    async def get_allowance(
        self, *, chain_id: int, address: str, token_hash: str, spender: str
    ) -> str | None:
        return await self._queries.get_allowance(
            chain_id=chain_id, address=address, token_hash=token_hash, spender=spender
        )

    async def get_total_supply(self, *, chain_id: int, token_hash: str) -> str | None:
        return await self._queries.get_total_supply(chain_id=chain_id, token_hash=token_hash)

    async def get_nft_approved(self, *, from_chain_id: int, token_hash: str, token_id: str) -> bool:
        return await self._queries.get_nft_approved(
            from_chain_id=from_chain_id, token_hash=token_hash, token_id=token_id
        )

    async def get_transaction_status(self, *, transaction_hash: str) -> TransactionStatus:
        return await self._status.get_transaction_status(transaction_hash=transaction_hash)

    # ------------------------------------------------------------------
    # Transactions
    # ------------------------------------------------------------------
    async def approve(
        self, *, chain_id: int, address: str, token_hash: str, spender: str, amount: str
    ) -> str:
        return await self._submitter.approve(
            chain_id=chain_id,
            address=address,
            token_hash=token_hash,
            spender=spender,
            amount=amount,
        )

    async def nft_approve(
        self, *, address: str, token_hash: str, spender: str, token_id: str
    ) -> str:
        return await self._submitter.nft_approve(
            address=address, token_hash=token_hash, spender=spender, token_id=token_id
        )

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
        return await self._submitter.lock(
            from_chain_id=from_chain_id,
            from_address=from_address,
            from_token_hash=from_token_hash,
            to_chain_id=to_chain_id,
            to_address=to_address,
            amount=amount,
            fee=fee,
        )

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
        return await self._submitter.nft_lock(
            from_chain_id=from_chain_id,
            from_address=from_address,
            from_token_hash=from_token_hash,
            to_chain_id=to_chain_id,
            to_address=to_address,
            token_id=token_id,
            fee=fee,
        )
