"""Wallet adapter base interface."""

from abc import ABC, abstractmethod

from .types import ConnectionState, TransactionStatus


class WalletAdapterBase(ABC):
    """Operations a bridge application calls on a wallet."""

    @property
    @abstractmethod
    def state(self) -> ConnectionState:
        pass

    @abstractmethod
    async def install(self) -> None:
        pass

    @abstractmethod
    async def connect(self) -> None:
        pass

    @abstractmethod
    async def get_balance(self, *, chain_id: int, address: str, token_hash: str) -> str:
        pass

    @abstractmethod
    async def get_allowance(
        self, *, chain_id: int, address: str, token_hash: str, spender: str
    ) -> str | None:
        pass

    @abstractmethod
    async def get_total_supply(self, *, chain_id: int, token_hash: str) -> str | None:
        pass

    @abstractmethod
    async def get_nft_approved(self, *, from_chain_id: int, token_hash: str, token_id: str) -> bool:
        pass

    @abstractmethod
    async def get_transaction_status(self, *, transaction_hash: str) -> TransactionStatus:
        pass

    @abstractmethod
    async def approve(
        self, *, chain_id: int, address: str, token_hash: str, spender: str, amount: str
    ) -> str:
        pass

    @abstractmethod
    async def nft_approve(
        self, *, address: str, token_hash: str, spender: str, token_id: str
    ) -> str:
        pass

    @abstractmethod
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
        pass

    @abstractmethod
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
        pass

    @abstractmethod
    def close(self) -> None:
        pass
