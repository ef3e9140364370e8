from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any

import pytest
from eth_abi import encode as abi_encode
from web3 import Web3

from bridge_wallet.events import EventEmitter
from bridge_wallet.evm.client import InjectedWalletAdapter
from bridge_wallet.evm.config import WalletAdapterConfig
from bridge_wallet.exceptions import WalletProviderError
from bridge_wallet.registry import StaticChainRegistry, StaticTokenRegistry
from bridge_wallet.store import InMemorySessionFlags, WalletStore
from bridge_wallet.types import ChainId, ChainInfo, TokenBasic

USER_ADDRESS = "0x" + "ab" * 20
TOKEN_HASH = "1f" * 20
NFT_HASH = "2e" * 20
LOCK_HASH = "3d" * 20
NFT_LOCK_HASH = "4c" * 20
TX_HASH = "0x" + "9a" * 32


def selector(signature: str) -> str:
    return Web3.keccak(text=signature)[:4].hex().removeprefix("0x")


class FakeWallet(EventEmitter):
    """In-memory injected wallet answering the JSON-RPC calls the adapter makes."""

    def __init__(self, *, accounts: Sequence[str] = (), chain_id: str = "0x61") -> None:
        super().__init__()
        self.accounts = list(accounts)
        self.chain_id = chain_id
        self.balances: dict[str, int] = {}
        self.call_results: dict[tuple[str, str], bytes] = {}
        self.receipts: dict[str, dict[str, Any] | None] = {}
        self.errors: dict[str, Exception] = {}
        self.requests: list[tuple[str, list[Any]]] = []
        self.sent: list[dict[str, Any]] = []
        self.tx_hash = TX_HASH

    def methods(self, name: str) -> list[list[Any]]:
        return [params for method, params in self.requests if method == name]

    def set_call_result(self, contract: str, signature: str, types: list[str], values: list[Any]):
        key = (contract.lower().removeprefix("0x"), selector(signature))
        self.call_results[key] = abi_encode(types, values)

    async def request(self, method: str, params: Sequence[Any] | None = None) -> Any:
        params = list(params or [])
        self.requests.append((method, params))
        if method in self.errors:
            raise self.errors[method]

        if method in ("eth_accounts", "eth_requestAccounts"):
            return list(self.accounts)
        if method == "eth_chainId":
            return self.chain_id
        if method == "eth_getBalance":
            return hex(self.balances.get(str(params[0]).lower(), 0))
        if method == "eth_call":
            tx = params[0]
            data = tx.get("data") or tx.get("input")
            if isinstance(data, bytes | bytearray):
                data = data.hex()
            key = (str(tx["to"]).lower().removeprefix("0x"), str(data).removeprefix("0x")[:8])
            return "0x" + self.call_results[key].hex()
        if method == "eth_sendTransaction":
            self.sent.append(dict(params[0]))
            return self.tx_hash
        if method == "eth_getTransactionReceipt":
            return self.receipts.get(str(params[0]).lower())
        raise WalletProviderError(f"Unsupported method {method}", code=-32601)


@pytest.fixture
def wallet() -> FakeWallet:
    return FakeWallet()


@pytest.fixture
def token_registry() -> StaticTokenRegistry:
    return StaticTokenRegistry(
        [
            TokenBasic(chain_id=ChainId.BSC, token_hash="0" * 40, decimals=18, name="BNB"),
            TokenBasic(chain_id=ChainId.BSC, token_hash=TOKEN_HASH, decimals=6, name="USDT"),
            TokenBasic(chain_id=ChainId.BSC, token_hash=NFT_HASH, decimals=0, name="NFT"),
        ]
    )


@pytest.fixture
def chain_registry() -> StaticChainRegistry:
    return StaticChainRegistry(
        [
            ChainInfo(
                chain_id=ChainId.BSC,
                lock_contract_hash=LOCK_HASH,
                nft_lock_contract_hash=NFT_LOCK_HASH,
            ),
            ChainInfo(chain_id=ChainId.HECO, lock_contract_hash=LOCK_HASH, nft_fee_name="HT"),
        ]
    )


@pytest.fixture
def store() -> WalletStore:
    return WalletStore()


@pytest.fixture
def session_flags() -> InMemorySessionFlags:
    return InMemorySessionFlags()


@pytest.fixture
def make_adapter(
    token_registry: StaticTokenRegistry,
    chain_registry: StaticChainRegistry,
    store: WalletStore,
    session_flags: InMemorySessionFlags,
) -> Callable[..., InjectedWalletAdapter]:
    def factory(provider: Any, **kwargs: Any) -> InjectedWalletAdapter:
        kwargs.setdefault("config", WalletAdapterConfig(testnet=True))
        return InjectedWalletAdapter(
            provider,
            token_registry=token_registry,
            chain_registry=chain_registry,
            state_sink=store,
            session_flags=session_flags,
            **kwargs,
        )

    return factory
