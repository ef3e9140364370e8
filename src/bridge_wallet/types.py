"""Type definitions and data models for the bridge wallet adapter."""

from dataclasses import dataclass
from enum import Enum, IntEnum

Address = str  # Checksum address as reported by the wallet
HexString = str  # Lower-case hex without 0x prefix


class WalletName(str, Enum):
    """Injected wallets the adapter knows how to label."""

    BINANCE = "Binance"
    METAMASK = "Metamask"


class ChainId(IntEnum):
    """Logical chain identifiers used by the bridge."""

    POLY = 0
    BTC = 1
    ETH = 2
    ONT = 3
    NEO = 4
    BSC = 6
    HECO = 7
    OK = 12
    MATIC = 17


class TransactionStatus(Enum):
    """Status of a single submitted transaction."""

    PENDING = "pending"
    DONE = "done"
    FAILED = "failed"


class ContractKind(Enum):
    """Contracts the adapter talks to."""

    ERC20 = "erc20"
    ERC721 = "erc721"
    LOCK = "lock"
    NFT_LOCK = "nft_lock"


@dataclass(frozen=True)
class ConnectionState:
    """Snapshot of a wallet's connection as published to the state sink."""

    name: WalletName
    installed: bool = False
    connected: bool = False
    address: Address | None = None
    address_hex: HexString | None = None
    chain_id: ChainId | None = None

    def __post_init__(self) -> None:
        if self.connected != (self.address is not None):
            raise ValueError("connected must be True exactly when an address is set")


@dataclass(frozen=True)
class TokenBasic:
    """Registry entry describing a token on one chain."""

    chain_id: int
    token_hash: HexString
    decimals: int
    name: str | None = None


@dataclass(frozen=True)
class ChainInfo:
    """Registry entry describing a chain's bridge contracts."""

    chain_id: int
    lock_contract_hash: HexString
    nft_lock_contract_hash: HexString | None = None
    nft_fee_name: str | None = None
