"""Bridge wallet adapter - injected wallet access for a cross-chain bridge.

This library tracks an injected wallet's connection state, reads token
balances and allowances, and submits approve/lock transactions to the
bridge's lock proxies, returning hashes the caller polls for status.
"""

from .base import WalletAdapterBase
from .classifier import ErrorClassifier, ErrorRule, classify_error
from .constants import NATIVE_TOKEN_HASH
from .evm import InjectedWalletAdapter, JsonRpcWalletProvider, WalletAdapterConfig
from .exceptions import (
    BridgeWalletError,
    ErrorKind,
    FormatError,
    NetworkError,
    RegistryLookupError,
    ValidationError,
    WalletError,
    WalletNotInstalledError,
    WalletProviderError,
)
from .registry import (
    ChainApiRegistry,
    EthereumChainApi,
    StaticChainRegistry,
    StaticTokenRegistry,
    fetch_chain_registry,
    fetch_token_registry,
    try_to_convert_address_to_hex,
)
from .store import InMemorySessionFlags, WalletStore
from .types import (
    ChainId,
    ChainInfo,
    ConnectionState,
    TokenBasic,
    TransactionStatus,
    WalletName,
)
from .utils import decimal_to_integer, integer_to_decimal, to_standard_hex

__version__ = "0.1.0"

__all__ = [
    # Adapters
    "WalletAdapterBase",
    "InjectedWalletAdapter",
    "JsonRpcWalletProvider",
    "WalletAdapterConfig",
    # Types and enums
    "ChainId",
    "ChainInfo",
    "ConnectionState",
    "TokenBasic",
    "TransactionStatus",
    "WalletName",
    "NATIVE_TOKEN_HASH",
    # Collaborators
    "ChainApiRegistry",
    "EthereumChainApi",
    "StaticChainRegistry",
    "StaticTokenRegistry",
    "InMemorySessionFlags",
    "WalletStore",
    "fetch_chain_registry",
    "fetch_token_registry",
    "try_to_convert_address_to_hex",
    # Errors
    "BridgeWalletError",
    "ErrorClassifier",
    "ErrorKind",
    "ErrorRule",
    "FormatError",
    "NetworkError",
    "RegistryLookupError",
    "ValidationError",
    "WalletError",
    "WalletNotInstalledError",
    "WalletProviderError",
    "classify_error",
    # Utility functions
    "decimal_to_integer",
    "integer_to_decimal",
    "to_standard_hex",
]
