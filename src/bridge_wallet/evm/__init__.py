"""Injected EVM wallet adapter."""

from .client import InjectedWalletAdapter
from .config import WalletAdapterConfig
from .provider import InjectedWeb3Provider, JsonRpcWalletProvider, WalletProvider
from .transactions import TransactionEmitter, confirm_later

__all__ = [
    "InjectedWalletAdapter",
    "WalletAdapterConfig",
    "WalletProvider",
    "InjectedWeb3Provider",
    "JsonRpcWalletProvider",
    "TransactionEmitter",
    "confirm_later",
]
