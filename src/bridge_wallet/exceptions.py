"""Exception hierarchy for the bridge wallet adapter."""

from enum import Enum
from typing import Any


class BridgeWalletError(Exception):
    """Base exception for all bridge wallet errors."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ValidationError(BridgeWalletError):
    """Raised when input validation fails."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: Any | None = None,
        details: dict | None = None,
    ):
        super().__init__(message, details)
        self.field = field
        self.value = value


class FormatError(ValidationError):
    """Raised when a numeric or hex string is malformed."""

    pass


class NetworkError(BridgeWalletError):
    """Raised when the provider or a remote registry cannot be reached."""

    def __init__(
        self,
        message: str,
        endpoint: str | None = None,
        details: dict | None = None,
    ):
        super().__init__(message, details)
        self.endpoint = endpoint


class RegistryLookupError(BridgeWalletError):
    """Raised when a token, chain or address codec is not registered."""

    def __init__(self, message: str, key: Any | None = None, details: dict | None = None):
        super().__init__(message, details)
        self.key = key


class WalletNotInstalledError(BridgeWalletError):
    """Raised when an operation needs a wallet provider that is absent."""

    def __init__(self, wallet_name: str):
        super().__init__(f"Wallet '{wallet_name}' is not installed")
        self.wallet_name = wallet_name


class WalletProviderError(BridgeWalletError):
    """JSON-RPC error reported by a wallet provider."""

    def __init__(self, message: str, code: int | None = None, data: Any | None = None):
        super().__init__(message, {"code": code, "data": data})
        self.code = code
        self.data = data


class ErrorKind(str, Enum):
    """Closed taxonomy of wallet failures surfaced to callers."""

    USER_REJECTED = "user_rejected"
    INSUFFICIENT_FUNDS = "insufficient_funds"
    UNKNOWN = "unknown"


class WalletError(BridgeWalletError):
    """Classified wallet failure; ``kind`` and ``cause`` are read-only."""

    def __init__(
        self,
        message: str,
        kind: ErrorKind = ErrorKind.UNKNOWN,
        cause: BaseException | None = None,
    ):
        Exception.__init__(self, message)
        self.details = {"kind": kind.value}
        self._message = message
        self._kind = kind
        self._cause = cause

    @property
    def message(self) -> str:  # type: ignore[override]
        return self._message

    @property
    def kind(self) -> ErrorKind:
        return self._kind

    @property
    def cause(self) -> BaseException | None:
        return self._cause

    def __repr__(self) -> str:
        return f"WalletError(kind={self._kind.value!r}, message={self.message!r})"
