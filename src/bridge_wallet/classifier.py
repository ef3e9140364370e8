"""Normalise raw provider and contract errors into :class:`WalletError`."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from typing import Any

from .constants import USER_REJECTED_CODE
from .exceptions import ErrorKind, WalletError

ErrorPredicate = Callable[[BaseException], bool]


def error_message(error: BaseException) -> str:
    """Best-effort human readable message of a provider error."""
    message = getattr(error, "message", None)
    if isinstance(message, str) and message:
        return message
    if error.args and isinstance(error.args[0], dict):
        # web3 raises RPC errors carrying the JSON-RPC error object
        inner = error.args[0].get("message")
        if isinstance(inner, str):
            return inner
    return str(error) or type(error).__name__


def error_code(error: BaseException) -> int | None:
    code: Any = getattr(error, "code", None)
    if code is None and error.args and isinstance(error.args[0], dict):
        code = error.args[0].get("code")
    try:
        return int(code) if code is not None else None
    except (TypeError, ValueError):
        return None


def message_contains(fragment: str, *, case_sensitive: bool = True) -> ErrorPredicate:
    """Predicate matching errors whose message contains ``fragment``."""

    if case_sensitive:
        return lambda error: fragment in error_message(error)

    lowered = fragment.lower()
    return lambda error: lowered in error_message(error).lower()


def code_equals(code: int) -> ErrorPredicate:
    """Predicate matching errors carrying the JSON-RPC ``code``."""
    return lambda error: error_code(error) == code


@dataclass(frozen=True)
class ErrorRule:
    predicate: ErrorPredicate
    kind: ErrorKind


DEFAULT_RULES: tuple[ErrorRule, ...] = (
    ErrorRule(message_contains("Rejected by user"), ErrorKind.USER_REJECTED),
    ErrorRule(code_equals(USER_REJECTED_CODE), ErrorKind.USER_REJECTED),
    ErrorRule(message_contains("insufficient funds"), ErrorKind.INSUFFICIENT_FUNDS),
)


class ErrorClassifier:
    """Map errors to an :class:`ErrorKind` using an ordered rule list.

    The first matching rule wins; errors matching no rule are ``UNKNOWN``.
    Already classified errors pass through untouched so call sites can be
    composed without double wrapping.
    """

    def __init__(self, rules: Iterable[ErrorRule] | None = None) -> None:
        self._rules: Sequence[ErrorRule] = tuple(DEFAULT_RULES if rules is None else rules)

    @property
    def rules(self) -> Sequence[ErrorRule]:
        return self._rules

    def with_rules(self, *rules: ErrorRule) -> ErrorClassifier:
        """Return a classifier evaluating ``rules`` before the current ones."""
        return ErrorClassifier((*rules, *self._rules))

    def classify(self, error: BaseException) -> WalletError:
        if isinstance(error, WalletError):
            return error

        kind = ErrorKind.UNKNOWN
        for rule in self._rules:
            if rule.predicate(error):
                kind = rule.kind
                break
        return WalletError(error_message(error), kind=kind, cause=error)


_default_classifier = ErrorClassifier()


def classify_error(error: BaseException) -> WalletError:
    """Classify ``error`` with the default rules."""
    return _default_classifier.classify(error)
