"""Amount and hex conversion helpers for the bridge wallet adapter."""

import re
from collections.abc import Mapping, Sequence
from decimal import ROUND_DOWN, Context, Decimal, InvalidOperation
from typing import Any

from hexbytes import HexBytes
from web3 import Web3

from .constants import NATIVE_TOKEN_HASH
from .exceptions import FormatError

_DECIMAL_RE = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)$")
_INTEGER_RE = re.compile(r"^[+-]?\d+$")
_HEX_RE = re.compile(r"^[0-9a-f]*$")


def _check_decimals(decimals: int) -> int:
    if isinstance(decimals, bool) or not isinstance(decimals, int) or decimals < 0:
        raise FormatError(
            "Decimals must be a non-negative integer", field="decimals", value=decimals
        )
    return decimals


def _context_for(digits: int, decimals: int) -> Context:
    # Wide enough that no arithmetic step ever rounds
    return Context(prec=digits + decimals + 2)


def decimal_to_integer(value: str | int | Decimal, decimals: int) -> str:
    """Shift ``value`` right by ``decimals`` digits, truncating any remainder.

    Args:
        value: Decimal string such as ``"1.5"``
        decimals: Token precision

    Returns:
        Integer string such as ``"1500000000000000000"``

    Raises:
        FormatError: If ``value`` is not a plain decimal number
    """
    decimals = _check_decimals(decimals)
    if isinstance(value, Decimal):
        if not value.is_finite():
            raise FormatError(f"Invalid decimal amount: {value!r}", field="value", value=value)
        # str() of a Decimal may use exponent notation
        text = format(value, "f")
    else:
        text = str(value).strip()
    if not _DECIMAL_RE.match(text):
        raise FormatError(f"Invalid decimal amount: {value!r}", field="value", value=value)

    quantity = Decimal(text)
    context = _context_for(len(text), decimals)
    scaled = quantity.scaleb(decimals, context=context)
    integral = scaled.to_integral_value(rounding=ROUND_DOWN, context=context)
    return str(int(integral))


def integer_to_decimal(value: str | int, decimals: int) -> str:
    """Shift ``value`` left by ``decimals`` digits without losing precision.

    The result is normalised: trailing fractional zeros are dropped, so
    ``decimal_to_integer("1.50", 2)`` converts back to ``"1.5"``. Compare
    amounts numerically rather than as strings.

    Raises:
        FormatError: If ``value`` is not an integer
    """
    decimals = _check_decimals(decimals)
    if isinstance(value, bool):
        raise FormatError(f"Invalid integer amount: {value!r}", field="value", value=value)
    if isinstance(value, int):
        integer = value
    else:
        text = str(value).strip()
        if not _INTEGER_RE.match(text):
            raise FormatError(f"Invalid integer amount: {value!r}", field="value", value=value)
        integer = int(text)

    if decimals == 0:
        return str(integer)

    digits = len(str(abs(integer)))
    try:
        shifted = Decimal(integer).scaleb(-decimals, context=_context_for(digits, decimals))
    except InvalidOperation as exc:  # pragma: no cover - context is always wide enough
        raise FormatError("Unable to scale integer amount", field="value", value=value) from exc

    text = format(shifted, "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    if text in ("-0", ""):
        text = "0"
    return text


def to_standard_hex(value: str | bytes) -> str:
    """Return ``value`` as lower-case hex without a ``0x`` prefix."""
    if isinstance(value, bytes | bytearray):
        return HexBytes(value).hex().removeprefix("0x")
    text = value.strip()
    if text[:2] in ("0x", "0X"):
        text = text[2:]
    text = text.lower()
    if not _HEX_RE.match(text):
        raise FormatError(f"Invalid hex string: {value!r}", field="hex", value=value)
    return text


def to_checksum_hex_address(value: str) -> str:
    """Return a checksum ``0x`` address for a standard or prefixed hex address."""
    return Web3.to_checksum_address(f"0x{to_standard_hex(value)}")


def same_address(left: str | None, right: str | None) -> bool:
    """Compare two hex addresses ignoring prefix and letter case."""
    if left is None or right is None:
        return False
    return to_standard_hex(left) == to_standard_hex(right)


def serialise_receipt(receipt: Any) -> Any:
    """Serialise web3 receipt objects into JSON-friendly structures."""
    if receipt is None:
        return None
    if isinstance(receipt, Mapping):
        return {key: serialise_receipt(value) for key, value in receipt.items()}
    if isinstance(receipt, Sequence) and not isinstance(
        receipt, str | bytes | bytearray | HexBytes
    ):
        return [serialise_receipt(item) for item in receipt]
    if isinstance(receipt, bytes | bytearray | HexBytes):
        return HexBytes(receipt).to_0x_hex()
    return receipt


def is_native_token(token_hash: str) -> bool:
    """Whether ``token_hash`` is the sentinel for the chain's native coin."""
    return to_standard_hex(token_hash) == NATIVE_TOKEN_HASH
