"""
Ether amount parsing.

Accepts ``0x``-prefixed hex (taken as wei), plain integers (wei), or a
decimal amount tagged with a unit, e.g. ``"1ether"``, ``"1.5 gwei"``,
``"2 Finney"``.
"""

from __future__ import annotations

import decimal
import re
from decimal import Decimal

from eth_utils import from_wei, to_wei

from .errors import ParseError
from .numeric import UINT256_MAX

_HEX_RE = re.compile(r"[0-9a-fA-F]+")
_AMOUNT_RE = re.compile(r"(?P<value>\d+(?:\.\d+)?)\s*(?P<unit>[A-Za-z]+)?")

_UNIT_ALIASES = {"eth": "ether"}


def _normalize_unit(unit: str) -> str:
    unit = unit.lower()
    return _UNIT_ALIASES.get(unit, unit)


def _unit_decimals(unit: str) -> int:
    try:
        return len(str(to_wei(1, unit))) - 1
    except ValueError as exc:
        raise ParseError(f"Unrecognized unit: {unit!r}") from exc


def parse_ether_value(value: str) -> int:
    """
    Parse an ether amount into wei.

    An untagged amount (e.g. ``"100"``) is interpreted as wei.

    Raises:
        ParseError: On malformed numbers, unknown units, sub-wei amounts or
            values that do not fit in a uint256.
    """
    text = value.strip()
    if text.startswith("0x"):
        body = text[2:]
        if not _HEX_RE.fullmatch(body):
            raise ParseError(f"Invalid hex value: {value!r}")
        wei = int(body, 16)
        if wei > UINT256_MAX:
            raise ParseError(f"Hex value does not fit in uint256: {value!r}")
        return wei

    match = _AMOUNT_RE.fullmatch(text)
    if match is None:
        raise ParseError(f"Invalid ether value: {value!r}")

    amount = match.group("value")
    unit = _normalize_unit(match.group("unit") or "wei")
    decimals = _unit_decimals(unit)

    if "." in amount:
        fraction = amount.split(".", 1)[1].rstrip("0")
        if len(fraction) > decimals:
            raise ParseError(f"Value {value!r} is smaller than 1 wei")

    try:
        wei = to_wei(Decimal(amount), unit)
    except (ValueError, decimal.InvalidOperation) as exc:
        raise ParseError(f"Invalid ether value {value!r}: {exc}") from exc
    if wei > UINT256_MAX:
        raise ParseError(f"Value does not fit in uint256: {value!r}")
    return int(wei)


def format_ether_value(wei: int, unit: str = "ether") -> str:
    """Format a wei amount in ``unit`` for display, e.g. ``"1.5 ether"``."""
    unit = _normalize_unit(unit)
    _unit_decimals(unit)
    amount = Decimal(from_wei(wei, unit))
    text = format(amount.normalize(), "f") if amount else "0"
    return f"{text} {unit}"
