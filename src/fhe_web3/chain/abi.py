"""
ABI helpers - function selectors, call data encoding and result decoding.

Functions are named by their signature, e.g. ``"store(bytes)"``. FHE objects
travel as ``bytes`` arguments holding their codec encoding.
"""

from __future__ import annotations

from typing import Any, Sequence

from eth_abi import decode, encode
from eth_abi.exceptions import DecodingError, EncodingError
from eth_abi.exceptions import ParseError as AbiTypeParseError
from eth_utils import keccak

from ..errors import AbiError

_ABI_ERRORS = (EncodingError, DecodingError, AbiTypeParseError, ValueError, TypeError, OverflowError)


def parse_signature(signature: str) -> tuple[str, list[str]]:
    """Split ``"name(t1,t2)"`` into its name and argument types."""
    signature = signature.replace(" ", "")
    if "(" not in signature or not signature.endswith(")"):
        raise AbiError(f"Invalid function signature: {signature!r}")
    name, _, rest = signature.partition("(")
    inner = rest[:-1]
    types: list[str] = []
    depth = 0
    current = ""
    for ch in inner:
        if ch == "," and depth == 0:
            types.append(current)
            current = ""
            continue
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
        current += ch
    if inner:
        types.append(current)
    if not name or depth != 0 or any(not t for t in types):
        raise AbiError(f"Invalid function signature: {signature!r}")
    return name, types


def function_selector(signature: str) -> bytes:
    """First four bytes of the Keccak-256 hash of a canonical signature."""
    # NOTE: Keccak-256 != SHA3-256 (NIST). Never use hashlib.sha3_256 here.
    name, types = parse_signature(signature)
    return keccak(text=f"{name}({','.join(types)})")[:4]


def encode_args(types: Sequence[str], args: Sequence[Any]) -> bytes:
    if len(types) != len(args):
        raise AbiError(f"Expected {len(types)} arguments, got {len(args)}")
    if not types:
        return b""
    try:
        return encode(list(types), list(args))
    except _ABI_ERRORS as exc:
        raise AbiError(f"Cannot encode arguments {list(types)}: {exc}") from exc


def encode_call(signature: str, args: Sequence[Any] = ()) -> bytes:
    """ABI-encode a call to ``signature`` (selector followed by arguments)."""
    _, types = parse_signature(signature)
    return function_selector(signature) + encode_args(types, args)


def decode_result(types: Sequence[str], data: bytes | str) -> Any:
    """
    ABI-decode return data.

    Returns:
        ``None`` for no outputs, the single value for one output, else a tuple
    """
    if not types:
        return None
    try:
        if isinstance(data, str):
            data = bytes.fromhex(data[2:] if data.startswith("0x") else data)
        decoded = decode(list(types), data)
    except _ABI_ERRORS as exc:
        raise AbiError(f"Cannot decode result as {list(types)}: {exc}") from exc
    if len(decoded) == 1:
        return decoded[0]
    return decoded
