"""
Byte codec for FHE objects embedded in contract call data.

Contracts take FHE keys and ciphertexts as opaque ``bytes``. Every
serializable type goes through the same pair of functions here: the object's
wire fields are tagged with its type name and written as canonical CBOR, so
the same object always encodes to the same bytes.
"""

from __future__ import annotations

import io
from typing import Any, ClassVar, Protocol, TypeVar

import cbor2

from .errors import ConversionError

T = TypeVar("T", bound="BinarySerializable")

TYPE_KEY = "type"

_DECODE_ERRORS = (cbor2.CBORDecodeError, ValueError, TypeError, EOFError, OverflowError)


class BinarySerializable(Protocol):
    wire_tag: ClassVar[str]

    def to_wire(self) -> dict[str, Any]:
        ...

    @classmethod
    def from_wire(cls: type[T], fields: dict[str, Any]) -> T:
        ...


def encode(obj: BinarySerializable) -> bytes:
    """Encode a serializable object as a tagged canonical CBOR map."""
    fields = obj.to_wire()
    if TYPE_KEY in fields:
        raise ConversionError(f"Wire fields of {obj.wire_tag} must not use key '{TYPE_KEY}'")
    payload = {TYPE_KEY: obj.wire_tag, **fields}
    try:
        return cbor2.dumps(payload, canonical=True)
    except (cbor2.CBOREncodeError, TypeError, ValueError) as exc:
        raise ConversionError(f"Cannot encode {obj.wire_tag}: {exc}") from exc


def decode(cls: type[T], data: bytes) -> T:
    """
    Decode ``data`` into an instance of ``cls``.

    Raises:
        ConversionError: If the buffer is malformed, truncated, has trailing
            bytes, or encodes a different type.
    """
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise ConversionError(f"Expected bytes, got {type(data).__name__}")
    raw = bytes(data)
    stream = io.BytesIO(raw)
    try:
        payload = cbor2.CBORDecoder(stream).decode()
    except _DECODE_ERRORS as exc:
        raise ConversionError(f"Malformed {cls.wire_tag} encoding: {exc}") from exc
    if stream.tell() != len(raw):
        raise ConversionError(
            f"Trailing data after {cls.wire_tag} encoding "
            f"({len(raw) - stream.tell()} bytes)"
        )
    if not isinstance(payload, dict):
        raise ConversionError(f"Expected a map for {cls.wire_tag}, got {type(payload).__name__}")

    fields = dict(payload)
    tag = fields.pop(TYPE_KEY, None)
    if tag != cls.wire_tag:
        raise ConversionError(f"Expected {cls.wire_tag} encoding, found {tag!r}")
    try:
        return cls.from_wire(fields)
    except ConversionError:
        raise
    except (KeyError, TypeError, ValueError) as exc:
        raise ConversionError(f"Invalid {cls.wire_tag} fields: {exc}") from exc


def take_field(fields: dict[str, Any], name: str, expected: type | tuple[type, ...]) -> Any:
    """Pop a required wire field and check its type."""
    if name not in fields:
        raise ConversionError(f"Missing field '{name}'")
    value = fields.pop(name)
    if isinstance(value, bool) and expected is not bool:
        raise ConversionError(f"Field '{name}' has wrong type bool")
    if not isinstance(value, expected):
        raise ConversionError(f"Field '{name}' has wrong type {type(value).__name__}")
    return value


def ensure_consumed(fields: dict[str, Any], wire_tag: str) -> None:
    if fields:
        names = ", ".join(sorted(str(k) for k in fields))
        raise ConversionError(f"Unexpected fields in {wire_tag}: {names}")


class AsBytes:
    """Mixin giving a ``BinarySerializable`` class ``to_bytes``/``from_bytes``."""

    def to_bytes(self) -> bytes:
        return encode(self)  # type: ignore[arg-type]

    @classmethod
    def from_bytes(cls, data: bytes):
        return decode(cls, data)  # type: ignore[type-var]
