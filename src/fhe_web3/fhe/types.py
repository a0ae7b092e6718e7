"""
FHE object model.

Keys and ciphertexts are produced by the FHE runtime; this layer only carries
the runtime's own serialized form together with the parameter set it belongs
to. Instances are immutable.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar

from ..codec import AsBytes, ensure_consumed, take_field
from ..errors import ConversionError
from ..keystore import AsFile

BFV = "bfv"

# Plaintext type labels a ciphertext may carry
DATA_TYPES = ("Signed", "Unsigned64", "Unsigned256")


@dataclass(frozen=True)
class SchemeParams:
    scheme: str = BFV
    poly_modulus_degree: int = 4096
    plain_modulus: int = 1032193

    def to_wire(self) -> dict[str, Any]:
        return {
            "scheme": self.scheme,
            "poly_modulus_degree": self.poly_modulus_degree,
            "plain_modulus": self.plain_modulus,
        }

    @classmethod
    def from_wire(cls, value: Any) -> "SchemeParams":
        if not isinstance(value, dict):
            raise ConversionError(f"Field 'params' has wrong type {type(value).__name__}")
        fields = dict(value)
        params = cls(
            scheme=take_field(fields, "scheme", str),
            poly_modulus_degree=take_field(fields, "poly_modulus_degree", int),
            plain_modulus=take_field(fields, "plain_modulus", int),
        )
        ensure_consumed(fields, "params")
        return params


@dataclass(frozen=True)
class _KeyMaterial(AsBytes, AsFile):
    params: SchemeParams
    data: bytes

    def to_wire(self) -> dict[str, Any]:
        return {"params": self.params.to_wire(), "data": bytes(self.data)}

    @classmethod
    def from_wire(cls, fields: dict[str, Any]):
        params = SchemeParams.from_wire(take_field(fields, "params", dict))
        data = take_field(fields, "data", bytes)
        ensure_consumed(fields, cls.wire_tag)
        return cls(params=params, data=data)


@dataclass(frozen=True)
class PublicKey(_KeyMaterial):
    """A public key (serialized public runtime context)."""

    wire_tag: ClassVar[str] = "PublicKey"


@dataclass(frozen=True)
class PrivateKey(_KeyMaterial):
    """A private key (serialized runtime context including the secret key)."""

    wire_tag: ClassVar[str] = "PrivateKey"

    def __repr__(self) -> str:
        return f"PrivateKey(params={self.params!r}, data=<{len(self.data)} bytes>)"


@dataclass(frozen=True)
class Ciphertext(AsBytes, AsFile):
    """
    An encrypted value.

    Attributes:
        params: Parameter set the ciphertext was encrypted under.
        data_type: Label of the plaintext type, e.g. ``"Signed"``.
        data: Serialized runtime ciphertext.
    """

    wire_tag: ClassVar[str] = "Ciphertext"

    params: SchemeParams
    data_type: str
    data: bytes

    def to_wire(self) -> dict[str, Any]:
        return {
            "params": self.params.to_wire(),
            "data_type": self.data_type,
            "data": bytes(self.data),
        }

    @classmethod
    def from_wire(cls, fields: dict[str, Any]) -> "Ciphertext":
        params = SchemeParams.from_wire(take_field(fields, "params", dict))
        data_type = take_field(fields, "data_type", str)
        data = take_field(fields, "data", bytes)
        ensure_consumed(fields, cls.wire_tag)
        return cls(params=params, data_type=data_type, data=data)


CRYPTO_OBJECT_TYPES: tuple[type, ...] = (PublicKey, PrivateKey, Ciphertext)


def detect_object_type(data: bytes) -> type:
    """Return the CryptoObject class whose encoding ``data`` holds."""
    for cls in CRYPTO_OBJECT_TYPES:
        try:
            cls.from_bytes(data)
        except ConversionError:
            continue
        return cls
    raise ConversionError("Buffer does not hold a PublicKey, PrivateKey or Ciphertext")
