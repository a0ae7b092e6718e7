"""
Numeric bridge between the FHE runtime's 256-bit unsigned integer and the
chain client's 256-bit word.

The runtime keeps a fixed number of little-endian limbs; eth-abi takes and
returns ``uint256`` as a plain ``int``. Only the container changes, never the
value.
"""

from __future__ import annotations

from dataclasses import dataclass

from .errors import ConversionError

UINT256_BITS = 256
UINT256_MAX = (1 << UINT256_BITS) - 1

# Limb width of the runtime integer. Any width dividing 256 is supported.
LIMB_BITS = 64


def _check_limb_bits(limb_bits: int) -> int:
    if limb_bits <= 0 or UINT256_BITS % limb_bits != 0:
        raise ValueError(f"Limb width must divide {UINT256_BITS}, got {limb_bits}")
    return UINT256_BITS // limb_bits


def check_uint256(value: object) -> int:
    """Return ``value`` if it is an int in ``[0, 2**256)``, else raise ConversionError."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConversionError(f"Expected an int, got {type(value).__name__}")
    if value < 0 or value > UINT256_MAX:
        raise ConversionError(f"Value out of uint256 range: {value}")
    return value


@dataclass(frozen=True, eq=False)
class Unsigned256:
    """
    256-bit unsigned integer as held by the FHE runtime.

    Attributes:
        limbs: Least significant limb first.
        limb_bits: Width of every limb.
    """

    limbs: tuple[int, ...]
    limb_bits: int = LIMB_BITS

    def __post_init__(self) -> None:
        count = _check_limb_bits(self.limb_bits)
        if len(self.limbs) != count:
            raise ValueError(
                f"Expected {count} limbs of {self.limb_bits} bits, got {len(self.limbs)}"
            )
        limit = 1 << self.limb_bits
        for limb in self.limbs:
            if isinstance(limb, bool) or not isinstance(limb, int) or not 0 <= limb < limit:
                raise ValueError(f"Limb out of range for {self.limb_bits} bits: {limb!r}")

    @classmethod
    def from_int(cls, value: int, limb_bits: int = LIMB_BITS) -> "Unsigned256":
        count = _check_limb_bits(limb_bits)
        value = check_uint256(value)
        mask = (1 << limb_bits) - 1
        limbs = tuple((value >> (limb_bits * i)) & mask for i in range(count))
        return cls(limbs=limbs, limb_bits=limb_bits)

    @classmethod
    def zero(cls) -> "Unsigned256":
        return cls.from_int(0)

    def __int__(self) -> int:
        value = 0
        for i, limb in enumerate(self.limbs):
            value |= limb << (self.limb_bits * i)
        return value

    __index__ = __int__

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Unsigned256):
            return int(self) == int(other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(int(self))

    def __repr__(self) -> str:
        return f"Unsigned256({int(self):#x})"


def to_chain_word(value: Unsigned256) -> int:
    """Convert a runtime integer into the chain client's uint256 word."""
    return int(value)


def to_runtime_int(word: int, limb_bits: int = LIMB_BITS) -> Unsigned256:
    """Convert a chain client uint256 word into a runtime integer."""
    return Unsigned256.from_int(word, limb_bits=limb_bits)
