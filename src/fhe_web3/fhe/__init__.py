from .runtime import FheRuntime
from .types import (
    BFV,
    CRYPTO_OBJECT_TYPES,
    Ciphertext,
    PrivateKey,
    PublicKey,
    SchemeParams,
    detect_object_type,
)

__all__ = [
    "BFV",
    "CRYPTO_OBJECT_TYPES",
    "Ciphertext",
    "FheRuntime",
    "PrivateKey",
    "PublicKey",
    "SchemeParams",
    "detect_object_type",
]
