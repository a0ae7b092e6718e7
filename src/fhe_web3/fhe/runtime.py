"""
FHE runtime adapter over TenSEAL's BFV scheme.

TenSEAL is an optional dependency (``pip install fhe-web3[fhe]``) and is only
imported when a runtime operation is used. Keys are TenSEAL contexts
serialized with or without their secret key; ciphertexts are serialized
BFV vectors.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Union

from ..errors import ConversionError, OtherError
from .types import BFV, DATA_TYPES, Ciphertext, PrivateKey, PublicKey, SchemeParams

logger = logging.getLogger(__name__)


def _tenseal() -> Any:
    try:
        import tenseal
    except ImportError as exc:
        raise OtherError(
            "TenSEAL is required for FHE operations. "
            "Install it with: pip install 'fhe-web3[fhe]'"
        ) from exc
    return tenseal


class FheRuntime:
    """Generate keys, encrypt, decrypt and add under one BFV parameter set."""

    def __init__(self, params: SchemeParams | None = None) -> None:
        self.params = params or SchemeParams()
        if self.params.scheme != BFV:
            raise ConversionError(f"Unsupported FHE scheme: {self.params.scheme}")

    def _check_params(self, params: SchemeParams, what: str) -> None:
        if params != self.params:
            raise ConversionError(
                f"{what} was produced under {params}, runtime uses {self.params}"
            )

    def _context_from(self, data: bytes) -> Any:
        ts = _tenseal()
        try:
            return ts.context_from(data)
        except (ValueError, RuntimeError) as exc:
            raise ConversionError(f"Invalid serialized key: {exc}") from exc

    def generate_keys(self) -> tuple[PublicKey, PrivateKey]:
        ts = _tenseal()
        context = ts.context(
            ts.SCHEME_TYPE.BFV,
            poly_modulus_degree=self.params.poly_modulus_degree,
            plain_modulus=self.params.plain_modulus,
        )
        private = context.serialize(save_secret_key=True)
        context.make_context_public()
        public = context.serialize()
        logger.debug(
            "Generated BFV keys (n=%d, t=%d)",
            self.params.poly_modulus_degree,
            self.params.plain_modulus,
        )
        return PublicKey(params=self.params, data=public), PrivateKey(params=self.params, data=private)

    def encrypt(
        self,
        values: Union[int, Iterable[int]],
        public_key: PublicKey,
        data_type: str = "Signed",
    ) -> Ciphertext:
        self._check_params(public_key.params, "Public key")
        if data_type not in DATA_TYPES:
            raise ConversionError(f"Unknown plaintext type {data_type!r} (known: {', '.join(DATA_TYPES)})")
        plain = [values] if isinstance(values, int) else list(values)
        if not plain:
            raise ConversionError("Nothing to encrypt")
        ts = _tenseal()
        context = self._context_from(public_key.data)
        vector = ts.bfv_vector(context, plain)
        return Ciphertext(params=self.params, data_type=data_type, data=vector.serialize())

    def decrypt(self, ciphertext: Ciphertext, private_key: PrivateKey) -> list[int]:
        self._check_params(private_key.params, "Private key")
        self._check_params(ciphertext.params, "Ciphertext")
        ts = _tenseal()
        context = self._context_from(private_key.data)
        if not context.is_private():
            raise ConversionError("Private key does not contain a secret key")
        try:
            vector = ts.bfv_vector_from(context, ciphertext.data)
        except (ValueError, RuntimeError) as exc:
            raise ConversionError(f"Invalid serialized ciphertext: {exc}") from exc
        return list(vector.decrypt())

    def add(self, a: Ciphertext, b: Ciphertext, public_key: PublicKey) -> Ciphertext:
        """Homomorphically add two ciphertexts of the same plaintext type."""
        self._check_params(public_key.params, "Public key")
        for ct in (a, b):
            self._check_params(ct.params, "Ciphertext")
        if a.data_type != b.data_type:
            raise ConversionError(f"Cannot add {a.data_type} and {b.data_type} ciphertexts")
        ts = _tenseal()
        context = self._context_from(public_key.data)
        try:
            left = ts.bfv_vector_from(context, a.data)
            right = ts.bfv_vector_from(context, b.data)
        except (ValueError, RuntimeError) as exc:
            raise ConversionError(f"Invalid serialized ciphertext: {exc}") from exc
        total = left + right
        return Ciphertext(params=self.params, data_type=a.data_type, data=total.serialize())
