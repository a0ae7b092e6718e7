"""
File keystore for FHE objects and Ethereum signing keys.

FHE objects are stored as exactly their codec encoding. Signing keys are
stored as the raw 32-byte secp256k1 scalar, which is the form eth-account
loads them from. One file per object, no header, no locking. Writes create
or truncate the target file.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import TypeVar, Union

from eth_account import Account
from eth_account.signers.local import LocalAccount

from .codec import BinarySerializable, decode, encode
from .errors import KeystoreIOError, WalletError

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BinarySerializable)

PathLike = Union[str, os.PathLike]

PRIVATE_KEY_SIZE = 32

# Order of the secp256k1 group
SECP256K1_N = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141


def _read_bytes(path: PathLike) -> bytes:
    try:
        return Path(path).read_bytes()
    except OSError as exc:
        raise KeystoreIOError(f"Cannot read {path}: {exc.strerror or exc}") from exc


def _write_bytes(path: PathLike, data: bytes) -> None:
    try:
        Path(path).write_bytes(data)
    except OSError as exc:
        raise KeystoreIOError(f"Cannot write {path}: {exc.strerror or exc}") from exc


def read_object(cls: type[T], path: PathLike) -> T:
    """Read an encoded object of type ``cls`` from ``path``."""
    obj = decode(cls, _read_bytes(path))
    logger.debug("Read %s from %s", cls.wire_tag, path)
    return obj


def write_object(obj: BinarySerializable, path: PathLike) -> None:
    """Write ``obj``'s encoding to ``path``, replacing any existing contents."""
    data = encode(obj)
    _write_bytes(path, data)
    logger.debug("Wrote %s (%d bytes) to %s", obj.wire_tag, len(data), path)


class AsFile:
    """Mixin giving a ``BinarySerializable`` class ``read``/``write``."""

    @classmethod
    def read(cls, path: PathLike):
        return read_object(cls, path)  # type: ignore[type-var]

    def write(self, path: PathLike) -> None:
        write_object(self, path)  # type: ignore[arg-type]


# ---------------------------------------------------------------------------
# Signing keys
# ---------------------------------------------------------------------------


def generate_signing_key() -> LocalAccount:
    """Create a new random secp256k1 signing key."""
    return Account.create()


def signing_key_from_bytes(data: bytes) -> LocalAccount:
    """
    Rebuild a signing key from its raw scalar.

    Raises:
        WalletError: If ``data`` is not 32 bytes or is not a valid scalar.
    """
    if len(data) != PRIVATE_KEY_SIZE:
        raise WalletError(
            f"Private key must be exactly {PRIVATE_KEY_SIZE} bytes, got {len(data)}"
        )
    scalar = int.from_bytes(data, "big")
    if scalar == 0 or scalar >= SECP256K1_N:
        raise WalletError("Private key is outside the secp256k1 scalar range")
    try:
        return Account.from_key(bytes(data))
    except ValueError as exc:
        raise WalletError(f"Invalid private key: {exc}") from exc


def read_signing_key(path: PathLike) -> LocalAccount:
    """Read a raw 32-byte signing key from ``path``."""
    account = signing_key_from_bytes(_read_bytes(path))
    logger.debug("Loaded signing key for %s from %s", account.address, path)
    return account


def write_signing_key(account: LocalAccount, path: PathLike) -> None:
    """Write ``account``'s raw private key to ``path``, replacing any existing contents."""
    _write_bytes(path, bytes(account.key))

    # Owner-only permissions on Unix
    if os.name != "nt":
        try:
            os.chmod(path, 0o600)
        except OSError as exc:
            raise KeystoreIOError(f"Cannot set permissions on {path}: {exc.strerror or exc}") from exc
    logger.debug("Wrote signing key for %s to %s", account.address, path)
