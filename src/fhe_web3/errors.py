"""
Error taxonomy for fhe-web3.

Every fallible operation raises a subclass of :class:`Web3Error`. The
``kind`` attribute is the closed discriminant callers switch on; the
``exit_code`` attribute is what the CLI exits with.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    ABI = "abi"
    CONVERSION = "conversion"
    IO = "io"
    WALLET = "wallet"
    OTHER = "other"


class Web3Error(RuntimeError):
    kind: ErrorKind = ErrorKind.OTHER
    exit_code: int = 1

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"{self.kind.value} error: {self.message}"


class AbiError(Web3Error):
    """ABI encoding or decoding failed."""

    kind = ErrorKind.ABI
    exit_code = 2


class ConversionError(Web3Error):
    """A byte buffer or number could not be converted."""

    kind = ErrorKind.CONVERSION
    exit_code = 3


class KeystoreIOError(Web3Error):
    """Filesystem access failed."""

    kind = ErrorKind.IO
    exit_code = 4


class WalletError(Web3Error):
    """Signing key bytes are invalid."""

    kind = ErrorKind.WALLET
    exit_code = 5


class OtherError(Web3Error):
    kind = ErrorKind.OTHER
    exit_code = 1


class ParseError(OtherError):
    """A value string could not be parsed."""


class RpcError(OtherError):
    """The JSON-RPC endpoint failed or returned an error object."""

    exit_code = 6


class NodeError(OtherError):
    """The local test node could not be started."""

    exit_code = 7


class ConfigError(OtherError):
    pass
