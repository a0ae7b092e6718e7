__version__ = "0.1.0"

__all__ = [
    # Errors
    "ErrorKind",
    "Web3Error",
    "AbiError",
    "ConversionError",
    "KeystoreIOError",
    "WalletError",
    "OtherError",
    "ParseError",
    "RpcError",
    "NodeError",
    "ConfigError",
    # FHE objects
    "SchemeParams",
    "PublicKey",
    "PrivateKey",
    "Ciphertext",
    "FheRuntime",
    # Codec
    "encode",
    "decode",
    # Keystore
    "read_object",
    "write_object",
    "generate_signing_key",
    "read_signing_key",
    "write_signing_key",
    # Numeric bridge
    "Unsigned256",
    "to_chain_word",
    "to_runtime_int",
    # Units
    "parse_ether_value",
    "format_ether_value",
    # Networks
    "NetworkDescriptor",
    "PARASOL",
    "LOCALHOST",
    "SignedClient",
]

from .errors import (
    AbiError,
    ConfigError,
    ConversionError,
    ErrorKind,
    KeystoreIOError,
    NodeError,
    OtherError,
    ParseError,
    RpcError,
    WalletError,
    Web3Error,
)
from .codec import decode, encode
from .keystore import (
    generate_signing_key,
    read_object,
    read_signing_key,
    write_object,
    write_signing_key,
)
from .numeric import Unsigned256, to_chain_word, to_runtime_int
from .units import format_ether_value, parse_ether_value
from .fhe import Ciphertext, FheRuntime, PrivateKey, PublicKey, SchemeParams
from .chain import LOCALHOST, PARASOL, NetworkDescriptor, SignedClient
