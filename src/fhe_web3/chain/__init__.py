"""
Chain - on-chain interaction layer.

Provides a JSON-RPC client, ABI helpers, a signing client and the table of
known networks. Uses httpx + eth-account + eth-abi instead of web3.py.
"""

from .abi import decode_result, encode_call, function_selector
from .networks import LOCALHOST, NETWORKS, PARASOL, NetworkDescriptor, get_network
from .rpc import JsonRpcClient
from .tx import SignedClient, TxResult

__all__ = [
    "JsonRpcClient",
    "LOCALHOST",
    "NETWORKS",
    "NetworkDescriptor",
    "PARASOL",
    "SignedClient",
    "TxResult",
    "decode_result",
    "encode_call",
    "function_selector",
    "get_network",
]
