from __future__ import annotations

import json
from typing import Any, Callable

import httpx
import pytest

from fhe_web3.fhe.types import Ciphertext, PrivateKey, PublicKey, SchemeParams


@pytest.fixture()
def params() -> SchemeParams:
    return SchemeParams(scheme="bfv", poly_modulus_degree=4096, plain_modulus=1032193)


@pytest.fixture()
def public_key(params: SchemeParams) -> PublicKey:
    return PublicKey(params=params, data=bytes(range(256)) * 4)


@pytest.fixture()
def private_key(params: SchemeParams) -> PrivateKey:
    return PrivateKey(params=params, data=b"\x5a" * 700 + b"secret")


@pytest.fixture()
def ciphertext(params: SchemeParams) -> Ciphertext:
    return Ciphertext(params=params, data_type="Signed", data=b"\x00\x01\xfe\xff" * 300)


Handler = Callable[[list], Any]


class FakeNode:
    def __init__(self, chain_id: int = 574) -> None:
        self.calls: list[tuple[str, list]] = []
        self.raw_transactions: list[str] = []
        self.balances: dict[str, int] = {}
        self.handlers: dict[str, Handler] = {
            "eth_chainId": lambda params: hex(chain_id),
            "eth_blockNumber": lambda params: "0x10",
            "eth_getBalance": lambda params: hex(self.balances.get(params[0].lower(), 0)),
            "eth_getTransactionCount": lambda params: "0x3",
            "eth_gasPrice": lambda params: hex(1_000_000_000),
            "eth_estimateGas": lambda params: hex(21_000),
            "eth_sendRawTransaction": self._send_raw,
            "eth_getTransactionReceipt": lambda params: {"transactionHash": params[0], "status": "0x1"},
        }

    def _send_raw(self, params: list) -> str:
        self.raw_transactions.append(params[0])
        return "0x" + "ab" * 32

    def methods(self) -> list[str]:
        return [method for method, _ in self.calls]

    def handle(self, request: httpx.Request) -> httpx.Response:
        payload = json.loads(request.content)
        method, params = payload["method"], payload["params"]
        self.calls.append((method, params))
        handler = self.handlers.get(method)
        if handler is None:
            body = {"jsonrpc": "2.0", "id": payload["id"], "error": {"code": -32601, "message": "method not found"}}
        else:
            body = {"jsonrpc": "2.0", "id": payload["id"], "result": handler(params)}
        return httpx.Response(200, json=body)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)


@pytest.fixture()
def fake_node() -> FakeNode:
    return FakeNode()
