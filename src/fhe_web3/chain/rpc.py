"""
JSON-RPC client for Ethereum nodes.

Lightweight alternative to web3.py: uses httpx for HTTP and eth-abi for
encoding. Supports read-only contract calls, balance and nonce queries, raw
transaction submission and receipt polling.
"""

from __future__ import annotations

import itertools
import logging
import time
from typing import Any, Optional

import httpx

from ..errors import RpcError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


def _from_hex(value: Any, field: str) -> int:
    if not isinstance(value, str):
        raise RpcError(f"Expected hex quantity for {field}, got {value!r}")
    try:
        return int(value, 16)
    except ValueError as exc:
        raise RpcError(f"Invalid hex quantity for {field}: {value!r}") from exc


class JsonRpcClient:
    """
    A JSON-RPC 2.0 client bound to one endpoint.

    Args:
        rpc_url: HTTP(S) endpoint URL
        timeout: Per-request timeout in seconds
        transport: Optional httpx transport (used by tests)
    """

    def __init__(
        self,
        rpc_url: str,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.rpc_url = rpc_url
        self._ids = itertools.count(1)
        self._http = httpx.Client(timeout=timeout, transport=transport)

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "JsonRpcClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"JsonRpcClient({self.rpc_url!r})"

    def call(self, method: str, params: Optional[list] = None) -> Any:
        """
        Make a JSON-RPC call.

        Args:
            method: RPC method name (e.g., "eth_call")
            params: RPC parameters

        Returns:
            Result field from the RPC response

        Raises:
            RpcError: On an invalid URL, a transport failure, a non-2xx
                status, a malformed response, or a JSON-RPC error object
        """
        payload = {
            "jsonrpc": "2.0",
            "method": method,
            "params": params or [],
            "id": next(self._ids),
        }
        logger.debug("RPC %s -> %s", method, self.rpc_url)

        try:
            response = self._http.post(self.rpc_url, json=payload)
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise RpcError(f"{method} failed: {exc}") from exc
        except ValueError as exc:
            raise RpcError(f"{method} returned invalid JSON") from exc

        if not isinstance(data, dict):
            raise RpcError(f"{method} returned a malformed response")
        if data.get("error") is not None:
            error = data["error"]
            if isinstance(error, dict):
                raise RpcError(f"{method}: {error.get('message', error)} (code {error.get('code')})")
            raise RpcError(f"{method}: {error}")

        return data.get("result")

    def chain_id(self) -> int:
        return _from_hex(self.call("eth_chainId"), "chainId")

    def block_number(self) -> int:
        return _from_hex(self.call("eth_blockNumber"), "blockNumber")

    def get_balance(self, address: str, block: str = "latest") -> int:
        """Balance of ``address`` in wei."""
        return _from_hex(self.call("eth_getBalance", [address, block]), "balance")

    def get_nonce(self, address: str, block: str = "pending") -> int:
        return _from_hex(self.call("eth_getTransactionCount", [address, block]), "nonce")

    def get_gas_price(self) -> int:
        return _from_hex(self.call("eth_gasPrice"), "gasPrice")

    def estimate_gas(self, tx: dict[str, Any]) -> int:
        return _from_hex(self.call("eth_estimateGas", [tx]), "gas")

    def eth_call(self, to: str, data: bytes, block: str = "latest") -> bytes:
        """Execute a read-only call and return the raw return data."""
        result = self.call("eth_call", [{"to": to, "data": "0x" + data.hex()}, block])
        if not result or result == "0x":
            return b""
        try:
            return bytes.fromhex(result[2:] if result.startswith("0x") else result)
        except (TypeError, ValueError) as exc:
            raise RpcError(f"eth_call returned invalid data: {result!r}") from exc

    def send_raw_transaction(self, raw_tx: bytes) -> str:
        """Submit a signed transaction and return its 0x-prefixed hash."""
        return self.call("eth_sendRawTransaction", ["0x" + bytes(raw_tx).hex()])

    def get_transaction_receipt(self, tx_hash: str) -> Optional[dict[str, Any]]:
        return self.call("eth_getTransactionReceipt", [tx_hash])

    def wait_for_receipt(
        self,
        tx_hash: str,
        timeout: float = 120,
        poll_interval: float = 2.0,
    ) -> dict[str, Any]:
        """
        Wait for a transaction receipt.

        Raises:
            RpcError: If the receipt is not found within ``timeout`` seconds
        """
        start = time.monotonic()
        while True:
            receipt = self.get_transaction_receipt(tx_hash)
            if receipt is not None:
                return receipt
            if time.monotonic() - start >= timeout:
                break
            time.sleep(poll_interval)

        raise RpcError(f"Transaction {tx_hash} not confirmed within {timeout}s")
