"""
Signed client - build, sign, and send transactions from one account.

Uses eth-account for signing and the httpx JSON-RPC client for sending.
Gas is paid by the signing account.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Optional, Sequence

from eth_account.signers.local import LocalAccount
from eth_utils import to_checksum_address

from ..errors import ConversionError, RpcError
from ..numeric import check_uint256
from .abi import decode_result, encode_call
from .rpc import JsonRpcClient

logger = logging.getLogger(__name__)

DEFAULT_GAS_LIMIT = 500_000


def _checksum(address: str) -> str:
    try:
        return to_checksum_address(address)
    except (TypeError, ValueError) as exc:
        raise ConversionError(f"Invalid address: {address!r}") from exc


@dataclass
class TxResult:
    tx_hash: str
    receipt: Optional[dict[str, Any]] = None

    @property
    def status(self) -> Optional[int]:
        if self.receipt is None:
            return None
        return int(self.receipt.get("status", "0x0"), 16)

    @property
    def succeeded(self) -> bool:
        return self.status == 1


@dataclass
class SignedClient:
    """
    A client that signs transactions with ``account`` for ``chain_id``.

    Attributes:
        rpc: JSON-RPC client for the network
        account: eth-account signing key
        chain_id: Chain ID embedded in every signed transaction
    """

    rpc: JsonRpcClient
    account: LocalAccount
    chain_id: int
    receipt_timeout: float = 120
    poll_interval: float = 2.0
    gas_limit: Optional[int] = field(default=None)

    @property
    def address(self) -> str:
        return self.account.address

    def balance(self, address: Optional[str] = None) -> int:
        return self.rpc.get_balance(address or self.address)

    def build_transaction(
        self,
        to: Optional[str],
        value: int = 0,
        data: bytes = b"",
        gas: Optional[int] = None,
    ) -> dict[str, Any]:
        """
        Build an unsigned legacy transaction.

        Args:
            to: Recipient address, or ``None`` for contract creation
            value: Amount in wei
            data: Call data
            gas: Gas limit (default: estimated by the node)
        """
        check_uint256(value)
        tx: dict[str, Any] = {
            "value": value,
            "data": "0x" + bytes(data).hex(),
            "nonce": self.rpc.get_nonce(self.address),
            "gasPrice": self.rpc.get_gas_price(),
            "chainId": self.chain_id,
        }
        if to is not None:
            tx["to"] = _checksum(to)

        gas = gas or self.gas_limit
        if gas is None:
            estimate: dict[str, Any] = {"from": self.address, "value": hex(value), "data": tx["data"]}
            if to is not None:
                estimate["to"] = tx["to"]
            try:
                gas = self.rpc.estimate_gas(estimate)
            except RpcError as exc:
                logger.warning("Gas estimation failed (%s), using %d", exc, DEFAULT_GAS_LIMIT)
                gas = DEFAULT_GAS_LIMIT
        tx["gas"] = gas
        return tx

    def sign_and_send(self, tx: dict[str, Any], wait: bool = True) -> TxResult:
        """Sign ``tx`` with the account and submit it."""
        signed = self.account.sign_transaction(tx)
        tx_hash = self.rpc.send_raw_transaction(signed.raw_transaction)
        logger.info("Sent transaction %s from %s", tx_hash, self.address)

        result = TxResult(tx_hash=tx_hash)
        if wait:
            result.receipt = self.rpc.wait_for_receipt(
                tx_hash,
                timeout=self.receipt_timeout,
                poll_interval=self.poll_interval,
            )
        return result

    def send_transaction(
        self,
        to: Optional[str],
        value: int = 0,
        data: bytes = b"",
        gas: Optional[int] = None,
        wait: bool = True,
    ) -> TxResult:
        """Build, sign, and send a transaction."""
        tx = self.build_transaction(to, value=value, data=data, gas=gas)
        return self.sign_and_send(tx, wait=wait)

    def call_function(
        self,
        to: str,
        signature: str,
        args: Sequence[Any] = (),
        outputs: Sequence[str] = (),
    ) -> Any:
        """Read from a contract (eth_call) and decode ``outputs``."""
        data = encode_call(signature, args)
        result = self.rpc.eth_call(_checksum(to), data)
        if not result:
            return None
        return decode_result(outputs, result)

    def transact_function(
        self,
        to: str,
        signature: str,
        args: Sequence[Any] = (),
        value: int = 0,
        gas: Optional[int] = None,
        wait: bool = True,
    ) -> TxResult:
        """Send a state-changing contract call."""
        data = encode_call(signature, args)
        return self.send_transaction(to, value=value, data=data, gas=gas, wait=wait)
