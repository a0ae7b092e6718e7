"""Tests for the signing client and network descriptors."""

from __future__ import annotations

import pytest
from eth_account import Account

from conftest import FakeNode
from fhe_web3.chain.abi import encode_args, function_selector
from fhe_web3.chain.networks import LOCALHOST, NETWORKS, PARASOL, get_network
from fhe_web3.chain.tx import DEFAULT_GAS_LIMIT, SignedClient
from fhe_web3.errors import ConfigError, ConversionError, RpcError, Web3Error
from fhe_web3.fhe.types import Ciphertext
from fhe_web3.testing import ALICE, BOB


@pytest.fixture()
def client(fake_node: FakeNode) -> SignedClient:
    client = PARASOL.client(ALICE, transport=fake_node.transport())
    client.poll_interval = 0
    return client


class TestNetworks:
    def test_parasol(self) -> None:
        assert PARASOL.rpc_url == "https://rpc.sunscreen.tech/parasol"
        assert PARASOL.chain_id == 574
        assert PARASOL.faucet_url == "https://faucet.sunscreen.tech/"

    def test_localhost(self) -> None:
        assert LOCALHOST.chain_id == 31337
        assert LOCALHOST.faucet_url is None

    def test_lookup(self) -> None:
        assert get_network("parasol") is PARASOL
        assert get_network("Parasol") is PARASOL
        assert set(NETWORKS) == {"parasol", "localhost"}

    def test_unknown(self) -> None:
        with pytest.raises(ConfigError, match="known: localhost, parasol"):
            get_network("mainnet")

    def test_immutable(self) -> None:
        with pytest.raises(AttributeError):
            PARASOL.chain_id = 1  # type: ignore[misc]

    def test_with_rpc_url(self) -> None:
        custom = PARASOL.with_rpc_url("http://127.0.0.1:9999")
        assert custom.rpc_url == "http://127.0.0.1:9999"
        assert custom.chain_id == PARASOL.chain_id
        assert PARASOL.rpc_url == "https://rpc.sunscreen.tech/parasol"

    def test_client_binds_chain(self, client: SignedClient) -> None:
        assert client.chain_id == 574
        assert client.address == ALICE.address
        assert client.rpc.rpc_url == PARASOL.rpc_url


class TestTransactions:
    def test_build_transaction(self, client: SignedClient) -> None:
        tx = client.build_transaction(BOB.address.lower(), value=10_000)
        assert tx["to"] == BOB.address
        assert tx["value"] == 10_000
        assert tx["chainId"] == 574
        assert tx["nonce"] == 3
        assert tx["gasPrice"] == 1_000_000_000
        assert tx["gas"] == 21_000

    def test_explicit_gas_skips_estimate(self, client: SignedClient, fake_node: FakeNode) -> None:
        tx = client.build_transaction(BOB.address, gas=100_000)
        assert tx["gas"] == 100_000
        assert "eth_estimateGas" not in fake_node.methods()

    def test_estimate_failure_falls_back(self, client: SignedClient, fake_node: FakeNode) -> None:
        del fake_node.handlers["eth_estimateGas"]
        tx = client.build_transaction(BOB.address)
        assert tx["gas"] == DEFAULT_GAS_LIMIT

    def test_send_transaction(self, client: SignedClient, fake_node: FakeNode) -> None:
        result = client.send_transaction(BOB.address, value=10_000)
        assert result.tx_hash == "0x" + "ab" * 32
        assert result.succeeded
        assert len(fake_node.raw_transactions) == 1
        assert Account.recover_transaction(fake_node.raw_transactions[0]) == ALICE.address

    def test_no_wait(self, client: SignedClient, fake_node: FakeNode) -> None:
        result = client.send_transaction(BOB.address, value=1, wait=False)
        assert result.receipt is None
        assert result.status is None
        assert "eth_getTransactionReceipt" not in fake_node.methods()

    def test_reverted(self, client: SignedClient, fake_node: FakeNode) -> None:
        fake_node.handlers["eth_getTransactionReceipt"] = lambda params: {"status": "0x0"}
        result = client.send_transaction(BOB.address, value=1)
        assert result.status == 0
        assert not result.succeeded

    def test_receipt_never_arrives(self, client: SignedClient, fake_node: FakeNode) -> None:
        fake_node.handlers["eth_getTransactionReceipt"] = lambda params: None
        client.receipt_timeout = 0
        with pytest.raises(Web3Error, match="not confirmed") as exc_info:
            client.send_transaction(BOB.address, value=1)
        assert isinstance(exc_info.value, RpcError)
        assert len(fake_node.raw_transactions) == 1

    def test_invalid_address(self, client: SignedClient) -> None:
        with pytest.raises(ConversionError):
            client.build_transaction("0x1234", value=1)

    def test_negative_value(self, client: SignedClient) -> None:
        with pytest.raises(ConversionError):
            client.build_transaction(BOB.address, value=-1)


class TestContractCalls:
    def test_transact_with_ciphertext(
        self, client: SignedClient, fake_node: FakeNode, ciphertext: Ciphertext
    ) -> None:
        client.transact_function(BOB.address, "store(bytes)", [ciphertext.to_bytes()])
        method, params = next(call for call in fake_node.calls if call[0] == "eth_estimateGas")
        data = bytes.fromhex(params[0]["data"][2:])
        assert data[:4] == function_selector("store(bytes)")
        assert data[4:] == encode_args(["bytes"], [ciphertext.to_bytes()])

    def test_call_function_decodes(
        self, client: SignedClient, fake_node: FakeNode, ciphertext: Ciphertext
    ) -> None:
        encoded = encode_args(["bytes"], [ciphertext.to_bytes()])
        fake_node.handlers["eth_call"] = lambda params: "0x" + encoded.hex()
        raw = client.call_function(BOB.address, "balanceOf(address)", [ALICE.address], ["bytes"])
        assert Ciphertext.from_bytes(raw) == ciphertext

    def test_call_function_empty_result(self, client: SignedClient, fake_node: FakeNode) -> None:
        fake_node.handlers["eth_call"] = lambda params: "0x"
        assert client.call_function(BOB.address, "ping()") is None


class TestTestWallets:
    def test_addresses(self) -> None:
        assert ALICE.address.lower() == "0xb5f27c716e44ffe48fd6622983c651355ad8c75a"
        assert BOB.address.lower() == "0x00d88e763c5764e69dd667fa8073d48022a4afef"
