"""
End-to-end tests against a local anvil node.

Skipped unless an anvil executable is found on PATH or via ANVIL_PATH.
"""

from __future__ import annotations

from typing import Iterator

import pytest

from fhe_web3.testing import ALICE, BOB, Node, find_anvil

pytestmark = [
    pytest.mark.integration,
    pytest.mark.skipif(find_anvil() is None, reason="anvil executable not found"),
]


@pytest.fixture(scope="module")
def node() -> Iterator[Node]:
    with Node() as node:
        yield node


def test_chain_id(node: Node) -> None:
    assert node.chain_id == 31337
    with node.rpc() as rpc:
        assert rpc.chain_id() == node.chain_id


def test_test_users_are_funded(node: Node) -> None:
    client = node.client(ALICE)
    assert client.balance() > 0
    assert client.balance(BOB.address) > 0


def test_transfer(node: Node) -> None:
    client = node.client(ALICE)
    before = client.balance(BOB.address)

    result = client.send_transaction(BOB.address, value=10_000)

    assert result.succeeded
    assert client.balance(BOB.address) == before + 10_000
