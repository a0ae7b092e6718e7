"""
Known networks and the client factory.

Descriptors are immutable module-level constants. ``descriptor.client(account)``
returns a :class:`SignedClient` bound to the descriptor's RPC URL and chain ID.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional

import httpx
from eth_account.signers.local import LocalAccount

from ..errors import ConfigError
from .rpc import JsonRpcClient
from .tx import SignedClient


@dataclass(frozen=True)
class NetworkDescriptor:
    name: str
    rpc_url: str
    chain_id: int
    faucet_url: Optional[str] = None

    def with_rpc_url(self, rpc_url: str) -> "NetworkDescriptor":
        return replace(self, rpc_url=rpc_url)

    def rpc(self, transport: Optional[httpx.BaseTransport] = None) -> JsonRpcClient:
        """Construct a JSON-RPC client for this network."""
        return JsonRpcClient(self.rpc_url, transport=transport)

    def client(
        self,
        account: LocalAccount,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> SignedClient:
        """
        Construct a client that signs and submits transactions from
        ``account`` on this network.

        Example::

            from fhe_web3.chain.networks import PARASOL
            from fhe_web3.keystore import read_signing_key
            from fhe_web3.units import parse_ether_value

            client = PARASOL.client(read_signing_key("wallet.key"))
            client.send_transaction("0x...", value=parse_ether_value("100gwei"))
        """
        return SignedClient(rpc=self.rpc(transport), account=account, chain_id=self.chain_id)


#: Sunscreen's Parasol testnet.
PARASOL = NetworkDescriptor(
    name="parasol",
    rpc_url="https://rpc.sunscreen.tech/parasol",
    chain_id=574,
    faucet_url="https://faucet.sunscreen.tech/",
)

#: A local anvil node on its default port.
LOCALHOST = NetworkDescriptor(
    name="localhost",
    rpc_url="http://127.0.0.1:8545",
    chain_id=31337,
)

NETWORKS: dict[str, NetworkDescriptor] = {
    PARASOL.name: PARASOL,
    LOCALHOST.name: LOCALHOST,
}


def get_network(name: str) -> NetworkDescriptor:
    try:
        return NETWORKS[name.lower()]
    except KeyError:
        known = ", ".join(sorted(NETWORKS))
        raise ConfigError(f"Unknown network {name!r} (known: {known})") from None
