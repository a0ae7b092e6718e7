"""
Local development node for testing contracts before deploying them on chain.

As a prerequisite you need an ``anvil`` executable (Sunscreen's foundry fork for
FHE precompiles). Set ``ANVIL_PATH`` if it is not on ``PATH``::

    cargo install --git https://github.com/Sunscreen-tech/foundry --profile local anvil
"""

from __future__ import annotations

import logging
import os
import shutil
import socket
import subprocess
import tempfile
import time
from typing import Any, Optional, Sequence

from eth_account import Account

from .chain.networks import NetworkDescriptor
from .chain.rpc import JsonRpcClient
from .chain.tx import SignedClient
from .config import ANVIL_PATH_ENV
from .errors import NodeError, RpcError

logger = logging.getLogger(__name__)

#: Mnemonic anvil is launched with. ALICE and BOB exist only under it.
ANVIL_MNEMONIC = "gas monster ski craft below illegal discover limit dog bundle bus artefact"

#: Test user Alice. Address: 0xb5f27c716e44ffe48fd6622983c651355ad8c75a
ALICE = Account.from_key("0x1c0eb5244c165957525ef389fc14fac4424feaaefabf87c7e4e15bcc7b425e15")

#: Test user Bob. Address: 0x00d88e763c5764e69dd667fa8073d48022a4afef
BOB = Account.from_key("0x3b42a2df3c658b156b8240e1891723fab65ae0b97f9f5bba2abd5e240065baa1")

DEFAULT_GAS_LIMIT_ARGS = ("--gas-limit", "3000000000000000000")
STARTUP_TIMEOUT = 30.0


def find_anvil() -> Optional[str]:
    """Path of the anvil executable from ``ANVIL_PATH`` or ``PATH``."""
    return os.environ.get(ANVIL_PATH_ENV) or shutil.which("anvil")


def _free_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


class Node:
    """
    An anvil subprocess for local development.

    Usage::

        with Node() as node:
            client = node.client(ALICE)
            client.send_transaction(BOB.address, value=10_000)
    """

    def __init__(
        self,
        executable: Optional[str] = None,
        args: Sequence[str] = DEFAULT_GAS_LIMIT_ARGS,
        mnemonic: str = ANVIL_MNEMONIC,
        port: Optional[int] = None,
        startup_timeout: float = STARTUP_TIMEOUT,
    ) -> None:
        executable = executable or find_anvil()
        if not executable:
            raise NodeError("anvil executable not found. Install it or set ANVIL_PATH.")

        self.port = port or _free_port()
        self.endpoint = f"http://127.0.0.1:{self.port}"
        command = [executable, "--port", str(self.port), "--mnemonic", mnemonic, *args]
        logger.info("Spawning %s", " ".join(command))
        # stderr is kept in a file and read back on startup failure
        self._stderr = tempfile.TemporaryFile()
        try:
            self._process: Optional[subprocess.Popen] = subprocess.Popen(
                command,
                stdout=subprocess.DEVNULL,
                stderr=self._stderr,
            )
        except OSError as exc:
            self._stderr.close()
            raise NodeError(f"Cannot start anvil: {exc}") from exc

        try:
            self.chain_id = self._wait_ready(self._process, startup_timeout)
        except NodeError:
            self.stop()
            raise

    def _read_stderr(self) -> str:
        self._stderr.seek(0)
        return self._stderr.read().decode(errors="replace").strip()

    def _wait_ready(self, process: subprocess.Popen, timeout: float) -> int:
        deadline = time.monotonic() + timeout
        with JsonRpcClient(self.endpoint, timeout=2.0) as rpc:
            while time.monotonic() < deadline:
                if process.poll() is not None:
                    raise NodeError(f"anvil exited with code {process.returncode}: {self._read_stderr()}")
                try:
                    return rpc.chain_id()
                except RpcError:
                    time.sleep(0.1)
        raise NodeError(f"anvil did not answer on {self.endpoint} within {timeout}s")

    @property
    def network(self) -> NetworkDescriptor:
        return NetworkDescriptor(name="anvil", rpc_url=self.endpoint, chain_id=self.chain_id)

    def rpc(self) -> JsonRpcClient:
        return self.network.rpc()

    def client(self, account: Any) -> SignedClient:
        """Construct a signing client for ``account`` on this node."""
        client = self.network.client(account)
        client.poll_interval = 0.1
        return client

    def stop(self) -> None:
        if self._process is None:
            return
        self._process.terminate()
        try:
            self._process.wait(timeout=10)
        except subprocess.TimeoutExpired:
            self._process.kill()
            self._process.wait()
        self._stderr.close()
        self._process = None

    def __enter__(self) -> "Node":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.stop()
