"""
Configuration from environment variables.

Values may also come from ``$FHE_WEB3_HOME/.env`` (default ``~/.fhe_web3/.env``),
loaded with python-dotenv without overriding variables already set.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from .chain.networks import NetworkDescriptor, get_network

HOME_ENV = "FHE_WEB3_HOME"
NETWORK_ENV = "FHE_WEB3_NETWORK"
RPC_URL_ENV = "FHE_WEB3_RPC_URL"
LOG_LEVEL_ENV = "FHE_WEB3_LOG_LEVEL"
ANVIL_PATH_ENV = "ANVIL_PATH"

DEFAULT_HOME = Path.home() / ".fhe_web3"
DEFAULT_NETWORK = "parasol"
WALLET_FILENAME = "wallet.key"


def home_dir() -> Path:
    return Path(os.environ.get(HOME_ENV, str(DEFAULT_HOME))).expanduser()


def load_env_file(path: Optional[Path] = None) -> bool:
    """Load ``.env`` from the home directory. Returns True if a file was read."""
    path = path or home_dir() / ".env"
    if not path.exists():
        return False
    return load_dotenv(path, override=False)


@dataclass(frozen=True)
class Settings:
    home: Path
    network_name: str = DEFAULT_NETWORK
    rpc_url: Optional[str] = None
    log_level: str = "WARNING"
    anvil_path: Optional[str] = None

    @classmethod
    def from_env(cls) -> "Settings":
        """Snapshot the current environment (after loading the ``.env`` file)."""
        load_env_file()
        return cls(
            home=home_dir(),
            network_name=os.environ.get(NETWORK_ENV, DEFAULT_NETWORK),
            rpc_url=os.environ.get(RPC_URL_ENV) or None,
            log_level=os.environ.get(LOG_LEVEL_ENV, "WARNING").upper(),
            anvil_path=os.environ.get(ANVIL_PATH_ENV) or None,
        )

    @property
    def wallet_path(self) -> Path:
        return self.home / WALLET_FILENAME

    def network(self, name: Optional[str] = None) -> NetworkDescriptor:
        """
        Resolve a network descriptor.

        ``FHE_WEB3_RPC_URL`` overrides the RPC URL of the selected network.
        """
        descriptor = get_network(name or self.network_name)
        if self.rpc_url:
            descriptor = descriptor.with_rpc_url(self.rpc_url)
        return descriptor
