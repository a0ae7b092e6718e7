"""
fhe-web3 CLI

Command-line interface for FHE key files, wallets and simple transfers.

Commands:
  networks     - List known networks
  wallet       - Create or show the signing wallet
  keys         - Generate or inspect FHE key / ciphertext files
  parse-value  - Convert an ether amount to wei
  balance      - Show an account balance
  send         - Send ether to an address
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Optional

import click

from . import __version__
from .config import Settings
from .errors import ParseError, Web3Error
from .fhe.types import Ciphertext, detect_object_type
from .keystore import (
    generate_signing_key,
    read_signing_key,
    write_signing_key,
)
from .log import configure_logging
from .units import format_ether_value, parse_ether_value


class EtherValue(click.ParamType):
    """Click parameter type for ether amounts (``1ether``, ``0x64``, ``100``)."""

    name = "ether-value"

    def convert(self, value: Any, param: Optional[click.Parameter], ctx: Optional[click.Context]) -> int:
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        try:
            return parse_ether_value(str(value))
        except ParseError as exc:
            self.fail(exc.message, param, ctx)


ETHER_VALUE = EtherValue()


def _fail(exc: Web3Error) -> None:
    click.secho(f"ERROR: {exc}", fg="red", err=True)
    sys.exit(exc.exit_code)


def _settings(ctx: click.Context) -> Settings:
    return ctx.find_object(Settings) or Settings.from_env()


# ============ Main CLI Group ============


@click.group()
@click.version_option(version=__version__, prog_name="fhe-web3")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """fhe-web3 - FHE keys, ciphertexts and wallets for web3."""
    settings = Settings.from_env()
    configure_logging("DEBUG" if verbose else settings.log_level)
    ctx.obj = settings


@cli.command()
def networks() -> None:
    """List known networks."""
    from .chain.networks import NETWORKS

    for descriptor in NETWORKS.values():
        click.echo(f"{descriptor.name}")
        click.echo(f"  RPC URL:   {descriptor.rpc_url}")
        click.echo(f"  Chain ID:  {descriptor.chain_id}")
        if descriptor.faucet_url:
            click.echo(f"  Faucet:    {descriptor.faucet_url}")


@cli.command("parse-value")
@click.argument("value", type=ETHER_VALUE)
def parse_value(value: int) -> None:
    """Print VALUE (e.g. 1ether, 0x64, 100) in wei."""
    click.echo(str(value))


# ============ Wallet ============


@cli.group()
def wallet() -> None:
    """Manage the signing wallet."""


@wallet.command("new")
@click.option("--out", "out_path", type=click.Path(dir_okay=False, path_type=Path), help="Key file path")
@click.option("--force", is_flag=True, help="Overwrite an existing key file")
@click.pass_context
def wallet_new(ctx: click.Context, out_path: Optional[Path], force: bool) -> None:
    """Create a new wallet key file."""
    settings = _settings(ctx)
    path = out_path or settings.wallet_path
    if path.exists() and not force:
        click.secho(f"ERROR: {path} already exists (use --force to overwrite)", fg="red", err=True)
        sys.exit(1)

    account = generate_signing_key()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        write_signing_key(account, path)
    except OSError as exc:
        click.secho(f"ERROR: Cannot create {path.parent}: {exc}", fg="red", err=True)
        sys.exit(1)
    except Web3Error as exc:
        _fail(exc)

    click.echo(f"Address: {account.address}")
    click.echo(f"Key file: {path}")


@wallet.command("address")
@click.option("--key", "key_path", type=click.Path(dir_okay=False, path_type=Path), help="Key file path")
@click.pass_context
def wallet_address(ctx: click.Context, key_path: Optional[Path]) -> None:
    """Show the wallet address."""
    path = key_path or _settings(ctx).wallet_path
    try:
        account = read_signing_key(path)
    except Web3Error as exc:
        _fail(exc)
    click.echo(f"Address: {account.address}")


# ============ FHE keys ============


@cli.group()
def keys() -> None:
    """Generate or inspect FHE key and ciphertext files."""


@keys.command("generate")
@click.option(
    "--out-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=Path("."),
    show_default=True,
    help="Directory for public.key and private.key",
)
@click.option("--force", is_flag=True, help="Overwrite existing key files")
def keys_generate(out_dir: Path, force: bool) -> None:
    """Generate an FHE key pair (requires the 'fhe' extra)."""
    from .fhe.runtime import FheRuntime

    public_path = out_dir / "public.key"
    private_path = out_dir / "private.key"
    for path in (public_path, private_path):
        if path.exists() and not force:
            click.secho(f"ERROR: {path} already exists (use --force to overwrite)", fg="red", err=True)
            sys.exit(1)

    try:
        public_key, private_key = FheRuntime().generate_keys()
        out_dir.mkdir(parents=True, exist_ok=True)
        public_key.write(public_path)
        private_key.write(private_path)
    except Web3Error as exc:
        _fail(exc)

    click.echo(f"Public key:  {public_path}")
    click.echo(f"Private key: {private_path}")


@keys.command("inspect")
@click.argument("path", type=click.Path(dir_okay=False, path_type=Path))
def keys_inspect(path: Path) -> None:
    """Show what kind of FHE object PATH holds."""
    try:
        data = path.read_bytes()
    except OSError as exc:
        click.secho(f"ERROR: Cannot read {path}: {exc}", fg="red", err=True)
        sys.exit(4)

    try:
        cls = detect_object_type(data)
        obj = cls.from_bytes(data)
    except Web3Error as exc:
        _fail(exc)

    click.echo(f"Type:    {cls.wire_tag}")
    click.echo(f"Scheme:  {obj.params.scheme} (n={obj.params.poly_modulus_degree}, t={obj.params.plain_modulus})")
    if isinstance(obj, Ciphertext):
        click.echo(f"Plain:   {obj.data_type}")
    click.echo(f"Payload: {len(obj.data)} bytes")
    click.echo(f"Encoded: {len(data)} bytes")


# ============ Chain ============


@cli.command()
@click.argument("address", required=False)
@click.option("--network", "network_name", help="Network name (default: FHE_WEB3_NETWORK or parasol)")
@click.option("--key", "key_path", type=click.Path(dir_okay=False, path_type=Path), help="Key file path")
@click.pass_context
def balance(ctx: click.Context, address: Optional[str], network_name: Optional[str], key_path: Optional[Path]) -> None:
    """Show the balance of ADDRESS (default: the wallet address)."""
    settings = _settings(ctx)
    try:
        if address is None:
            address = read_signing_key(key_path or settings.wallet_path).address
        network = settings.network(network_name)
        with network.rpc() as rpc:
            wei = rpc.get_balance(address)
    except Web3Error as exc:
        _fail(exc)

    click.echo(f"Address: {address}")
    click.echo(f"Network: {network.name} ({network.chain_id})")
    click.echo(f"Balance: {format_ether_value(wei)} ({wei} wei)")


@cli.command()
@click.option("--to", "to_address", required=True, help="Recipient address")
@click.option("--value", required=True, type=ETHER_VALUE, help="Amount, e.g. 1ether, 100gwei, 0x64")
@click.option("--network", "network_name", help="Network name (default: FHE_WEB3_NETWORK or parasol)")
@click.option("--key", "key_path", type=click.Path(dir_okay=False, path_type=Path), help="Key file path")
@click.option("--no-wait", is_flag=True, help="Do not wait for the receipt")
@click.option(
    "--timeout",
    type=click.FloatRange(min=0),
    default=120.0,
    show_default=True,
    help="Seconds to wait for the receipt",
)
@click.pass_context
def send(
    ctx: click.Context,
    to_address: str,
    value: int,
    network_name: Optional[str],
    key_path: Optional[Path],
    no_wait: bool,
    timeout: float,
) -> None:
    """Send ether from the wallet."""
    settings = _settings(ctx)
    try:
        account = read_signing_key(key_path or settings.wallet_path)
        network = settings.network(network_name)
    except Web3Error as exc:
        _fail(exc)

    click.echo(f"  Sender:  {account.address}")
    click.echo(f"  Target:  {to_address}")
    click.echo(f"  Value:   {value} wei")
    click.echo(f"  Network: {network.name}")
    click.echo("")

    client = network.client(account)
    client.receipt_timeout = timeout
    try:
        result = client.send_transaction(to_address, value=value, wait=not no_wait)
    except Web3Error as exc:
        _fail(exc)
    finally:
        client.rpc.close()

    if no_wait:
        click.echo(f"Submitted: {result.tx_hash}")
    elif result.succeeded:
        click.secho("SUCCESS: Transaction confirmed!", fg="green")
        click.echo(f"  TX: {result.tx_hash}")
    else:
        click.secho("FAILED: Transaction reverted", fg="red")
        click.echo(f"  TX: {result.tx_hash}")
        sys.exit(1)


def main() -> None:
    """fhe-web3 CLI entry point."""
    cli()


if __name__ == "__main__":
    main()
