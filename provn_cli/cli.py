"""
provn CLI: hash payloads, sign claims, and verify signed-claim envelopes.

Usage:
    python -m provn_cli.cli hash report.pdf
    python -m provn_cli.cli sign report.pdf --private-key <hex> --out claim.json
    python -m provn_cli.cli verify claim.json --public-key <hex>
    python -m provn_cli.cli inspect claim.json
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from provn.config import ProvnConfig
from provn.envelope import from_json, to_json
from provn.errors import DecodingError, ProvnError
from provn.hashing import hash_file
from provn.integrity import verify_envelope_integrity
from provn.schema import Claim
from provn.signing import encode_claim, sign_claim


console = Console()


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def _parse_hex(value: str, name: str) -> bytes:
    try:
        return bytes.fromhex(value.strip())
    except ValueError:
        raise click.BadParameter(f"{name} must be hex") from None


def _read_envelope(path: str) -> str:
    return Path(path).read_text(encoding="utf-8")


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx: click.Context, verbose: bool):
    """provn: deterministic claim signing and independent verification."""
    _setup_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj["config"] = ProvnConfig.from_env()


@main.command("hash")
@click.argument("payload_file", type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def hash_cmd(ctx: click.Context, payload_file: str):
    """Print the SHA-256 digest of a file."""
    config: ProvnConfig = ctx.obj["config"]
    digest = hash_file(payload_file, chunk_size=config.hash_chunk_size)
    click.echo(digest.hex())


@main.command()
@click.argument("payload_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--private-key", "-k", envvar="PROVN_PRIVATE_KEY", required=True,
              help="Hex Ed25519 private key seed (32 bytes)")
@click.option("--timestamp", "-t", type=click.IntRange(min=0), default=None,
              help="Claim time in UTC seconds (default: now)")
@click.option("--metadata", "-m", default=None, help="Optional claim metadata")
@click.option("--out", "-o", type=click.Path(dir_okay=False), default=None,
              help="Write the envelope here instead of stdout")
@click.pass_context
def sign(ctx: click.Context, payload_file: str, private_key: str,
         timestamp: int | None, metadata: str | None, out: str | None):
    """Hash a file, build a claim, and sign it."""
    config: ProvnConfig = ctx.obj["config"]
    digest = hash_file(payload_file, chunk_size=config.hash_chunk_size)
    key = _parse_hex(private_key, "private key")

    try:
        claim = Claim.new(digest, timestamp, metadata=metadata)
    except ValidationError as e:
        raise click.ClickException(f"invalid claim: {e.errors()[0]['msg']}") from e

    try:
        signed = sign_claim(claim, key, max_size=config.max_encoded_size)
    except ProvnError as e:
        raise click.ClickException(str(e)) from e

    text = to_json(signed, indent=2)
    if out:
        Path(out).write_text(text + "\n", encoding="utf-8")
        console.print(f"[green]✓ Signed claim written to {out}[/green]")
        console.print(f"  Signer: {signed.signer_hex}")
    else:
        click.echo(text)


@main.command()
@click.argument("envelope_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--public-key", "-k", default=None,
              help="Expected hex Ed25519 public key of the signer")
def verify(envelope_file: str, public_key: str | None):
    """Verify a signed claim envelope."""
    expected = _parse_hex(public_key, "public key") if public_key else None
    result = verify_envelope_integrity(_read_envelope(envelope_file), expected)

    console.print(Panel("provn Claim Verification", style="bold blue"))

    if result.decoded is None:
        for err in result.errors:
            console.print(f"  [red]✗ {escape(err)}[/red]")
        console.print("\n[bold red]✗ ENVELOPE REJECTED[/bold red]")
        sys.exit(1)

    signed = result.decoded
    console.print(f"  Digest:    {signed.claim.data}")
    console.print(f"  Timestamp: {signed.claim.timestamp}")
    console.print(f"  Signer:    {signed.signer_hex} (kid {signed.key_id})")

    if result.signature_valid:
        console.print("  [green]✓ Ed25519 signature is VALID[/green]")
    else:
        console.print("  [red]✗ Ed25519 signature is INVALID[/red]")

    for err in result.errors:
        console.print(f"  [red]✗ {escape(err)}[/red]")

    if result.ok:
        console.print("\n[bold green]✓ CLAIM VERIFIED SUCCESSFULLY[/bold green]")
    else:
        console.print("\n[bold red]✗ CLAIM VERIFICATION FAILED[/bold red]")
        sys.exit(1)


@main.command()
@click.argument("envelope_file", type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def inspect(ctx: click.Context, envelope_file: str):
    """Show a signed claim and its canonical bytes without verifying."""
    try:
        signed = from_json(_read_envelope(envelope_file))
    except DecodingError as e:
        raise click.ClickException(str(e)) from e

    console.print(Panel("provn Claim Inspection", style="bold cyan"))

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Field", width=14)
    table.add_column("Value")
    for name, value in sorted(signed.claim.to_canonical_dict().items()):
        table.add_row(name, str(value))
    console.print(table)

    console.print(f"  Signer:    {signed.signer_hex}")
    console.print(f"  Key ID:    {signed.key_id}")
    console.print(f"  Signature: {signed.signature_hex}")
    try:
        canonical = encode_claim(signed.claim, max_size=ctx.obj["config"].max_encoded_size)
    except ProvnError as e:
        console.print(f"  [red]Canonical: not encodable ({escape(str(e))})[/red]")
    else:
        console.print(f"  Canonical: {canonical.decode('utf-8')}", markup=False)


if __name__ == "__main__":
    main()
