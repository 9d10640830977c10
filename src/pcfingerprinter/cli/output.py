"""Rich output formatting helpers for the PC Fingerprinter CLI.

Provides consistent terminal output for envelopes and verification
results. Machine-readable output (``--json``) bypasses Rich entirely and
goes through ``click.echo`` so it stays parseable.
"""

from __future__ import annotations

import json
import logging
from typing import Any

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from pcfingerprinter.core.envelope import BuyerInfo, Envelope
from pcfingerprinter.lifecycle import CreateResult, VerificationResult

console = Console()
err_console = Console(stderr=True)


def configure_logging(verbose: bool = False) -> None:
    """Route library logging to stderr through Rich."""
    handler = RichHandler(console=err_console, show_path=False, show_time=False)
    root = logging.getLogger("pcfingerprinter")
    root.handlers[:] = [handler]
    root.setLevel(logging.DEBUG if verbose else logging.WARNING)


def _na(value: Any) -> str:
    return "N/A" if value in (None, "") else str(value)


def print_buyer(buyer: BuyerInfo) -> None:
    """Print the buyer and warranty block."""
    console.print(f"Buyer: {_na(buyer.name)}")
    console.print(f"Purchase date: {_na(buyer.purchase_date)}")
    console.print(f"Warranty days: {_na(buyer.warranty_days)}")
    console.print(f"Warranty expires: {_na(buyer.warranty_expires)}")


def print_create_result(result: CreateResult) -> None:
    """Print the outcome of ``create``."""
    if result.parts_warning:
        console.print(Text.assemble(("Warning: ", "yellow"), result.parts_warning))
    console.print(f"Fingerprint written to {result.path}", markup=False)
    console.print(
        "IMPORTANT: Keep the private key offline. "
        "The public key ships with the app for verification."
    )


def print_envelope(envelope: Envelope) -> None:
    """Print an envelope summary followed by its full JSON."""
    meta = envelope.meta
    buyer = envelope.buyer
    snapshot = envelope.hardware_snapshot

    table = Table(title="Fingerprint", show_header=False)
    table.add_column("Field", style="bold")
    table.add_column("Value")
    table.add_row("Signer", envelope.signer)
    table.add_row("App", _na(meta.app))
    table.add_row("Created", _na(meta.created_at))
    table.add_row("Installer", _na(meta.installer))
    table.add_row("Buyer", _na(buyer.name))
    table.add_row("Purchase date", _na(buyer.purchase_date))
    table.add_row("Warranty expires", _na(buyer.warranty_expires))
    table.add_row("Machine ID", _na(snapshot.machine_id if snapshot else None))
    console.print(table)

    console.print("----- Fingerprint (envelope) -----")
    console.print_json(envelope.to_json())


def print_verification(result: VerificationResult) -> None:
    """Print signature validity, hardware mismatches and buyer info."""
    if result.signature_valid:
        verdict = Text("VALID", style="bold green")
    else:
        verdict = Text("INVALID", style="bold red")
    header = Text.assemble(("Signature: ", "bold"), verdict)
    console.print(Panel(header, title="Fingerprint Verification"))
    if not result.signature_valid:
        console.print(
            "[red]Signature invalid: possible tamper or wrong public key.[/red]"
        )

    console.print(f"Total mismatches: {len(result.mismatches)}")
    if result.mismatches:
        table = Table(title="Hardware Mismatches", show_header=True)
        table.add_column("#", justify="right")
        table.add_column("Difference")
        for i, mismatch in enumerate(result.mismatches, 1):
            table.add_row(str(i), Text(mismatch))
        console.print(table)
    else:
        console.print("[green]No mismatches detected.[/green]")

    console.print()
    print_buyer(result.buyer)


def echo_json(data: Any) -> None:
    """Write ``data`` to stdout as indented JSON."""
    click.echo(json.dumps(data, indent=2, ensure_ascii=False, default=str))


def echo_error(message: str, as_json: bool = False) -> None:
    """Report an error in the requested output format."""
    if as_json:
        echo_json({"error": message})
    else:
        click.echo(f"Error: {message}", err=True)
