"""``pc-fingerprinter show`` - Show fingerprint file contents (no verify).

Exit Codes:
    0 - Fingerprint printed.
    1 - Fingerprint not found, unreadable, or malformed.
"""

from __future__ import annotations

import sys

import click

from pcfingerprinter.cli.context import manager_from_context
from pcfingerprinter.cli.output import echo_error, echo_json, print_envelope
from pcfingerprinter.exceptions import FingerprintError


@click.command("show")
@click.option(
    "--path", "path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Fingerprint path (default: platform location).",
)
@click.option("--json", "as_json", is_flag=True, help="Print the raw envelope JSON.")
@click.pass_context
def show_command(ctx: click.Context, path: str | None, as_json: bool) -> None:
    """Show the stored fingerprint without checking its signature."""
    manager = manager_from_context(ctx)
    try:
        envelope = manager.show(path)
    except FingerprintError as exc:
        echo_error(str(exc), as_json)
        sys.exit(1)
    except OSError as exc:
        echo_error(f"Could not read fingerprint: {exc}", as_json)
        sys.exit(1)

    if as_json:
        echo_json(envelope.to_dict())
    else:
        print_envelope(envelope)
    sys.exit(0)
