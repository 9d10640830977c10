"""``pc-fingerprinter create`` - Create and sign a hardware fingerprint.

Collects a hardware snapshot, merges it with buyer, warranty and optional
parts data, canonicalizes and signs the payload with the given private key,
and writes the envelope (mode 0640, parent directories created).

Exit Codes:
    0 - Fingerprint written.
    1 - Invalid argument (e.g., purchase date, warranty days) or write failure.
    2 - Private key missing, unparsable, or signing failed.
"""

from __future__ import annotations

import sys

import click

from pcfingerprinter.cli.context import manager_from_context
from pcfingerprinter.cli.output import echo_error, print_create_result
from pcfingerprinter.core.envelope import DEFAULT_WARRANTY_DAYS, parse_warranty_days
from pcfingerprinter.exceptions import (
    FingerprintError,
    KeyMaterialError,
    SignatureError,
)


@click.command("create")
@click.option("--buyer", required=True, help="Buyer name.")
@click.option(
    "--purchase", required=True,
    help="Purchase date YYYY-MM-DD.",
)
@click.option(
    "--warrantyDays", "warranty_days",
    default=str(DEFAULT_WARRANTY_DAYS),
    show_default=True,
    help="Warranty length in days.",
)
@click.option(
    "--partsFile", "parts_file",
    type=click.Path(dir_okay=False),
    default=None,
    help="Optional JSON/YAML file with parts list/serials.",
)
@click.option(
    "--privKey", "priv_key",
    required=True,
    type=click.Path(dir_okay=False),
    help="Path to the PEM private key used to sign.",
)
@click.option(
    "--out", "out",
    type=click.Path(dir_okay=False),
    default=None,
    help="Fingerprint output path (default: platform location).",
)
@click.pass_context
def create_command(
    ctx: click.Context,
    buyer: str,
    purchase: str,
    warranty_days: str,
    parts_file: str | None,
    priv_key: str,
    out: str | None,
) -> None:
    """Create and sign a fingerprint for this machine.

    Exit code 0 on success, 1 on invalid input, 2 on key or signing failure.
    """
    manager = manager_from_context(ctx)
    try:
        result = manager.create(
            buyer,
            purchase,
            parse_warranty_days(warranty_days),
            parts_file,
            private_key_path=priv_key,
            output_path=out,
        )
    except (KeyMaterialError, SignatureError) as exc:
        echo_error(str(exc))
        sys.exit(2)
    except FingerprintError as exc:
        echo_error(str(exc))
        sys.exit(1)
    except OSError as exc:
        echo_error(f"Could not write fingerprint: {exc}")
        sys.exit(1)

    print_create_result(result)
    sys.exit(0)
