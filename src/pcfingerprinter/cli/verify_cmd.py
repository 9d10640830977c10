"""``pc-fingerprinter verify`` - Verify signature and compare current hardware.

Loads the fingerprint, re-canonicalizes its payload, checks the signature
against the public key, and compares the stored hardware snapshot with a
freshly collected one. Both checks are always reported.

Public key resolution: ``--pubKey``, then ``$PC_FINGERPRINTER_PUBKEY``,
then the key bundled with the application.

Exit Codes:
    0 - Signature valid (hardware mismatches are reported, not fatal).
    1 - Fingerprint or public key not found, unreadable file, or malformed input.
    2 - Signature invalid.
"""

from __future__ import annotations

import sys

import click

from pcfingerprinter.cli.context import manager_from_context
from pcfingerprinter.cli.output import echo_error, echo_json, print_verification
from pcfingerprinter.exceptions import FingerprintError


@click.command("verify")
@click.option(
    "--path", "path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Fingerprint path (default: platform location).",
)
@click.option(
    "--pubKey", "pub_key",
    type=click.Path(dir_okay=False),
    default=None,
    help="PEM public key (default: $PC_FINGERPRINTER_PUBKEY or bundled key).",
)
@click.option("--json", "as_json", is_flag=True, help="Print a JSON summary.")
@click.pass_context
def verify_command(
    ctx: click.Context, path: str | None, pub_key: str | None, as_json: bool
) -> None:
    """Verify the fingerprint signature and compare current hardware.

    Exit code 0 if the signature is valid, 2 if it is not, 1 on errors.
    """
    manager = manager_from_context(ctx)
    try:
        result = manager.verify(path, pub_key)
    except FingerprintError as exc:
        echo_error(str(exc), as_json)
        sys.exit(1)
    except OSError as exc:
        echo_error(f"Could not read fingerprint: {exc}", as_json)
        sys.exit(1)

    if as_json:
        echo_json(result.to_dict())
    else:
        print_verification(result)
    sys.exit(0 if result.signature_valid else 2)
