"""PC Fingerprinter CLI --- signed hardware fingerprints for PC warranties.

Entry point for the ``pc-fingerprinter`` command-line tool. Registers all
subcommands under a single Click group.

Commands:
    create  - Collect hardware, sign it with buyer/warranty data, write it.
    show    - Print the stored fingerprint without any verification.
    verify  - Check the signature and compare against current hardware.

Usage::

    pc-fingerprinter create --buyer "Jane Doe" --purchase 2025-09-18 \\
        --warrantyDays 90 --partsFile parts.json --privKey ./private.pem
    pc-fingerprinter show
    pc-fingerprinter verify --pubKey ./public.pem --json

Exit Codes:
    0 - Success.
    1 - Not found, invalid argument or usage, malformed file, or other failure.
    2 - Invalid signature (verify), or missing/unusable key (create).
"""

from __future__ import annotations

from pathlib import Path

import click

from pcfingerprinter import __version__
from pcfingerprinter.cli.create_cmd import create_command
from pcfingerprinter.cli.output import configure_logging, echo_error
from pcfingerprinter.cli.show_cmd import show_command
from pcfingerprinter.cli.verify_cmd import verify_command
from pcfingerprinter.exceptions import FingerprintError
from pcfingerprinter.lifecycle import FingerprintConfig


class FingerprintGroup(click.Group):
    """Click group whose usage errors exit with code 1.

    Exit code 2 is reserved for signature and key failures.
    """

    def make_context(self, info_name, args, parent=None, **extra):
        try:
            return super().make_context(info_name, args, parent=parent, **extra)
        except click.UsageError as exc:
            exc.exit_code = 1
            raise

    def invoke(self, ctx):
        try:
            return super().invoke(ctx)
        except click.UsageError as exc:
            exc.exit_code = 1
            raise


@click.group(cls=FingerprintGroup)
@click.version_option(version=__version__)
@click.option(
    "--config", "config_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="YAML file overriding signer, fingerprint_path, public_key_path.",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.pass_context
def cli(ctx: click.Context, config_path: str | None, verbose: bool) -> None:
    """PC Fingerprinter: Tamper-evident hardware fingerprints for warranties.

    Binds this machine's hardware identity to buyer and warranty data in a
    signed record, and later re-verifies that record against the signature
    and the hardware present now.
    """
    configure_logging(verbose)
    ctx.ensure_object(dict)
    config = ctx.obj.get("config") or FingerprintConfig.default()
    try:
        if config_path:
            config = config.with_yaml(Path(config_path))
        config = config.with_environment(ctx.obj.get("environ"))
    except FingerprintError as exc:
        echo_error(str(exc))
        ctx.exit(1)
    ctx.obj["config"] = config


# Register all subcommands
cli.add_command(create_command)
cli.add_command(show_command)
cli.add_command(verify_command)
