"""Builds the ``FingerprintManager`` for a CLI invocation.

Tests inject collaborators through Click's context object::

    runner.invoke(cli, args, obj={"hardware_source": StaticHardwareSource(...)})
"""

from __future__ import annotations

import click

from pcfingerprinter.core.signing import FileKeyStore
from pcfingerprinter.lifecycle import FingerprintConfig, FingerprintManager


def manager_from_context(ctx: click.Context) -> FingerprintManager:
    obj = ctx.ensure_object(dict)
    config = obj.get("config") or FingerprintConfig.default()
    key_store = obj.get("key_store") or FileKeyStore(
        config.public_key_path, environ=obj.get("environ"),
    )
    return FingerprintManager(
        config=config,
        hardware_source=obj.get("hardware_source"),
        key_store=key_store,
    )
