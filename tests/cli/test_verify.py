"""Tests for ``pc-fingerprinter verify``.

Verifies:
    - An untouched fingerprint verifies (exit code 0).
    - Hardware changes are reported without failing.
    - Tampering or a wrong key exits 2.
    - Missing or unreadable files and usage errors exit 1.
"""

from __future__ import annotations

import json
from pathlib import Path

from click.testing import CliRunner

from pcfingerprinter.cli.main import cli
from pcfingerprinter.core.hardware import StaticHardwareSource
from pcfingerprinter.lifecycle import FingerprintManager


def _tamper(path: Path) -> None:
    data = json.loads(path.read_text())
    data["payload"]["buyer"]["warrantyDays"] = 3650
    path.write_text(json.dumps(data))


class TestVerifyValid:

    def test_exit_code_0(self, runner: CliRunner, cli_obj, created: Path) -> None:
        result = runner.invoke(cli, ["verify"], obj=cli_obj)
        assert result.exit_code == 0, result.output
        assert "VALID" in result.output
        assert "INVALID" not in result.output
        assert "No mismatches detected." in result.output

    def test_prints_buyer(self, runner: CliRunner, cli_obj, created: Path) -> None:
        result = runner.invoke(cli, ["verify"], obj=cli_obj)
        assert "Buyer: Jane Doe" in result.output
        assert "Warranty expires: 2025-12-17T00:00:00.000Z" in result.output

    def test_json_output(self, runner: CliRunner, cli_obj, created: Path) -> None:
        result = runner.invoke(cli, ["verify", "--json"], obj=cli_obj)
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["signatureValid"] is True
        assert data["mismatches"] == []
        assert data["buyer"]["name"] == "Jane Doe"

    def test_explicit_public_key(self, runner: CliRunner, cli_obj, created: Path, key_files) -> None:
        result = runner.invoke(
            cli, ["verify", "--pubKey", str(key_files[1]), "--json"], obj=cli_obj
        )
        assert result.exit_code == 0, result.output

    def test_public_key_from_environment(
        self, runner: CliRunner, cli_obj, created: Path, key_files, config
    ) -> None:
        obj = dict(cli_obj)
        obj["config"] = config.with_overrides(public_key_path=key_files[1].parent / "absent.pem")
        obj["environ"] = {"PC_FINGERPRINTER_PUBKEY": str(key_files[1])}
        result = runner.invoke(cli, ["verify", "--json"], obj=obj)
        assert result.exit_code == 0, result.output


class TestVerifyHardwareChanges:

    def test_mismatches_reported_not_fatal(
        self, runner: CliRunner, cli_obj, created: Path, snapshot_factory
    ) -> None:
        obj = dict(cli_obj)
        obj["hardware_source"] = StaticHardwareSource(
            snapshot_factory(memory_gb=64, machine_id="replaced")
        )
        result = runner.invoke(cli, ["verify", "--json"], obj=obj)
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["signatureValid"] is True
        assert data["mismatches"] == [
            "machineId: saved=4c4c4544-0042-3510-8052-b4c04f4e4d32 current=replaced",
            "memoryGB: saved=32 current=64",
        ]

    def test_human_output_counts(
        self, runner: CliRunner, cli_obj, created: Path, snapshot_factory
    ) -> None:
        obj = dict(cli_obj)
        obj["hardware_source"] = StaticHardwareSource(snapshot_factory(memory_gb=64))
        result = runner.invoke(cli, ["verify"], obj=obj)
        assert result.exit_code == 0
        assert "Total mismatches: 1" in result.output


class TestVerifyInvalid:

    def test_tampered_exits_2(self, runner: CliRunner, cli_obj, created: Path) -> None:
        _tamper(created)
        result = runner.invoke(cli, ["verify"], obj=cli_obj)
        assert result.exit_code == 2
        assert "INVALID" in result.output
        assert "possible tamper or wrong public key" in result.output

    def test_tampered_json(self, runner: CliRunner, cli_obj, created: Path) -> None:
        _tamper(created)
        result = runner.invoke(cli, ["verify", "--json"], obj=cli_obj)
        assert result.exit_code == 2
        data = json.loads(result.output)
        assert data["signatureValid"] is False
        assert data["buyer"]["warrantyDays"] == 3650

    def test_wrong_public_key(
        self, runner: CliRunner, cli_obj, created: Path, other_rsa_keypair, tmp_path: Path
    ) -> None:
        other = tmp_path / "other.pem"
        other.write_bytes(other_rsa_keypair[1])
        result = runner.invoke(cli, ["verify", "--pubKey", str(other)], obj=cli_obj)
        assert result.exit_code == 2


class TestVerifyErrors:

    def test_missing_fingerprint(self, runner: CliRunner, cli_obj) -> None:
        result = runner.invoke(cli, ["verify"], obj=cli_obj)
        assert result.exit_code == 1
        assert "Fingerprint not found" in result.output

    def test_missing_fingerprint_json(self, runner: CliRunner, cli_obj) -> None:
        result = runner.invoke(cli, ["verify", "--json"], obj=cli_obj)
        assert result.exit_code == 1
        assert "error" in json.loads(result.output)

    def test_missing_public_key(
        self, runner: CliRunner, cli_obj, created: Path, tmp_path: Path
    ) -> None:
        result = runner.invoke(
            cli, ["verify", "--pubKey", str(tmp_path / "absent.pem")], obj=cli_obj
        )
        assert result.exit_code == 1
        assert "Public key not readable" in result.output

    def test_malformed_signature(self, runner: CliRunner, cli_obj, created: Path) -> None:
        data = json.loads(created.read_text())
        data["signature"] = "***not base64***"
        created.write_text(json.dumps(data))
        result = runner.invoke(cli, ["verify"], obj=cli_obj)
        assert result.exit_code == 1
        assert "Error:" in result.output

    def test_unreadable_fingerprint(self, runner: CliRunner, cli_obj, monkeypatch) -> None:
        """An OS-level read failure exits 1 with an error line."""
        def deny(self, path=None, public_key_path=None):
            raise PermissionError(13, "Permission denied")

        monkeypatch.setattr(FingerprintManager, "verify", deny)
        result = runner.invoke(cli, ["verify"], obj=cli_obj)
        assert result.exit_code == 1
        assert "Error: Could not read fingerprint" in result.output

    def test_unreadable_fingerprint_json(self, runner: CliRunner, cli_obj, monkeypatch) -> None:
        def deny(self, path=None, public_key_path=None):
            raise PermissionError(13, "Permission denied")

        monkeypatch.setattr(FingerprintManager, "verify", deny)
        result = runner.invoke(cli, ["verify", "--json"], obj=cli_obj)
        assert result.exit_code == 1
        assert "Could not read fingerprint" in json.loads(result.output)["error"]

    def test_unknown_option_exits_1(self, runner: CliRunner, cli_obj) -> None:
        result = runner.invoke(cli, ["verify", "--pubkey", "x.pem"], obj=cli_obj)
        assert result.exit_code == 1
        assert "No such option" in result.output
