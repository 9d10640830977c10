"""Shared fixtures for pcfingerprinter tests.

Key pairs are generated once per session; snapshots and sources are
rebuilt per test so mutations never leak between tests.
"""

from __future__ import annotations

from pathlib import Path

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec, ed25519, rsa

from pcfingerprinter.core.hardware import (
    BaseboardInfo,
    BiosInfo,
    CpuInfo,
    DiskInfo,
    HardwareSnapshot,
    NetworkInterface,
    OsInfo,
    StaticHardwareSource,
)
from pcfingerprinter.core.signing import FileKeyStore
from pcfingerprinter.lifecycle import FingerprintConfig, FingerprintManager


def _private_pem(key) -> bytes:
    return key.private_bytes(
        serialization.Encoding.PEM,
        serialization.PrivateFormat.PKCS8,
        serialization.NoEncryption(),
    )


def _public_pem(key) -> bytes:
    return key.public_key().public_bytes(
        serialization.Encoding.PEM,
        serialization.PublicFormat.SubjectPublicKeyInfo,
    )


@pytest.fixture(scope="session")
def rsa_keypair() -> tuple[bytes, bytes]:
    """(private PEM, public PEM) for a 2048-bit RSA key."""
    key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    return _private_pem(key), _public_pem(key)


@pytest.fixture(scope="session")
def other_rsa_keypair() -> tuple[bytes, bytes]:
    """A second, unrelated RSA key pair."""
    key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    return _private_pem(key), _public_pem(key)


@pytest.fixture(scope="session")
def ec_keypair() -> tuple[bytes, bytes]:
    key = ec.generate_private_key(ec.SECP256R1())
    return _private_pem(key), _public_pem(key)


@pytest.fixture(scope="session")
def ed25519_keypair() -> tuple[bytes, bytes]:
    key = ed25519.Ed25519PrivateKey.generate()
    return _private_pem(key), _public_pem(key)


@pytest.fixture
def key_files(tmp_path: Path, rsa_keypair: tuple[bytes, bytes]) -> tuple[Path, Path]:
    """Write the session RSA key pair to disk; return (private, public) paths."""
    keys_dir = tmp_path / "keys"
    keys_dir.mkdir()
    private_path = keys_dir / "private.pem"
    public_path = keys_dir / "public.pem"
    private_path.write_bytes(rsa_keypair[0])
    public_path.write_bytes(rsa_keypair[1])
    return private_path, public_path


def make_snapshot(**overrides) -> HardwareSnapshot:
    """A fully populated snapshot of a fictional workstation."""
    snapshot = HardwareSnapshot(
        machine_id="4c4c4544-0042-3510-8052-b4c04f4e4d32",
        platform="linux",
        arch="x86_64",
        hostname="workstation-01",
        cpu=CpuInfo(
            manufacturer="GenuineIntel",
            brand="Intel(R) Core(TM) i7-12700K",
            speed=3.6,
            physical_cores=12,
            cores=20,
        ),
        bios=BiosInfo(
            vendor="American Megatrends Inc.",
            version="1.20",
            release_date="2023-03-14",
            serial="BIOS-SN-0001",
        ),
        baseboard=BaseboardInfo(
            manufacturer="ASUSTeK COMPUTER INC.",
            model="PRIME Z690-P",
            serial="MB-SN-0001",
        ),
        disk=DiskInfo(
            vendor="Samsung",
            name="Samsung SSD 980 PRO 1TB",
            size=1000204886016,
            serial="S5GXNF0R123456",
        ),
        net=[
            NetworkInterface(
                iface="enp5s0", mac="aa:bb:cc:00:00:01",
                ip4="192.168.1.20", ip6="fe80::1",
            ),
            NetworkInterface(
                iface="wlp4s0", mac="aa:bb:cc:00:00:02",
                ip4="192.168.1.21", ip6=None,
            ),
        ],
        memory_gb=32,
        os=OsInfo(platform="linux", distro="Ubuntu 24.04 LTS", release="6.8.0"),
        timestamp="2025-09-18T10:00:00.000Z",
    )
    for name, value in overrides.items():
        setattr(snapshot, name, value)
    return snapshot


@pytest.fixture
def snapshot_factory():
    """Return the ``make_snapshot`` factory for tests that need variants."""
    return make_snapshot


@pytest.fixture
def sample_snapshot() -> HardwareSnapshot:
    return make_snapshot()


@pytest.fixture
def static_source(sample_snapshot: HardwareSnapshot) -> StaticHardwareSource:
    return StaticHardwareSource(sample_snapshot)


@pytest.fixture
def config(tmp_path: Path, key_files: tuple[Path, Path]) -> FingerprintConfig:
    """Config pointing at a temp fingerprint path and the test public key."""
    return FingerprintConfig(
        app_name="PC-Fingerprinter",
        signer="Acme PCs",
        fingerprint_path=tmp_path / "data" / "fingerprint.json",
        public_key_path=key_files[1],
    )


@pytest.fixture
def manager(
    config: FingerprintConfig, static_source: StaticHardwareSource
) -> FingerprintManager:
    """Manager wired to the static source and an environment-free key store."""
    return FingerprintManager(
        config=config,
        hardware_source=static_source,
        key_store=FileKeyStore(config.public_key_path, environ={}),
    )
