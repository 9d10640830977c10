"""Lifecycle result types returned by ``FingerprintManager``."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from pcfingerprinter.core.envelope import BuyerInfo, Envelope


@dataclass
class CreateResult:
    """Outcome of ``create``.

    Attributes:
        path: Where the envelope was written.
        envelope: The envelope as written.
        parts_warning: Why the parts file was ignored, if it was.
    """

    path: Path
    envelope: Envelope
    parts_warning: str | None = None


@dataclass
class VerificationResult:
    """Outcome of ``verify``.

    Both checks always run: a failed signature does not suppress the
    hardware comparison.

    Attributes:
        path: The fingerprint that was verified.
        signature_valid: Whether the stored signature covers the payload.
        mismatches: Hardware differences, in checklist order.
        buyer: Buyer and warranty block from the stored payload.
    """

    path: Path
    signature_valid: bool
    mismatches: list[str] = field(default_factory=list)
    buyer: BuyerInfo = field(default_factory=BuyerInfo)

    @property
    def hardware_matches(self) -> bool:
        return not self.mismatches

    def to_dict(self) -> dict[str, Any]:
        """Machine-readable summary (used by ``verify --json``)."""
        return {
            "path": str(self.path),
            "signatureValid": self.signature_valid,
            "mismatches": list(self.mismatches),
            "buyer": self.buyer.to_dict(),
        }
