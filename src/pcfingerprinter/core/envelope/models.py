"""Payload data models --- metadata, buyer, and the signed payload.

These dataclasses are used to *build* a payload. Once built, a payload
is canonicalized into a plain dict and that dict is what the envelope
carries, signs, and stores; the typed views here never round-trip a stored
payload back to disk, so fields added by other producers are preserved.

Warranty arithmetic:
    The purchase date is a calendar date, interpreted as midnight UTC.
    ``warrantyExpires`` is that instant plus ``warrantyDays`` whole days,
    rendered ``YYYY-MM-DDTHH:MM:SS.mmmZ``. No local timezone is involved,
    so ``2025-09-18`` + 90 days is ``2025-12-17T00:00:00.000Z`` everywhere.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from typing import Any

from pcfingerprinter.core.hardware.models import HardwareSnapshot, utc_isoformat
from pcfingerprinter.exceptions import ValidationError

DEFAULT_WARRANTY_DAYS: int = 90


def parse_purchase_date(value: str | date) -> date:
    """Parse a purchase date given as ``YYYY-MM-DD``.

    A full ISO-8601 timestamp is accepted too; only its calendar date is
    kept.

    Raises:
        ValidationError: If the value is not a recognizable calendar date.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip() if value is not None else ""
    if not text:
        raise ValidationError("Purchase date is required (YYYY-MM-DD)")
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError as exc:
        raise ValidationError(
            f"Invalid purchase date {text!r}: expected YYYY-MM-DD"
        ) from exc


def parse_warranty_days(value: str | int) -> int:
    """Parse a warranty length given as an integer or its decimal text.

    Raises:
        ValidationError: If the value is not a whole number.
    """
    if isinstance(value, bool):
        raise ValidationError(f"Warranty days must be an integer, got {value!r}")
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except ValueError as exc:
        raise ValidationError(
            f"Warranty days must be an integer, got {value!r}"
        ) from exc


def warranty_expiry(purchase: date, warranty_days: int) -> str:
    """Return the ISO-8601 UTC instant at which the warranty expires."""
    start = datetime.combine(purchase, time(0, 0), tzinfo=timezone.utc)
    return utc_isoformat(start + timedelta(days=warranty_days))


@dataclass
class PayloadMeta:
    """Provenance block: which tool created the record, when, and by whom."""

    app: str
    created_at: str
    installer: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "app": self.app,
            "createdAt": self.created_at,
            "installer": self.installer,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PayloadMeta:
        return cls(
            app=data.get("app", ""),
            created_at=data.get("createdAt", ""),
            installer=data.get("installer"),
        )


@dataclass
class BuyerInfo:
    """Buyer and warranty block.

    Attributes:
        name: Buyer name as entered by the operator.
        purchase_date: Calendar date, ``YYYY-MM-DD``.
        warranty_days: Warranty length in days.
        warranty_expires: ISO-8601 UTC expiry instant.
    """

    name: str | None = None
    purchase_date: str | None = None
    warranty_days: int | None = None
    warranty_expires: str | None = None

    @classmethod
    def create(
        cls,
        name: str,
        purchase_date: str | date,
        warranty_days: int = DEFAULT_WARRANTY_DAYS,
    ) -> BuyerInfo:
        """Validate operator input and compute the warranty expiry.

        Raises:
            ValidationError: On an empty name, an unparsable date, or a
                negative or non-integer warranty length.
        """
        if not name or not str(name).strip():
            raise ValidationError("Buyer name must not be empty")
        if isinstance(warranty_days, bool) or not isinstance(warranty_days, int):
            raise ValidationError(
                f"Warranty days must be an integer, got {warranty_days!r}"
            )
        if warranty_days < 0:
            raise ValidationError(
                f"Warranty days must not be negative, got {warranty_days}"
            )
        purchase = parse_purchase_date(purchase_date)
        return cls(
            name=str(name).strip(),
            purchase_date=purchase.isoformat(),
            warranty_days=warranty_days,
            warranty_expires=warranty_expiry(purchase, warranty_days),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "purchaseDate": self.purchase_date,
            "warrantyDays": self.warranty_days,
            "warrantyExpires": self.warranty_expires,
        }

    @classmethod
    def from_dict(cls, data: Any) -> BuyerInfo:
        """Read a stored buyer block; anything missing stays None."""
        if not isinstance(data, dict):
            return cls()
        return cls(
            name=data.get("name"),
            purchase_date=data.get("purchaseDate"),
            warranty_days=data.get("warrantyDays"),
            warranty_expires=data.get("warrantyExpires"),
        )


@dataclass
class Payload:
    """Everything that gets signed.

    Attributes:
        meta: Provenance block.
        buyer: Buyer and warranty block.
        hardware_snapshot: Hardware captured at creation time.
        parts: Optional operator-supplied parts list. Opaque JSON.
    """

    meta: PayloadMeta
    buyer: BuyerInfo
    hardware_snapshot: HardwareSnapshot
    parts: Any = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "meta": self.meta.to_dict(),
            "buyer": self.buyer.to_dict(),
            "parts": self.parts,
            "hardwareSnapshot": self.hardware_snapshot.to_dict(),
        }
