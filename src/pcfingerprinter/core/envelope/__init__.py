"""Signed fingerprint envelope and payload model.

The package is split into focused submodules:

- ``models``: Payload building blocks (``PayloadMeta``, ``BuyerInfo``,
  ``Payload``) and warranty date arithmetic.
- ``envelope``: The ``Envelope`` class with sealing, verification, typed
  payload views, and serialization.
- ``operations``: Deserialization (``from_dict``, ``from_json``, ``read``).

All public names are re-exported here so that callers can write
``from pcfingerprinter.core.envelope import Envelope``.
"""

from pcfingerprinter.core.envelope.models import (
    DEFAULT_WARRANTY_DAYS,
    BuyerInfo,
    Payload,
    PayloadMeta,
    parse_purchase_date,
    parse_warranty_days,
    warranty_expiry,
)
from pcfingerprinter.core.envelope.envelope import (
    DEFAULT_FILE_MODE,
    REQUIRED_FIELDS,
    Envelope,
)

# Attach operations to Envelope as classmethods
from pcfingerprinter.core.envelope import operations as _ops

Envelope.from_dict = classmethod(_ops._from_dict)
Envelope.from_json = classmethod(_ops._from_json)
Envelope.read = classmethod(_ops._read)

__all__ = [
    "BuyerInfo",
    "DEFAULT_FILE_MODE",
    "DEFAULT_WARRANTY_DAYS",
    "Envelope",
    "Payload",
    "PayloadMeta",
    "REQUIRED_FIELDS",
    "parse_purchase_date",
    "parse_warranty_days",
    "warranty_expiry",
]
