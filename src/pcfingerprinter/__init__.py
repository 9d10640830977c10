"""PC Fingerprinter: Signed, tamper-evident hardware records for PC warranties."""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Application name embedded in every payload's ``meta.app`` field.
APP_NAME = "PC-Fingerprinter"
