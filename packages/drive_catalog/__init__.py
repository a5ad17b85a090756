"""Drive catalog package.

This package parses the drive table consumed by the TCO engine and exposes
the resulting read-only drive records.
"""

from packages.drive_catalog.loader import (
    NOT_APPLICABLE,
    CatalogRowError,
    DriveCatalog,
    load_drive_catalog,
    parse_drive_catalog,
)
from packages.drive_catalog.records import DriveRecord, MediaType, classify_interface

__all__ = [
    "NOT_APPLICABLE",
    "CatalogRowError",
    "DriveCatalog",
    "DriveRecord",
    "MediaType",
    "classify_interface",
    "load_drive_catalog",
    "parse_drive_catalog",
]
