"""Drive catalog loader.

This module parses the comma-delimited drive table into DriveRecord objects.
Rows with missing or non-numeric mandatory fields are skipped individually so
one bad row never aborts the whole load.
"""

import csv
import io
import logging
import math
from pathlib import Path
from typing import Iterator, Optional, Union

from packages.drive_catalog.records import DriveRecord, MediaType

logger = logging.getLogger("storage_tco.drive_catalog")

# Literal used by the catalog for "no value"
NOT_APPLICABLE = "N/A"

VENDOR = "Vendor"
MODEL_NAME = "Model Name"
CAPACITY_TB = "Capacity (TB)"
PRICE_PER_TB = "Price ($/TB)"
POWER_ACTIVE_W = "Power Active (W)"
POWER_IDLE_W = "Power Idle (W)"
INTERFACE = "Interface"
AFR_PERCENT = "AFR (%)"

# Optional performance columns mapped to DriveRecord fields
PERFORMANCE_COLUMNS = {
    "IOPS QD1": "iops_qd1",
    "IOPS Max Random Read": "iops_max_random_read",
    "Bandwidth Sequential Read (MB/s)": "bandwidth_sequential_read",
    "Bandwidth Sequential Write (MB/s)": "bandwidth_sequential_write",
    "Endurance (TBW)": "endurance_tbw",
}

MANDATORY_COLUMNS = (VENDOR, MODEL_NAME, CAPACITY_TB, PRICE_PER_TB, POWER_ACTIVE_W, POWER_IDLE_W)


class CatalogRowError(ValueError):
    """Raised when a catalog row cannot be turned into a DriveRecord."""


def parse_drive_catalog(csv_text: str) -> list[DriveRecord]:
    """
    Parse catalog text into drive records.

    Args:
        csv_text: Header-described, comma-delimited drive table

    Returns:
        List of DriveRecord objects in file order. Invalid rows and duplicate
        models are skipped and logged.
    """
    reader = csv.DictReader(io.StringIO(csv_text.strip()))
    if not reader.fieldnames:
        logger.error("Drive catalog has no header row")
        return []

    headers = [name.strip() for name in reader.fieldnames]
    reader.fieldnames = headers
    missing_columns = [column for column in MANDATORY_COLUMNS if column not in headers]
    if missing_columns:
        logger.error(f"Drive catalog is missing required columns: {missing_columns}")
        return []

    drives: list[DriveRecord] = []
    seen_models: set[str] = set()

    # line_num is the last physical line of the row just read
    for row in reader:
        line_number = reader.line_num
        if not any((value or "").strip() for value in row.values() if isinstance(value, str)):
            continue

        try:
            drive = parse_drive_row(row)
        except CatalogRowError as e:
            logger.warning(f"Skipping catalog line {line_number}: {e}")
            continue

        if drive.model in seen_models:
            logger.warning(f"Skipping catalog line {line_number}: duplicate model {drive.model!r}")
            continue

        seen_models.add(drive.model)
        drives.append(drive)

    if drives:
        logger.info(f"Parsed {len(drives)} drives from catalog")
    else:
        logger.error("No valid drives parsed from catalog")

    return drives


def parse_drive_row(row: dict[str, Optional[str]]) -> DriveRecord:
    """
    Convert one catalog row into a DriveRecord.

    Args:
        row: Mapping of column header to raw cell text

    Returns:
        DriveRecord built from the row

    Raises:
        CatalogRowError: If a mandatory field is missing or non-numeric
    """
    for column in MANDATORY_COLUMNS:
        if not _cell(row, column):
            raise CatalogRowError(f"missing required field {column!r}")

    capacity_tb = _required_number(row, CAPACITY_TB)
    price_per_tb = _required_number(row, PRICE_PER_TB)

    afr_text = _cell(row, AFR_PERCENT)
    if afr_text in ("", NOT_APPLICABLE):
        afr = 0.0
    else:
        afr = _required_number(row, AFR_PERCENT)

    performance = {
        field_name: _optional_number(_cell(row, column))
        for column, field_name in PERFORMANCE_COLUMNS.items()
    }

    return DriveRecord(
        model=f"{_cell(row, VENDOR)} {_cell(row, MODEL_NAME)}".strip(),
        capacity_tb=capacity_tb,
        price=price_per_tb * capacity_tb,
        power_active_w=_required_number(row, POWER_ACTIVE_W),
        power_idle_w=_required_number(row, POWER_IDLE_W),
        interface=_cell(row, INTERFACE),
        afr=afr,
        **performance,
    )


def load_drive_catalog(path: Union[str, Path]) -> list[DriveRecord]:
    """
    Read and parse a catalog file.

    Args:
        path: Path to the CSV file

    Returns:
        List of DriveRecord objects

    Raises:
        OSError: If the file cannot be read
    """
    catalog_path = Path(path)
    logger.info(f"Loading drive catalog from {catalog_path}")
    return parse_drive_catalog(catalog_path.read_text(encoding="utf-8-sig"))


class DriveCatalog:
    """Read-only collection of drives keyed by model."""

    def __init__(self, drives: Optional[list[DriveRecord]] = None):
        self._drives: dict[str, DriveRecord] = {}
        for drive in drives or []:
            self._drives.setdefault(drive.model, drive)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "DriveCatalog":
        return cls(load_drive_catalog(path))

    @classmethod
    def from_text(cls, csv_text: str) -> "DriveCatalog":
        return cls(parse_drive_catalog(csv_text))

    def get(self, model: str) -> DriveRecord:
        """
        Look up a drive by model.

        Raises:
            KeyError: If the model is not in the catalog
        """
        try:
            return self._drives[model]
        except KeyError:
            raise KeyError(f"Drive not found in catalog: {model}") from None

    def models(self) -> list[str]:
        return list(self._drives)

    def by_media_type(self, media_type: MediaType) -> list[DriveRecord]:
        return [drive for drive in self._drives.values() if drive.media_type is media_type]

    def __contains__(self, model: object) -> bool:
        return model in self._drives

    def __iter__(self) -> Iterator[DriveRecord]:
        return iter(self._drives.values())

    def __len__(self) -> int:
        return len(self._drives)


def _cell(row: dict[str, Optional[str]], column: str) -> str:
    """Return the stripped cell text, with surrounding quotes removed."""
    value = row.get(column)
    if not isinstance(value, str):
        return ""
    return value.replace('"', "").strip()


def _required_number(row: dict[str, Optional[str]], column: str) -> float:
    text = _cell(row, column)
    try:
        value = float(text)
    except ValueError:
        raise CatalogRowError(f"non-numeric value {text!r} for {column!r}") from None
    if math.isnan(value):
        raise CatalogRowError(f"non-numeric value {text!r} for {column!r}")
    return value


def _optional_number(text: str) -> Optional[float]:
    """Parse an optional metric; anything that is not a number is absent."""
    if not text or text == NOT_APPLICABLE:
        return None
    try:
        value = float(text)
    except ValueError:
        return None
    if math.isnan(value):
        return None
    return value
