"""Drive records for the storage TCO calculator."""

from dataclasses import dataclass, fields
from enum import Enum
from numbers import Real
from typing import Optional


class MediaType(Enum):
    """Storage media family of a drive."""

    HDD = "HDD"
    SSD = "SSD"


# Interface substrings that identify flash media
_FLASH_INTERFACE_MARKERS = ("NVME", "PCIE", "U.2", "U.3", "E1.S", "E1.L", "E3.S", "E3.L", "SSD")


def classify_interface(interface: Optional[str]) -> MediaType:
    """
    Classify a drive interface string as SSD or HDD.

    Args:
        interface: Interface column value, e.g. "NVMe PCIe 4.0" or "SATA 6Gb/s"

    Returns:
        MediaType.SSD for flash transports, MediaType.HDD otherwise
    """
    if not interface:
        return MediaType.HDD

    normalized = interface.upper()
    if any(marker in normalized for marker in _FLASH_INTERFACE_MARKERS):
        return MediaType.SSD
    return MediaType.HDD


def coerce_number(name: str, value: object) -> float:
    """
    Check that an input value is a number and return it as a float.

    Raises:
        TypeError: If the value is not a real number (bools are rejected)
        ValueError: If the value is an integer too large for a float
    """
    if isinstance(value, bool) or not isinstance(value, Real):
        raise TypeError(f"{name} must be a number")
    try:
        return float(value)
    except OverflowError:
        raise ValueError(f"{name} is too large") from None


_REQUIRED_FIELDS = ("model", "capacity_tb", "price", "power_active_w", "power_idle_w")

_OPTIONAL_METRICS = (
    "iops_qd1",
    "iops_max_random_read",
    "bandwidth_sequential_read",
    "bandwidth_sequential_write",
    "endurance_tbw",
)


@dataclass(frozen=True)
class DriveRecord:
    """A single drive from the catalog."""

    model: str
    capacity_tb: float
    price: float  # USD for the whole drive
    power_active_w: float
    power_idle_w: float
    interface: str
    afr: float  # Annual failure rate, percent

    # Performance metrics, None when the catalog has no value
    iops_qd1: Optional[float] = None
    iops_max_random_read: Optional[float] = None
    bandwidth_sequential_read: Optional[float] = None  # MB/s
    bandwidth_sequential_write: Optional[float] = None  # MB/s
    endurance_tbw: Optional[float] = None

    @property
    def media_type(self) -> MediaType:
        return classify_interface(self.interface)

    @property
    def price_per_tb(self) -> float:
        if self.capacity_tb == 0:
            return float("nan")
        return self.price / self.capacity_tb

    @classmethod
    def from_dict(cls, data: dict) -> "DriveRecord":
        """
        Build a drive from a dict using DriveRecord field names.

        Raises:
            ValueError: If a required field is missing or unknown, or a number
                is too large for a float
            TypeError: If data is not a dict or a numeric field holds
                something other than a number
        """
        if not isinstance(data, dict):
            raise TypeError("drive must be an object")

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known - {"media_type"})
        if unknown:
            raise ValueError(f"Unknown drive fields: {', '.join(unknown)}")

        missing = [name for name in _REQUIRED_FIELDS if name not in data]
        if missing:
            raise ValueError(f"Missing drive fields: {', '.join(missing)}")

        values = {key: value for key, value in data.items() if key in known}
        values.setdefault("interface", "")
        values.setdefault("afr", 0.0)

        for key, value in values.items():
            if key in ("model", "interface"):
                if not isinstance(value, str):
                    raise TypeError(f"{key} must be a string")
            elif value is None and key in _OPTIONAL_METRICS:
                continue
            else:
                values[key] = coerce_number(key, value)

        return cls(**values)

    def to_dict(self) -> dict:
        """Serialize the drive to a JSON-compatible dict."""
        return {
            "model": self.model,
            "capacity_tb": self.capacity_tb,
            "price": self.price,
            "power_active_w": self.power_active_w,
            "power_idle_w": self.power_idle_w,
            "interface": self.interface,
            "afr": self.afr,
            "media_type": self.media_type.value,
            "iops_qd1": self.iops_qd1,
            "iops_max_random_read": self.iops_max_random_read,
            "bandwidth_sequential_read": self.bandwidth_sequential_read,
            "bandwidth_sequential_write": self.bandwidth_sequential_write,
            "endurance_tbw": self.endurance_tbw,
        }
