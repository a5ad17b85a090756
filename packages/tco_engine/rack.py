"""Rack topology models for the TCO engine.

A rack is either HDD-oriented (servers plus JBOD enclosures) or SSD-oriented
(servers plus JBOF enclosures). Each family is its own dataclass so only the
fields that matter for that family exist on an instance.
"""

import copy
from dataclasses import asdict, dataclass, fields
from enum import Enum
from typing import Any, ClassVar, Union

from packages.drive_catalog.records import DriveRecord, MediaType, coerce_number


class RackType(Enum):
    """Chassis family of a rack."""

    HDD = "HDD"
    SSD = "SSD"


@dataclass
class _RackBase:
    """Fields shared by both rack families."""

    rack_type: ClassVar[RackType]

    # Per-unit costs (USD)
    rack_cost: float = 2000
    server_cost: float = 15000
    switch_cost: float = 3000

    # Per-unit power draw (W)
    server_power: float = 800
    switch_power: float = 100

    # Rack-unit sizes
    server_ru: float = 2
    switch_ru: float = 1
    rack_units: float = 42

    # Topology
    drives_per_server: float = 24
    servers_per_rack: float = 4
    utility_servers_per_rack: float = 2


@dataclass
class HDDRackConfiguration(_RackBase):
    """Server + JBOD rack."""

    rack_type: ClassVar[RackType] = RackType.HDD

    jbod_cost: float = 5000
    jbod_power: float = 200
    jbod_ru: float = 4
    drives_per_jbod: float = 60
    jbods_per_rack: float = 8

    @property
    def enclosures_per_rack(self) -> float:
        return self.jbods_per_rack

    @property
    def drives_per_enclosure(self) -> float:
        return self.drives_per_jbod

    @property
    def enclosure_cost(self) -> float:
        return self.jbod_cost

    @property
    def enclosure_power(self) -> float:
        return self.jbod_power

    @property
    def enclosure_ru(self) -> float:
        return self.jbod_ru


@dataclass
class SSDRackConfiguration(_RackBase):
    """Server + JBOF rack."""

    rack_type: ClassVar[RackType] = RackType.SSD

    jbof_cost: float = 8000
    jbof_power: float = 350
    jbof_ru: float = 2
    drives_per_jbof: float = 24
    jbofs_per_rack: float = 8

    @property
    def enclosures_per_rack(self) -> float:
        return self.jbofs_per_rack

    @property
    def drives_per_enclosure(self) -> float:
        return self.drives_per_jbof

    @property
    def enclosure_cost(self) -> float:
        return self.jbof_cost

    @property
    def enclosure_power(self) -> float:
        return self.jbof_power

    @property
    def enclosure_ru(self) -> float:
        return self.jbof_ru


RackConfiguration = Union[HDDRackConfiguration, SSDRackConfiguration]

_RACK_CLASSES: dict[RackType, type] = {
    RackType.HDD: HDDRackConfiguration,
    RackType.SSD: SSDRackConfiguration,
}


def default_rack(rack_type: RackType = RackType.HDD) -> RackConfiguration:
    """Return a rack of the given family populated with default values."""
    return _RACK_CLASSES[rack_type]()


def rack_type_for_drive(drive: DriveRecord) -> RackType:
    """Rack family that normally hosts a drive: JBOF for flash, JBOD otherwise."""
    if drive.media_type is MediaType.SSD:
        return RackType.SSD
    return RackType.HDD


def rack_units_used(rack: RackConfiguration) -> float:
    """Rack units occupied by servers, enclosures and utility servers."""
    return (
        rack.server_ru * rack.servers_per_rack
        + rack.enclosure_ru * rack.enclosures_per_rack
        + rack.switch_ru * rack.utility_servers_per_rack
    )


def copy_rack(rack: RackConfiguration) -> RackConfiguration:
    """Return an independent copy of a rack configuration."""
    return copy.deepcopy(rack)


def rack_to_dict(rack: RackConfiguration) -> dict[str, Any]:
    """Serialize a rack, tagging it with its family."""
    data: dict[str, Any] = {"rack_type": rack.rack_type.value}
    data.update(asdict(rack))
    return data


def rack_from_dict(data: dict[str, Any]) -> RackConfiguration:
    """
    Build a rack configuration from a tagged dict.

    Missing fields take the family defaults.

    Args:
        data: Dict with a "rack_type" key ("HDD" or "SSD") and rack fields

    Returns:
        HDDRackConfiguration or SSDRackConfiguration

    Raises:
        ValueError: If rack_type is missing/unknown, a field does not
            belong to that family, or a number is too large for a float
        TypeError: If data is not a dict or a field value is not a number
    """
    if not isinstance(data, dict):
        raise TypeError("rack must be an object")

    rack_type = parse_rack_type(data.get("rack_type"))
    rack_class = _RACK_CLASSES[rack_type]
    known = {f.name for f in fields(rack_class)}
    values = {key: value for key, value in data.items() if key != "rack_type"}

    unknown = sorted(set(values) - known)
    if unknown:
        raise ValueError(f"Unknown fields for {rack_type.value} rack: {', '.join(unknown)}")

    return rack_class(**{key: coerce_number(key, value) for key, value in values.items()})


def parse_rack_type(value: Any) -> RackType:
    """
    Parse a rack family name, ignoring case.

    Raises:
        ValueError: If the value is not "HDD" or "SSD"
    """
    if isinstance(value, RackType):
        return value
    if isinstance(value, str):
        value = value.upper()
    try:
        return RackType(value)
    except ValueError:
        valid = ", ".join(t.value for t in RackType)
        raise ValueError(f"rack_type must be one of: {valid}") from None


def update_rack(rack: RackConfiguration, changes: dict[str, Any]) -> RackConfiguration:
    """
    Return a copy of a rack with some fields changed.

    A "rack_type" key naming the other family switches families; shared
    fields carry over and the new family's fields take their defaults.
    A "rack_type" naming the current family changes nothing.
    """
    if not isinstance(changes, dict):
        raise TypeError("rack changes must be an object")

    if "rack_type" in changes and parse_rack_type(changes["rack_type"]) is not rack.rack_type:
        current = {
            key: value
            for key, value in asdict(rack).items()
            if key in {f.name for f in fields(_RackBase)}
        }
        current["rack_type"] = changes["rack_type"]
        merged = {**current, **changes}
    else:
        merged = {**rack_to_dict(rack), **changes}
    return rack_from_dict(merged)
