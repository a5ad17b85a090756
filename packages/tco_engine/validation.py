"""Configuration range checks for the TCO engine.

calculate_tco accepts any numeric input. These checks are an optional gate
for callers that want to flag values outside the modelled ranges.
"""

from typing import Optional

from packages.drive_catalog.records import DriveRecord
from packages.tco_engine.calculator import FixedCosts, WorkloadParams
from packages.tco_engine.rack import RackConfiguration, RackType, rack_units_used


class ValidationError(Exception):
    """Raised when configuration validation fails."""

    def __init__(self, errors: dict[str, str]):
        self.errors = errors
        super().__init__(f"Configuration validation failed: {errors}")


def check_configuration(
    rack: Optional[RackConfiguration] = None,
    fixed_costs: Optional[FixedCosts] = None,
    workload: Optional[WorkloadParams] = None,
    drive: Optional[DriveRecord] = None,
) -> dict[str, str]:
    """
    Collect out-of-range values across the engine inputs.

    Args:
        rack: Rack configuration (counts, costs and power must be non-negative,
            occupied rack units must fit the rack)
        fixed_costs: Fixed costs (PUE >= 1, depreciation > 0, costs >= 0)
        workload: Workload parameters (replication, erasure coding and data
            reduction >= 1, utilization and duty cycle within 0-1)
        drive: Drive record (capacity > 0, power and AFR >= 0)

    Returns:
        Dictionary of field names to error messages. Empty dict if all valid.
    """
    errors = {}

    if rack is not None:
        errors.update(_check_rack(rack))

    if fixed_costs is not None:
        errors.update(_check_fixed_costs(fixed_costs))

    if workload is not None:
        errors.update(_check_workload(workload))

    if drive is not None:
        errors.update(_check_drive(drive))

    return errors


def validate_configuration(
    rack: Optional[RackConfiguration] = None,
    fixed_costs: Optional[FixedCosts] = None,
    workload: Optional[WorkloadParams] = None,
    drive: Optional[DriveRecord] = None,
) -> dict[str, str]:
    """
    Validate engine inputs against their modelled ranges.

    Returns:
        Empty dict if all values are in range

    Raises:
        ValidationError: If any check fails (contains errors dict)
    """
    errors = check_configuration(rack=rack, fixed_costs=fixed_costs, workload=workload, drive=drive)

    if errors:
        raise ValidationError(errors)

    return errors


def _check_rack(rack: RackConfiguration) -> dict[str, str]:
    errors = {}
    prefix = "rack"

    counts = {
        "drives_per_server": rack.drives_per_server,
        "servers_per_rack": rack.servers_per_rack,
        "utility_servers_per_rack": rack.utility_servers_per_rack,
    }
    if rack.rack_type is RackType.HDD:
        counts["drives_per_jbod"] = rack.drives_per_jbod
        counts["jbods_per_rack"] = rack.jbods_per_rack
    else:
        counts["drives_per_jbof"] = rack.drives_per_jbof
        counts["jbofs_per_rack"] = rack.jbofs_per_rack

    for name, value in counts.items():
        if value < 0:
            errors[f"{prefix}.{name}"] = f"{_label(name)} must not be negative"

    amounts = {
        "rack_cost": rack.rack_cost,
        "server_cost": rack.server_cost,
        "switch_cost": rack.switch_cost,
        "enclosure_cost": rack.enclosure_cost,
        "server_power": rack.server_power,
        "switch_power": rack.switch_power,
        "enclosure_power": rack.enclosure_power,
    }
    for name, value in amounts.items():
        if value < 0:
            errors[f"{prefix}.{name}"] = f"{_label(name)} must not be negative"

    if rack.servers_per_rack * rack.drives_per_server + (
        rack.enclosures_per_rack * rack.drives_per_enclosure
    ) <= 0:
        errors[f"{prefix}.drives_per_rack"] = "Rack must hold at least one drive"

    used = rack_units_used(rack)
    if used > rack.rack_units:
        errors[f"{prefix}.rack_units"] = (
            f"Equipment needs {used:g} RU but the rack has {rack.rack_units:g} RU"
        )

    return errors


def _check_fixed_costs(fixed_costs: FixedCosts) -> dict[str, str]:
    errors = {}
    prefix = "fixed_costs"

    if fixed_costs.power_cost_per_kwh < 0:
        errors[f"{prefix}.power_cost_per_kwh"] = "Power cost must not be negative"

    if fixed_costs.pue < 1:
        errors[f"{prefix}.pue"] = "PUE must be at least 1.0"

    if fixed_costs.depreciation_years <= 0:
        errors[f"{prefix}.depreciation_years"] = "Depreciation period must be positive"

    for name in (
        "network_cost_per_month",
        "software_license_cost_per_month",
        "rackspace_and_cooling_per_month",
    ):
        if getattr(fixed_costs, name) < 0:
            errors[f"{prefix}.{name}"] = f"{_label(name)} must not be negative"

    return errors


def _check_workload(workload: WorkloadParams) -> dict[str, str]:
    errors = {}
    prefix = "workload"

    for name in ("replication_factor", "erasure_coding_overhead", "data_reduction_ratio"):
        if getattr(workload, name) < 1:
            errors[f"{prefix}.{name}"] = f"{_label(name)} must be at least 1"

    for name in ("utilization_target", "duty_active_percent"):
        value = getattr(workload, name)
        if value < 0 or value > 1:
            errors[f"{prefix}.{name}"] = f"{_label(name)} must be between 0 and 1"

    return errors


def _check_drive(drive: DriveRecord) -> dict[str, str]:
    errors = {}
    prefix = "drive"

    if drive.capacity_tb <= 0:
        errors[f"{prefix}.capacity_tb"] = "Capacity must be positive"

    if drive.price < 0:
        errors[f"{prefix}.price"] = "Price must not be negative"

    for name in ("power_active_w", "power_idle_w", "afr"):
        if getattr(drive, name) < 0:
            errors[f"{prefix}.{name}"] = f"{_label(name)} must not be negative"

    return errors


def _label(name: str) -> str:
    """Turn a field name into a readable label."""
    return name.replace("_", " ").capitalize()
