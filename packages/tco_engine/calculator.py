"""TCO calculation engine for the storage TCO calculator.

This module turns a drive, a rack topology, data-center fixed costs and
workload parameters into a capital/operating cost breakdown and cost per
raw and effective terabyte per month.

calculate_tco is a pure function: it performs no I/O, keeps no state and
never raises for numeric input. Zero denominators produce inf or nan the
way IEEE-754 division does, and callers present those values as "N/A".
"""

import math
from dataclasses import asdict, dataclass, fields, replace
from numbers import Real
from typing import Any

from packages.drive_catalog.records import DriveRecord, coerce_number
from packages.tco_engine.rack import RackConfiguration

# Fixed policy assumptions, not exposed as inputs
HOURS_PER_DAY = 24
DAYS_PER_MONTH = 30  # Fixed 720-hour month, not calendar accurate
HOURS_PER_MONTH = HOURS_PER_DAY * DAYS_PER_MONTH
REPLACEMENT_COST_PER_DRIVE = 100
TB_PER_PB = 1024
MONTHS_PER_YEAR = 12


@dataclass
class FixedCosts:
    """Data-center assumptions independent of any drive or rack."""

    power_cost_per_kwh: float = 0.12
    pue: float = 1.0
    depreciation_years: float = 5
    network_cost_per_month: float = 0
    software_license_cost_per_month: float = 0
    rackspace_and_cooling_per_month: float = 0

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "FixedCosts":
        return cls(**_numeric_fields(cls, data))


@dataclass
class WorkloadParams:
    """Logical-to-physical capacity amplification and duty cycle."""

    replication_factor: float = 3  # 2 for mirroring, 3 for triple replication
    erasure_coding_overhead: float = 1.4  # RAID / erasure coding capacity tax
    utilization_target: float = 0.75  # Fraction of usable capacity allowed to fill
    duty_active_percent: float = 0.5  # Fraction of time drives draw active power
    data_reduction_ratio: float = 1.0  # 2.0 for 2:1 compression/dedup

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "WorkloadParams":
        return cls(**_numeric_fields(cls, data))


@dataclass(frozen=True)
class CapexResults:
    """Capital expenditure for one rack."""

    drives_per_rack: float
    drives_cost: float
    servers_cost: float
    enclosures_cost: float
    infrastructure_cost: float
    total_capex: float
    capex_per_month: float
    capacity_per_rack_tb: float
    raw_capacity_per_rack_pb: float


@dataclass(frozen=True)
class OpexResults:
    """Monthly operating expenditure for one rack."""

    chassis_power_watts: float
    drive_power_watts: float
    total_power_watts: float
    power_cost_per_month: float
    failed_drives_per_year: float
    replacement_cost_per_month: float
    data_center_costs: float
    total_opex: float


@dataclass(frozen=True)
class TotalResults:
    """Capacity and cost summary for one rack."""

    effective_capacity_per_rack_pb: float
    total_cost_per_month: float
    tco_per_tb_raw_per_month: float
    tco_per_tb_effective_per_month: float


@dataclass(frozen=True)
class TCOResults:
    """Complete TCO breakdown for a drive in a rack configuration."""

    capex: CapexResults
    opex: OpexResults
    totals: TotalResults

    def to_dict(self) -> dict[str, dict[str, float]]:
        return {
            "capex": asdict(self.capex),
            "opex": asdict(self.opex),
            "totals": asdict(self.totals),
        }


@dataclass
class CostLineItem:
    """Individual cost line item in a breakdown."""

    category: str
    description: str
    amount: float
    unit: str  # e.g., "USD/month", "USD/TBe/month"


@dataclass
class CostBreakdown:
    """Complete cost breakdown with itemized line items."""

    items: list[CostLineItem]
    total: float
    currency: str = "USD"


def calculate_tco(
    drive: DriveRecord,
    rack: RackConfiguration,
    fixed_costs: FixedCosts,
    workload: WorkloadParams,
) -> TCOResults:
    """
    Calculate the TCO of one rack filled with a single drive model.

    Steps:
    1. Drive count per rack from the rack family's enclosures
    2. Raw capacity, then effective capacity after utilization, replication,
       erasure coding and data reduction (applied in that order)
    3. CapEx (drives + infrastructure) depreciated per month
    4. OpEx: power with PUE, drive replacements, flat data-center costs
    5. Cost per raw and effective TB per month

    Args:
        drive: Drive record from the catalog
        rack: HDD or SSD rack configuration
        fixed_costs: Energy price, PUE, depreciation and monthly add-ons
        workload: Replication, erasure coding, utilization, duty cycle and
            data reduction

    Returns:
        TCOResults with capex, opex and totals groups
    """
    drive = _float_fields(drive)
    rack = _float_fields(rack)
    fixed_costs = _float_fields(fixed_costs)
    workload = _float_fields(workload)

    drives_per_rack = (
        rack.drives_per_server * rack.servers_per_rack
        + rack.drives_per_enclosure * rack.enclosures_per_rack
    )

    # Capacity
    capacity_per_rack_tb = drives_per_rack * drive.capacity_tb
    raw_capacity_per_rack_pb = _divide(drives_per_rack * drive.capacity_tb, TB_PER_PB)

    effective_capacity_per_rack_pb = raw_capacity_per_rack_pb * workload.utilization_target
    effective_capacity_per_rack_pb = _divide(
        effective_capacity_per_rack_pb, workload.replication_factor
    )
    effective_capacity_per_rack_pb = _divide(
        effective_capacity_per_rack_pb, workload.erasure_coding_overhead
    )
    effective_capacity_per_rack_pb = effective_capacity_per_rack_pb * workload.data_reduction_ratio

    # CapEx
    drives_cost = drive.price * drives_per_rack
    servers_cost = rack.server_cost * rack.servers_per_rack
    enclosures_cost = rack.enclosure_cost * rack.enclosures_per_rack
    infrastructure_cost = (
        rack.rack_cost
        + servers_cost
        + enclosures_cost
        + rack.switch_cost * rack.utility_servers_per_rack
    )
    total_capex = infrastructure_cost + drives_cost
    capex_per_month = _divide(total_capex, fixed_costs.depreciation_years * MONTHS_PER_YEAR)

    # Power
    chassis_power_watts = (
        rack.server_power * rack.servers_per_rack
        + rack.enclosure_power * rack.enclosures_per_rack
        + rack.switch_power * rack.utility_servers_per_rack
    )
    drive_power_watts = (
        drive.power_active_w * drives_per_rack * workload.duty_active_percent
        + drive.power_idle_w * drives_per_rack * (1 - workload.duty_active_percent)
    )
    total_power_watts = chassis_power_watts + drive_power_watts
    power_cost_per_month = _divide(
        total_power_watts
        * HOURS_PER_DAY
        * DAYS_PER_MONTH
        * fixed_costs.power_cost_per_kwh
        * fixed_costs.pue,
        1000,
    )

    # Drive replacement at a flat cost per failed drive
    failed_drives_per_year = drives_per_rack * _divide(drive.afr, 100)
    replacement_cost_per_month = _divide(
        failed_drives_per_year * REPLACEMENT_COST_PER_DRIVE, MONTHS_PER_YEAR
    )

    data_center_costs = (
        fixed_costs.network_cost_per_month
        + fixed_costs.software_license_cost_per_month
        + fixed_costs.rackspace_and_cooling_per_month
    )
    total_opex = power_cost_per_month + replacement_cost_per_month + data_center_costs

    # Summary
    total_cost_per_month = capex_per_month + total_opex
    tco_per_tb_raw_per_month = _divide(total_cost_per_month, raw_capacity_per_rack_pb * TB_PER_PB)
    tco_per_tb_effective_per_month = _divide(
        total_cost_per_month, effective_capacity_per_rack_pb * TB_PER_PB
    )

    return TCOResults(
        capex=CapexResults(
            drives_per_rack=drives_per_rack,
            drives_cost=drives_cost,
            servers_cost=servers_cost,
            enclosures_cost=enclosures_cost,
            infrastructure_cost=infrastructure_cost,
            total_capex=total_capex,
            capex_per_month=capex_per_month,
            capacity_per_rack_tb=capacity_per_rack_tb,
            raw_capacity_per_rack_pb=raw_capacity_per_rack_pb,
        ),
        opex=OpexResults(
            chassis_power_watts=chassis_power_watts,
            drive_power_watts=drive_power_watts,
            total_power_watts=total_power_watts,
            power_cost_per_month=power_cost_per_month,
            failed_drives_per_year=failed_drives_per_year,
            replacement_cost_per_month=replacement_cost_per_month,
            data_center_costs=data_center_costs,
            total_opex=total_opex,
        ),
        totals=TotalResults(
            effective_capacity_per_rack_pb=effective_capacity_per_rack_pb,
            total_cost_per_month=total_cost_per_month,
            tco_per_tb_raw_per_month=tco_per_tb_raw_per_month,
            tco_per_tb_effective_per_month=tco_per_tb_effective_per_month,
        ),
    )


def calculate_tco_for_drives(
    drives: list[DriveRecord],
    rack: RackConfiguration,
    fixed_costs: FixedCosts,
    workload: WorkloadParams,
) -> list[tuple[DriveRecord, TCOResults]]:
    """
    Calculate TCO for several drives against the same configuration.

    Returns:
        List of (drive, results) pairs in the order the drives were given
    """
    return [(drive, calculate_tco(drive, rack, fixed_costs, workload)) for drive in drives]


def build_monthly_breakdown(results: TCOResults) -> CostBreakdown:
    """
    Itemize the monthly rack cost.

    Args:
        results: Output of calculate_tco

    Returns:
        CostBreakdown with CapEx, Power, Drive Replacement and Data Center
        line items in USD/month
    """
    items = [
        CostLineItem(
            category="CapEx",
            description=f"Depreciated drives and infrastructure "
            f"({results.capex.drives_per_rack:g} drives per rack)",
            amount=results.capex.capex_per_month,
            unit="USD/month",
        ),
        CostLineItem(
            category="Power",
            description=f"Electricity for {results.opex.total_power_watts:,.0f} W "
            f"over {HOURS_PER_MONTH} hours/month",
            amount=results.opex.power_cost_per_month,
            unit="USD/month",
        ),
        CostLineItem(
            category="Drive Replacement",
            description=f"{results.opex.failed_drives_per_year:.2f} failed drives/year "
            f"at ${REPLACEMENT_COST_PER_DRIVE} each",
            amount=results.opex.replacement_cost_per_month,
            unit="USD/month",
        ),
        CostLineItem(
            category="Data Center",
            description="Network, software licenses, rackspace and cooling",
            amount=results.opex.data_center_costs,
            unit="USD/month",
        ),
    ]

    total = sum(item.amount for item in items)

    return CostBreakdown(items=items, total=total, currency="USD")


def project_costs(
    results: TCOResults,
    depreciation_years: float,
) -> dict[str, CostBreakdown]:
    """
    Project CapEx and OpEx per effective TB over monthly, yearly and total horizons.

    The total horizon spans the depreciation period.

    Args:
        results: Output of calculate_tco
        depreciation_years: Depreciation horizon used for the total projection

    Returns:
        Dictionary mapping "monthly", "yearly" and "total" to CostBreakdown
        objects in USD per effective TB
    """
    effective_tb = results.totals.effective_capacity_per_rack_pb * TB_PER_PB
    capex_per_tb = _divide(results.capex.capex_per_month, effective_tb)
    opex_per_tb = _divide(results.opex.total_opex, effective_tb)

    horizons = {
        "monthly": (1, "USD/TBe/month"),
        "yearly": (MONTHS_PER_YEAR, "USD/TBe/year"),
        "total": (MONTHS_PER_YEAR * depreciation_years, "USD/TBe"),
    }

    projections = {}
    for horizon, (months, unit) in horizons.items():
        items = [
            CostLineItem(
                category="CapEx",
                description=f"{horizon.capitalize()} CapEx per effective TB",
                amount=capex_per_tb * months,
                unit=unit,
            ),
            CostLineItem(
                category="OpEx",
                description=f"{horizon.capitalize()} OpEx per effective TB",
                amount=opex_per_tb * months,
                unit=unit,
            ),
        ]
        projections[horizon] = CostBreakdown(
            items=items,
            total=sum(item.amount for item in items),
            currency="USD",
        )

    return projections


def _divide(numerator: float, denominator: float) -> float:
    """Divide with IEEE-754 results for a zero denominator instead of raising."""
    if denominator == 0:
        if numerator == 0 or math.isnan(numerator):
            return math.nan
        return math.copysign(math.inf, numerator) * math.copysign(1.0, denominator)
    return numerator / denominator


def _numeric_fields(cls: type, data: dict[str, Any]) -> dict[str, float]:
    """Pick the dataclass fields out of a dict, rejecting unknown or non-numeric values."""
    if not isinstance(data, dict):
        raise TypeError(f"{cls.__name__} must be given as an object")

    known = {f.name for f in fields(cls)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(f"Unknown fields for {cls.__name__}: {', '.join(unknown)}")

    return {key: coerce_number(key, value) for key, value in data.items()}


def _as_float(value: Real) -> float:
    """Convert a number to float, saturating integers beyond float range to +/-inf."""
    try:
        return float(value)
    except OverflowError:
        return math.inf if value > 0 else -math.inf


def _float_fields(obj):
    """Copy of a dataclass with every non-float numeric field converted by _as_float."""
    changes = {}
    for f in fields(obj):
        value = getattr(obj, f.name)
        if isinstance(value, Real) and not isinstance(value, float):
            changes[f.name] = _as_float(value)
    return replace(obj, **changes) if changes else obj
