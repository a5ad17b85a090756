"""TCO engine package.

This package computes rack-level total cost of ownership per raw and
effective terabyte for a drive, a rack topology, data-center fixed costs and
workload parameters.
"""

from packages.tco_engine.calculator import (
    FixedCosts,
    TCOResults,
    WorkloadParams,
    calculate_tco,
    calculate_tco_for_drives,
    project_costs,
)
from packages.tco_engine.rack import (
    HDDRackConfiguration,
    RackConfiguration,
    RackType,
    SSDRackConfiguration,
)

__all__ = [
    "FixedCosts",
    "HDDRackConfiguration",
    "RackConfiguration",
    "RackType",
    "SSDRackConfiguration",
    "TCOResults",
    "WorkloadParams",
    "calculate_tco",
    "calculate_tco_for_drives",
    "project_costs",
]
