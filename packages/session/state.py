"""Calculator session state.

A session holds the active rack, fixed costs and workload parameters plus
the drives selected for comparison. Every change runs recalculate(), which
calls the TCO engine once per selected drive and replaces the previous
results wholesale.
"""

import dataclasses
import logging
from typing import Any, Optional

from packages.drive_catalog.records import DriveRecord
from packages.session.saved_configs import RackConfigurationStore
from packages.tco_engine.calculator import (
    FixedCosts,
    TCOResults,
    WorkloadParams,
    calculate_tco_for_drives,
)
from packages.tco_engine.rack import (
    RackConfiguration,
    copy_rack,
    default_rack,
    update_rack,
)

logger = logging.getLogger("storage_tco.session")

MAX_SELECTED_DRIVES = 3


class CalculatorSession:
    """Single-user calculator state."""

    def __init__(
        self,
        rack: Optional[RackConfiguration] = None,
        fixed_costs: Optional[FixedCosts] = None,
        workload: Optional[WorkloadParams] = None,
        max_selected_drives: int = MAX_SELECTED_DRIVES,
    ):
        self.rack = copy_rack(rack) if rack is not None else default_rack()
        self.fixed_costs = FixedCosts()
        self.workload = WorkloadParams()
        if fixed_costs is not None:
            self.fixed_costs = dataclasses.replace(fixed_costs)
        if workload is not None:
            self.workload = dataclasses.replace(workload)
        self.max_selected_drives = max_selected_drives
        self.saved_racks = RackConfigurationStore()
        self._selected: list[DriveRecord] = []
        self._results: list[tuple[DriveRecord, TCOResults]] = []

    @property
    def selected_drives(self) -> list[DriveRecord]:
        return list(self._selected)

    @property
    def results(self) -> list[tuple[DriveRecord, TCOResults]]:
        """Latest (drive, results) pairs in selection order."""
        return list(self._results)

    def select_drive(self, drive: DriveRecord) -> TCOResults:
        """
        Add a drive to the comparison.

        Returns:
            The TCO results for the new drive

        Raises:
            ValueError: If the drive is already selected or the selection is full
        """
        if any(selected.model == drive.model for selected in self._selected):
            raise ValueError(f"Drive already selected: {drive.model}")

        if len(self._selected) >= self.max_selected_drives:
            raise ValueError(
                f"At most {self.max_selected_drives} drives can be compared at once"
            )

        self._selected.append(drive)
        logger.info(f"Selected drive {drive.model}")
        self.recalculate()
        return self._results[-1][1]

    def remove_drive(self, model: str) -> None:
        """
        Remove a drive from the comparison.

        Raises:
            KeyError: If the drive is not selected
        """
        for index, drive in enumerate(self._selected):
            if drive.model == model:
                del self._selected[index]
                break
        else:
            raise KeyError(f"Drive not selected: {model}")

        logger.info(f"Removed drive {model}")
        self.recalculate()

    def update_rack(self, **changes: Any) -> RackConfiguration:
        """Change fields of the active rack; rack_type switches family."""
        self.rack = update_rack(self.rack, changes)
        self.recalculate()
        return self.rack

    def replace_rack(self, rack: RackConfiguration) -> None:
        self.rack = copy_rack(rack)
        self.recalculate()

    def update_fixed_costs(self, **changes: Any) -> FixedCosts:
        self.fixed_costs = FixedCosts.from_dict({**self.fixed_costs.to_dict(), **changes})
        self.recalculate()
        return self.fixed_costs

    def update_workload(self, **changes: Any) -> WorkloadParams:
        self.workload = WorkloadParams.from_dict({**self.workload.to_dict(), **changes})
        self.recalculate()
        return self.workload

    def save_rack(self, name: str) -> None:
        """Snapshot the active rack under a name."""
        self.saved_racks.save(name, self.rack)

    def load_rack(self, name: str) -> RackConfiguration:
        """
        Make a saved rack the active one.

        Raises:
            KeyError: If no configuration has that name
        """
        self.rack = self.saved_racks.load(name)
        logger.info(f"Loaded rack configuration {name}")
        self.recalculate()
        return self.rack

    def recalculate(self) -> list[tuple[DriveRecord, TCOResults]]:
        """Recompute results for every selected drive against the active configuration."""
        self._results = calculate_tco_for_drives(
            self._selected, self.rack, self.fixed_costs, self.workload
        )
        logger.debug(f"Recalculated TCO for {len(self._results)} drive(s)")
        return self.results
