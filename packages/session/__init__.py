"""Calculator session package.

This package keeps the active configuration, the selected drives and the
named rack snapshots for a single user.
"""

from packages.session.saved_configs import RackConfigurationStore
from packages.session.state import MAX_SELECTED_DRIVES, CalculatorSession

__all__ = ["MAX_SELECTED_DRIVES", "CalculatorSession", "RackConfigurationStore"]
