"""Named rack configuration snapshots.

Snapshots are copies: editing the active rack after saving never changes a
saved entry, and loading returns a copy the caller is free to edit.
"""

import logging

from packages.tco_engine.rack import RackConfiguration, copy_rack

logger = logging.getLogger("storage_tco.session.saved_configs")


class RackConfigurationStore:
    """In-memory store of named rack configurations, kept in save order."""

    def __init__(self):
        self._configs: dict[str, RackConfiguration] = {}

    def save(self, name: str, rack: RackConfiguration) -> None:
        """
        Save a copy of a rack under a name, replacing any entry with that name.

        Raises:
            ValueError: If the name is empty
        """
        name = (name or "").strip()
        if not name:
            raise ValueError("Configuration name is required")

        if name in self._configs:
            logger.info(f"Replacing saved rack configuration: {name}")
        self._configs[name] = copy_rack(rack)
        logger.debug(f"Saved rack configuration {name} ({rack.rack_type.value})")

    def load(self, name: str) -> RackConfiguration:
        """
        Return a copy of a saved rack.

        Raises:
            KeyError: If no configuration has that name
        """
        try:
            return copy_rack(self._configs[name])
        except KeyError:
            raise KeyError(f"Saved rack configuration not found: {name}") from None

    def delete(self, name: str) -> None:
        """
        Remove a saved rack.

        Raises:
            KeyError: If no configuration has that name
        """
        try:
            del self._configs[name]
        except KeyError:
            raise KeyError(f"Saved rack configuration not found: {name}") from None
        logger.debug(f"Deleted rack configuration {name}")

    def names(self) -> list[str]:
        return list(self._configs)

    def __contains__(self, name: object) -> bool:
        return name in self._configs

    def __len__(self) -> int:
        return len(self._configs)
