"""API routes package for REST endpoints.

- drives.py: Drive catalog endpoints
- configuration.py: Rack, fixed cost and workload configuration endpoints
- tco.py: Drive selection, TCO results and chart endpoints
"""

from typing import Any

from flask import current_app, request
from werkzeug.exceptions import BadRequest

from packages.drive_catalog.loader import DriveCatalog
from packages.session.state import CalculatorSession

__all__ = ["get_calculator_session", "get_drive_catalog", "get_json_body"]


def get_calculator_session() -> CalculatorSession:
    """Return the calculator session owned by the current app."""
    return current_app.extensions["calculator_session"]


def get_drive_catalog() -> DriveCatalog:
    """Return the drive catalog loaded by the current app."""
    return current_app.extensions["drive_catalog"]


def get_json_body() -> dict[str, Any]:
    """
    Parse the request body as a JSON object.

    Raises:
        BadRequest: If the body is missing or not a JSON object
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise BadRequest("Request body must be a JSON object")
    return data
