"""TCO API routes for drive selection, results and charts."""

import logging

from flask import Blueprint, jsonify
from werkzeug.exceptions import BadRequest

from packages.api.middleware.error_handler import create_error_response
from packages.api.routes import get_calculator_session, get_drive_catalog, get_json_body
from packages.api.serializers import build_chart_data, serialize_results
from packages.drive_catalog.records import DriveRecord
from packages.tco_engine.calculator import FixedCosts, WorkloadParams, calculate_tco
from packages.tco_engine.rack import default_rack, rack_from_dict, rack_type_for_drive
from packages.tco_engine.validation import check_configuration

logger = logging.getLogger("storage_tco.api.routes.tco")

bp = Blueprint("tco", __name__, url_prefix="/api/tco")


@bp.route("", methods=["GET"])
def get_results():
    """
    Return TCO results for every selected drive.

    Returns:
        200: {
            "results": [{"drive", "results", "monthly_breakdown", "non_finite"}, ...],
            "warnings": {field: message}  # out-of-range configuration values
        }
    """
    session = get_calculator_session()
    return jsonify(
        {
            "results": [serialize_results(drive, tco) for drive, tco in session.results],
            "warnings": check_configuration(
                rack=session.rack, fixed_costs=session.fixed_costs, workload=session.workload
            ),
        }
    )


@bp.route("/drives", methods=["POST"])
def select_drive():
    """
    Add a catalog drive to the comparison.

    Request Body:
        {"model": str}

    Returns:
        201: Serialized results for the drive
        400: Missing model
        404: Model not in the catalog
        409: Drive already selected or comparison full
    """
    model = get_json_body().get("model")
    if not isinstance(model, str) or not model:
        return create_error_response("VALIDATION_ERROR", "model is required")

    drive = get_drive_catalog().get(model)

    try:
        results = get_calculator_session().select_drive(drive)
    except ValueError as e:
        return create_error_response("CONFLICT", str(e))

    return jsonify(serialize_results(drive, results)), 201


@bp.route("/drives/<path:model>", methods=["DELETE"])
def remove_drive(model: str):
    """
    Remove a drive from the comparison.

    Returns:
        200: {"message": str}
        404: Drive not selected
    """
    get_calculator_session().remove_drive(model)
    return jsonify({"message": f"Removed drive {model}"})


@bp.route("/calculate", methods=["POST"])
def calculate():
    """
    Calculate TCO for explicit inputs without touching the session.

    Request Body:
        {
            "model": str,            # catalog drive, or
            "drive": {...},          # inline drive using DriveRecord fields
            "rack": {...},           # optional, defaults to the drive's rack family
            "fixed_costs": {...},    # optional, defaults to FixedCosts()
            "workload": {...}        # optional, defaults to WorkloadParams()
        }

    Returns:
        200: Serialized results with "warnings" for out-of-range values
        400: Invalid inputs
        404: Model not in the catalog
    """
    data = get_json_body()

    if "drive" in data:
        if not isinstance(data["drive"], dict):
            raise BadRequest("drive must be a JSON object")
        drive = DriveRecord.from_dict(data["drive"])
    elif "model" in data:
        drive = get_drive_catalog().get(data["model"])
    else:
        return create_error_response("VALIDATION_ERROR", "Either model or drive is required")

    if "rack" in data:
        rack = rack_from_dict(data["rack"])
    else:
        rack = default_rack(rack_type_for_drive(drive))
    fixed_costs = FixedCosts.from_dict(data.get("fixed_costs", {}))
    workload = WorkloadParams.from_dict(data.get("workload", {}))

    results = calculate_tco(drive, rack, fixed_costs, workload)
    logger.debug(f"Calculated one-off TCO for {drive.model}")

    document = serialize_results(drive, results)
    document["warnings"] = check_configuration(
        rack=rack, fixed_costs=fixed_costs, workload=workload, drive=drive
    )
    return jsonify(document)


@bp.route("/charts", methods=["GET"])
def get_charts():
    """
    Return chart series for the selected drives.

    Returns:
        200: {
            "cost_per_tbe": {"monthly" | "yearly" | "total": {"categories", "series"}},
            "performance": {"iops" | "bandwidth" | "endurance": {"categories", "series"}},
            "non_finite": [path, ...]
        }
    """
    session = get_calculator_session()
    chart_data = build_chart_data(session.results, session.fixed_costs.depreciation_years)
    return jsonify(chart_data)
