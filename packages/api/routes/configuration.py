"""Configuration API routes for rack topology, fixed costs and workload parameters."""

import logging

from flask import Blueprint, jsonify

from packages.api.middleware.error_handler import create_error_response
from packages.api.routes import get_calculator_session, get_json_body
from packages.api.serializers import sanitize_numbers
from packages.tco_engine.calculator import FixedCosts, WorkloadParams
from packages.tco_engine.rack import rack_from_dict, rack_to_dict, rack_units_used
from packages.tco_engine.validation import validate_configuration

logger = logging.getLogger("storage_tco.api.routes.configuration")

bp = Blueprint("configuration", __name__, url_prefix="/api/configuration")


@bp.route("", methods=["GET"])
def get_configuration():
    """Return the active rack, fixed costs and workload parameters."""
    session = get_calculator_session()
    return jsonify(
        {
            "rack": _rack_document(session.rack),
            "fixed_costs": sanitize_numbers(session.fixed_costs.to_dict()),
            "workload": sanitize_numbers(session.workload.to_dict()),
        }
    )


@bp.route("/rack", methods=["GET"])
def get_rack():
    return jsonify(_rack_document(get_calculator_session().rack))


@bp.route("/rack", methods=["PUT"])
def replace_rack():
    """
    Replace the active rack.

    Request Body:
        {"rack_type": "HDD" | "SSD", <rack fields>...}; missing fields take
        the family defaults

    Returns:
        200: rack
        400: Unknown rack_type, unknown field or non-numeric value
    """
    rack = rack_from_dict(get_json_body())
    session = get_calculator_session()
    session.replace_rack(rack)
    logger.info(f"Replaced active rack ({rack.rack_type.value})")
    return jsonify(_rack_document(session.rack))


@bp.route("/rack", methods=["PATCH"])
def update_rack():
    """
    Change some fields of the active rack.

    A "rack_type" key switches family; shared fields carry over.
    """
    session = get_calculator_session()
    session.update_rack(**get_json_body())
    return jsonify(_rack_document(session.rack))


@bp.route("/fixed-costs", methods=["GET"])
def get_fixed_costs():
    return jsonify(sanitize_numbers(get_calculator_session().fixed_costs.to_dict()))


@bp.route("/fixed-costs", methods=["PUT"])
def replace_fixed_costs():
    fixed_costs = FixedCosts.from_dict(get_json_body())
    session = get_calculator_session()
    session.update_fixed_costs(**fixed_costs.to_dict())
    return jsonify(sanitize_numbers(session.fixed_costs.to_dict()))


@bp.route("/fixed-costs", methods=["PATCH"])
def update_fixed_costs():
    session = get_calculator_session()
    session.update_fixed_costs(**get_json_body())
    return jsonify(sanitize_numbers(session.fixed_costs.to_dict()))


@bp.route("/workload", methods=["GET"])
def get_workload():
    return jsonify(sanitize_numbers(get_calculator_session().workload.to_dict()))


@bp.route("/workload", methods=["PUT"])
def replace_workload():
    workload = WorkloadParams.from_dict(get_json_body())
    session = get_calculator_session()
    session.update_workload(**workload.to_dict())
    return jsonify(sanitize_numbers(session.workload.to_dict()))


@bp.route("/workload", methods=["PATCH"])
def update_workload():
    session = get_calculator_session()
    session.update_workload(**get_json_body())
    return jsonify(sanitize_numbers(session.workload.to_dict()))


@bp.route("/validate", methods=["POST"])
def validate():
    """
    Check configuration values against their modelled ranges.

    Request Body (every key optional, missing keys use the active session):
        {"rack": {...}, "fixed_costs": {...}, "workload": {...}}

    Returns:
        200: {"valid": true, "errors": {}}
        400: VALIDATION_ERROR with details.errors mapping field to message
    """
    data = get_json_body()
    session = get_calculator_session()

    rack = rack_from_dict(data["rack"]) if "rack" in data else session.rack
    fixed_costs = (
        FixedCosts.from_dict(data["fixed_costs"]) if "fixed_costs" in data else session.fixed_costs
    )
    workload = (
        WorkloadParams.from_dict(data["workload"]) if "workload" in data else session.workload
    )

    errors = validate_configuration(rack=rack, fixed_costs=fixed_costs, workload=workload)
    return jsonify({"valid": True, "errors": errors})


@bp.route("/racks", methods=["GET"])
def list_saved_racks():
    """List saved rack configurations in save order."""
    session = get_calculator_session()
    saved = []
    for name in session.saved_racks.names():
        rack = session.saved_racks.load(name)
        saved.append({"name": name, "rack": _rack_document(rack)})
    return jsonify({"racks": saved})


@bp.route("/racks", methods=["POST"])
def save_rack():
    """
    Save the active rack under a name.

    Request Body:
        {"name": str}

    Returns:
        201: {"name": str, "rack": rack}
        400: Missing name
    """
    name = get_json_body().get("name")
    if not isinstance(name, str) or not name.strip():
        return create_error_response("VALIDATION_ERROR", "Configuration name is required")

    session = get_calculator_session()
    session.save_rack(name)
    logger.info(f"Saved rack configuration: {name.strip()}")
    return (
        jsonify({"name": name.strip(), "rack": _rack_document(session.rack)}),
        201,
    )


@bp.route("/racks/<name>/load", methods=["POST"])
def load_rack(name: str):
    """
    Make a saved rack the active rack.

    Returns:
        200: rack
        404: No saved rack with that name
    """
    rack = get_calculator_session().load_rack(name)
    return jsonify(_rack_document(rack))


@bp.route("/racks/<name>", methods=["DELETE"])
def delete_rack(name: str):
    get_calculator_session().saved_racks.delete(name)
    logger.info(f"Deleted rack configuration: {name}")
    return jsonify({"message": f"Deleted rack configuration {name}"})


def _rack_document(rack) -> dict:
    document = rack_to_dict(rack)
    document["rack_units_used"] = rack_units_used(rack)
    return sanitize_numbers(document)
