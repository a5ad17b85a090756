"""Drive catalog API routes."""

import logging

from flask import Blueprint, jsonify, request
from werkzeug.exceptions import BadRequest

from packages.api.routes import get_drive_catalog
from packages.api.serializers import sanitize_numbers
from packages.drive_catalog.records import MediaType

logger = logging.getLogger("storage_tco.api.routes.drives")

bp = Blueprint("drives", __name__, url_prefix="/api/drives")


@bp.route("", methods=["GET"])
def list_drives():
    """
    List catalog drives.

    Query Parameters:
        media_type: Optional "HDD" or "SSD" filter

    Returns:
        200: {"drives": [drive, ...], "count": int}
        400: Unknown media_type
    """
    catalog = get_drive_catalog()
    media_type = request.args.get("media_type")

    if media_type:
        try:
            drives = catalog.by_media_type(MediaType(media_type.upper()))
        except ValueError:
            raise BadRequest("media_type must be one of: HDD, SSD") from None
    else:
        drives = list(catalog)

    return jsonify(
        {
            "drives": [sanitize_numbers(drive.to_dict()) for drive in drives],
            "count": len(drives),
        }
    )


@bp.route("/<path:model>", methods=["GET"])
def get_drive(model: str):
    """
    Get one drive by model.

    Returns:
        200: drive
        404: Model not in the catalog
    """
    drive = get_drive_catalog().get(model)
    return jsonify(sanitize_numbers(drive.to_dict()))
