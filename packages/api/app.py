"""Flask application setup for the storage TCO calculator API."""

import logging
import os
from typing import Any

from flask import Flask, request
from werkzeug.exceptions import HTTPException

from packages.api.middleware import error_handler
from packages.drive_catalog.loader import DriveCatalog
from packages.session.state import MAX_SELECTED_DRIVES, CalculatorSession
from packages.tco_engine.validation import ValidationError

# Configure logging
logger = logging.getLogger("storage_tco.api")


def create_app(config: dict[str, Any] | None = None) -> Flask:
    """
    Create and configure the Flask application.

    Configuration keys:
        DRIVE_CATALOG_PATH: CSV file with the drive catalog
        DRIVE_CATALOG: Prebuilt DriveCatalog, used instead of the file
        MAX_SELECTED_DRIVES: Number of drives that can be compared at once

    Args:
        config: Optional configuration dictionary

    Returns:
        Configured Flask application instance
    """
    app = Flask(__name__)

    # Default configuration
    app.config.update(
        {
            "DRIVE_CATALOG_PATH": os.getenv("DRIVE_CATALOG_PATH", "data/drives.csv"),
            "DRIVE_CATALOG": None,
            "MAX_SELECTED_DRIVES": MAX_SELECTED_DRIVES,
        }
    )

    # Apply custom configuration if provided
    if config:
        app.config.update(config)

    app.extensions["drive_catalog"] = _load_catalog(app)
    app.extensions["calculator_session"] = CalculatorSession(
        max_selected_drives=app.config["MAX_SELECTED_DRIVES"]
    )

    # Register middleware
    _register_middleware(app)

    # Register error handlers
    _register_error_handlers(app)

    # Register blueprints
    from packages.api.routes import configuration, drives, tco

    app.register_blueprint(drives.bp)
    app.register_blueprint(configuration.bp)
    app.register_blueprint(tco.bp)

    @app.route("/health", methods=["GET"])
    def health() -> dict[str, Any]:
        return {"status": "ok", "drives": len(app.extensions["drive_catalog"])}

    logger.info("Flask application created successfully")
    return app


def _load_catalog(app: Flask) -> DriveCatalog:
    """Load the drive catalog, starting empty if the file cannot be read."""
    if app.config["DRIVE_CATALOG"] is not None:
        return app.config["DRIVE_CATALOG"]

    path = app.config["DRIVE_CATALOG_PATH"]
    try:
        catalog = DriveCatalog.from_file(path)
    except OSError as e:
        logger.error(f"Could not read drive catalog {path}: {e}")
        return DriveCatalog()

    logger.info(f"Loaded {len(catalog)} drives from {path}")
    return catalog


def _register_middleware(app: Flask) -> None:
    """Register middleware functions."""

    # Request logging
    @app.before_request
    def log_request() -> None:
        logger.info(
            f"Request: {request.method} {request.path}",
            extra={"remote_addr": request.remote_addr},
        )


def _register_error_handlers(app: Flask) -> None:
    """Register error handlers for consistent error responses."""

    @app.errorhandler(HTTPException)
    def handle_http_exception(e: HTTPException) -> tuple[dict[str, Any], int]:
        """Handle HTTP exceptions."""
        return error_handler.handle_http_error(e)

    @app.errorhandler(ValidationError)
    def handle_validation_exception(e: ValidationError) -> tuple[dict[str, Any], int]:
        """Handle configuration range failures."""
        return error_handler.handle_validation_error(e)

    @app.errorhandler(Exception)
    def handle_generic_exception(e: Exception) -> tuple[dict[str, Any], int]:
        """Handle all other exceptions."""
        return error_handler.handle_generic_error(e)


if __name__ == "__main__":
    # Development server (not for production)
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app = create_app()
    app.run(host="127.0.0.1", port=10000, debug=True)
