from __future__ import annotations

import logging

from flask import jsonify

from ..core.exceptions import AuthenticationError, DomainError, NotFoundError, RemoteFailure, ValidationError

logger = logging.getLogger(__name__)


def ok(data: dict):
    return jsonify({"success": True, "data": data})


def error_response(error: Exception):
    """Map an exception to the JSON error shape used by every endpoint."""
    if isinstance(error, ValidationError):
        status = 400
    elif isinstance(error, NotFoundError):
        status = 404
    elif isinstance(error, AuthenticationError):
        status = 409
    elif isinstance(error, RemoteFailure):
        status = 502
    elif isinstance(error, DomainError):
        status = 400
    else:
        logger.exception("Unhandled error", exc_info=error)
        return jsonify({"success": False, "message": "Internal server error"}), 500

    return jsonify({"success": False, "message": str(error)}), status
