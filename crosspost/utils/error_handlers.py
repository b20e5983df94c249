from flask import jsonify

from ..constants.service_code import HTTP_STATUS_CODES


def _error(name, message, code_name):
    code = HTTP_STATUS_CODES[code_name]
    return jsonify({"success": False, "error": name, "message": message, "status_code": code}), code


def handle_permission_error(error):
    return _error("PermissionError", str(error), "FORBIDDEN")


def handle_validation_error(error):
    # marshmallow keeps per-field messages in a dict
    return _error("Validation Error", error.messages, "BAD_REQUEST")


def handle_post_not_found(error):
    return _error("Not Found", str(error) or "Post not found", "NOT_FOUND")
