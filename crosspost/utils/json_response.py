from flask import jsonify

from ..constants.service_code import HTTP_STATUS_CODES


def prepared_response(status, status_code, message, data=None, errors=None):
    """
    Standard JSON envelope: {success, status_code, message[, data][, errors]}.
    `status_code` is a key of HTTP_STATUS_CODES ("OK", "ACCEPTED", ...).
    """
    code = HTTP_STATUS_CODES[status_code]
    body = {"success": status, "status_code": code, "message": str(message)}
    if data is not None:
        body["data"] = data
    if errors is not None:
        body["errors"] = errors
    return jsonify(body), code
