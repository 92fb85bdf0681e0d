"""
JSON response envelope used by every endpoint:
{ success, statusCode, message, data?, recordsTotal?, recordsFiltered? }
"""
from flask import jsonify


class ResponseCode:
    FAILED = 0
    SUCCESS = 1
    VALIDATION_ERROR = 2
    DUPLICATE = 3
    NOT_FOUND = 4
    VERIFICATION_PENDING = 5


GENERIC_ERROR = "Something went wrong. Please try again later."
NO_CHANGES_MSG = "No changes detected, record is already up-to-date"


def api_response(message, http_status=200, success=True, code=ResponseCode.SUCCESS, data=None, **extra):
    """Build the envelope; data is only included when not None."""
    body = {"success": success, "statusCode": code, "message": message}
    if data is not None:
        body["data"] = data
    body.update(extra)
    return jsonify(body), http_status


def ok(message, data=None, http_status=200, **extra):
    return api_response(message, http_status=http_status, data=data, **extra)


def validation_error(message):
    return api_response(message, 422, success=False, code=ResponseCode.VALIDATION_ERROR)


def duplicate(message):
    return api_response(message, 409, success=False, code=ResponseCode.DUPLICATE)


def not_found(message):
    return api_response(message, 404, success=False, code=ResponseCode.NOT_FOUND)


def blocked(message):
    return api_response(message, 400, success=False, code=ResponseCode.FAILED)


def no_changes(message=NO_CHANGES_MSG):
    return api_response(message, 200, success=False, code=ResponseCode.DUPLICATE)


def failed(message=GENERIC_ERROR, http_status=500):
    return api_response(message, http_status, success=False, code=ResponseCode.FAILED)


def paginated(message, records_total, records_filtered, rows):
    return api_response(
        message,
        data=rows,
        recordsTotal=records_total,
        recordsFiltered=records_filtered,
    )
