from flask import request

from app.buisness.procurement.errors import InvalidInput


def json_body() -> dict:
    """Request JSON object; an absent body is an empty object."""
    data = request.get_json(silent=True)
    if data is None:
        if request.data:
            raise InvalidInput("Request body must be valid JSON")
        return {}
    if not isinstance(data, dict):
        raise InvalidInput("Request body must be a JSON object")
    return data
