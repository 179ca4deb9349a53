"""
Helper functions shared by the API blueprints.
"""

from flask import request
from werkzeug.exceptions import BadRequest

from errors import InvalidJSONError


def get_json_body():
    """
    Decode the request body as JSON. Content-Type is not enforced.

    Returns:
        Decoded JSON value

    Raises:
        InvalidJSONError: empty or malformed body
    """
    try:
        return request.get_json(force=True)
    except BadRequest as e:
        raise InvalidJSONError() from e


def no_content():
    """Empty 204 response for successful deletes."""
    return '', 204
