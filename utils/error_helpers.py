"""
Error handling helpers for the verification API
Turns draw failures into JSON error responses
"""

import logging
from functools import wraps

from flask import jsonify

from roulette_system.errors import DrawError, SessionStateError

logger = logging.getLogger(__name__)


def api_error_handler(func):
    """
    Decorator for API endpoints that maps exceptions to JSON error responses

    DrawError and other ValueErrors -> 400, SessionStateError -> 409,
    anything else -> 500 with the traceback logged.
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except DrawError as e:
            logger.warning(f"Draw error in {func.__name__}: {e}")
            return json_error(e, 400, type=type(e).__name__)
        except ValueError as e:
            logger.warning(f"Validation error in {func.__name__}: {e}")
            return json_error(e, 400)
        except SessionStateError as e:
            logger.warning(f"Out of sequence call in {func.__name__}: {e}")
            return json_error(e, 409)
        except Exception as e:
            logger.error(f"Unexpected error in {func.__name__}: {e}", exc_info=True)
            return json_error('Internal server error', 500)
    return wrapper


def json_success(data=None, **kwargs):
    """Standardized success JSON response"""
    response = {'success': True}
    if data is not None:
        response['data'] = data
    response.update(kwargs)
    return jsonify(response)


def json_error(error, status_code=400, **kwargs):
    """Standardized error JSON response with the given status code"""
    response = {'success': False, 'error': str(error)}
    response.update(kwargs)
    return jsonify(response), status_code


def require_fields(data, required_fields):
    """
    Raise ValueError listing any missing fields

    Args:
        data: Parsed JSON body
        required_fields: Field names that must be present (None counts as missing)
    """
    if not isinstance(data, dict):
        raise ValueError("Request body must be a JSON object")
    missing = [field for field in required_fields if data.get(field) is None]
    if missing:
        raise ValueError(f"Missing fields: {', '.join(missing)}")
