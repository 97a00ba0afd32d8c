"""
Request Helpers

Small helpers shared by the route modules: tolerant number parsing,
JSON body access, pagination and the standard response envelope.
"""

import math

from flask import jsonify, request
from flask_login import current_user

from models import db
from utils.errors import ValidationError, NotFoundError


def safe_float(value, default=0.0, min_val=None, max_val=None):
    """Safely parse a float value with optional bounds."""
    try:
        result = float(value) if value not in (None, '') else default
        if result is None:
            return None
        if min_val is not None:
            result = max(min_val, result)
        if max_val is not None:
            result = min(max_val, result)
        return result
    except (ValueError, TypeError):
        return default


def safe_int(value, default=1, min_val=None, max_val=None):
    """Safely parse an integer value with optional bounds."""
    try:
        result = int(value) if value not in (None, '') else default
        if result is None:
            return None
        if min_val is not None:
            result = max(min_val, result)
        if max_val is not None:
            result = min(max_val, result)
        return result
    except (ValueError, TypeError):
        return default


def parse_bool(value, default=False):
    """Interpret query string style booleans ('true', '1', 'yes')."""
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ('true', '1', 'yes', 'on')


def get_json_body():
    """
    Return the request JSON body as a dict.

    Raises:
        ValidationError: If the body is missing or not a JSON object
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError('Request body must be a JSON object')
    return data


def get_pagination(default_limit=12, max_limit=50):
    """Read page/limit from the query string, clamped to sane bounds."""
    page = safe_int(request.args.get('page'), default=1, min_val=1)
    limit = safe_int(request.args.get('limit'), default=default_limit, min_val=1, max_val=max_limit)
    return page, limit


def build_pagination(page, limit, total):
    """Pagination block returned alongside list responses."""
    total_pages = math.ceil(total / limit) if limit else 0
    return {
        'page': page,
        'limit': limit,
        'total': total,
        'totalPages': total_pages,
        'hasNextPage': page < total_pages,
        'hasPrevPage': page > 1,
    }


def get_or_404(model, object_id, message=None):
    """Fetch a row by primary key or raise NotFoundError."""
    obj = db.session.get(model, object_id)
    if obj is None:
        raise NotFoundError(message or f'{model.__name__} not found')
    return obj


def success(data=None, status=200, **extra):
    """Standard success envelope: {success, data, ...extra}."""
    payload = {'success': True}
    if data is not None:
        payload['data'] = data
    payload.update(extra)
    return jsonify(payload), status


def require_text(data, key, label, max_length, min_length=1):
    """
    Pull a required string field out of a request body.

    Args:
        data: Request body dict
        key: Field name in the body
        label: Human readable field name for error messages
        max_length: Maximum allowed length after stripping
        min_length: Minimum allowed length after stripping

    Returns:
        The stripped string

    Raises:
        ValidationError: If missing, not a string or out of bounds
    """
    value = data.get(key)
    if not isinstance(value, str) or len(value.strip()) < min_length:
        raise ValidationError(f'{label} is required')
    value = value.strip()
    if len(value) > max_length:
        raise ValidationError(f'{label} must be at most {max_length} characters')
    return value


def viewer_id():
    """Id of the signed-in user, or None for anonymous requests."""
    if current_user.is_authenticated:
        return current_user.id
    return None
