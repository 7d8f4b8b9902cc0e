from functools import wraps
from flask import current_app, g, jsonify, request

from gymdesk.utils.errors import ApiError
from gymdesk.utils.session import SessionError, decode_token

# Paths that never need a session.
PUBLIC_PATHS = ('/api/auth/login', '/api/auth/logout')


def load_session_identity():
    """Session guard, registered as a before_request hook on the app.

    Every /api request except login/logout must carry a valid session cookie;
    otherwise a 401 JSON response short-circuits the request and the handler
    never runs.
    """
    g.identity = None
    if not request.path.startswith('/api/') or request.path in PUBLIC_PATHS:
        return None
    if request.method == 'OPTIONS':
        return None

    config = current_app.config
    raw = request.cookies.get(config['SESSION_COOKIE_NAME'])
    try:
        identity = decode_token(
            raw,
            config['SESSION_SECRET'],
            admin_pin=config.get('ADMIN_PIN'),
            allow_legacy=config.get('ALLOW_LEGACY_SESSIONS', False),
            max_age_ms=config['SESSION_MAX_AGE'] * 1000,
        )
    except SessionError as e:
        current_app.logger.info("Rejected session for %s %s: %s", request.method, request.path, e)
        return jsonify({'error': f'Unauthorized: {e}'}), 401

    g.identity = identity
    return None


def current_identity():
    return g.get('identity')


def admin_required(f):
    """Decorator to require an owner (admin) session"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        identity = current_identity()
        if identity is None:
            return jsonify({'error': 'Authentication required'}), 401
        if not identity.is_admin:
            return jsonify({'error': 'Unauthorized: Members cannot access admin endpoints'}), 403
        return f(*args, **kwargs)
    return decorated_function


def member_required(f):
    """Decorator for portal routes; the member id comes from the session only."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        identity = current_identity()
        if identity is None or not identity.is_member or not identity.member_id:
            return jsonify({'error': 'Unauthorized'}), 401
        return f(*args, **kwargs)
    return decorated_function


def json_endpoint(f):
    """Map handler failures to JSON error responses.

    ApiError subclasses keep their status; anything else (database errors
    included) is logged and reported as a 500 with the exception text.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        try:
            return f(*args, **kwargs)
        except ApiError as e:
            return jsonify(e.to_dict()), e.status_code
        except Exception as e:
            current_app.logger.exception("Unhandled error in %s %s", request.method, request.path)
            return jsonify({'error': str(e)}), 500
    return decorated_function
