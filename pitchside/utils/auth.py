"""Shared authentication utilities.

Sign-in happens at the hosted auth provider; this backend only verifies
the access tokens it issues (HS256, signed with JWT_SECRET_KEY, user id in
the 'sub' claim) and looks up roles in the user_roles table.
"""

from functools import wraps
from flask import request, jsonify, current_app
import jwt


def _decode_token():
    """Decode the bearer token of the current request.

    Returns (user_id, None) on success or (None, error_response) on failure.
    """
    auth_header = request.headers.get('Authorization')

    if not auth_header:
        return None, (jsonify({'error': 'Token is missing'}), 401)

    # Support both "Bearer <token>" and raw token formats
    token = auth_header.split(' ')[1] if ' ' in auth_header else auth_header

    try:
        payload = jwt.decode(
            token,
            current_app.config['JWT_SECRET_KEY'],
            algorithms=['HS256'],
            audience=current_app.config.get('JWT_AUDIENCE') or None,
        )
    except jwt.ExpiredSignatureError:
        return None, (jsonify({'error': 'Token has expired'}), 401)
    except jwt.InvalidTokenError:
        return None, (jsonify({'error': 'Token is invalid'}), 401)

    user_id = payload.get('sub')
    if not user_id:
        return None, (jsonify({'error': 'Token is invalid'}), 401)
    return str(user_id), None


def token_required(f):
    """
    Decorator to require a valid access token.

    Passes the user id (the token's 'sub') as the first argument.

    Usage:
        @bp.route('/protected')
        @token_required
        def protected_route(current_user_id):
            return jsonify({'user_id': current_user_id})
    """
    @wraps(f)
    def decorated(*args, **kwargs):
        current_user_id, error = _decode_token()
        if error:
            return error
        return f(current_user_id, *args, **kwargs)
    return decorated


def role_required(*roles):
    """
    Decorator factory: token_required + the user must hold one of roles.

    Admins pass every role check.

    Usage:
        @bp.route('/articles', methods=['POST'])
        @role_required('editor')
        def create_article(current_user_id):
            ...
    """
    def decorator(f):
        @wraps(f)
        @token_required
        def decorated(current_user_id, *args, **kwargs):
            from pitchside.models import UserRole, ROLE_ADMIN

            held = UserRole.roles_for(current_user_id)
            if ROLE_ADMIN not in held and not held.intersection(roles):
                return jsonify({'error': 'Insufficient permissions'}), 403
            return f(current_user_id, *args, **kwargs)
        return decorated
    return decorator


editor_required = role_required('editor')
admin_required = role_required('admin')
