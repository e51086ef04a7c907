from functools import wraps
from flask import jsonify, g
from flask_jwt_extended import verify_jwt_in_request, get_jwt_identity
from bazario import db, sign_in_required
from bazario.models import Profile


def current_identity():
    """Return the authenticated Profile for this request, or None."""
    if 'identity' not in g:
        verify_jwt_in_request(optional=True)
        profile_id = get_jwt_identity()
        g.identity = db.session.get(Profile, profile_id) if profile_id else None
    return g.identity


def login_required(f):
    @wraps(f)
    def decorated(*args, **kwargs):
        verify_jwt_in_request()
        if current_identity() is None:
            # token is valid but its profile is gone
            return sign_in_required('Profile not found')
        return f(*args, **kwargs)
    return decorated


def user_type_required(user_type):
    def decorator(f):
        @wraps(f)
        @login_required
        def decorated(*args, **kwargs):
            if current_identity().user_type != user_type:
                return jsonify({'message': f'Only {user_type} accounts can do this'}), 403
            return f(*args, **kwargs)
        return decorated
    return decorator


startup_required = user_type_required('startup')
seller_required = user_type_required('seller')
