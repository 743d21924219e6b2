"""Role-based access control implementation"""
from functools import wraps
from flask import abort
from flask_login import current_user
import logging

logger = logging.getLogger(__name__)

def permission_required(permission):
    """Decorator for checking if current user has a specific permission"""
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            if not current_user.is_authenticated:
                abort(401)

            if not current_user.has_permission(permission):
                logger.warning(f"User {current_user.username} attempted to access a resource requiring {permission} permission")
                abort(403)

            return f(*args, **kwargs)
        return decorated_function
    return decorator
