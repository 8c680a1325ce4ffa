"""
Permission decorators for role-based access control.
Extends require_login with role checks.
"""

from functools import wraps
from flask import g

from app.exceptions import ForbiddenError, UnauthorizedError


def require_role(*allowed_roles):
    """
    Decorator to restrict access to specific roles.

    Usage:
        @require_role('admin')
        @require_role('admin', 'ventas')

    Super admins (acceso_total) pass regardless of role.
    """
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            principal = g.get('principal')
            if principal is None:
                raise UnauthorizedError('Acceso no autorizado - Inicia sesión')

            if not principal.has_role(*allowed_roles):
                raise ForbiddenError()

            return f(*args, **kwargs)

        return decorated_function
    return decorator
