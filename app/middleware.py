"""Middleware for authentication context."""
from functools import wraps
from flask import session, g, current_app
from app.database import get_session
from app.exceptions import UnauthorizedError
from app.services.auth_service import load_principal


def load_current_principal():
    """
    Load the current principal into g (Flask's per-request global).

    Called before each request. Sets g.principal to None when the session
    carries no user or the user is gone/inactive.
    """
    g.principal = None

    user_id = session.get('user_id')
    if not user_id:
        return

    principal = load_principal(get_session(), user_id)
    if principal is None:
        current_app.logger.info(f"Session user {user_id} no longer active, clearing session")
        session.pop('user_id', None)
        return

    g.principal = principal


def require_login(f):
    """
    Decorator: Require an authenticated principal.

    Raises UnauthorizedError (rendered as 401 JSON) before the view runs.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if g.get('principal') is None:
            raise UnauthorizedError('Acceso no autorizado - Inicia sesión')
        return f(*args, **kwargs)
    return decorated_function
