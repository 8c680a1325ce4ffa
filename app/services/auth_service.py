"""
Authentication service.

Resolves the authenticated principal (id, role, super-admin flag) used by
the quoting and pricing endpoints.
"""
import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.orm import Session

from app.exceptions import UnauthorizedError, ValidationError
from app.models import AppUser

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Principal:
    """Authenticated caller."""
    id: int
    email: str
    role: Optional[str]
    is_super_admin: bool

    @classmethod
    def from_user(cls, user: AppUser) -> 'Principal':
        return cls(
            id=user.id,
            email=user.email,
            role=user.role_name,
            is_super_admin=bool(user.is_super_admin),
        )

    def has_role(self, *roles) -> bool:
        """Super admins pass every role check."""
        return self.is_super_admin or (self.role is not None and self.role in roles)

    def to_dict(self):
        return {
            'id': self.id,
            'correo': self.email,
            'rol': self.role,
            'acceso_total': self.is_super_admin,
        }


def authenticate(session: Session, email, password) -> Principal:
    """
    Check email/password and return the principal.

    Raises:
        ValidationError: email or password missing.
        UnauthorizedError: unknown user, inactive user or wrong password.
    """
    if not email or not password:
        raise ValidationError('Se requieren correo y contraseña')

    user = session.query(AppUser).filter_by(email=email.strip().lower()).first()
    if not user or not user.active or not user.check_password(password):
        logger.warning(f"Failed login attempt for {email}")
        raise UnauthorizedError('Credenciales inválidas')

    logger.info(f"User logged in: {user.email}")
    return Principal.from_user(user)


def load_principal(session: Session, user_id) -> Optional[Principal]:
    """Principal for an active user id, or None."""
    if not user_id:
        return None
    user = session.query(AppUser).filter_by(id=user_id, active=True).first()
    if not user:
        return None
    return Principal.from_user(user)
