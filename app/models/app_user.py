"""AppUser model - back-office users with email/password authentication."""
from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from werkzeug.security import generate_password_hash, check_password_hash
from app.database import Base, BigIntegerId


class AppUser(Base):
    """AppUser model - platform users."""

    __tablename__ = 'app_user'

    id = Column(BigIntegerId, primary_key=True, autoincrement=True)
    email = Column(String(255), nullable=False, unique=True)
    password_hash = Column(String(255), nullable=True)
    full_name = Column(String(200), nullable=True)
    role_id = Column(BigIntegerId, ForeignKey('role.id'), nullable=True)
    is_super_admin = Column(Boolean, nullable=False, default=False)  # acceso_total
    active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    # Relationships
    role = relationship('Role', back_populates='users')

    def set_password(self, password):
        """Set password hash."""
        self.password_hash = generate_password_hash(password, method='scrypt')

    def check_password(self, password):
        """Check password against hash."""
        if not self.password_hash:
            return False
        return check_password_hash(self.password_hash, password)

    @property
    def role_name(self):
        return self.role.name if self.role else None

    def __repr__(self):
        return f"<AppUser(id={self.id}, email='{self.email}', role_id={self.role_id})>"
