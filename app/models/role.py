"""Role model - named permission level assigned to each user."""
from sqlalchemy import Column, String, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base, BigIntegerId


class Role(Base):
    """Role (rol) - e.g. admin, ventas, produccion."""

    __tablename__ = 'role'

    id = Column(BigIntegerId, primary_key=True, autoincrement=True)
    name = Column(String(50), nullable=False, unique=True)
    description = Column(String(255), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    # Relationships
    users = relationship('AppUser', back_populates='role')

    def __repr__(self):
        return f"<Role(id={self.id}, name='{self.name}')>"
