"""Client model."""
from sqlalchemy import Column, String, Text, DateTime, Boolean
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base, BigIntegerId


class Client(Base):
    """Client (cliente). Only the display fields quotes need are mapped."""

    __tablename__ = 'client'

    id = Column(BigIntegerId, primary_key=True, autoincrement=True)
    legal_name = Column(String(200), nullable=False)  # razon_social
    company = Column(String(200), nullable=True)
    phone = Column(String(50), nullable=True)
    email = Column(String(255), nullable=True)
    notes = Column(Text, nullable=True)
    active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    # Relationships
    quotes = relationship('Quote', back_populates='client')

    def __repr__(self):
        return f"<Client(id={self.id}, legal_name='{self.legal_name}')>"
