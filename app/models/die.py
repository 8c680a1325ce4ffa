"""Die model (asa/suaje) - handle cut options for plastic bags."""
from sqlalchemy import Column, String
from app.database import Base, BigIntegerId


class Die(Base):
    """Die (suaje)."""

    __tablename__ = 'die'

    id = Column(BigIntegerId, primary_key=True, autoincrement=True)
    kind = Column(String(100), nullable=False)  # tipo

    def __repr__(self):
        return f"<Die(id={self.id}, kind='{self.kind}')>"
