"""Administrative status catalog for quotes (estado_administrativo_cat)."""
import enum
from sqlalchemy import Column, Integer, String
from app.database import Base


class QuoteStatusId(enum.IntEnum):
    """Known status ids. Transitions are explicit admin updates only."""
    PENDING = 1
    IN_PROGRESS = 2
    APPROVED = 3
    REJECTED = 4


DEFAULT_STATUS_NAMES = {
    QuoteStatusId.PENDING: 'Pendiente',
    QuoteStatusId.IN_PROGRESS: 'En proceso',
    QuoteStatusId.APPROVED: 'Aprobada',
    QuoteStatusId.REJECTED: 'Rechazada',
}


class QuoteStatus(Base):
    """Quote status row; ids match QuoteStatusId."""

    __tablename__ = 'quote_status'

    id = Column(Integer, primary_key=True, autoincrement=False)
    name = Column(String(50), nullable=False)

    def __repr__(self):
        return f"<QuoteStatus(id={self.id}, name='{self.name}')>"
