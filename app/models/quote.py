"""Quote model for cotizaciones."""
from sqlalchemy import Column, Integer, DateTime, ForeignKey, Sequence
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base, BigIntegerId
from app.models.quote_status import QuoteStatusId

# Source of sequence numbers on backends with native sequences
quote_number_seq = Sequence('quote_sequence_number_seq', metadata=Base.metadata)


class Quote(Base):
    """
    Quote (Cotización) header.

    sequence_number is the caller-facing identifier (no_cotizacion). It is
    assigned once at creation; status updates and deletion address quotes by
    it rather than by id.
    """

    __tablename__ = 'quote'

    id = Column(BigIntegerId, primary_key=True, autoincrement=True)
    sequence_number = Column(Integer, nullable=False, unique=True)
    client_id = Column(BigIntegerId, ForeignKey('client.id'), nullable=False)
    status_id = Column(Integer, ForeignKey('quote_status.id'), nullable=False, default=int(QuoteStatusId.PENDING))
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    # Relationships
    client = relationship('Client', back_populates='quotes')
    status = relationship('QuoteStatus')
    products = relationship('QuoteProduct', back_populates='quote', order_by='QuoteProduct.id')

    def __repr__(self):
        return f"<Quote(id={self.id}, number={self.sequence_number}, status_id={self.status_id})>"
