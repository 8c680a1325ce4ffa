"""QuoteLine model for quantity/price pairs of a quote product."""
import enum
from sqlalchemy import Column, Numeric, ForeignKey, Enum as SQLEnum
from sqlalchemy.orm import relationship
from app.database import Base, BigIntegerId


class ApprovalState(enum.Enum):
    """Per-line review state."""
    UNSET = 'UNSET'
    APPROVED = 'APPROVED'
    REJECTED = 'REJECTED'

    @classmethod
    def from_flag(cls, approved):
        """Map an approve/reject flag to a state; None means not reviewed."""
        if approved is None:
            return cls.UNSET
        return cls.APPROVED if approved else cls.REJECTED

    def as_flag(self):
        if self is ApprovalState.UNSET:
            return None
        return self is ApprovalState.APPROVED


class QuoteLine(Base):
    """
    Quote Line (cotizacion_detalle).

    line_total is computed by the client from the pricing preview
    (unit_price * quantity) and stored as sent.
    """

    __tablename__ = 'quote_line'

    id = Column(BigIntegerId, primary_key=True, autoincrement=True)
    quote_product_id = Column(BigIntegerId, ForeignKey('quote_product.id'), nullable=False)
    quantity = Column(Numeric(14, 3), nullable=False)
    line_total = Column(Numeric(14, 2), nullable=False)
    approval_state = Column(
        SQLEnum(ApprovalState, native_enum=False, length=10, name='approval_state'),
        nullable=False,
        default=ApprovalState.UNSET,
    )

    # Relationships
    quote_product = relationship('QuoteProduct', back_populates='lines')

    def __repr__(self):
        return f"<QuoteLine(id={self.id}, qty={self.quantity}, total={self.line_total}, state={self.approval_state})>"
