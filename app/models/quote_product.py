"""QuoteProduct model - one bag configuration inside a quote."""
from sqlalchemy import Column, Boolean, Integer, Text, ForeignKey
from sqlalchemy.orm import relationship
from app.database import Base, BigIntegerId


class QuoteProduct(Base):
    """
    Quote Product (cotizacion_producto).

    Carries the print setup (ink/face ids) and decoration options chosen
    for the configuration. Owned by its quote.
    """

    __tablename__ = 'quote_product'

    id = Column(BigIntegerId, primary_key=True, autoincrement=True)
    quote_id = Column(BigIntegerId, ForeignKey('quote.id'), nullable=False)
    product_config_id = Column(BigIntegerId, ForeignKey('plastic_config.id'), nullable=False)
    ink_id = Column(BigIntegerId, ForeignKey('ink.id'), nullable=True)
    face_id = Column(BigIntegerId, ForeignKey('face.id'), nullable=True)
    die_id = Column(BigIntegerId, ForeignKey('die.id'), nullable=True)

    # Decoration options, NULL when not specified
    bk = Column(Boolean, nullable=True)
    foil = Column(Boolean, nullable=True)
    embossing = Column(Boolean, nullable=True)  # alto relieve
    lamination = Column(Boolean, nullable=True)
    uv_coating = Column(Boolean, nullable=True)
    pigment_count = Column(Integer, nullable=True)
    pantone_count = Column(Integer, nullable=True)

    observation = Column(Text, nullable=True)

    # Relationships
    quote = relationship('Quote', back_populates='products')
    product_config = relationship('PlasticConfig')
    die = relationship('Die')
    lines = relationship('QuoteLine', back_populates='quote_product', order_by='QuoteLine.id')

    def __repr__(self):
        return f"<QuoteProduct(id={self.id}, quote_id={self.quote_id}, config_id={self.product_config_id})>"
