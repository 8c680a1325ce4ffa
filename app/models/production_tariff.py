"""ProductionTariff model - price per kg for an ink/face/weight combination."""
from sqlalchemy import Column, Numeric, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from app.database import Base, BigIntegerId


class ProductionTariff(Base):
    """Production tariff (tarifas_produccion)."""

    __tablename__ = 'production_tariff'
    __table_args__ = (
        UniqueConstraint('ink_id', 'face_id', 'weight_band_id', name='uq_production_tariff_band'),
    )

    id = Column(BigIntegerId, primary_key=True, autoincrement=True)
    ink_id = Column(BigIntegerId, ForeignKey('ink.id'), nullable=False)
    face_id = Column(BigIntegerId, ForeignKey('face.id'), nullable=False)
    weight_band_id = Column(BigIntegerId, ForeignKey('weight_band.id'), nullable=False)
    price_per_kg = Column(Numeric(12, 2), nullable=False)
    waste_percent = Column(Numeric(5, 2), nullable=False, default=0)

    # Relationships
    ink = relationship('Ink')
    face = relationship('Face')
    weight_band = relationship('WeightBand')

    def __repr__(self):
        return (
            f"<ProductionTariff(id={self.id}, ink_id={self.ink_id}, face_id={self.face_id}, "
            f"weight_band_id={self.weight_band_id}, price_per_kg={self.price_per_kg})>"
        )
