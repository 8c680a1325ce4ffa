"""Plastic bag configuration models and their lookup catalogs."""
from sqlalchemy import Column, String, Numeric, ForeignKey
from sqlalchemy.orm import relationship
from app.database import Base, BigIntegerId


class PlasticProductType(Base):
    """Bag type (tipo_producto_plastico), e.g. 'Bolsa camiseta'."""

    __tablename__ = 'plastic_product_type'

    id = Column(BigIntegerId, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)


class PlasticMaterial(Base):
    """Film material (material_plastico), e.g. 'Alta densidad'."""

    __tablename__ = 'plastic_material'

    id = Column(BigIntegerId, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)


class Caliber(Base):
    """Film gauge (calibre)."""

    __tablename__ = 'caliber'

    id = Column(BigIntegerId, primary_key=True, autoincrement=True)
    value = Column(String(20), nullable=False)


class PlasticConfig(Base):
    """
    Plastic bag configuration (configuracion_plastico).

    units_per_kg is the weight factor the pricing engine divides quantities by.
    """

    __tablename__ = 'plastic_config'

    id = Column(BigIntegerId, primary_key=True, autoincrement=True)
    product_type_id = Column(BigIntegerId, ForeignKey('plastic_product_type.id'), nullable=False)
    material_id = Column(BigIntegerId, ForeignKey('plastic_material.id'), nullable=False)
    caliber_id = Column(BigIntegerId, ForeignKey('caliber.id'), nullable=False)
    height = Column(Numeric(10, 2), nullable=True)
    width = Column(Numeric(10, 2), nullable=True)
    bottom_gusset = Column(Numeric(10, 2), nullable=True, default=0)
    left_gusset = Column(Numeric(10, 2), nullable=True, default=0)
    right_gusset = Column(Numeric(10, 2), nullable=True, default=0)
    reinforcement = Column(Numeric(10, 2), nullable=True, default=0)
    size_label = Column(String(100), nullable=True)  # medida
    units_per_kg = Column(Numeric(12, 2), nullable=True)  # por_kilo

    # Relationships
    product_type = relationship('PlasticProductType')
    material = relationship('PlasticMaterial')
    caliber = relationship('Caliber')

    def to_dict(self):
        return {
            'id': self.id,
            'tipo_producto': self.product_type.name if self.product_type else None,
            'material': self.material.name if self.material else None,
            'calibre': self.caliber.value if self.caliber else None,
            'altura': self.height,
            'ancho': self.width,
            'fuelle_fondo': self.bottom_gusset,
            'fuelle_lat_iz': self.left_gusset,
            'fuelle_lat_de': self.right_gusset,
            'refuerzo': self.reinforcement,
            'medida': self.size_label,
            'por_kilo': self.units_per_kg,
        }

    def __repr__(self):
        return f"<PlasticConfig(id={self.id}, size='{self.size_label}', units_per_kg={self.units_per_kg})>"
