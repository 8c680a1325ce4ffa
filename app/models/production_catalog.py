"""Production catalogs: ink counts, printed faces and weight bands."""
from sqlalchemy import Column, Integer, Numeric, String
from app.database import Base, BigIntegerId


class Ink(Base):
    """Ink count option (tintas)."""

    __tablename__ = 'ink'

    id = Column(BigIntegerId, primary_key=True, autoincrement=True)
    count = Column(Integer, nullable=False)

    def __repr__(self):
        return f"<Ink(id={self.id}, count={self.count})>"


class Face(Base):
    """Printed faces option (caras)."""

    __tablename__ = 'face'

    id = Column(BigIntegerId, primary_key=True, autoincrement=True)
    count = Column(Integer, nullable=False)

    def __repr__(self):
        return f"<Face(id={self.id}, count={self.count})>"


class WeightBand(Base):
    """
    Weight range (kilogramos) a production tariff applies to.

    kg_min is inclusive, kg_max exclusive; a NULL kg_max is unbounded.
    """

    __tablename__ = 'weight_band'

    id = Column(BigIntegerId, primary_key=True, autoincrement=True)
    label = Column(String(50), nullable=True)
    kg = Column(Numeric(12, 2), nullable=True)  # reference weight shown in the tariff grid
    kg_min = Column(Numeric(12, 2), nullable=True)
    kg_max = Column(Numeric(12, 2), nullable=True)

    def __repr__(self):
        return f"<WeightBand(id={self.id}, range=[{self.kg_min}, {self.kg_max}))>"
