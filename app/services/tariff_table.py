"""Tariff table: weight-banded production rates used by the pricing engine."""
import logging
from dataclasses import dataclass, asdict
from decimal import Decimal
from typing import List, Optional

from flask import current_app
from sqlalchemy.orm import Session

from app.models import ProductionTariff, WeightBand
from app.services.cache_service import get_cache

logger = logging.getLogger(__name__)

CACHE_MODULE = 'tariffs'
CACHE_KEY = 'bands'


@dataclass(frozen=True)
class TariffBand:
    """One production tariff joined with its weight range."""
    id: int
    ink_id: int
    face_id: int
    weight_band_id: int
    weight_min: Optional[Decimal]
    weight_max: Optional[Decimal]
    price_per_kg: Decimal
    waste_percent: Decimal

    @property
    def lower_bound(self) -> Decimal:
        """weight_min with NULL read as zero."""
        return self.weight_min if self.weight_min is not None else Decimal('0')

    def covers(self, weight: Decimal) -> bool:
        """weight_min is inclusive, weight_max exclusive, NULL max unbounded."""
        if weight < self.lower_bound:
            return False
        return self.weight_max is None or weight < self.weight_max

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> 'TariffBand':
        return cls(**data)


def query_tariff_bands(session: Session) -> List[TariffBand]:
    """Read every tariff joined to its weight band, ascending by kg_min."""
    rows = (
        session.query(ProductionTariff, WeightBand)
        .join(WeightBand, WeightBand.id == ProductionTariff.weight_band_id)
        .order_by(WeightBand.kg_min.asc(), ProductionTariff.id.asc())
        .all()
    )
    return [
        TariffBand(
            id=tariff.id,
            ink_id=tariff.ink_id,
            face_id=tariff.face_id,
            weight_band_id=band.id,
            weight_min=band.kg_min,
            weight_max=band.kg_max,
            price_per_kg=tariff.price_per_kg,
            waste_percent=tariff.waste_percent if tariff.waste_percent is not None else Decimal('0'),
        )
        for tariff, band in rows
    ]


def load_tariff_bands(session: Session) -> List[TariffBand]:
    """
    Read-through cached tariff table.

    Callers load once per request and pass the list to the pricing engine.
    The cache entry is dropped by invalidate_tariff_bands() whenever tariffs
    are written.
    """
    ttl = current_app.config.get('CACHE_TARIFFS_TTL')
    cached = get_cache().memoize(
        CACHE_MODULE,
        CACHE_KEY,
        lambda: [band.to_dict() for band in query_tariff_bands(session)],
        ttl=ttl,
    )
    bands = [TariffBand.from_dict(item) for item in cached]
    logger.debug(f"[PRICING] Tariff bands loaded: {len(bands)}")
    return bands


def invalidate_tariff_bands() -> int:
    """Drop cached tariff bands after a catalog write."""
    return get_cache().invalidate_module(CACHE_MODULE)
