"""
Pricing engine for plastic bag production.

Unit prices come from weight-banded production tariffs: the requested
quantity is converted to kilograms with the product's units-per-kg factor,
the band covering that weight for the ink/face combination gives the price
per kg, and the production cost is spread over the quantity.

Waste (merma) is computed and reported but never billed: total_cost is the
production cost alone.
"""
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, List, Optional, Sequence

from app.services.tariff_table import TariffBand

logger = logging.getLogger(__name__)

HUNDRED = Decimal('100')


@dataclass(frozen=True)
class PricingResult:
    """Cost breakdown for one quantity."""
    total_weight_kg: Decimal
    price_per_kg: Decimal
    waste_percent: Decimal
    production_cost: Decimal
    waste_cost: Decimal
    total_cost: Decimal
    unit_price: Decimal
    weight_range_min: Decimal
    matched_band_id: int
    matched_weight_band_id: int

    def to_dict(self) -> dict:
        # Keys follow the names the quoting front-end already consumes
        return {
            'peso_total_kg': self.total_weight_kg,
            'precio_kg': self.price_per_kg,
            'merma_porcentaje': self.waste_percent,
            'costo_produccion': self.production_cost,
            'costo_merma': self.waste_cost,
            'costo_total': self.total_cost,
            'precio_unitario': self.unit_price,
            'kilogramos_rango': self.weight_range_min,
            'tarifa_id': self.matched_band_id,
            'kilogramos_id': self.matched_weight_band_id,
        }


def find_applicable_band(
    bands: Iterable[TariffBand],
    ink_id: int,
    face_id: int,
    weight: Decimal,
) -> Optional[TariffBand]:
    """
    Return the first band for (ink_id, face_id) whose range covers weight.

    Bands are expected sorted by ascending weight_min; they are not
    re-sorted, so with overlapping ranges the caller's order decides.
    Returns None when no band matches (weight out of every configured range).
    """
    for band in bands:
        if band.ink_id == ink_id and band.face_id == face_id and band.covers(weight):
            return band

    logger.warning(
        f"[PRICING] No tariff for weight={weight} kg, ink_id={ink_id}, face_id={face_id}"
    )
    return None


def compute_price(
    quantity: Decimal,
    units_per_kg: Decimal,
    ink_id: int,
    face_id: int,
    bands: Sequence[TariffBand],
) -> Optional[PricingResult]:
    """
    Price a quantity against the tariff table.

    Returns None for non-positive quantity or units_per_kg, an empty tariff
    table, or a weight no band covers.
    """
    if quantity <= 0 or units_per_kg <= 0 or not bands:
        return None

    total_weight_kg = quantity / units_per_kg

    band = find_applicable_band(bands, ink_id, face_id, total_weight_kg)
    if band is None:
        return None

    production_cost = total_weight_kg * band.price_per_kg
    waste_cost = production_cost * band.waste_percent / HUNDRED
    total_cost = production_cost
    unit_price = production_cost / quantity

    logger.debug(
        f"[PRICING] qty={quantity} weight={total_weight_kg:.2f}kg "
        f"range=[{band.lower_bound}, {band.weight_max if band.weight_max is not None else 'inf'}) "
        f"price_kg={band.price_per_kg} cost={production_cost:.2f} "
        f"waste={waste_cost:.2f} (informative) unit={unit_price:.4f}"
    )

    return PricingResult(
        total_weight_kg=total_weight_kg,
        price_per_kg=band.price_per_kg,
        waste_percent=band.waste_percent,
        production_cost=production_cost,
        waste_cost=waste_cost,
        total_cost=total_cost,
        unit_price=unit_price,
        weight_range_min=band.lower_bound,
        matched_band_id=band.id,
        matched_weight_band_id=band.weight_band_id,
    )


def compute_price_batch(
    quantities: Sequence[Decimal],
    units_per_kg: Decimal,
    ink_id: int,
    face_id: int,
    bands: Sequence[TariffBand],
) -> List[Optional[PricingResult]]:
    """
    Price several quantities with one shared setup.

    The result has the same length and order as quantities; a quantity
    <= 0, or one no band covers, yields None at its position.
    """
    results = []
    for quantity in quantities:
        if quantity <= 0:
            results.append(None)
            continue
        results.append(compute_price(quantity, units_per_kg, ink_id, face_id, bands))
    return results
