"""
Unit tests for the pricing engine.
"""

from decimal import Decimal

import pytest

from app.services.pricing_service import (
    compute_price, compute_price_batch, find_applicable_band
)
from app.services.tariff_table import TariffBand


def band(id, weight_min, weight_max, price, waste='0', ink_id=1, face_id=1):
    return TariffBand(
        id=id,
        ink_id=ink_id,
        face_id=face_id,
        weight_band_id=100 + id,
        weight_min=Decimal(weight_min) if weight_min is not None else None,
        weight_max=Decimal(weight_max) if weight_max is not None else None,
        price_per_kg=Decimal(price),
        waste_percent=Decimal(waste),
    )


@pytest.fixture
def bands():
    return [
        band(1, '0', '10', '50'),
        band(2, '10', '30', '40', waste='5'),
        band(3, '30', None, '35', waste='3'),
        band(4, '0', None, '90', ink_id=2, face_id=2),
    ]


class TestFindApplicableBand:
    """Tests for band lookup."""

    def test_lower_bound_is_inclusive(self, bands):
        assert find_applicable_band(bands, 1, 1, Decimal('10')).id == 2

    def test_upper_bound_is_exclusive(self, bands):
        assert find_applicable_band(bands, 1, 1, Decimal('29.999')).id == 2
        assert find_applicable_band(bands, 1, 1, Decimal('30')).id == 3

    def test_unbounded_band_covers_large_weights(self, bands):
        assert find_applicable_band(bands, 1, 1, Decimal('100000')).id == 3

    def test_filters_by_ink_and_face(self, bands):
        assert find_applicable_band(bands, 2, 2, Decimal('5')).id == 4

    def test_no_band_for_combination(self, bands):
        assert find_applicable_band(bands, 3, 1, Decimal('5')) is None

    def test_null_minimum_reads_as_zero(self):
        bands = [band(7, None, '10', '20')]
        assert find_applicable_band(bands, 1, 1, Decimal('0')).id == 7

    def test_first_match_wins_on_overlap(self):
        bands = [band(1, '0', '20', '10'), band(2, '5', '20', '99')]
        assert find_applicable_band(bands, 1, 1, Decimal('8')).id == 1


class TestComputePrice:
    """Tests for single quantity pricing."""

    def test_reference_example(self, bands):
        """1000 units at 50 per kg weigh 20 kg and fall in the 40/kg band."""
        result = compute_price(Decimal('1000'), Decimal('50'), 1, 1, bands)

        assert result.total_weight_kg == Decimal('20')
        assert result.price_per_kg == Decimal('40')
        assert result.production_cost == Decimal('800')
        assert result.waste_percent == Decimal('5')
        assert result.waste_cost == Decimal('40')
        assert result.total_cost == Decimal('800')
        assert result.unit_price == Decimal('0.8')
        assert result.weight_range_min == Decimal('10')
        assert result.matched_band_id == 2
        assert result.matched_weight_band_id == 102

    def test_waste_is_not_billed(self, bands):
        result = compute_price(Decimal('1000'), Decimal('50'), 1, 1, bands)
        assert result.total_cost == result.production_cost
        assert result.waste_cost > 0

    def test_unit_price_times_quantity_is_total(self, bands):
        quantity = Decimal('7500')
        result = compute_price(quantity, Decimal('50'), 1, 1, bands)
        assert result.unit_price * quantity == result.total_cost

    @pytest.mark.parametrize('quantity,units_per_kg', [
        ('0', '50'),
        ('-10', '50'),
        ('1000', '0'),
        ('1000', '-1'),
    ])
    def test_non_positive_inputs_return_none(self, bands, quantity, units_per_kg):
        assert compute_price(Decimal(quantity), Decimal(units_per_kg), 1, 1, bands) is None

    def test_empty_table_returns_none(self):
        assert compute_price(Decimal('1000'), Decimal('50'), 1, 1, []) is None

    def test_weight_outside_every_band_returns_none(self):
        bands = [band(1, '10', '30', '40')]
        assert compute_price(Decimal('100'), Decimal('50'), 1, 1, bands) is None

    def test_to_dict_keys(self, bands):
        data = compute_price(Decimal('1000'), Decimal('50'), 1, 1, bands).to_dict()
        assert data['precio_unitario'] == Decimal('0.8')
        assert data['costo_total'] == Decimal('800')
        assert data['costo_merma'] == Decimal('40')
        assert data['tarifa_id'] == 2
        assert data['kilogramos_rango'] == Decimal('10')


class TestComputePriceBatch:
    """Tests for batch pricing."""

    def test_same_length_and_order(self, bands):
        quantities = [Decimal('250'), Decimal('1000'), Decimal('5000')]
        results = compute_price_batch(quantities, Decimal('50'), 1, 1, bands)

        assert len(results) == 3
        assert [r.matched_band_id for r in results] == [1, 2, 3]

    def test_matches_single_pricing(self, bands):
        quantities = [Decimal('1000'), Decimal('5000')]
        results = compute_price_batch(quantities, Decimal('50'), 1, 1, bands)
        for quantity, result in zip(quantities, results):
            assert result == compute_price(quantity, Decimal('50'), 1, 1, bands)

    def test_non_positive_quantity_yields_none_in_place(self, bands):
        quantities = [Decimal('1000'), Decimal('0'), Decimal('-5'), Decimal('250')]
        results = compute_price_batch(quantities, Decimal('50'), 1, 1, bands)

        assert results[1] is None
        assert results[2] is None
        assert results[0].matched_band_id == 2
        assert results[3].matched_band_id == 1

    def test_unmatched_quantity_yields_none(self):
        bands = [band(1, '0', '10', '50')]
        results = compute_price_batch([Decimal('100'), Decimal('1000')], Decimal('50'), 1, 1, bands)
        assert results[0] is not None
        assert results[1] is None
