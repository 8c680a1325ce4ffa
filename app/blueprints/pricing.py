"""Pricing blueprint: unit price preview from production tariffs."""
import logging

from flask import Blueprint, request, jsonify

from app.database import get_session
from app.exceptions import NotFoundError, ValidationError
from app.blueprints.metrics import record_pricing
from app.middleware import require_login
from app.services.pricing_service import compute_price, compute_price_batch
from app.services.tariff_table import load_tariff_bands
from app.utils.number_format import to_decimal, to_id, to_object, to_positive_decimal

logger = logging.getLogger(__name__)

pricing_bp = Blueprint('pricing', __name__, url_prefix='/api/pricing')


def _load_bands():
    bands = load_tariff_bands(get_session())
    if not bands:
        raise NotFoundError('No hay tarifas configuradas en el sistema')
    return bands


@pricing_bp.route('/preview', methods=['POST'])
@require_login
def preview():
    """
    Price one quantity.

    Body: {cantidad, porKilo, tintasId, carasId}
    """
    data = to_object(request.get_json(silent=True))

    missing = [k for k in ('cantidad', 'porKilo', 'tintasId', 'carasId') if data.get(k) in (None, '')]
    if missing:
        raise ValidationError('Se requieren: cantidad, porKilo, tintasId, carasId')

    quantity = to_positive_decimal(data['cantidad'], 'cantidad')
    units_per_kg = to_positive_decimal(data['porKilo'], 'porKilo')
    ink_id = to_id(data['tintasId'], 'tintasId')
    face_id = to_id(data['carasId'], 'carasId')

    bands = _load_bands()
    result = compute_price(quantity, units_per_kg, ink_id, face_id, bands)
    record_pricing([quantity], [result])

    if result is None:
        raise NotFoundError(
            'No se encontró tarifa aplicable para estos parámetros',
            payload={'detalles': {
                'cantidad': quantity,
                'peso_kg': round(quantity / units_per_kg, 2),
                'tintasId': ink_id,
                'carasId': face_id,
            }},
        )

    return jsonify({'success': True, **result.to_dict()})


@pricing_bp.route('/batch', methods=['POST'])
@require_login
def batch():
    """
    Price several quantities sharing one setup.

    Body: {cantidades: [...], porKilo, tintasId, carasId}
    Response resultados[i] is null where cantidades[i] <= 0 or no tariff applies.
    """
    data = to_object(request.get_json(silent=True))

    quantities = data.get('cantidades')
    if not isinstance(quantities, list) or not quantities:
        raise ValidationError('Se requiere un array de cantidades')

    if any(data.get(k) in (None, '') for k in ('porKilo', 'tintasId', 'carasId')):
        raise ValidationError('Se requieren: porKilo, tintasId, carasId')

    units_per_kg = to_positive_decimal(data['porKilo'], 'porKilo')
    ink_id = to_id(data['tintasId'], 'tintasId')
    face_id = to_id(data['carasId'], 'carasId')
    parsed = [to_decimal(q, 'cantidades') for q in quantities]

    # One tariff read for the whole batch
    bands = _load_bands()
    results = compute_price_batch(parsed, units_per_kg, ink_id, face_id, bands)
    record_pricing(parsed, results)

    logger.info(f"[PRICING] Batch de {len(parsed)} cantidades calculado")
    return jsonify({
        'success': True,
        'resultados': [r.to_dict() if r is not None else None for r in results],
    })
