"""Quotes blueprint for cotizaciones management."""
from flask import Blueprint, request, jsonify

from app.database import get_session
from app.blueprints.metrics import quote_writes_total
from app.middleware import require_login
from app.utils.number_format import to_object
from app.services.quote_service import (
    create_quote,
    list_quotes,
    update_quote_status,
    set_line_approval,
    update_product_observation,
    delete_quote
)

quotes_bp = Blueprint('quotes', __name__, url_prefix='/api/quotes')


@quotes_bp.route('', methods=['GET'])
@require_login
def list_all():
    """All quotes grouped by no_cotizacion with their products and lines."""
    return jsonify(list_quotes(get_session()))


@quotes_bp.route('', methods=['POST'])
@require_login
def create():
    """Create a quote from confirmed pricing lines."""
    data = request.get_json(silent=True)
    sequence_number = create_quote(get_session(), data)
    quote_writes_total.labels(operation='create').inc()
    return jsonify({
        'message': 'Cotización creada exitosamente',
        'no_cotizacion': sequence_number,
    }), 201


@quotes_bp.route('/lines/<int:line_id>/approval', methods=['PATCH'])
@require_login
def approve_line(line_id):
    """Body: {aprobado: true|false}"""
    data = to_object(request.get_json(silent=True))
    state = set_line_approval(get_session(), line_id, data.get('aprobado'))
    quote_writes_total.labels(operation='approval').inc()
    return jsonify({
        'message': 'Detalle actualizado exitosamente',
        'estado_aprobacion': state.value,
        'aprobado': state.as_flag(),
    })


@quotes_bp.route('/products/<int:quote_product_id>/observation', methods=['PATCH'])
@require_login
def update_observation(quote_product_id):
    """Body: {observacion: string|null}"""
    data = to_object(request.get_json(silent=True))
    observation = update_product_observation(get_session(), quote_product_id, data.get('observacion'))
    quote_writes_total.labels(operation='observation').inc()
    return jsonify({
        'message': 'Observación actualizada exitosamente',
        'observacion': observation,
    })


@quotes_bp.route('/<int:sequence_number>/status', methods=['PATCH'])
@require_login
def update_status(sequence_number):
    """Body: {estadoId: number}"""
    data = to_object(request.get_json(silent=True))
    update_quote_status(get_session(), sequence_number, data.get('estadoId'))
    quote_writes_total.labels(operation='status').inc()
    return jsonify({'message': 'Estado actualizado exitosamente'})


@quotes_bp.route('/<int:sequence_number>', methods=['DELETE'])
@require_login
def delete(sequence_number):
    deleted = delete_quote(get_session(), sequence_number)
    quote_writes_total.labels(operation='delete').inc()
    return jsonify({'message': 'Cotización eliminada exitosamente', 'eliminados': deleted})
