"""Catalog blueprint: read access to production catalogs, tariff maintenance."""
from flask import Blueprint, request, jsonify

from app.database import get_session
from app.decorators.permissions import require_role
from app.middleware import require_login
from app.utils.number_format import to_object
from app.services.catalog_service import (
    list_tariffs,
    update_tariffs_batch,
    get_production_catalogs,
    list_dies,
    get_product_config
)

catalog_bp = Blueprint('catalog', __name__, url_prefix='/api/catalog')


@catalog_bp.route('/tariffs', methods=['GET'])
@require_login
def tariffs():
    return jsonify(list_tariffs(get_session()))


@catalog_bp.route('/tariffs', methods=['PUT'])
@require_login
@require_role('admin')
def update_tariffs():
    """Body: {tarifas: [{id, precio, merma_porcentaje}, ...]}"""
    data = to_object(request.get_json(silent=True))
    count = update_tariffs_batch(get_session(), data.get('tarifas'))
    return jsonify({'message': 'Tarifas actualizadas exitosamente', 'count': count})


@catalog_bp.route('/production', methods=['GET'])
@require_login
def production():
    """Ink and face options."""
    return jsonify(get_production_catalogs(get_session()))


@catalog_bp.route('/dies', methods=['GET'])
@require_login
def dies():
    return jsonify(list_dies(get_session()))


@catalog_bp.route('/products/<int:config_id>', methods=['GET'])
@require_login
def product(config_id):
    return jsonify(get_product_config(get_session(), config_id).to_dict())
