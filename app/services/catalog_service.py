"""Catalog reads (and tariff writes) used by pricing and quoting."""
import logging
from typing import Any, Dict, List

from flask import current_app
from sqlalchemy.orm import Session, joinedload

from app.database import transaction
from app.exceptions import NotFoundError, ValidationError
from app.models import Client, Die, Face, Ink, PlasticConfig, ProductionTariff, WeightBand
from app.services.cache_service import get_cache
from app.services.tariff_table import CACHE_MODULE, invalidate_tariff_bands
from app.utils.number_format import to_decimal, to_id

logger = logging.getLogger(__name__)

TARIFF_GRID_KEY = 'grid'


def list_tariffs(session: Session) -> List[Dict[str, Any]]:
    """Tariff grid grouped for display: by face, ink, then ascending kg_min (cached)."""
    return get_cache().memoize(
        CACHE_MODULE,
        TARIFF_GRID_KEY,
        lambda: query_tariff_grid(session),
        ttl=current_app.config.get('CACHE_TARIFFS_TTL'),
    )


def query_tariff_grid(session: Session) -> List[Dict[str, Any]]:
    rows = (
        session.query(ProductionTariff, WeightBand)
        .join(WeightBand, WeightBand.id == ProductionTariff.weight_band_id)
        .order_by(ProductionTariff.face_id, ProductionTariff.ink_id, WeightBand.kg_min.asc())
        .all()
    )
    return [
        {
            'id': tariff.id,
            'tintas_id': tariff.ink_id,
            'caras_id': tariff.face_id,
            'kilogramos_id': band.id,
            'kg': band.kg,
            'kg_min': band.kg_min,
            'kg_max': band.kg_max,
            'precio': tariff.price_per_kg,
            'merma_porcentaje': tariff.waste_percent,
        }
        for tariff, band in rows
    ]


def update_tariffs_batch(session: Session, tariffs: List[Dict[str, Any]]) -> int:
    """
    Update price and waste percent of several tariffs at once.

    Every entry is validated before anything is written; the updates run in
    one transaction and the cached tariff table is invalidated afterwards.

    Returns:
        Number of tariffs updated.
    """
    if not isinstance(tariffs, list) or not tariffs:
        raise ValidationError('Se requiere un array de tarifas')

    updates = []
    for item in tariffs:
        if not isinstance(item, dict):
            raise ValidationError('Datos inválidos en tarifa')
        tariff_id = to_id(item.get('id'), 'id')
        price = to_decimal(item.get('precio'), 'precio')
        waste = to_decimal(item.get('merma_porcentaje'), 'merma_porcentaje')
        if price < 0 or waste < 0:
            raise ValidationError('Precio y merma no pueden ser negativos')
        updates.append((tariff_id, price, waste))

    with transaction(session):
        for tariff_id, price, waste in updates:
            updated = session.query(ProductionTariff).filter(
                ProductionTariff.id == tariff_id
            ).update(
                {ProductionTariff.price_per_kg: price, ProductionTariff.waste_percent: waste},
                synchronize_session=False,
            )
            if not updated:
                raise NotFoundError(f'Tarifa {tariff_id} no encontrada')

    invalidate_tariff_bands()
    logger.info(f"[CATALOG] {len(updates)} tarifas actualizadas")
    return len(updates)


def get_production_catalogs(session: Session) -> Dict[str, List[Dict[str, Any]]]:
    """Ink and face options, ascending by count."""
    faces = session.query(Face).order_by(Face.count.asc()).all()
    inks = session.query(Ink).order_by(Ink.count.asc()).all()
    return {
        'caras': [{'id': f.id, 'cantidad': f.count} for f in faces],
        'tintas': [{'id': i.id, 'cantidad': i.count} for i in inks],
    }


def list_dies(session: Session) -> List[Dict[str, Any]]:
    dies = session.query(Die).order_by(Die.kind.asc()).all()
    return [{'idsuaje': d.id, 'tipo': d.kind} for d in dies]


def get_die(session: Session, die_id: int) -> Die:
    die = session.query(Die).filter(Die.id == die_id).first()
    if not die:
        raise NotFoundError(f'Suaje {die_id} no encontrado')
    return die


def get_product_config(session: Session, config_id: int) -> PlasticConfig:
    """Plastic bag configuration with its type, material and caliber loaded."""
    config = (
        session.query(PlasticConfig)
        .options(
            joinedload(PlasticConfig.product_type),
            joinedload(PlasticConfig.material),
            joinedload(PlasticConfig.caliber),
        )
        .filter(PlasticConfig.id == config_id)
        .first()
    )
    if not config:
        raise NotFoundError(f'Producto {config_id} no encontrado')
    return config


def get_client(session: Session, client_id: int) -> Client:
    client = session.query(Client).filter(Client.id == client_id).first()
    if not client:
        raise NotFoundError(f'Cliente {client_id} no encontrado')
    return client
