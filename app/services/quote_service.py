"""Quote service: create, list, review and delete cotizaciones."""

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.database import transaction
from app.exceptions import ConflictError, NotFoundError, ValidationError
from app.models import (
    Caliber, Client, Die, PlasticConfig, PlasticMaterial, PlasticProductType,
    Quote, QuoteLine, QuoteProduct, QuoteStatus, QuoteStatusId, ApprovalState,
    quote_number_seq
)
from app.services.catalog_service import get_client, get_die, get_product_config
from app.services.quote_aggregator import aggregate_quote_rows
from app.utils.number_format import (
    to_decimal, to_id, to_optional_bool, to_optional_int
)

logger = logging.getLogger(__name__)

# Request keys for the decoration options of a product, mapped to columns
FLAG_FIELDS = {
    'bk': 'bk',
    'foil': 'foil',
    'altoRel': 'embossing',
    'laminado': 'lamination',
    'uvBr': 'uv_coating',
}
COUNT_FIELDS = {
    'pigmentos': 'pigment_count',
    'pantones': 'pantone_count',
}


@dataclass
class LineInput:
    quantity: Decimal
    line_total: Decimal


@dataclass
class ProductInput:
    product_config_id: int
    ink_id: Optional[int]
    face_id: Optional[int]
    die_id: Optional[int]
    options: Dict[str, Any]
    observation: Optional[str]
    lines: List[LineInput] = field(default_factory=list)


def _clean_observation(value) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError('La observación debe ser texto')
    return value.strip() or None


def _parse_lines(product_config_id: int, details) -> List[LineInput]:
    """Keep only lines with cantidad > 0 and precio_total > 0."""
    if details is None:
        details = []
    if not isinstance(details, list):
        raise ValidationError(f'Los detalles del producto ID {product_config_id} deben ser una lista')

    valid = []
    for detail in details:
        if not isinstance(detail, dict):
            raise ValidationError(f'Detalle inválido en el producto ID {product_config_id}')
        raw_qty = detail.get('cantidad')
        raw_total = detail.get('precio_total')
        if raw_qty is None or raw_total is None:
            continue
        quantity = to_decimal(raw_qty, 'cantidad')
        line_total = to_decimal(raw_total, 'precio_total')
        if quantity > 0 and line_total > 0:
            valid.append(LineInput(quantity=quantity, line_total=line_total))
    return valid


def parse_quote_payload(payload) -> Tuple[int, List[ProductInput]]:
    """
    Validate a create-quote request body without touching the database.

    Raises:
        ValidationError: missing client, empty product list, missing
            productoId or malformed values.
        ConflictError: a product has no line with cantidad > 0 and
            precio_total > 0.
    """
    if not isinstance(payload, dict):
        raise ValidationError('Cuerpo de la solicitud inválido')

    client_id = to_id(payload.get('clienteId'), 'clienteId')

    products = payload.get('productos')
    if not isinstance(products, list) or not products:
        raise ValidationError('Se requiere al menos un producto')

    parsed = []
    for product in products:
        if not isinstance(product, dict):
            raise ValidationError('Producto inválido')
        if product.get('productoId') in (None, ''):
            raise ValidationError('Cada producto requiere productoId')
        config_id = to_id(product.get('productoId'), 'productoId')

        lines = _parse_lines(config_id, product.get('detalles'))
        if not lines:
            raise ConflictError(
                f'El producto ID {config_id} no tiene cantidades válidas',
                payload={'producto_id': config_id},
            )

        options = {}
        for key, column in FLAG_FIELDS.items():
            options[column] = to_optional_bool(product.get(key), key)
        for key, column in COUNT_FIELDS.items():
            options[column] = to_optional_int(product.get(key), key)

        parsed.append(ProductInput(
            product_config_id=config_id,
            ink_id=to_id(product.get('tintasId'), 'tintasId', required=False),
            face_id=to_id(product.get('carasId'), 'carasId', required=False),
            die_id=to_id(product.get('asaSuaje'), 'asaSuaje', required=False),
            options=options,
            observation=_clean_observation(product.get('observacion')),
            lines=lines,
        ))

    return client_id, parsed


def next_sequence_number(session: Session) -> int:
    """Next caller-facing quote number: the database sequence, or max + 1."""
    dialect = session.get_bind().dialect
    if dialect.supports_sequences:
        return session.execute(select(quote_number_seq.next_value())).scalar()
    current = session.query(func.max(Quote.sequence_number)).scalar()
    return (current or 0) + 1


def create_quote(session: Session, payload: Dict[str, Any]) -> int:
    """
    Create a quote with its products and lines in a single transaction.

    Nothing is persisted unless every product is written; on any failure
    the header insert is rolled back too.

    Returns:
        The assigned sequence number (no_cotizacion).
    """
    client_id, products = parse_quote_payload(payload)

    with transaction(session):
        get_client(session, client_id)

        quote = Quote(
            sequence_number=next_sequence_number(session),
            client_id=client_id,
            status_id=int(QuoteStatusId.PENDING),
        )
        session.add(quote)
        session.flush()

        for item in products:
            get_product_config(session, item.product_config_id)
            if item.die_id is not None:
                get_die(session, item.die_id)

            quote_product = QuoteProduct(
                quote_id=quote.id,
                product_config_id=item.product_config_id,
                ink_id=item.ink_id,
                face_id=item.face_id,
                die_id=item.die_id,
                observation=item.observation,
                **item.options
            )
            session.add(quote_product)
            session.flush()

            for line in item.lines:
                session.add(QuoteLine(
                    quote_product_id=quote_product.id,
                    quantity=line.quantity,
                    line_total=line.line_total,
                    approval_state=ApprovalState.UNSET,
                ))

        sequence_number = quote.sequence_number

    logger.info(
        f"[QUOTES] Cotización #{sequence_number} creada "
        f"(cliente={client_id}, productos={len(products)})"
    )
    return sequence_number


def quote_rows_query():
    """Flat quote listing: one row per line, outer-joined up to the header."""
    return (
        select(
            Quote.id.label('quote_id'),
            Quote.sequence_number.label('sequence_number'),
            Quote.created_at.label('created_at'),
            Quote.client_id.label('client_id'),
            Quote.status_id.label('status_id'),
            Client.legal_name.label('client_name'),
            Client.company.label('client_company'),
            Client.phone.label('client_phone'),
            Client.email.label('client_email'),
            QuoteStatus.name.label('status_name'),
            QuoteProduct.id.label('quote_product_id'),
            QuoteProduct.product_config_id.label('product_config_id'),
            QuoteProduct.ink_id.label('ink_id'),
            QuoteProduct.face_id.label('face_id'),
            QuoteProduct.die_id.label('die_id'),
            QuoteProduct.bk.label('bk'),
            QuoteProduct.foil.label('foil'),
            QuoteProduct.embossing.label('embossing'),
            QuoteProduct.lamination.label('lamination'),
            QuoteProduct.uv_coating.label('uv_coating'),
            QuoteProduct.pigment_count.label('pigment_count'),
            QuoteProduct.pantone_count.label('pantone_count'),
            QuoteProduct.observation.label('observation'),
            PlasticProductType.name.label('product_type'),
            PlasticConfig.size_label.label('size_label'),
            PlasticMaterial.name.label('material'),
            Caliber.value.label('caliber'),
            Die.kind.label('die_label'),
            QuoteLine.id.label('line_id'),
            QuoteLine.quantity.label('quantity'),
            QuoteLine.line_total.label('line_total'),
            QuoteLine.approval_state.label('approval_state'),
        )
        .select_from(Quote)
        .outerjoin(Client, Client.id == Quote.client_id)
        .outerjoin(QuoteStatus, QuoteStatus.id == Quote.status_id)
        .outerjoin(QuoteProduct, QuoteProduct.quote_id == Quote.id)
        .outerjoin(PlasticConfig, PlasticConfig.id == QuoteProduct.product_config_id)
        .outerjoin(PlasticProductType, PlasticProductType.id == PlasticConfig.product_type_id)
        .outerjoin(PlasticMaterial, PlasticMaterial.id == PlasticConfig.material_id)
        .outerjoin(Caliber, Caliber.id == PlasticConfig.caliber_id)
        .outerjoin(Die, Die.id == QuoteProduct.die_id)
        .outerjoin(QuoteLine, QuoteLine.quote_product_id == QuoteProduct.id)
        .order_by(Quote.sequence_number.desc(), QuoteProduct.id.asc(), QuoteLine.id.asc())
    )


def list_quotes(session: Session) -> List[Dict[str, Any]]:
    """All quotes as nested trees, newest sequence number first."""
    rows = session.execute(quote_rows_query()).mappings().all()
    quotes = aggregate_quote_rows(rows)
    logger.info(f"[QUOTES] Cotizaciones obtenidas: {len(quotes)}")
    return quotes


def update_quote_status(session: Session, sequence_number: int, status_id) -> int:
    """
    Set the administrative status of every quote row with this number.

    Returns:
        Number of rows updated.
    """
    status_id = to_id(status_id, 'estadoId')
    if status_id not in {s.value for s in QuoteStatusId}:
        raise ValidationError(f'Estado {status_id} no válido')

    with transaction(session):
        updated = session.query(Quote).filter(
            Quote.sequence_number == sequence_number
        ).update({Quote.status_id: status_id}, synchronize_session=False)
        if not updated:
            raise NotFoundError('Cotización no encontrada')

    logger.info(f"[QUOTES] Estado cotización #{sequence_number} -> estadoId {status_id}")
    return updated


def set_line_approval(session: Session, line_id: int, approved) -> ApprovalState:
    """Approve or reject a single quote line."""
    flag = to_optional_bool(approved, 'aprobado')
    if flag is None:
        raise ValidationError('Se requiere aprobado (true/false)')
    state = ApprovalState.from_flag(flag)

    with transaction(session):
        updated = session.query(QuoteLine).filter(
            QuoteLine.id == line_id
        ).update({QuoteLine.approval_state: state}, synchronize_session=False)
        if not updated:
            raise NotFoundError('Detalle de cotización no encontrado')

    logger.info(f"[QUOTES] Detalle {line_id} -> {state.value}")
    return state


def update_product_observation(session: Session, quote_product_id: int, observation) -> Optional[str]:
    """Replace the free-text observation of a quote product (blank clears it)."""
    observation = _clean_observation(observation)

    with transaction(session):
        updated = session.query(QuoteProduct).filter(
            QuoteProduct.id == quote_product_id
        ).update({QuoteProduct.observation: observation}, synchronize_session=False)
        if not updated:
            raise NotFoundError('Producto de cotización no encontrado')

    return observation


def delete_quote(session: Session, sequence_number: int) -> Dict[str, int]:
    """
    Delete every quote row with this number together with its products and lines.

    Children go first (lines, then products, then headers) inside one
    transaction.

    Returns:
        Counts of deleted quotes, products and lines.
    """
    with transaction(session):
        quote_ids = [
            row.id for row in session.query(Quote.id).filter(
                Quote.sequence_number == sequence_number
            ).all()
        ]
        if not quote_ids:
            raise NotFoundError('Cotización no encontrada')

        product_ids = [
            row.id for row in session.query(QuoteProduct.id).filter(
                QuoteProduct.quote_id.in_(quote_ids)
            ).all()
        ]

        lines_deleted = 0
        if product_ids:
            lines_deleted = session.query(QuoteLine).filter(
                QuoteLine.quote_product_id.in_(product_ids)
            ).delete(synchronize_session=False)

        products_deleted = session.query(QuoteProduct).filter(
            QuoteProduct.quote_id.in_(quote_ids)
        ).delete(synchronize_session=False)

        quotes_deleted = session.query(Quote).filter(
            Quote.id.in_(quote_ids)
        ).delete(synchronize_session=False)

    logger.info(f"[QUOTES] Cotización #{sequence_number} eliminada")
    return {
        'cotizaciones': quotes_deleted,
        'productos': products_deleted,
        'detalles': lines_deleted,
    }
