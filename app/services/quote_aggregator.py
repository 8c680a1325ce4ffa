"""
Rebuild nested quotes from the flat joined rows of the quote listing query.

Each input row carries quote, product and line columns; product and line
columns are NULL where the outer joins found nothing. Rows must arrive
ordered by (sequence_number DESC, quote_product_id ASC, line_id ASC).
"""
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Mapping

from app.models.quote_line import ApprovalState

STATUS_APPROVED = 'Aprobada'
STATUS_REJECTED = 'Rechazada'
STATUS_PENDING = 'Pendiente'

ZERO = Decimal('0')


def normalize_status_label(raw_label) -> str:
    """Collapse a raw status name into Aprobada / Rechazada / Pendiente."""
    label = (raw_label or '').lower()
    if 'aprobad' in label:
        return STATUS_APPROVED
    if 'rechazad' in label:
        return STATUS_REJECTED
    return STATUS_PENDING


def product_display_name(row: Mapping[str, Any]) -> str:
    """Join type, size and material labels, skipping blanks."""
    parts = [
        (row.get('product_type') or '').strip(),
        (row.get('size_label') or '').strip(),
        (row.get('material') or '').strip(),
    ]
    name = ' '.join(part for part in parts if part)
    return name or f"Producto #{row.get('product_config_id')}"


def _money(value) -> Decimal:
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def _approval_state(value) -> ApprovalState:
    if value is None:
        return ApprovalState.UNSET
    if isinstance(value, ApprovalState):
        return value
    return ApprovalState(value)


def _new_quote(row: Mapping[str, Any]) -> Dict[str, Any]:
    return {
        'no_cotizacion': row['sequence_number'],
        'fecha': row.get('created_at'),
        'estado_id': row.get('status_id'),
        'estado_nombre': row.get('status_name'),
        'estado': normalize_status_label(row.get('status_name')),
        'cliente_id': row.get('client_id'),
        'cliente': row.get('client_name') or '',
        'empresa': row.get('client_company') or '',
        'telefono': row.get('client_phone') or '',
        'correo': row.get('client_email') or '',
        'productos': [],
        'total': ZERO,
    }


def _new_product(row: Mapping[str, Any]) -> Dict[str, Any]:
    return {
        'idcotizacion': row.get('quote_id'),
        'idcotizacion_producto': row['quote_product_id'],
        'producto_id': row.get('product_config_id'),
        'nombre': product_display_name(row),
        'material': row.get('material'),
        'calibre': row.get('caliber'),
        'medida': row.get('size_label'),
        'tintas': row.get('ink_id'),
        'caras': row.get('face_id'),
        'bk': row.get('bk'),
        'foil': row.get('foil'),
        'alto_rel': row.get('embossing'),
        'laminado': row.get('lamination'),
        'uv_br': row.get('uv_coating'),
        'pigmentos': row.get('pigment_count'),
        'pantones': row.get('pantone_count'),
        'suaje_id': row.get('die_id'),
        'asa_suaje': row.get('die_label'),
        'observacion': row.get('observation'),
        'detalles': [],
        'subtotal': ZERO,
    }


def aggregate_quote_rows(rows: Iterable[Mapping[str, Any]]) -> List[Dict[str, Any]]:
    """
    Group flat rows into quotes -> productos -> detalles in one pass.

    Quotes are keyed by sequence number, so several header rows sharing one
    number merge into a single node. Each quote keeps an index of its
    product nodes by quote_product_id so repeated product columns (one per
    line) reuse the same node. Output order is first-encounter order.
    """
    quotes: Dict[Any, Dict[str, Any]] = {}
    product_index: Dict[Any, Dict[Any, Dict[str, Any]]] = {}

    for row in rows:
        number = row['sequence_number']

        quote = quotes.get(number)
        if quote is None:
            quote = _new_quote(row)
            quotes[number] = quote
            product_index[number] = {}

        product_id = row.get('quote_product_id')
        if product_id is None:
            continue

        product = product_index[number].get(product_id)
        if product is None:
            product = _new_product(row)
            product_index[number][product_id] = product
            quote['productos'].append(product)

        line_id = row.get('line_id')
        if line_id is None:
            continue

        state = _approval_state(row.get('approval_state'))
        line_total = _money(row.get('line_total'))
        product['detalles'].append({
            'iddetalle': line_id,
            'cantidad': row.get('quantity'),
            'precio_total': line_total,
            'estado_aprobacion': state.value,
            'aprobado': state.as_flag(),
        })
        product['subtotal'] += line_total

    for quote in quotes.values():
        quote['total'] = sum((p['subtotal'] for p in quote['productos']), ZERO)

    return list(quotes.values())
