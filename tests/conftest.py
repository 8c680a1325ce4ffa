import pytest
from decimal import Decimal
import uuid

from app import create_app
from app.database import Base, create_all, get_session
from app.models import (
    AppUser, Role, Client, Ink, Face, WeightBand, ProductionTariff,
    PlasticProductType, PlasticMaterial, Caliber, PlasticConfig, Die,
    QuoteStatus, DEFAULT_STATUS_NAMES
)


@pytest.fixture(scope='session')
def app():
    """Create application instance for testing."""
    app = create_app('config.TestingConfig')
    with app.app_context():
        create_all()
        yield app


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def session(app):
    """Database session; every table is emptied after the test."""
    session = get_session()
    yield session
    session.rollback()
    for table in reversed(Base.metadata.sorted_tables):
        session.execute(table.delete())
    session.commit()
    session.remove()


@pytest.fixture(scope='function')
def statuses(session):
    """Load the quote status catalog."""
    for status_id, name in DEFAULT_STATUS_NAMES.items():
        session.add(QuoteStatus(id=int(status_id), name=name))
    session.commit()
    return {status_id: name for status_id, name in DEFAULT_STATUS_NAMES.items()}


@pytest.fixture(scope='function')
def catalog(session):
    """
    Production catalogs and a tariff grid for 1 ink / 1 face.

    Bands: [0, 10) at 50/kg, [10, 30) at 40/kg with 5% waste, [30, inf) at 35/kg.
    Returns the ids the tests need.
    """
    ink = Ink(count=1)
    face = Face(count=1)
    session.add_all([ink, face])
    session.flush()

    bands = [
        WeightBand(label='0 - 10 kg', kg=Decimal('0'), kg_min=Decimal('0'), kg_max=Decimal('10')),
        WeightBand(label='10 - 30 kg', kg=Decimal('10'), kg_min=Decimal('10'), kg_max=Decimal('30')),
        WeightBand(label='30+ kg', kg=Decimal('30'), kg_min=Decimal('30'), kg_max=None),
    ]
    session.add_all(bands)
    session.flush()

    tariffs = [
        ProductionTariff(ink_id=ink.id, face_id=face.id, weight_band_id=bands[0].id,
                         price_per_kg=Decimal('50.00'), waste_percent=Decimal('0')),
        ProductionTariff(ink_id=ink.id, face_id=face.id, weight_band_id=bands[1].id,
                         price_per_kg=Decimal('40.00'), waste_percent=Decimal('5.00')),
        ProductionTariff(ink_id=ink.id, face_id=face.id, weight_band_id=bands[2].id,
                         price_per_kg=Decimal('35.00'), waste_percent=Decimal('3.00')),
    ]
    session.add_all(tariffs)

    product_type = PlasticProductType(name='Bolsa camiseta')
    material = PlasticMaterial(name='Alta densidad')
    caliber = Caliber(value='200')
    session.add_all([product_type, material, caliber])
    session.flush()

    config = PlasticConfig(
        product_type_id=product_type.id,
        material_id=material.id,
        caliber_id=caliber.id,
        height=Decimal('40'),
        width=Decimal('30'),
        size_label='30x40',
        units_per_kg=Decimal('50'),
    )
    die = Die(kind='Asa flexible')
    session.add_all([config, die])
    session.commit()

    return {
        'ink_id': ink.id,
        'face_id': face.id,
        'band_ids': [b.id for b in bands],
        'tariff_ids': [t.id for t in tariffs],
        'product_config_id': config.id,
        'die_id': die.id,
    }


@pytest.fixture(scope='function')
def client_id(session):
    """Create a test client (customer) and return its id."""
    customer = Client(
        legal_name='Plásticos del Norte SA',
        company='Plásticos del Norte',
        phone='555-0100',
        email='compras@norte.test',
    )
    session.add(customer)
    session.commit()
    return customer.id


def _create_user(session, role_name, super_admin=False):
    suffix = str(uuid.uuid4())[:8]
    role = session.query(Role).filter_by(name=role_name).first()
    if not role:
        role = Role(name=role_name)
        session.add(role)
        session.flush()
    user = AppUser(
        email=f'{role_name}-{suffix}@test.com',
        full_name=f'Usuario {role_name}',
        role_id=role.id,
        is_super_admin=super_admin,
        active=True
    )
    user.set_password('password123')
    session.add(user)
    session.commit()
    return {'id': user.id, 'email': user.email, 'password': 'password123'}


@pytest.fixture(scope='function')
def sales_user(session):
    """Back-office user with the 'ventas' role."""
    return _create_user(session, 'ventas')


@pytest.fixture(scope='function')
def admin_user(session):
    """Back-office user with the 'admin' role."""
    return _create_user(session, 'admin')


def _login(client, user_id):
    with client.session_transaction() as sess:
        sess['user_id'] = user_id
    return client


@pytest.fixture(scope='function')
def authenticated_client(client, sales_user):
    """Test client with a 'ventas' session."""
    return _login(client, sales_user['id'])


@pytest.fixture(scope='function')
def admin_client(client, admin_user):
    """Test client with an 'admin' session."""
    return _login(client, admin_user['id'])


@pytest.fixture(scope='function')
def quote_payload(catalog, client_id):
    """Valid create-quote body with one product and two lines."""
    return {
        'clienteId': client_id,
        'productos': [
            {
                'productoId': catalog['product_config_id'],
                'tintasId': catalog['ink_id'],
                'carasId': catalog['face_id'],
                'asaSuaje': catalog['die_id'],
                'bk': True,
                'foil': False,
                'pantones': 2,
                'observacion': 'Impresión a registro',
                'detalles': [
                    {'cantidad': 1000, 'precio_total': 800},
                    {'cantidad': 5000, 'precio_total': 3500},
                ],
            }
        ],
    }
