"""
Unit tests for SQLAlchemy models.
"""

import pytest
import uuid
from decimal import Decimal

from app.models import AppUser, Role, ApprovalState, QuoteStatusId, DEFAULT_STATUS_NAMES, PlasticConfig


class TestApprovalState:
    """Tests for the quote line approval enum."""

    def test_from_flag(self):
        assert ApprovalState.from_flag(True) is ApprovalState.APPROVED
        assert ApprovalState.from_flag(False) is ApprovalState.REJECTED
        assert ApprovalState.from_flag(None) is ApprovalState.UNSET

    def test_as_flag(self):
        assert ApprovalState.APPROVED.as_flag() is True
        assert ApprovalState.REJECTED.as_flag() is False
        assert ApprovalState.UNSET.as_flag() is None


class TestQuoteStatus:
    """Tests for the status catalog constants."""

    def test_every_status_has_a_name(self):
        assert set(DEFAULT_STATUS_NAMES) == set(QuoteStatusId)

    def test_pending_is_the_initial_status(self):
        assert int(QuoteStatusId.PENDING) == 1
        assert DEFAULT_STATUS_NAMES[QuoteStatusId.PENDING] == 'Pendiente'


class TestAppUserModel:
    """Tests for AppUser model."""

    def test_create_user(self, session):
        """Test creating a user."""
        suffix = str(uuid.uuid4())[:8]
        email = f'test_{suffix}@example.com'
        role = Role(name='ventas')
        session.add(role)
        session.flush()
        user = AppUser(
            email=email,
            full_name='Test User',
            role_id=role.id,
            active=True
        )
        user.set_password('securepassword')
        session.add(user)
        session.commit()

        assert user.id is not None
        assert user.email == email
        assert user.role_name == 'ventas'
        assert user.is_super_admin is False

    def test_password_hashing(self):
        """Test password is hashed and verifiable."""
        user = AppUser(email='hash@example.com')
        user.set_password('mypassword')

        assert user.password_hash != 'mypassword'
        assert user.check_password('mypassword')
        assert not user.check_password('wrongpassword')

    def test_user_without_password_cannot_authenticate(self):
        user = AppUser(email='nopass@example.com')
        assert not user.check_password('anything')

    def test_email_unique(self, session, sales_user):
        """Test that user email must be unique."""
        session.add(AppUser(email=sales_user['email']))

        with pytest.raises(Exception):  # IntegrityError
            session.commit()
        session.rollback()


class TestPlasticConfigModel:
    """Tests for PlasticConfig serialization."""

    def test_to_dict(self, session, catalog):
        config = session.get(PlasticConfig, catalog['product_config_id'])
        data = config.to_dict()

        assert data['tipo_producto'] == 'Bolsa camiseta'
        assert data['material'] == 'Alta densidad'
        assert data['calibre'] == '200'
        assert data['medida'] == '30x40'
        assert data['por_kilo'] == Decimal('50')
