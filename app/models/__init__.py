"""Models package - exports all SQLAlchemy models."""
# Access Models
from app.models.role import Role
from app.models.app_user import AppUser
from app.models.client import Client

# Catalog Models
from app.models.production_catalog import Ink, Face, WeightBand
from app.models.production_tariff import ProductionTariff
from app.models.plastic_product import PlasticProductType, PlasticMaterial, Caliber, PlasticConfig
from app.models.die import Die

# Quote Models
from app.models.quote_status import QuoteStatus, QuoteStatusId, DEFAULT_STATUS_NAMES
from app.models.quote import Quote, quote_number_seq
from app.models.quote_product import QuoteProduct
from app.models.quote_line import QuoteLine, ApprovalState

__all__ = [
    # Access
    'Role', 'AppUser', 'Client',
    # Catalogs
    'Ink', 'Face', 'WeightBand', 'ProductionTariff',
    'PlasticProductType', 'PlasticMaterial', 'Caliber', 'PlasticConfig', 'Die',
    # Quotes
    'QuoteStatus', 'QuoteStatusId', 'DEFAULT_STATUS_NAMES',
    'Quote', 'quote_number_seq', 'QuoteProduct', 'QuoteLine', 'ApprovalState',
]
