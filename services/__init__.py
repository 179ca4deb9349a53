"""
Services package for the Cabinet Shop Manager.
Contains repository classes for database access and the domain rules.
"""

from services.catalog_repository import CatalogRepository
from services.orders_repository import OrdersRepository
from services.quotes_repository import QuotesRepository
from services.settings_repository import SettingsRepository
from services.users_repository import UsersRepository

__all__ = [
    'CatalogRepository',
    'OrdersRepository',
    'QuotesRepository',
    'SettingsRepository',
    'UsersRepository'
]
