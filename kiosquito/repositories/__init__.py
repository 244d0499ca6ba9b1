# ==============================================================================
# CAPA DE REPOSITORIOS - Acceso a datos (SQLite)
# ==============================================================================
# Esta capa encapsula todo el acceso a la base local.
#
# ESTRUCTURA:
# ├── interfaces.py            → Protocolos/Interfaces (contratos)
# ├── base.py                  → Database (esquema, transacciones) y BaseRepository
# ├── user_repository.py       → Tabla users
# ├── product_repository.py    → Tabla products
# ├── currency_repository.py   → Tabla currencies
# ├── sales_repository.py      → Tabla sales
# └── migration_repository.py  → Tabla schema_migrations
# ==============================================================================

# Interfaces
from .interfaces import (
    IUserRepository,
    IProductRepository,
    ICurrencyRepository,
    ISalesRepository,
    IMigrationRepository,
)

# Implementaciones concretas (SQLite)
from .base import BaseRepository, Database, SCHEMA
from .user_repository import UserRepository
from .product_repository import ProductRepository
from .currency_repository import CurrencyRepository
from .sales_repository import SalesRepository
from .migration_repository import MigrationRepository

__all__ = [
    # Interfaces
    'IUserRepository',
    'IProductRepository',
    'ICurrencyRepository',
    'ISalesRepository',
    'IMigrationRepository',

    # Base
    'BaseRepository',
    'Database',
    'SCHEMA',

    # Implementaciones SQLite
    'UserRepository',
    'ProductRepository',
    'CurrencyRepository',
    'SalesRepository',
    'MigrationRepository',
]
