# ==============================================================================
# CAPA DE REPOSITORIOS - Acceso a datos
# ==============================================================================
# Esta capa encapsula todo el acceso a la persistencia (archivos JSON).
# Las interfaces (métodos públicos) no dependen del formato.
#
# ESTRUCTURA:
# ├── interfaces.py              → Protocolos/Interfaces
# ├── base.py                    → BaseRepository, ListRepository, StorageError
# ├── seed_data.py               → Datos por defecto de cada colección
# ├── collection_repositories.py → customers/products/rawMaterials/orders/expenses
# └── session_repository.py      → currentUser.json
# ==============================================================================

from .interfaces import (
    ICollectionRepository,
    ISessionRepository,
)

from .base import BaseRepository, ListRepository, StorageError
from .collection_repositories import (
    CollectionRepository,
    CustomerRepository,
    ProductRepository,
    RawMaterialRepository,
    OrderRepository,
    ExpenseRepository,
)
from .session_repository import SessionRepository
from .seed_data import DEFAULT_USERS

__all__ = [
    # Interfaces
    'ICollectionRepository',
    'ISessionRepository',

    # Clases base
    'BaseRepository',
    'ListRepository',
    'StorageError',

    # Implementaciones JSON
    'CollectionRepository',
    'CustomerRepository',
    'ProductRepository',
    'RawMaterialRepository',
    'OrderRepository',
    'ExpenseRepository',
    'SessionRepository',

    'DEFAULT_USERS',
]
