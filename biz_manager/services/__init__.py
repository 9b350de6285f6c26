# ==============================================================================
# CAPA DE SERVICIOS - Lógica de negocio
# ==============================================================================
# Los servicios no conocen el formato de almacenamiento: trabajan con el
# RecordStore y los repositorios a través de sus interfaces.
# ==============================================================================

from .record_store import RecordStore, COLLECTIONS
from .stats_service import StatsService
from .order_service import OrderService
from .catalog_service import CatalogService
from .user_service import UserService
from .report_service import ReportService

__all__ = [
    'RecordStore',
    'COLLECTIONS',
    'StatsService',
    'OrderService',
    'CatalogService',
    'UserService',
    'ReportService',
]
