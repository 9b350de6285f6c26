# ==============================================================================
# INTERFACES DE REPOSITORIOS
# ==============================================================================
#
# Contratos que cumplen los repositorios. Los servicios dependen de estas
# interfaces, no de la implementación JSON:
#
# 1. INDEPENDENCIA DE ALMACENAMIENTO
#    - Cambiar JSON → SQLite/MySQL solo requiere una nueva implementación
#
# 2. TESTING
#    - Fácil crear dobles en memoria que implementen estas interfaces
#
# ==============================================================================

from typing import Any, Dict, List, Optional, Protocol, runtime_checkable


@runtime_checkable
class ICollectionRepository(Protocol):
    """
    Interfaz para colecciones de registros con 'id'.
    Usado por: clientes, productos, materias primas, pedidos, gastos.
    """

    COLLECTION: str

    def get_all(self) -> List[Dict[str, Any]]:
        """Obtiene todos los registros (o la semilla)."""
        ...

    def save_all(self, data: List[Dict[str, Any]]) -> None:
        """Reemplaza la colección completa."""
        ...

    def get_by_id(self, record_id: Any) -> Optional[Dict[str, Any]]:
        ...

    def add(self, record: Dict[str, Any]) -> None:
        ...

    def update(self, record: Dict[str, Any]) -> bool:
        """Reemplaza por ID. False si no existía."""
        ...

    def delete(self, record_id: Any) -> bool:
        """Elimina por ID. False si no existía."""
        ...

    def clear(self) -> None:
        """Borra lo persistido; la próxima lectura devuelve la semilla."""
        ...


@runtime_checkable
class ISessionRepository(Protocol):
    """Interfaz para el marcador de sesión (usuario actual)."""

    def load(self) -> Optional[Dict[str, Any]]:
        ...

    def save(self, user_data: Dict[str, Any]) -> None:
        ...

    def clear(self) -> None:
        ...
