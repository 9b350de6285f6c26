# ==============================================================================
# SERVICIO DE CATÁLOGOS
# ==============================================================================
# Alta/edición/baja de clientes, productos, materias primas y gastos.
# Valida cada registro antes de escribir: si falla, no se escribe nada.
# Los pedidos NO pasan por aquí (ver OrderService).
# ==============================================================================

from typing import Any, Dict, List

from biz_manager.models import Customer, Product, RawMaterial, Expense, ValidationError
from biz_manager.services.order_service import new_record_id
from biz_manager.services.record_store import (
    RecordStore,
    CUSTOMERS,
    PRODUCTS,
    RAW_MATERIALS,
    EXPENSES,
)


# Colección -> entidad
ENTITY_TYPES = {
    CUSTOMERS: Customer,
    PRODUCTS: Product,
    RAW_MATERIALS: RawMaterial,
    EXPENSES: Expense,
}


class CatalogService:
    """
    CRUD validado para las colecciones simples.

    Los métodos devuelven {'ok': bool, 'error': str, 'record': dict}.
    'storage_error': True indica que falló la escritura, no la validación.
    """

    def __init__(self, store: RecordStore):
        self.store = store

    def _entity_type(self, collection: str):
        try:
            return ENTITY_TYPES[collection]
        except KeyError:
            raise KeyError(f"Colección sin catálogo: {collection}") from None

    def list(self, collection: str) -> List[Dict[str, Any]]:
        self._entity_type(collection)
        return self.store.get(collection)

    def create(self, collection: str, data: Dict[str, Any], created_by: str = None) -> Dict[str, Any]:
        """
        Crea un registro. Si no trae 'id' se genera uno.

        Args:
            collection: customers / products / rawMaterials / expenses
            data: Campos del registro (claves JSON)
            created_by: Nombre del usuario (se guarda en gastos)
        """
        entity_type = self._entity_type(collection)
        data = dict(data)
        if not data.get('id'):
            data['id'] = new_record_id(r.get('id') for r in self.store.get(collection))
        if collection == EXPENSES and created_by and not data.get('createdBy'):
            data['createdBy'] = created_by

        try:
            entity = entity_type.from_dict(data)
            entity.validate()
        except ValidationError as e:
            return {'ok': False, 'error': str(e)}

        if self.store.get_by_id(collection, entity.id) is not None:
            return {'ok': False, 'error': f'Ya existe un registro con id {entity.id}'}

        if not self.store.add(collection, entity):
            return {'ok': False, 'error': 'No se pudo guardar el registro', 'storage_error': True}
        return {'ok': True, 'record': entity.to_dict()}

    def update(self, collection: str, record_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """Reemplaza el registro completo con el mismo id."""
        entity_type = self._entity_type(collection)
        data = dict(data, id=record_id)

        try:
            entity = entity_type.from_dict(data)
            entity.validate()
        except ValidationError as e:
            return {'ok': False, 'error': str(e)}

        updated = self.store.update(collection, entity)
        if updated is None:
            return {'ok': False, 'error': 'No se pudo guardar el registro', 'storage_error': True}
        if not updated:
            return {'ok': False, 'error': f'Registro {record_id} no encontrado'}
        return {'ok': True, 'record': entity.to_dict()}

    def delete(self, collection: str, record_id: str) -> Dict[str, Any]:
        self._entity_type(collection)
        deleted = self.store.delete(collection, record_id)
        if deleted is None:
            return {'ok': False, 'error': 'No se pudo eliminar el registro', 'storage_error': True}
        if not deleted:
            return {'ok': False, 'error': f'Registro {record_id} no encontrado'}
        return {'ok': True}
