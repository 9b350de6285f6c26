# ==============================================================================
# ALMACÉN DE REGISTROS
# ==============================================================================
# Punto único de lectura/escritura de las colecciones.
#
# REGLAS:
# - get() nunca falla: sin datos guardados devuelve la semilla
# - Cada mutación es UNA escritura completa de la colección
# - Registrar un pedido descuenta el stock de los productos referenciados
#   (si un producto ya no existe, ese ítem se ignora)
# - Un error de almacenamiento NO se propaga: se registra en el log y la
#   mutación devuelve False (None en update/delete, donde False es
#   "no existe"). El estado persistido no cambia.
# ==============================================================================

import logging
from typing import Any, Dict, Iterable, List, Optional

from biz_manager.models import Customer, Product, RawMaterial, Order, Expense
from biz_manager.repositories import (
    ICollectionRepository,
    StorageError,
    CustomerRepository,
    ProductRepository,
    RawMaterialRepository,
    OrderRepository,
    ExpenseRepository,
)


logger = logging.getLogger(__name__)


CUSTOMERS = 'customers'
PRODUCTS = 'products'
RAW_MATERIALS = 'rawMaterials'
ORDERS = 'orders'
EXPENSES = 'expenses'

COLLECTIONS = (CUSTOMERS, PRODUCTS, RAW_MATERIALS, ORDERS, EXPENSES)


def _as_record(record: Any) -> Dict[str, Any]:
    """Acepta entidades (con to_dict) o diccionarios."""
    if hasattr(record, 'to_dict'):
        return record.to_dict()
    return dict(record)


class RecordStore:
    """
    Servicio de persistencia de colecciones.

    Se construye explícitamente (ver AppContainer) y se pasa por referencia
    a los servicios que lo necesitan.

    Uso:
        store = RecordStore.from_path('/ruta/datos')
        store.add('orders', order)
        products = store.get('products')
    """

    def __init__(self, repositories: Dict[str, ICollectionRepository]):
        """
        Args:
            repositories: {nombre_colección: repositorio}
        """
        self._repos = dict(repositories)

    @classmethod
    def from_path(cls, base_path: str) -> 'RecordStore':
        """Crea el almacén con los repositorios JSON en base_path."""
        return cls({
            CUSTOMERS: CustomerRepository(base_path),
            PRODUCTS: ProductRepository(base_path),
            RAW_MATERIALS: RawMaterialRepository(base_path),
            ORDERS: OrderRepository(base_path),
            EXPENSES: ExpenseRepository(base_path),
        })

    def repository(self, collection: str) -> ICollectionRepository:
        """
        Raises:
            KeyError: Si la colección no existe
        """
        try:
            return self._repos[collection]
        except KeyError:
            raise KeyError(f"Colección desconocida: {collection}") from None

    def has_collection(self, collection: str) -> bool:
        return collection in self._repos

    # =========================================================================
    # OPERACIONES GENÉRICAS
    # =========================================================================

    def get(self, collection: str) -> List[Dict[str, Any]]:
        """
        Obtiene la colección completa.

        Returns:
            Lista de registros guardados, o la semilla si no hay nada
        """
        return self.repository(collection).get_all()

    def get_by_id(self, collection: str, record_id: Any) -> Optional[Dict[str, Any]]:
        return self.repository(collection).get_by_id(record_id)

    def replace_all(self, collection: str, records: Iterable[Any]) -> bool:
        """
        Reemplaza la colección completa en una sola escritura.

        Returns:
            True si se guardó
        """
        repo = self.repository(collection)
        data = [_as_record(r) for r in records]
        return self._safe_write(collection, 'replace_all', lambda: repo.save_all(data))

    def add(self, collection: str, record: Any) -> bool:
        """
        Agrega un registro. Pedidos y gastos van al inicio.
        Un pedido además descuenta stock de productos.

        Returns:
            True si se guardó el registro
        """
        repo = self.repository(collection)
        data = _as_record(record)
        if not self._safe_write(collection, 'add', lambda: repo.add(data)):
            return False
        if collection == ORDERS:
            self._apply_order_stock(data)
        return True

    def update(self, collection: str, record: Any) -> Optional[bool]:
        """
        Reemplaza el registro con el mismo ID.

        Returns:
            True si existía y se guardó; False si no existe;
            None si falló el almacenamiento (estado sin cambios)
        """
        repo = self.repository(collection)
        data = _as_record(record)
        result = {}

        def _write():
            result['found'] = repo.update(data)

        if not self._safe_write(collection, 'update', _write):
            return None
        return result.get('found', False)

    def delete(self, collection: str, record_id: Any) -> Optional[bool]:
        """
        Elimina un registro por ID.

        Returns:
            True si existía y se eliminó; False si no existe;
            None si falló el almacenamiento
        """
        repo = self.repository(collection)
        result = {}

        def _write():
            result['found'] = repo.delete(record_id)

        if not self._safe_write(collection, 'delete', _write):
            return None
        return result.get('found', False)

    def reset(self) -> bool:
        """
        Borra todas las colecciones guardadas.
        La próxima lectura de cada una devuelve su semilla.
        """
        ok = True
        for name, repo in self._repos.items():
            ok = self._safe_write(name, 'reset', repo.clear) and ok
        return ok

    # =========================================================================
    # ACCESO TIPADO
    # =========================================================================

    def customers(self) -> List[Customer]:
        return [Customer.from_dict(r) for r in self.get(CUSTOMERS)]

    def products(self) -> List[Product]:
        return [Product.from_dict(r) for r in self.get(PRODUCTS)]

    def raw_materials(self) -> List[RawMaterial]:
        return [RawMaterial.from_dict(r) for r in self.get(RAW_MATERIALS)]

    def orders(self) -> List[Order]:
        return [Order.from_dict(r) for r in self.get(ORDERS)]

    def expenses(self) -> List[Expense]:
        return [Expense.from_dict(r) for r in self.get(EXPENSES)]

    # =========================================================================
    # INTERNOS
    # =========================================================================

    def _apply_order_stock(self, order: Dict[str, Any]) -> None:
        """Descuenta del stock la cantidad de cada ítem del pedido."""
        deltas: Dict[str, float] = {}
        for item in order.get('items', []) or []:
            pid = str(item.get('productId'))
            deltas[pid] = deltas.get(pid, 0) - (item.get('quantity', 0) or 0)
        if not deltas:
            return

        repo = self.repository(PRODUCTS)
        result = {}

        def _write():
            result['touched'] = repo.adjust_stock(deltas)

        if self._safe_write(PRODUCTS, 'stock', _write):
            skipped = set(deltas) - set(result.get('touched', []))
            if skipped:
                logger.info("Pedido %s: productos inexistentes ignorados en stock: %s",
                            order.get('id'), sorted(skipped))

    def _safe_write(self, collection: str, operation: str, write) -> bool:
        try:
            write()
            return True
        except StorageError as e:
            logger.error("Error de almacenamiento en %s (%s): %s", collection, operation, e)
            return False
