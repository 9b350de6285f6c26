# ==============================================================================
# REPOSITORIOS DE COLECCIONES
# ==============================================================================
# Un repositorio por colección persistida: <data_dir>/<colección>.json
# Cada uno define su archivo, sus datos semilla y si inserta al inicio.
# ==============================================================================

import os
from typing import Dict, List

from biz_manager.repositories.base import ListRepository
from biz_manager.repositories.seed_data import (
    DEFAULT_CUSTOMERS,
    DEFAULT_PRODUCTS,
    DEFAULT_RAW_MATERIALS,
)


class CollectionRepository(ListRepository):
    """
    Repositorio de una colección con nombre.

    COLLECTION es a la vez la clave lógica y el nombre del archivo.
    """

    COLLECTION = ''

    def __init__(self, base_path: str):
        """
        Args:
            base_path: Directorio de datos
        """
        file_path = os.path.join(base_path, f'{self.COLLECTION}.json')
        super().__init__(file_path)


class CustomerRepository(CollectionRepository):
    COLLECTION = 'customers'
    DEFAULTS = DEFAULT_CUSTOMERS


class ProductRepository(CollectionRepository):
    """
    Productos terminados.

    adjust_stock se usa al registrar un pedido: descuenta stock sin
    fallar si el producto ya no existe.
    """
    COLLECTION = 'products'
    DEFAULTS = DEFAULT_PRODUCTS

    def adjust_stock(self, deltas: Dict[str, float]) -> List[str]:
        """
        Suma deltas de stock a varios productos en una sola escritura.

        Args:
            deltas: {product_id: delta} (negativo para descontar)

        Returns:
            IDs de productos efectivamente actualizados
        """
        products = self.get_all()
        touched = []
        for product in products:
            pid = str(product.get('id'))
            if pid in deltas:
                product['stock'] = (product.get('stock', 0) or 0) + deltas[pid]
                touched.append(pid)
        if touched:
            self.save_all(products)
        return touched


class RawMaterialRepository(CollectionRepository):
    COLLECTION = 'rawMaterials'
    DEFAULTS = DEFAULT_RAW_MATERIALS


class OrderRepository(CollectionRepository):
    """Pedidos, el más reciente primero."""
    COLLECTION = 'orders'
    PREPEND = True


class ExpenseRepository(CollectionRepository):
    """Gastos, el más reciente primero."""
    COLLECTION = 'expenses'
    PREPEND = True
