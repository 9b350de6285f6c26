# ==============================================================================
# CAPA DE MODELOS - Estructuras de datos del sistema
# ==============================================================================
# Este módulo define todas las entidades del dominio usando dataclasses.
# Independiente del mecanismo de persistencia: cada entidad sabe
# convertirse a/desde el diccionario JSON almacenado.
# ==============================================================================

from .entities import (
    # Errores
    ValidationError,

    # Usuarios y visibilidad
    User,
    UserRole,
    Capability,
    ROLE_CAPABILITIES,
    capabilities_for,

    # Clientes
    Customer,

    # Inventario
    Product,
    RawMaterial,
    StockStatus,

    # Pedidos
    Order,
    OrderItem,
    OrderStatus,
    PaymentStatus,
    PaymentMethod,
    DEFAULT_GST_RATE,

    # Gastos
    Expense,
    EXPENSE_CATEGORIES,
)

__all__ = [
    'ValidationError',

    'User',
    'UserRole',
    'Capability',
    'ROLE_CAPABILITIES',
    'capabilities_for',

    'Customer',

    'Product',
    'RawMaterial',
    'StockStatus',

    'Order',
    'OrderItem',
    'OrderStatus',
    'PaymentStatus',
    'PaymentMethod',
    'DEFAULT_GST_RATE',

    'Expense',
    'EXPENSE_CATEGORIES',
]
