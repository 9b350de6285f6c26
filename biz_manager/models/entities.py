# ==============================================================================
# ENTIDADES DEL DOMINIO - Definiciones de dataclasses
# ==============================================================================
# Cada entidad representa un concepto del negocio.
# Las claves de persistencia (camelCase) son las del almacenamiento JSON:
# no se renombran al leer ni al escribir.
# ==============================================================================

from dataclasses import dataclass, field
from typing import Optional, List, Dict, Any, FrozenSet
from enum import Enum


class ValidationError(ValueError):
    """Falta un campo obligatorio o un valor es inválido."""
    pass


# ==============================================================================
# ENUMERACIONES - Estados y tipos válidos
# ==============================================================================

class UserRole(str, Enum):
    """Roles de usuario. Solo definen visibilidad, no seguridad."""
    ADMIN = "admin"
    STAFF = "staff"
    ACCOUNTANT = "accountant"


class Capability(str, Enum):
    """Secciones del panel que un rol puede ver."""
    ORDERS = "orders"
    INVENTORY = "inventory"
    EXPENSES = "expenses"
    PROFIT_LOSS = "profitloss"
    ANALYTICS = "analytics"
    CUSTOMERS = "customers"


class OrderStatus(str, Enum):
    """Estados posibles de un pedido."""
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"     # Se guarda pero no cuenta en ingresos/COGS


class PaymentStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"


class PaymentMethod(str, Enum):
    """Métodos de pago ofrecidos en el formulario de pedidos."""
    CASH = "cash"
    CARD = "card"
    UPI = "upi"
    BANK_TRANSFER = "bank_transfer"


class StockStatus(str, Enum):
    LOW = "LOW"
    OK = "OK"


# Categorías fijas de gastos (orden de presentación)
EXPENSE_CATEGORIES = (
    'Packaging',
    'Delivery',
    'Utilities',
    'Labor',
    'Raw Materials',
    'Equipment',
    'Marketing',
    'Rent',
    'Maintenance',
    'Other',
)

# Tasa de GST por defecto (%)
DEFAULT_GST_RATE = 18.0


# ==============================================================================
# TABLA DE VISIBILIDAD POR ROL
# ==============================================================================
# admin ve todo; staff opera pedidos/inventario/clientes;
# accountant ve pedidos y la parte financiera.

ROLE_CAPABILITIES: Dict[UserRole, FrozenSet[Capability]] = {
    UserRole.ADMIN: frozenset(Capability),
    UserRole.STAFF: frozenset([
        Capability.ORDERS,
        Capability.INVENTORY,
        Capability.CUSTOMERS,
    ]),
    UserRole.ACCOUNTANT: frozenset([
        Capability.ORDERS,
        Capability.EXPENSES,
        Capability.PROFIT_LOSS,
        Capability.ANALYTICS,
    ]),
}


def capabilities_for(role: Any) -> FrozenSet[Capability]:
    """
    Obtiene las secciones visibles para un rol.

    Args:
        role: UserRole o su valor en texto

    Returns:
        Conjunto de capacidades (vacío si el rol no existe)
    """
    try:
        return ROLE_CAPABILITIES[UserRole(role)]
    except ValueError:
        return frozenset()


def _require(value: Any, field_name: str) -> None:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError(f"El campo '{field_name}' es obligatorio")


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _numeric(value: Any, field_name: str) -> None:
    if not _is_number(value):
        raise ValidationError(f"El campo '{field_name}' debe ser numérico")


def _non_negative(value: Any, field_name: str) -> None:
    _numeric(value, field_name)
    if value < 0:
        raise ValidationError(f"El campo '{field_name}' no puede ser negativo")


def _to_float(value: Any, default: float = 0.0) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _to_number(value: Any, default: float = 0) -> Any:
    """
    Convierte texto numérico de formularios ('5', '2.5') a número.
    Vacío -> default. Un texto no numérico se deja tal cual para que
    validate() lo rechace.
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        return default
    if _is_number(value):
        return value
    try:
        number = float(value)
    except (TypeError, ValueError):
        return value
    return int(number) if number.is_integer() else number


def _enum_or_default(enum_cls, value, default):
    try:
        return enum_cls(value)
    except ValueError:
        return default


# ==============================================================================
# USUARIOS
# ==============================================================================

@dataclass
class User:
    """
    Usuario de la sesión actual.

    Attributes:
        id: Identificador
        username: Nombre de usuario
        role: Rol (define qué secciones ve)
        name: Nombre para mostrar
    """
    id: str
    username: str
    role: UserRole = UserRole.STAFF
    name: str = ''

    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    def can_access(self, capability: Any) -> bool:
        """Verifica si el rol puede ver una sección."""
        try:
            return Capability(capability) in capabilities_for(self.role)
        except ValueError:
            return False

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'username': self.username,
            'role': self.role.value if isinstance(self.role, Enum) else self.role,
            'name': self.name,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'User':
        return cls(
            id=str(data.get('id', '')),
            username=data.get('username', ''),
            role=_enum_or_default(UserRole, data.get('role'), UserRole.STAFF),
            name=data.get('name') or data.get('username', ''),
        )


# ==============================================================================
# CLIENTES
# ==============================================================================

@dataclass
class Customer:
    id: str
    name: str
    email: str = ''
    phone: str = ''
    address: str = ''
    gst_number: Optional[str] = None

    def validate(self) -> None:
        _require(self.id, 'id')
        _require(self.name, 'name')
        _require(self.email, 'email')
        _require(self.phone, 'phone')
        _require(self.address, 'address')

    def to_dict(self) -> Dict[str, Any]:
        d = {
            'id': self.id,
            'name': self.name,
            'email': self.email,
            'phone': self.phone,
            'address': self.address,
        }
        if self.gst_number:
            d['gstNumber'] = self.gst_number
        return d

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Customer':
        return cls(
            id=str(data.get('id', '')),
            name=data.get('name', ''),
            email=data.get('email', ''),
            phone=data.get('phone', ''),
            address=data.get('address', ''),
            gst_number=data.get('gstNumber') or None,
        )


# ==============================================================================
# INVENTARIO
# ==============================================================================

@dataclass
class Product:
    """
    Producto terminado a la venta.

    Attributes:
        price: Precio de venta por unidad
        cost: Costo de producción por unidad
        stock: Cantidad en inventario
        unit: Etiqueta de unidad ('pack', 'kg', ...)
        low_stock_threshold: Umbral inclusivo de stock bajo
    """
    id: str
    name: str
    category: str = ''
    price: float = 0.0
    cost: float = 0.0
    stock: float = 0
    unit: str = 'pack'
    low_stock_threshold: float = 0

    @property
    def margin(self) -> float:
        """Margen unitario (price - cost) / price. 0 si no hay precio."""
        if self.price <= 0:
            return 0.0
        return (self.price - self.cost) / self.price

    def validate(self) -> None:
        _require(self.id, 'id')
        _require(self.name, 'name')
        _non_negative(self.price, 'price')
        _non_negative(self.cost, 'cost')
        _numeric(self.stock, 'stock')
        _non_negative(self.low_stock_threshold, 'lowStockThreshold')

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'category': self.category,
            'price': self.price,
            'cost': self.cost,
            'stock': self.stock,
            'unit': self.unit,
            'lowStockThreshold': self.low_stock_threshold,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Product':
        return cls(
            id=str(data.get('id', '')),
            name=data.get('name', ''),
            category=data.get('category', ''),
            price=_to_number(data.get('price')),
            cost=_to_number(data.get('cost')),
            stock=_to_number(data.get('stock')),
            unit=data.get('unit', 'pack'),
            low_stock_threshold=_to_number(data.get('lowStockThreshold')),
        )


@dataclass
class RawMaterial:
    """Materia prima. Mismo criterio de stock bajo que Product."""
    id: str
    name: str
    quantity: float = 0
    unit: str = 'kg'
    cost_per_unit: float = 0.0
    supplier: str = ''
    low_stock_threshold: float = 0

    @property
    def stock_value(self) -> float:
        return self.quantity * self.cost_per_unit

    def validate(self) -> None:
        _require(self.id, 'id')
        _require(self.name, 'name')
        _numeric(self.quantity, 'quantity')
        _non_negative(self.cost_per_unit, 'costPerUnit')
        _non_negative(self.low_stock_threshold, 'lowStockThreshold')

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'quantity': self.quantity,
            'unit': self.unit,
            'costPerUnit': self.cost_per_unit,
            'supplier': self.supplier,
            'lowStockThreshold': self.low_stock_threshold,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'RawMaterial':
        return cls(
            id=str(data.get('id', '')),
            name=data.get('name', ''),
            quantity=_to_number(data.get('quantity')),
            unit=data.get('unit', 'kg'),
            cost_per_unit=_to_number(data.get('costPerUnit')),
            supplier=data.get('supplier', ''),
            low_stock_threshold=_to_number(data.get('lowStockThreshold')),
        )


# ==============================================================================
# PEDIDOS
# ==============================================================================

@dataclass
class OrderItem:
    """
    Línea de pedido. Copia de precio/costo al momento de la venta:
    cambios posteriores del producto no alteran pedidos históricos.
    """
    product_id: str
    product_name: str
    quantity: float
    price: float
    cost: float = 0.0

    @property
    def line_total(self) -> float:
        return self.quantity * self.price

    @property
    def line_cost(self) -> float:
        return self.quantity * self.cost

    def to_dict(self) -> Dict[str, Any]:
        return {
            'productId': self.product_id,
            'productName': self.product_name,
            'quantity': self.quantity,
            'price': self.price,
            'cost': self.cost,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'OrderItem':
        return cls(
            product_id=str(data.get('productId', '')),
            product_name=data.get('productName', ''),
            quantity=_to_number(data.get('quantity')),
            price=_to_number(data.get('price')),
            cost=_to_number(data.get('cost')),
        )


@dataclass
class Order:
    """
    Pedido con copia desnormalizada del cliente.

    Invariantes:
        subtotal = Σ quantity × price
        gst_amount = subtotal × gst_rate / 100
        total = subtotal + gst_amount
    """
    id: str
    customer_id: str
    customer_name: str = ''
    customer_email: str = ''
    customer_phone: str = ''
    customer_address: str = ''
    customer_gst: Optional[str] = None
    items: List[OrderItem] = field(default_factory=list)
    subtotal: float = 0.0
    gst_amount: float = 0.0
    gst_rate: float = DEFAULT_GST_RATE
    total: float = 0.0
    status: OrderStatus = OrderStatus.PENDING
    payment_method: str = PaymentMethod.CASH.value
    payment_status: PaymentStatus = PaymentStatus.PENDING
    created_at: str = ''
    updated_at: str = ''
    notes: Optional[str] = None

    @property
    def is_cancelled(self) -> bool:
        return self.status == OrderStatus.CANCELLED

    def validate(self) -> None:
        _require(self.id, 'id')
        _require(self.customer_id, 'customerId')
        if not self.items:
            raise ValidationError("El pedido debe tener al menos un producto")
        for item in self.items:
            if not _is_number(item.quantity) or item.quantity <= 0:
                raise ValidationError(
                    f"Cantidad inválida para {item.product_name or item.product_id}"
                )
            _non_negative(item.price, 'price')
            _non_negative(item.cost, 'cost')

    def to_dict(self) -> Dict[str, Any]:
        d = {
            'id': self.id,
            'customerId': self.customer_id,
            'customerName': self.customer_name,
            'customerEmail': self.customer_email,
            'customerPhone': self.customer_phone,
            'customerAddress': self.customer_address,
            'items': [item.to_dict() for item in self.items],
            'subtotal': self.subtotal,
            'gstAmount': self.gst_amount,
            'gstRate': self.gst_rate,
            'total': self.total,
            'status': self.status.value if isinstance(self.status, Enum) else self.status,
            'paymentMethod': self.payment_method,
            'paymentStatus': (
                self.payment_status.value
                if isinstance(self.payment_status, Enum) else self.payment_status
            ),
            'createdAt': self.created_at,
            'updatedAt': self.updated_at,
        }
        if self.customer_gst:
            d['customerGst'] = self.customer_gst
        if self.notes:
            d['notes'] = self.notes
        return d

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Order':
        return cls(
            id=str(data.get('id', '')),
            customer_id=str(data.get('customerId', '')),
            customer_name=data.get('customerName', ''),
            customer_email=data.get('customerEmail', ''),
            customer_phone=data.get('customerPhone', ''),
            customer_address=data.get('customerAddress', ''),
            customer_gst=data.get('customerGst') or None,
            items=[OrderItem.from_dict(i) for i in data.get('items', []) or []],
            subtotal=_to_float(data.get('subtotal')),
            gst_amount=_to_float(data.get('gstAmount')),
            gst_rate=_to_float(data.get('gstRate'), DEFAULT_GST_RATE),
            total=_to_float(data.get('total')),
            status=_enum_or_default(OrderStatus, data.get('status'), OrderStatus.PENDING),
            payment_method=data.get('paymentMethod') or PaymentMethod.CASH.value,
            payment_status=_enum_or_default(
                PaymentStatus, data.get('paymentStatus'), PaymentStatus.PENDING
            ),
            created_at=data.get('createdAt', ''),
            updated_at=data.get('updatedAt', ''),
            notes=data.get('notes') or None,
        )


# ==============================================================================
# GASTOS
# ==============================================================================

@dataclass
class Expense:
    id: str
    category: str
    description: str
    amount: float
    date: str
    created_by: str = ''
    notes: Optional[str] = None

    def validate(self) -> None:
        _require(self.id, 'id')
        _require(self.description, 'description')
        _require(self.date, 'date')
        if self.category not in EXPENSE_CATEGORIES:
            raise ValidationError(f"Categoría de gasto inválida: {self.category}")
        _non_negative(self.amount, 'amount')

    def to_dict(self) -> Dict[str, Any]:
        d = {
            'id': self.id,
            'category': self.category,
            'description': self.description,
            'amount': self.amount,
            'date': self.date,
            'createdBy': self.created_by,
        }
        if self.notes:
            d['notes'] = self.notes
        return d

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Expense':
        return cls(
            id=str(data.get('id', '')),
            category=data.get('category', 'Other'),
            description=data.get('description', ''),
            amount=_to_number(data.get('amount')),
            date=data.get('date', ''),
            created_by=data.get('createdBy', ''),
            notes=data.get('notes') or None,
        )
