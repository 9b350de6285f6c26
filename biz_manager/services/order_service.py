# ==============================================================================
# SERVICIO DE PEDIDOS
# ==============================================================================
# Gestiona el ciclo de vida de un pedido:
# - Construye el pedido a partir de un cliente y líneas de productos
# - Copia datos del cliente y precios/costos del producto (snapshot)
# - Calcula subtotal, GST y total
# - Registra el pedido (el almacén descuenta stock)
# - Cambios de estado / pago, edición y eliminación
# ==============================================================================

import logging
import time
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from biz_manager.models import (
    DEFAULT_GST_RATE,
    Order,
    OrderItem,
    OrderStatus,
    PaymentStatus,
    PaymentMethod,
    ValidationError,
)
from biz_manager.services.record_store import RecordStore, ORDERS, CUSTOMERS, PRODUCTS
from biz_manager.services.stats_service import order_totals


logger = logging.getLogger(__name__)


def new_record_id(existing_ids=()) -> str:
    """
    ID basado en milisegundos desde epoch.
    Si choca con uno existente, se incrementa.
    """
    candidate = int(time.time() * 1000)
    taken = set(str(i) for i in existing_ids)
    while str(candidate) in taken:
        candidate += 1
    return str(candidate)


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class OrderService:
    """
    Servicio para gestión de pedidos.

    Los métodos devuelven un diccionario de resultado:
        {'ok': True, 'order': {...}}
        {'ok': False, 'error': 'mensaje'}
        {'ok': False, 'error': 'mensaje', 'storage_error': True}
    """

    def __init__(self, store: RecordStore, default_gst_rate: float = DEFAULT_GST_RATE):
        """
        Args:
            store: Almacén de registros
            default_gst_rate: Tasa de GST para pedidos nuevos (%)
        """
        self.store = store
        self.default_gst_rate = default_gst_rate

    # =========================================================================
    # CREACIÓN
    # =========================================================================

    def create_order(
        self,
        customer_id: Optional[str],
        lines: List[Dict[str, Any]],
        payment_method: str = PaymentMethod.CASH.value,
        payment_status: str = PaymentStatus.PENDING.value,
        status: str = OrderStatus.PENDING.value,
        gst_rate: Optional[float] = None,
        notes: Optional[str] = None,
        now: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Crea un pedido y lo registra.

        Args:
            customer_id: Cliente seleccionado
            lines: [{'productId': str, 'quantity': n, 'price': opcional}]
                   Sin 'price' se usa el precio actual del producto
            payment_method: cash / card / upi / bank_transfer
            payment_status: pending / paid
            status: Estado inicial
            gst_rate: Tasa de GST (%); por defecto la del servicio
            notes: Observaciones
            now: Timestamp ISO de creación (tests)

        Returns:
            Dict con resultado (ok, error, order)
        """
        try:
            order = self.build_order(
                customer_id, lines,
                payment_method=payment_method,
                payment_status=payment_status,
                status=status,
                gst_rate=gst_rate,
                notes=notes,
                now=now,
            )
        except ValidationError as e:
            return {'ok': False, 'error': str(e)}

        if not self.store.add(ORDERS, order):
            return {'ok': False, 'error': 'No se pudo guardar el pedido', 'storage_error': True}

        logger.info("Pedido %s registrado: cliente=%s total=%.2f",
                    order.id, order.customer_id, order.total)
        return {'ok': True, 'order': order.to_dict()}

    def build_order(
        self,
        customer_id: Optional[str],
        lines: List[Dict[str, Any]],
        payment_method: str = PaymentMethod.CASH.value,
        payment_status: str = PaymentStatus.PENDING.value,
        status: str = OrderStatus.PENDING.value,
        gst_rate: Optional[float] = None,
        notes: Optional[str] = None,
        now: Optional[str] = None,
    ) -> Order:
        """
        Construye (sin guardar) un pedido validado.

        Raises:
            ValidationError: Cliente faltante/inexistente, sin ítems,
                             producto inexistente o cantidad inválida
        """
        if not customer_id:
            raise ValidationError('Selecciona un cliente')
        customer = self.store.get_by_id(CUSTOMERS, customer_id)
        if customer is None:
            raise ValidationError(f'Cliente {customer_id} no encontrado')
        if not lines:
            raise ValidationError('Agrega al menos un producto')

        items = [self._build_item(line) for line in lines]
        rate = self.default_gst_rate if gst_rate is None else float(gst_rate)
        totals = order_totals(items, rate)
        timestamp = now or _utc_now_iso()

        try:
            order_status = OrderStatus(status)
            pay_status = PaymentStatus(payment_status)
        except ValueError as e:
            raise ValidationError(str(e)) from e

        order = Order(
            id=new_record_id(o.get('id') for o in self.store.get(ORDERS)),
            customer_id=str(customer.get('id')),
            customer_name=customer.get('name', ''),
            customer_email=customer.get('email', ''),
            customer_phone=customer.get('phone', ''),
            customer_address=customer.get('address', ''),
            customer_gst=customer.get('gstNumber') or None,
            items=items,
            subtotal=totals.subtotal,
            gst_amount=totals.gst_amount,
            gst_rate=totals.gst_rate,
            total=totals.total,
            status=order_status,
            payment_method=payment_method or PaymentMethod.CASH.value,
            payment_status=pay_status,
            created_at=timestamp,
            updated_at=timestamp,
            notes=notes or None,
        )
        order.validate()
        return order

    def _build_item(self, line: Dict[str, Any]) -> OrderItem:
        product_id = line.get('productId')
        product = self.store.get_by_id(PRODUCTS, product_id) if product_id else None
        if product is None:
            raise ValidationError(f'Producto {product_id} no encontrado')

        try:
            quantity = float(line.get('quantity', 0))
            price = float(line['price']) if line.get('price') is not None else float(product.get('price', 0))
        except (TypeError, ValueError):
            raise ValidationError(f"Cantidad o precio inválido para {product.get('name')}") from None

        if quantity <= 0:
            raise ValidationError(f"Cantidad inválida para {product.get('name')}")
        if quantity.is_integer():
            quantity = int(quantity)

        return OrderItem(
            product_id=str(product.get('id')),
            product_name=product.get('name', ''),
            quantity=quantity,
            price=price,
            cost=float(product.get('cost', 0) or 0),
        )

    # =========================================================================
    # MODIFICACIÓN
    # =========================================================================

    def get_order(self, order_id: str) -> Optional[Order]:
        data = self.store.get_by_id(ORDERS, order_id)
        return Order.from_dict(data) if data else None

    def update_order(self, order: Order) -> Dict[str, Any]:
        """
        Guarda un pedido editado: recalcula totales y updatedAt.
        El stock no se vuelve a ajustar al editar.
        """
        try:
            order.validate()
        except ValidationError as e:
            return {'ok': False, 'error': str(e)}

        totals = order_totals(order.items, order.gst_rate)
        order.subtotal = totals.subtotal
        order.gst_amount = totals.gst_amount
        order.total = totals.total
        order.updated_at = _utc_now_iso()
        return self._save(order)

    def update_status(self, order_id: str, status: str) -> Dict[str, Any]:
        """Cambia el estado de un pedido."""
        try:
            new_status = OrderStatus(status)
        except ValueError:
            return {'ok': False, 'error': f'Estado inválido: {status}'}

        order = self.get_order(order_id)
        if order is None:
            return {'ok': False, 'error': f'Pedido {order_id} no encontrado'}

        order.status = new_status
        order.updated_at = _utc_now_iso()
        return self._save(order)

    def mark_paid(self, order_id: str) -> Dict[str, Any]:
        order = self.get_order(order_id)
        if order is None:
            return {'ok': False, 'error': f'Pedido {order_id} no encontrado'}

        order.payment_status = PaymentStatus.PAID
        order.updated_at = _utc_now_iso()
        return self._save(order)

    def delete_order(self, order_id: str) -> Dict[str, Any]:
        deleted = self.store.delete(ORDERS, order_id)
        if deleted is None:
            return {'ok': False, 'error': 'No se pudo eliminar el pedido', 'storage_error': True}
        if not deleted:
            return {'ok': False, 'error': f'Pedido {order_id} no encontrado'}
        return {'ok': True}

    def _save(self, order: Order) -> Dict[str, Any]:
        updated = self.store.update(ORDERS, order)
        if updated is None:
            return {'ok': False, 'error': 'No se pudo guardar el pedido', 'storage_error': True}
        if not updated:
            return {'ok': False, 'error': f'Pedido {order.id} no encontrado'}
        return {'ok': True, 'order': order.to_dict()}
