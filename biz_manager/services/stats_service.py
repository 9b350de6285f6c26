# ==============================================================================
# SERVICIO DE ESTADÍSTICAS - MÉTRICAS DERIVADAS
# ==============================================================================
# Convierte registros crudos (pedidos, gastos, productos) en métricas:
# totales de pedido con GST, ganancias y pérdidas, tendencia de ventas,
# productos más vendidos, recurrencia de clientes y distribuciones.
#
# REGLA PRINCIPAL: los pedidos "cancelled" NO cuentan para ingresos,
# COGS, tendencia, productos ni clientes. Sí cuentan en la distribución
# de estados.
#
# Las funciones de este módulo son puras:
# - no modifican las listas que reciben
# - no redondean internamente (el redondeo es solo para mostrar)
# - una división por cero devuelve 0, nunca NaN/infinito
# ==============================================================================

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any, Dict, Iterable, List, Optional, Tuple

from dateutil.relativedelta import relativedelta

from biz_manager.models import (
    Expense,
    EXPENSE_CATEGORIES,
    Order,
    OrderItem,
    OrderStatus,
    Product,
    RawMaterial,
    StockStatus,
)
from biz_manager.performance_logger import profile_function
from biz_manager.services.periods import (
    DEFAULT_COMPARISON_OFFSET,
    DateRange,
    DateLike,
    parse_timestamp,
    period_label,
    period_range,
    range_bound,
    start_of_day,
)


DEFAULT_CURRENCY_SYMBOL = '₹'
DEFAULT_TOP_PRODUCTS = 8


# ==============================================================================
# FORMATO PARA PRESENTACIÓN
# ==============================================================================

def format_currency(amount: float, symbol: str = DEFAULT_CURRENCY_SYMBOL) -> str:
    """'<símbolo><monto con 2 decimales>', p. ej. '₹236.00'."""
    return f"{symbol}{amount:.2f}"


def format_percent(value: float, digits: int = 2) -> str:
    return f"{value:.{digits}f}%"


def _ratio_percent(part: float, whole: float) -> float:
    if whole > 0:
        return part * 100 / whole
    return 0.0


# ==============================================================================
# NORMALIZACIÓN DE ENTRADAS
# ==============================================================================
# Se aceptan entidades o diccionarios tal como se guardan en JSON.

def _as_order(order: Any) -> Order:
    return order if isinstance(order, Order) else Order.from_dict(order)


def _as_item(item: Any) -> OrderItem:
    return item if isinstance(item, OrderItem) else OrderItem.from_dict(item)


def _as_expense(expense: Any) -> Expense:
    return expense if isinstance(expense, Expense) else Expense.from_dict(expense)


def _active_orders(orders: Iterable[Any]) -> List[Order]:
    """Pedidos no cancelados."""
    return [o for o in (_as_order(x) for x in orders) if not o.is_cancelled]


# ==============================================================================
# OBJETOS DE RESULTADO (inmutables)
# ==============================================================================

@dataclass(frozen=True)
class OrderTotals:
    subtotal: float
    gst_amount: float
    total: float
    gst_rate: float

    def to_dict(self) -> Dict[str, float]:
        return {
            'subtotal': self.subtotal,
            'gstAmount': self.gst_amount,
            'total': self.total,
            'gstRate': self.gst_rate,
        }

    def display(self, symbol: str = DEFAULT_CURRENCY_SYMBOL) -> Dict[str, str]:
        return {
            'subtotal': format_currency(self.subtotal, symbol),
            'gstAmount': format_currency(self.gst_amount, symbol),
            'total': format_currency(self.total, symbol),
            'gstRate': f"{self.gst_rate:g}%",
        }


@dataclass(frozen=True)
class ProfitLossSummary:
    """
    Estado de resultados de un rango.

    gross_profit = revenue - cogs
    net_profit = gross_profit - total_expenses
    """
    revenue: float
    cogs: float
    gross_profit: float
    total_expenses: float
    net_profit: float
    gross_margin: float
    profit_margin: float
    order_count: int
    expense_count: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            'revenue': self.revenue,
            'cogs': self.cogs,
            'grossProfit': self.gross_profit,
            'expenses': self.total_expenses,
            'netProfit': self.net_profit,
            'grossMargin': self.gross_margin,
            'profitMargin': self.profit_margin,
            'orderCount': self.order_count,
            'expenseCount': self.expense_count,
        }

    def display(self, symbol: str = DEFAULT_CURRENCY_SYMBOL) -> Dict[str, str]:
        return {
            'revenue': format_currency(self.revenue, symbol),
            'cogs': format_currency(self.cogs, symbol),
            'grossProfit': format_currency(self.gross_profit, symbol),
            'expenses': format_currency(self.total_expenses, symbol),
            'netProfit': format_currency(self.net_profit, symbol),
            'grossMargin': format_percent(self.gross_margin),
            'profitMargin': format_percent(self.profit_margin),
        }


@dataclass(frozen=True)
class GrowthSummary:
    """Ingresos del rango contra el mismo rango desplazado hacia atrás."""
    current_revenue: float
    previous_revenue: float
    growth: float
    previous_range: DateRange

    def to_dict(self) -> Dict[str, Any]:
        return {
            'currentRevenue': self.current_revenue,
            'previousRevenue': self.previous_revenue,
            'growth': self.growth,
            'previousRange': self.previous_range.to_dict(),
        }


@dataclass(frozen=True)
class TrendPoint:
    day: date
    revenue: float
    order_count: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            'date': self.day.isoformat(),
            'revenue': self.revenue,
            'orders': self.order_count,
        }

    def display(self) -> Dict[str, Any]:
        return {
            'date': self.day.strftime('%d/%m'),
            'revenue': round(self.revenue, 2),
            'orders': self.order_count,
        }


@dataclass(frozen=True)
class TopProduct:
    product_id: str
    name: str
    quantity: float
    revenue: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            'productId': self.product_id,
            'name': self.name,
            'quantity': self.quantity,
            'revenue': self.revenue,
        }


@dataclass(frozen=True)
class DistributionEntry:
    """Conteo de un grupo. key = valor crudo, name = etiqueta."""
    key: str
    name: str
    value: int

    def to_dict(self) -> Dict[str, Any]:
        return {'key': self.key, 'name': self.name, 'value': self.value}


@dataclass(frozen=True)
class CustomerMetrics:
    total_customers: int
    repeat_customers: int
    repeat_rate: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            'totalCustomers': self.total_customers,
            'repeatCustomers': self.repeat_customers,
            'repeatRate': self.repeat_rate,
        }


@dataclass(frozen=True)
class SalesOverview:
    total_revenue: float
    total_orders: int
    average_order_value: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            'totalRevenue': self.total_revenue,
            'totalOrders': self.total_orders,
            'avgOrderValue': self.average_order_value,
        }

    def display(self, symbol: str = DEFAULT_CURRENCY_SYMBOL) -> Dict[str, str]:
        return {
            'totalRevenue': format_currency(self.total_revenue, symbol),
            'totalOrders': str(self.total_orders),
            'avgOrderValue': format_currency(self.average_order_value, symbol),
        }


@dataclass(frozen=True)
class ExpenseSummary:
    """Total por categoría (todas las categorías fijas, incluso en cero)."""
    by_category: Tuple[Tuple[str, float], ...]
    total: float
    count: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            'byCategory': [{'category': c, 'total': t} for c, t in self.by_category],
            'total': self.total,
            'count': self.count,
        }


@dataclass(frozen=True)
class InventorySummary:
    product_count: int
    low_stock_products: int
    raw_material_count: int
    low_stock_materials: int
    raw_material_value: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            'productCount': self.product_count,
            'lowStockProducts': self.low_stock_products,
            'rawMaterialCount': self.raw_material_count,
            'lowStockMaterials': self.low_stock_materials,
            'rawMaterialValue': self.raw_material_value,
        }


# ==============================================================================
# STOCK
# ==============================================================================

def stock_status(quantity: float, low_stock_threshold: float) -> StockStatus:
    """LOW si quantity <= umbral (umbral inclusivo), si no OK."""
    if quantity <= low_stock_threshold:
        return StockStatus.LOW
    return StockStatus.OK


def item_stock_status(item: Any) -> StockStatus:
    """
    Estado de stock de un Product (campo stock) o RawMaterial
    (campo quantity), como entidad o diccionario.
    """
    if isinstance(item, Product):
        return stock_status(item.stock, item.low_stock_threshold)
    if isinstance(item, RawMaterial):
        return stock_status(item.quantity, item.low_stock_threshold)
    quantity = item.get('stock') if 'stock' in item else item.get('quantity', 0)
    return stock_status(quantity or 0, item.get('lowStockThreshold', 0) or 0)


def low_stock_items(items: Iterable[Any]) -> List[Any]:
    """Filtra los ítems en estado LOW (sin copiar ni modificar)."""
    return [i for i in items if item_stock_status(i) == StockStatus.LOW]


def inventory_summary(products: Iterable[Any], raw_materials: Iterable[Any]) -> InventorySummary:
    products = [p if isinstance(p, Product) else Product.from_dict(p) for p in products]
    materials = [m if isinstance(m, RawMaterial) else RawMaterial.from_dict(m)
                 for m in raw_materials]
    return InventorySummary(
        product_count=len(products),
        low_stock_products=len(low_stock_items(products)),
        raw_material_count=len(materials),
        low_stock_materials=len(low_stock_items(materials)),
        raw_material_value=sum(m.stock_value for m in materials),
    )


# ==============================================================================
# TOTALES DE PEDIDO
# ==============================================================================

def order_totals(items: Iterable[Any], gst_rate: float) -> OrderTotals:
    """
    subtotal = Σ quantity × price
    gst_amount = subtotal × gst_rate / 100
    total = subtotal + gst_amount
    """
    subtotal = sum(_as_item(x).line_total for x in items)
    gst_amount = subtotal * gst_rate / 100
    return OrderTotals(
        subtotal=subtotal,
        gst_amount=gst_amount,
        total=subtotal + gst_amount,
        gst_rate=gst_rate,
    )


def order_cogs(order: Order) -> float:
    return sum(item.line_cost for item in order.items)


# ==============================================================================
# GANANCIAS Y PÉRDIDAS
# ==============================================================================

def orders_in_range(orders: Iterable[Any], date_range: DateRange) -> List[Order]:
    """Pedidos no cancelados con createdAt dentro del rango."""
    return [o for o in _active_orders(orders)
            if date_range.contains(parse_timestamp(o.created_at))]


def expenses_in_range(expenses: Iterable[Any], date_range: DateRange) -> List[Expense]:
    return [e for e in (_as_expense(x) for x in expenses)
            if date_range.contains(parse_timestamp(e.date))]


def profit_and_loss(
    orders: Iterable[Any],
    expenses: Iterable[Any],
    start: DateLike,
    end: DateLike,
) -> ProfitLossSummary:
    """
    Calcula el estado de resultados para [start, end].

    Args:
        orders: Pedidos (se ignoran los cancelados)
        expenses: Gastos
        start: Inicio del rango (inclusive). None = sin límite
        end: Fin del rango (inclusive). Una fecha sin hora abarca el día
    """
    date_range = DateRange(
        range_bound(start, is_end=False) or datetime.min,
        range_bound(end, is_end=True) or datetime.max,
    )
    return _profit_and_loss(orders, expenses, date_range)


def _profit_and_loss(orders, expenses, date_range: DateRange) -> ProfitLossSummary:
    selected_orders = orders_in_range(orders, date_range)
    selected_expenses = expenses_in_range(expenses, date_range)

    revenue = sum(o.total for o in selected_orders)
    cogs = sum(order_cogs(o) for o in selected_orders)
    gross_profit = revenue - cogs
    total_expenses = sum(e.amount for e in selected_expenses)
    net_profit = gross_profit - total_expenses

    return ProfitLossSummary(
        revenue=revenue,
        cogs=cogs,
        gross_profit=gross_profit,
        total_expenses=total_expenses,
        net_profit=net_profit,
        gross_margin=_ratio_percent(gross_profit, revenue),
        profit_margin=_ratio_percent(net_profit, revenue),
        order_count=len(selected_orders),
        expense_count=len(selected_expenses),
    )


def revenue_growth(
    orders: Iterable[Any],
    date_range: DateRange,
    comparison_offset: relativedelta = DEFAULT_COMPARISON_OFFSET,
) -> GrowthSummary:
    """
    Crecimiento de ingresos contra el rango desplazado comparison_offset
    hacia atrás. El desplazamiento por defecto es un mes para cualquier
    preset (hoy y semana incluidos).

    growth = (actual - anterior) / anterior × 100, 0 si anterior es 0.
    """
    orders = list(orders)
    previous_range = date_range.shifted_back(comparison_offset)
    current = sum(o.total for o in orders_in_range(orders, date_range))
    previous = sum(o.total for o in orders_in_range(orders, previous_range))
    growth = (current - previous) * 100 / previous if previous > 0 else 0.0
    return GrowthSummary(
        current_revenue=current,
        previous_revenue=previous,
        growth=growth,
        previous_range=previous_range,
    )


# ==============================================================================
# ANALÍTICA
# ==============================================================================

def sales_trend(orders: Iterable[Any], days: int, now: Optional[datetime] = None) -> List[TrendPoint]:
    """
    Ingresos y cantidad de pedidos por día para los últimos N días
    calendario (el más antiguo primero, hoy incluido).
    """
    if days <= 0:
        return []
    today = start_of_day(parse_timestamp(now) if now is not None else datetime.now()).date()
    first_day = today - timedelta(days=days - 1)

    buckets: Dict[date, List[float]] = {}
    for order in _active_orders(orders):
        created = parse_timestamp(order.created_at)
        if created is None:
            continue
        day = created.date()
        if first_day <= day <= today:
            bucket = buckets.setdefault(day, [0.0, 0])
            bucket[0] += order.total
            bucket[1] += 1

    trend = []
    for offset in range(days):
        day = first_day + timedelta(days=offset)
        revenue, count = buckets.get(day, (0.0, 0))
        trend.append(TrendPoint(day=day, revenue=revenue, order_count=int(count)))
    return trend


def top_products(orders: Iterable[Any], limit: int = DEFAULT_TOP_PRODUCTS) -> List[TopProduct]:
    """
    Productos ordenados por ingreso (quantity × price de venta).
    Empates conservan el orden de primera aparición.
    """
    accumulated: Dict[str, Dict[str, Any]] = {}
    for order in _active_orders(orders):
        for item in order.items:
            entry = accumulated.setdefault(item.product_id, {
                'name': item.product_name,
                'quantity': 0,
                'revenue': 0.0,
            })
            entry['quantity'] += item.quantity
            entry['revenue'] += item.line_total

    ranked = sorted(accumulated.items(), key=lambda kv: kv[1]['revenue'], reverse=True)
    return [
        TopProduct(product_id=pid, name=data['name'],
                   quantity=data['quantity'], revenue=data['revenue'])
        for pid, data in ranked[:max(0, limit)]
    ]


def order_status_distribution(orders: Iterable[Any]) -> List[DistributionEntry]:
    """Pedidos por estado, TODOS los pedidos (cancelados incluidos)."""
    counts: Dict[str, int] = {}
    for order in (_as_order(x) for x in orders):
        key = order.status.value if isinstance(order.status, OrderStatus) else str(order.status)
        counts[key] = counts.get(key, 0) + 1
    return [DistributionEntry(key=k, name=k[:1].upper() + k[1:], value=v)
            for k, v in counts.items()]


def normalize_payment_method(method: str) -> str:
    """'bank_transfer' -> 'BANK TRANSFER' (solo el primer '_')."""
    return (method or '').replace('_', ' ', 1).upper()


def payment_method_distribution(orders: Iterable[Any]) -> List[DistributionEntry]:
    """Pedidos no cancelados por método de pago normalizado."""
    counts: Dict[str, int] = {}
    for order in _active_orders(orders):
        label = normalize_payment_method(order.payment_method)
        counts[label] = counts.get(label, 0) + 1
    return [DistributionEntry(key=k, name=k, value=v) for k, v in counts.items()]


def customer_metrics(orders: Iterable[Any]) -> CustomerMetrics:
    """
    Clientes distintos entre pedidos no cancelados; recurrentes son los
    que tienen más de un pedido.
    """
    per_customer: Dict[str, int] = {}
    for order in _active_orders(orders):
        per_customer[order.customer_id] = per_customer.get(order.customer_id, 0) + 1

    total = len(per_customer)
    repeat = sum(1 for count in per_customer.values() if count > 1)
    return CustomerMetrics(
        total_customers=total,
        repeat_customers=repeat,
        repeat_rate=_ratio_percent(repeat, total),
    )


def sales_overview(orders: Iterable[Any]) -> SalesOverview:
    active = _active_orders(orders)
    revenue = sum(o.total for o in active)
    return SalesOverview(
        total_revenue=revenue,
        total_orders=len(active),
        average_order_value=revenue / len(active) if active else 0.0,
    )


def expense_category_totals(expenses: Iterable[Any]) -> ExpenseSummary:
    expenses = [_as_expense(x) for x in expenses]
    totals = {category: 0.0 for category in EXPENSE_CATEGORIES}
    for expense in expenses:
        if expense.category in totals:
            totals[expense.category] += expense.amount
    return ExpenseSummary(
        by_category=tuple(totals.items()),
        total=sum(e.amount for e in expenses),
        count=len(expenses),
    )


# ==============================================================================
# REPORTES COMPUESTOS
# ==============================================================================

@dataclass(frozen=True)
class ProfitLossReport:
    period: str
    label: str
    date_range: DateRange
    summary: ProfitLossSummary
    growth: GrowthSummary

    def to_dict(self) -> Dict[str, Any]:
        return {
            'period': self.period,
            'label': self.label,
            'dateRange': self.date_range.to_dict(),
            'summary': self.summary.to_dict(),
            'growth': self.growth.to_dict(),
        }


@dataclass(frozen=True)
class AnalyticsReport:
    days: int
    overview: SalesOverview
    trend: Tuple[TrendPoint, ...]
    top_products: Tuple[TopProduct, ...]
    status_distribution: Tuple[DistributionEntry, ...]
    payment_distribution: Tuple[DistributionEntry, ...]
    customers: CustomerMetrics

    def to_dict(self) -> Dict[str, Any]:
        return {
            'days': self.days,
            'overview': self.overview.to_dict(),
            'trend': [p.to_dict() for p in self.trend],
            'topProducts': [p.to_dict() for p in self.top_products],
            'orderStatus': [e.to_dict() for e in self.status_distribution],
            'paymentMethods': [e.to_dict() for e in self.payment_distribution],
            'customers': self.customers.to_dict(),
        }


class StatsService:
    """
    Servicio para cálculo de estadísticas sobre el almacén de registros.

    Responsabilidades:
    - Leer pedidos/gastos/inventario del RecordStore
    - Resolver el período solicitado
    - Delegar en las funciones puras de este módulo
    """

    def __init__(self, store, comparison_offset: relativedelta = DEFAULT_COMPARISON_OFFSET):
        """
        Args:
            store: RecordStore del que se leen los registros
            comparison_offset: Desplazamiento del período de comparación
        """
        self.store = store
        self.comparison_offset = comparison_offset

    @profile_function(name="Reporte de ganancias y pérdidas")
    def profit_loss_report(
        self,
        period: str = 'month',
        custom_start: DateLike = None,
        custom_end: DateLike = None,
        now: Optional[datetime] = None,
    ) -> ProfitLossReport:
        """
        Estado de resultados del período con su crecimiento de ingresos.

        Args:
            period: 'today', 'week', 'month', 'custom'
            custom_start: Fecha inicio (YYYY-MM-DD) si period='custom'
            custom_end: Fecha fin (YYYY-MM-DD) si period='custom'
            now: Momento de referencia (tests)
        """
        date_range = period_range(period, now, custom_start, custom_end)
        orders = self.store.orders()
        expenses = self.store.expenses()
        return ProfitLossReport(
            period=period,
            label=period_label(period, date_range),
            date_range=date_range,
            summary=_profit_and_loss(orders, expenses, date_range),
            growth=revenue_growth(orders, date_range, self.comparison_offset),
        )

    @profile_function(name="Analítica de ventas")
    def analytics(
        self,
        days: int = 30,
        now: Optional[datetime] = None,
        top_limit: int = DEFAULT_TOP_PRODUCTS,
    ) -> AnalyticsReport:
        orders = self.store.orders()
        return AnalyticsReport(
            days=days,
            overview=sales_overview(orders),
            trend=tuple(sales_trend(orders, days, now)),
            top_products=tuple(top_products(orders, top_limit)),
            status_distribution=tuple(order_status_distribution(orders)),
            payment_distribution=tuple(payment_method_distribution(orders)),
            customers=customer_metrics(orders),
        )

    def stock_report(self) -> Dict[str, Any]:
        """Alertas de stock bajo y resumen de inventario."""
        products = self.store.products()
        materials = self.store.raw_materials()
        return {
            'lowStockProducts': [p.to_dict() for p in low_stock_items(products)],
            'lowStockMaterials': [m.to_dict() for m in low_stock_items(materials)],
            'summary': inventory_summary(products, materials).to_dict(),
        }

    def expense_summary(self) -> ExpenseSummary:
        return expense_category_totals(self.store.expenses())
