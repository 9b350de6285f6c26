# ==============================================================================
# SERVICIO DE REPORTES
# ==============================================================================
# Arma tablas (encabezado + filas) listas para exportar.
# Los montos salen como texto ya redondeado: '<símbolo><monto 2 decimales>'.
# El diseño de PDF/Excel queda fuera: aquí solo se genera CSV.
# ==============================================================================

import csv
import io
from dataclasses import dataclass
from typing import Any, Iterable, List, Tuple

from biz_manager.models import Expense, Order, Product, RawMaterial
from biz_manager.services.periods import parse_timestamp
from biz_manager.services.stats_service import (
    DEFAULT_CURRENCY_SYMBOL,
    ProfitLossReport,
    format_currency,
    format_percent,
    item_stock_status,
)


@dataclass(frozen=True)
class Report:
    """Tabla exportable."""
    name: str
    header: Tuple[str, ...]
    rows: Tuple[Tuple[str, ...], ...]


def _format_date(value: Any, pattern: str) -> str:
    parsed = parse_timestamp(value)
    return parsed.strftime(pattern) if parsed else ''


def _number(value: float) -> str:
    return f"{value:g}"


class ReportService:
    """
    Genera reportes de pedidos, gastos, inventario y ganancias/pérdidas.
    """

    def __init__(self, currency_symbol: str = DEFAULT_CURRENCY_SYMBOL):
        self.currency_symbol = currency_symbol

    def _money(self, amount: float) -> str:
        return format_currency(amount, self.currency_symbol)

    def orders_report(self, orders: Iterable[Order]) -> Report:
        header = ('Order ID', 'Date', 'Customer Name', 'Customer Email', 'Customer Phone',
                  'Status', 'Payment Method', 'Payment Status', 'Subtotal', 'GST Amount', 'Total')
        rows = tuple(
            (
                o.id,
                _format_date(o.created_at, '%d/%m/%Y %H:%M'),
                o.customer_name,
                o.customer_email,
                o.customer_phone,
                o.status.value,
                o.payment_method,
                o.payment_status.value,
                self._money(o.subtotal),
                self._money(o.gst_amount),
                self._money(o.total),
            )
            for o in orders
        )
        return Report('orders', header, rows)

    def expenses_report(self, expenses: Iterable[Expense]) -> Report:
        header = ('Date', 'Category', 'Description', 'Amount', 'Created By', 'Notes')
        rows = tuple(
            (
                _format_date(e.date, '%d/%m/%Y'),
                e.category,
                e.description,
                self._money(e.amount),
                e.created_by,
                e.notes or '',
            )
            for e in expenses
        )
        return Report('expenses', header, rows)

    def inventory_report(self, products: Iterable[Product],
                         raw_materials: Iterable[RawMaterial]) -> List[Report]:
        """Dos tablas: productos y materias primas, con estado LOW/OK."""
        product_rows = tuple(
            (
                p.name,
                p.category,
                _number(p.stock),
                p.unit,
                _number(p.low_stock_threshold),
                item_stock_status(p).value,
                self._money(p.cost),
                self._money(p.price),
            )
            for p in products
        )
        material_rows = tuple(
            (
                m.name,
                _number(m.quantity),
                m.unit,
                _number(m.low_stock_threshold),
                item_stock_status(m).value,
                self._money(m.cost_per_unit),
                m.supplier,
            )
            for m in raw_materials
        )
        return [
            Report('products',
                   ('Product Name', 'Category', 'Current Stock', 'Unit', 'Low Stock Threshold',
                    'Status', 'Cost Price', 'Selling Price'),
                   product_rows),
            Report('raw_materials',
                   ('Material Name', 'Current Quantity', 'Unit', 'Low Stock Threshold',
                    'Status', 'Cost Per Unit', 'Supplier'),
                   material_rows),
        ]

    def profit_loss_report(self, report: ProfitLossReport) -> Report:
        shown = report.summary.display(self.currency_symbol)
        rows = (
            ('Period', report.label),
            ('Revenue', shown['revenue']),
            ('Cost of Goods Sold (COGS)', shown['cogs']),
            ('Gross Profit', shown['grossProfit']),
            ('Operating Expenses', shown['expenses']),
            ('Net Profit', shown['netProfit']),
            ('Gross Margin', shown['grossMargin']),
            ('Profit Margin', shown['profitMargin']),
            ('Previous Period Revenue', self._money(report.growth.previous_revenue)),
            ('Revenue Growth', format_percent(report.growth.growth)),
        )
        return Report('profit_loss', ('Item', 'Amount'), rows)

    @staticmethod
    def to_csv(*reports: Report) -> str:
        """
        Serializa una o más tablas a CSV.
        Varias tablas se separan con una línea en blanco.
        """
        si = io.StringIO()
        writer = csv.writer(si)
        for index, report in enumerate(reports):
            if index:
                writer.writerow([])
            writer.writerow(report.header)
            writer.writerows(report.rows)
        return si.getvalue()
