import csv
import io
from datetime import datetime

from conftest import make_expense, make_order

from biz_manager.models import Expense, Order, Product, RawMaterial
from biz_manager.services import ReportService, StatsService
from biz_manager.services.record_store import EXPENSES, ORDERS


def test_orders_report_rows():
    order = Order.from_dict(dict(make_order('o1', 236, '2024-03-10T14:05:00'),
                                 subtotal=200, gstAmount=36, customerEmail='a@b.c'))
    report = ReportService().orders_report([order])
    assert report.header[0] == 'Order ID'
    row = report.rows[0]
    assert row[1] == '10/03/2024 14:05'
    assert row[3] == 'a@b.c'
    assert row[-3:] == ('₹200.00', '₹36.00', '₹236.00')


def test_expenses_report_uses_currency_symbol():
    expense = Expense.from_dict(make_expense('e1', 99.5, '2024-03-02', 'Utilities'))
    report = ReportService('$').expenses_report([expense])
    assert report.rows == (('02/03/2024', 'Utilities', 'Gasto e1', '$99.50', 'admin', ''),)


def test_inventory_report_marks_low_stock():
    products = [Product(id='1', name='Plain', stock=100, low_stock_threshold=100, price=120, cost=60)]
    materials = [RawMaterial(id='1', name='Salt', quantity=50, low_stock_threshold=10, cost_per_unit=20)]
    product_table, material_table = ReportService().inventory_report(products, materials)
    assert product_table.rows[0][5] == 'LOW'
    assert product_table.rows[0][-1] == '₹120.00'
    assert material_table.rows[0][4] == 'OK'


def test_profit_loss_statement(store):
    store.replace_all(ORDERS, [make_order('o1', 500, '2024-03-10T10:00:00')])
    store.replace_all(EXPENSES, [make_expense('e1', 100, '2024-03-11')])
    pl = StatsService(store).profit_loss_report('month', now=datetime(2024, 3, 20))

    rows = dict(ReportService().profit_loss_report(pl).rows)
    assert rows['Period'] == 'This Month'
    assert rows['Revenue'] == '₹500.00'
    assert rows['Net Profit'] == '₹400.00'
    assert rows['Profit Margin'] == '80.00%'
    assert rows['Revenue Growth'] == '0.00%'


def test_to_csv_joins_tables():
    products = [Product(id='1', name='Plain', stock=5, low_stock_threshold=1)]
    materials = [RawMaterial(id='1', name='Salt, fina', quantity=1, low_stock_threshold=1)]
    text = ReportService.to_csv(*ReportService().inventory_report(products, materials))

    lines = list(csv.reader(io.StringIO(text)))
    assert lines[0][0] == 'Product Name'
    assert lines[2] == []
    assert lines[3][0] == 'Material Name'
    assert lines[4][0] == 'Salt, fina'
