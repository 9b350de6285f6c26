import pytest

from biz_manager.models import OrderStatus, PaymentStatus, ValidationError
from biz_manager.repositories import OrderRepository, StorageError
from biz_manager.services import OrderService, StatsService
from biz_manager.services.order_service import new_record_id
from biz_manager.services.record_store import ORDERS, PRODUCTS


@pytest.fixture
def orders(store):
    return OrderService(store)


def test_create_order_computes_totals_and_snapshots(orders, store):
    result = orders.create_order('1', [{'productId': '1', 'quantity': 2, 'price': 100}],
                                 now='2024-03-10T10:00:00')
    assert result['ok'], result.get('error')
    order = result['order']
    assert order['subtotal'] == 200
    assert order['gstAmount'] == 36
    assert order['total'] == 236
    assert order['customerName'] == 'Rajesh Patel'
    assert order['customerGst'] == '24AAAAA0000A1Z5'
    assert order['items'][0]['cost'] == 60
    assert order['items'][0]['productName'] == 'Plain Khakhra'
    assert order['createdAt'] == '2024-03-10T10:00:00'

    assert store.get(ORDERS)[0]['id'] == order['id']
    assert store.get_by_id(PRODUCTS, '1')['stock'] == 498


def test_price_defaults_to_current_product_price(orders):
    result = orders.create_order('2', [{'productId': '6', 'quantity': 1}], gst_rate=0)
    assert result['order']['items'][0]['price'] == 180
    assert result['order']['total'] == 180
    assert 'customerGst' not in result['order']


@pytest.mark.parametrize('customer_id, lines', [
    (None, [{'productId': '1', 'quantity': 1}]),
    ('404', [{'productId': '1', 'quantity': 1}]),
    ('1', []),
    ('1', [{'productId': '404', 'quantity': 1}]),
    ('1', [{'productId': '1', 'quantity': 0}]),
    ('1', [{'productId': '1', 'quantity': 'dos'}]),
])
def test_invalid_orders_are_rejected(orders, store, customer_id, lines):
    result = orders.create_order(customer_id, lines)
    assert not result['ok']
    assert result['error']
    assert store.get(ORDERS) == []
    assert store.get_by_id(PRODUCTS, '1')['stock'] == 500


def test_build_order_rejects_unknown_status(orders):
    with pytest.raises(ValidationError):
        orders.build_order('1', [{'productId': '1', 'quantity': 1}], status='lost')


def test_cancelled_order_leaves_profit_and_loss(orders, store):
    created = orders.create_order('1', [{'productId': '1', 'quantity': 1, 'price': 100}], gst_rate=0)
    order_id = created['order']['id']
    stats = StatsService(store)
    assert stats.profit_loss_report('custom', '2000-01-01', '2100-01-01').summary.revenue == 100

    result = orders.update_status(order_id, 'cancelled')
    assert result['ok']
    assert orders.get_order(order_id).status == OrderStatus.CANCELLED
    assert stats.profit_loss_report('custom', '2000-01-01', '2100-01-01').summary.revenue == 0


def test_update_status_errors(orders):
    assert not orders.update_status('nope', 'shipped')['ok']
    assert not orders.update_status('nope', 'teleported')['ok']


def test_mark_paid(orders):
    order_id = orders.create_order('1', [{'productId': '1', 'quantity': 1}])['order']['id']
    assert orders.mark_paid(order_id)['ok']
    assert orders.get_order(order_id).payment_status == PaymentStatus.PAID


def test_update_order_recomputes_totals_without_touching_stock(orders, store):
    order_id = orders.create_order('1', [{'productId': '1', 'quantity': 1, 'price': 100}])['order']['id']
    order = orders.get_order(order_id)
    order.items[0].quantity = 3

    result = orders.update_order(order)
    assert result['ok']
    assert result['order']['subtotal'] == 300
    assert result['order']['total'] == 354
    assert store.get_by_id(PRODUCTS, '1')['stock'] == 499


def test_delete_order(orders, store):
    order_id = orders.create_order('1', [{'productId': '1', 'quantity': 1}])['order']['id']
    assert orders.delete_order(order_id)['ok']
    assert store.get(ORDERS) == []
    assert not orders.delete_order(order_id)['ok']


def test_new_record_id_avoids_collisions():
    first = new_record_id()
    assert first.isdigit()
    assert new_record_id([first]) != first


def test_non_numeric_item_quantity_rejected_on_edit(orders):
    order_id = orders.create_order('1', [{'productId': '1', 'quantity': '2'}])['order']['id']
    order = orders.get_order(order_id)
    assert order.items[0].quantity == 2

    order.items[0].quantity = 'tres'
    result = orders.update_order(order)
    assert not result['ok']
    assert orders.get_order(order_id).items[0].quantity == 2


def test_storage_errors_are_flagged(orders, monkeypatch):
    order_id = orders.create_order('1', [{'productId': '1', 'quantity': 1}])['order']['id']

    def failing_write(self, data):
        raise StorageError('disco lleno')

    monkeypatch.setattr(OrderRepository, '_write_raw', failing_write)
    for result in (orders.update_status(order_id, 'shipped'),
                   orders.mark_paid(order_id),
                   orders.update_order(orders.get_order(order_id)),
                   orders.delete_order(order_id)):
        assert not result['ok']
        assert result['storage_error']

    assert not orders.delete_order('nope').get('storage_error')
    assert orders.get_order(order_id).status == OrderStatus.PENDING
