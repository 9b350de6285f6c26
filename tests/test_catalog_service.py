import pytest

from biz_manager.models import StockStatus
from biz_manager.repositories import CustomerRepository, StorageError
from biz_manager.services import CatalogService
from biz_manager.services.record_store import CUSTOMERS, EXPENSES, PRODUCTS, RAW_MATERIALS
from biz_manager.services.stats_service import item_stock_status


@pytest.fixture
def catalog(store):
    return CatalogService(store)


def test_create_customer(catalog, store):
    result = catalog.create(CUSTOMERS, {
        'name': 'Surat Foods', 'email': 'surat@example.com',
        'phone': '9876500000', 'address': 'Ring Road, Surat',
    })
    assert result['ok']
    assert result['record']['id']
    assert store.get(CUSTOMERS)[-1]['name'] == 'Surat Foods'


def test_missing_required_field_writes_nothing(catalog, store):
    result = catalog.create(CUSTOMERS, {'name': 'Sin email', 'phone': '1', 'address': 'x'})
    assert not result['ok']
    assert 'email' in result['error']
    assert len(store.get(CUSTOMERS)) == 4


def test_negative_price_rejected(catalog):
    result = catalog.create(PRODUCTS, {'name': 'Roto', 'price': -1, 'cost': 0})
    assert not result['ok']


def test_duplicate_id_rejected(catalog):
    result = catalog.create(RAW_MATERIALS, {'id': '1', 'name': 'Otra harina'})
    assert not result['ok']


def test_create_expense_sets_creator_and_prepends(catalog, store):
    first = catalog.create(EXPENSES, {'category': 'Rent', 'description': 'Alquiler',
                                      'amount': 5000, 'date': '2024-03-01'}, created_by='admin')
    second = catalog.create(EXPENSES, {'category': 'Delivery', 'description': 'Envío',
                                       'amount': 200, 'date': '2024-03-02'}, created_by='admin')
    assert first['ok'] and second['ok']
    assert first['record']['createdBy'] == 'admin'
    assert [e['description'] for e in store.get(EXPENSES)] == ['Envío', 'Alquiler']


def test_expense_category_must_be_known(catalog):
    result = catalog.create(EXPENSES, {'category': 'Vacations', 'description': 'x',
                                       'amount': 1, 'date': '2024-03-01'})
    assert not result['ok']


def test_update_and_delete(catalog, store):
    product = dict(store.get_by_id(PRODUCTS, '2'), stock=42)
    assert catalog.update(PRODUCTS, '2', product)['ok']
    assert store.get_by_id(PRODUCTS, '2')['stock'] == 42

    assert not catalog.update(PRODUCTS, '404', dict(product))['ok']
    assert catalog.delete(PRODUCTS, '2')['ok']
    assert not catalog.delete(PRODUCTS, '2')['ok']


def test_orders_are_not_a_catalog(catalog):
    with pytest.raises(KeyError):
        catalog.list('orders')


def test_form_numbers_are_coerced(catalog, store):
    result = catalog.create(PRODUCTS, {'name': 'X', 'price': '10', 'cost': '5',
                                       'stock': '3', 'lowStockThreshold': '5'})
    assert result['ok'], result.get('error')
    saved = store.get_by_id(PRODUCTS, result['record']['id'])
    assert (saved['price'], saved['cost'], saved['stock'], saved['lowStockThreshold']) == (10, 5, 3, 5)
    assert item_stock_status(saved) == StockStatus.LOW

    result = catalog.create(RAW_MATERIALS, {'name': 'Sal', 'quantity': '2.5', 'costPerUnit': ''})
    assert result['ok'], result.get('error')
    assert result['record']['quantity'] == 2.5
    assert result['record']['costPerUnit'] == 0


@pytest.mark.parametrize('collection, data', [
    (PRODUCTS, {'name': 'X', 'price': 10, 'cost': 5, 'stock': 'muchos'}),
    (PRODUCTS, {'name': 'X', 'price': 'diez', 'cost': 5}),
    (PRODUCTS, {'name': 'X', 'price': 10, 'cost': 5, 'lowStockThreshold': [5]}),
    (RAW_MATERIALS, {'name': 'Sal', 'quantity': 'un saco'}),
    (EXPENSES, {'category': 'Rent', 'description': 'x', 'amount': 'mil', 'date': '2024-03-01'}),
])
def test_non_numeric_fields_rejected(catalog, store, collection, data):
    before = store.get(collection)
    result = catalog.create(collection, data)
    assert not result['ok']
    assert 'numérico' in result['error']
    assert store.get(collection) == before


def test_update_and_delete_flag_storage_errors(catalog, store, monkeypatch):
    def failing_write(self, data):
        raise StorageError('disco lleno')

    monkeypatch.setattr(CustomerRepository, '_write_raw', failing_write)
    customer = dict(store.get_by_id(CUSTOMERS, '1'), name='Otro')

    result = catalog.update(CUSTOMERS, '1', customer)
    assert not result['ok']
    assert result['storage_error']

    result = catalog.delete(CUSTOMERS, '1')
    assert not result['ok']
    assert result['storage_error']

    # No encontrado no es fallo de almacenamiento
    assert not catalog.delete(CUSTOMERS, '404').get('storage_error')
    assert store.get_by_id(CUSTOMERS, '1')['name'] == 'Rajesh Patel'
