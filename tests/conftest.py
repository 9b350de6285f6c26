import os
import sys

import pytest

# ensure project root is on sys.path when running from tests/ folder
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from biz_manager.app_container import AppContainer
from biz_manager.config import Settings
from biz_manager.main import create_app
from biz_manager.services import RecordStore


@pytest.fixture
def settings(tmp_path):
    return Settings(data_dir=str(tmp_path), secret_key='test-secret')


@pytest.fixture
def store(tmp_path):
    return RecordStore.from_path(str(tmp_path))


@pytest.fixture
def container(settings):
    return AppContainer(settings)


@pytest.fixture
def app(settings):
    app = create_app(settings)
    app.config['TESTING'] = True
    return app


@pytest.fixture
def client(app):
    with app.test_client() as c:
        yield c


def make_order(order_id, total, created_at, customer_id='1', status='pending',
               payment_method='cash', items=None):
    """Pedido crudo (como se guarda en JSON) para tests de métricas."""
    if items is None:
        items = [{'productId': '1', 'productName': 'Plain Khakhra',
                  'quantity': 1, 'price': total, 'cost': 0}]
    return {
        'id': order_id,
        'customerId': customer_id,
        'customerName': f'Cliente {customer_id}',
        'items': items,
        'subtotal': total,
        'gstAmount': 0,
        'gstRate': 0,
        'total': total,
        'status': status,
        'paymentMethod': payment_method,
        'paymentStatus': 'pending',
        'createdAt': created_at,
        'updatedAt': created_at,
    }


def make_expense(expense_id, amount, date, category='Other'):
    return {
        'id': expense_id,
        'category': category,
        'description': f'Gasto {expense_id}',
        'amount': amount,
        'date': date,
        'createdBy': 'admin',
    }
