from biz_manager.repositories import CustomerRepository, StorageError


def login(client, username='admin', role='admin'):
    r = client.post('/api/session', json={'username': username, 'role': role})
    assert r.status_code == 200
    return r.get_json()


def test_login_returns_sections(client):
    data = login(client, 'staff', 'staff')
    assert data['user']['name'] == 'Staff Member'
    assert data['sections'] == ['orders', 'inventory', 'customers']


def test_blank_username_is_bad_request(client):
    r = client.post('/api/session', json={'username': ' ', 'role': 'admin'})
    assert r.status_code == 400
    assert r.get_json()['ok'] is False


def test_session_restore_and_logout(client):
    assert client.get('/api/session').get_json()['user'] is None
    login(client, 'accountant', 'accountant')
    assert client.get('/api/session').get_json()['user']['role'] == 'accountant'

    assert client.delete('/api/session').status_code == 200
    assert client.get('/api/session').get_json()['user'] is None
    assert client.get('/api/orders').status_code == 401


def test_requires_login(client):
    assert client.get('/api/products').status_code == 401


def test_role_limits_sections(client):
    login(client, 'staff', 'staff')
    assert client.get('/api/products').status_code == 200
    assert client.get('/api/reports/profit-loss').status_code == 403
    assert client.get('/api/expenses').status_code == 403
    assert client.get('/api/export/profit-loss.csv').status_code == 403


def test_unknown_collection_is_not_found(client):
    login(client)
    r = client.get('/api/invoices')
    assert r.status_code == 404
    assert r.get_json()['ok'] is False


def test_collections_crud(client):
    login(client)
    assert len(client.get('/api/customers').get_json()) == 4

    r = client.post('/api/customers', json={'name': 'Nuevo', 'email': 'n@example.com',
                                             'phone': '1', 'address': 'Calle 1'})
    assert r.status_code == 201
    new_id = r.get_json()['record']['id']

    r = client.put(f'/api/customers/{new_id}', json={'name': 'Renombrado', 'email': 'n@example.com',
                                                      'phone': '1', 'address': 'Calle 1'})
    assert r.status_code == 200
    assert r.get_json()['record']['name'] == 'Renombrado'

    assert client.post('/api/customers', json={'name': 'Incompleto'}).status_code == 400
    assert client.put('/api/customers/404', json={'name': 'x'}).status_code == 404
    assert client.delete(f'/api/customers/{new_id}').status_code == 200
    assert client.delete(f'/api/customers/{new_id}').status_code == 404


def test_order_flow_and_reports(client):
    login(client)
    r = client.post('/api/orders', json={
        'customerId': '1',
        'items': [{'productId': '1', 'quantity': 2, 'price': 100}],
        'paymentMethod': 'upi',
    })
    assert r.status_code == 201
    order = r.get_json()['order']
    assert order['total'] == 236

    products = {p['id']: p for p in client.get('/api/products').get_json()}
    assert products['1']['stock'] == 498

    report = client.get('/api/reports/profit-loss?period=month').get_json()
    assert report['report']['summary']['revenue'] == 236
    assert report['display']['revenue'] == '₹236.00'

    analytics = client.get('/api/analytics?days=7').get_json()['analytics']
    assert len(analytics['trend']) == 7
    assert analytics['paymentMethods'] == [{'key': 'UPI', 'name': 'UPI', 'value': 1}]

    r = client.post(f"/api/orders/{order['id']}/status", json={'status': 'cancelled'})
    assert r.status_code == 200
    report = client.get('/api/reports/profit-loss?period=month').get_json()
    assert report['report']['summary']['revenue'] == 0


def test_order_validation_and_payment(client):
    login(client)
    assert client.post('/api/orders', json={'customerId': '1', 'items': []}).status_code == 400

    order = client.post('/api/orders', json={
        'customerId': '2', 'items': [{'productId': '3', 'quantity': 1}],
    }).get_json()['order']
    r = client.post(f"/api/orders/{order['id']}/status", json={'paymentStatus': 'paid'})
    assert r.status_code == 200
    assert r.get_json()['order']['paymentStatus'] == 'paid'

    assert client.post('/api/orders/404/status', json={'status': 'shipped'}).status_code == 400
    assert client.post(f"/api/orders/{order['id']}/status", json={}).status_code == 400


def test_stock_status_and_expense_summary(client):
    login(client)
    stock = client.get('/api/stock-status').get_json()
    assert stock['summary']['productCount'] == 8

    client.post('/api/expenses', json={'category': 'Rent', 'description': 'Alquiler',
                                       'amount': 1000, 'date': '2024-03-01'})
    summary = client.get('/api/expenses/summary').get_json()
    assert summary['total'] == 1000
    assert {'category': 'Rent', 'total': 1000} in summary['byCategory']
    assert client.get('/api/expenses').get_json()[0]['createdBy'] == 'admin'


def test_csv_export(client):
    login(client)
    r = client.get('/api/export/inventory.csv')
    assert r.status_code == 200
    assert r.mimetype == 'text/csv'
    assert 'attachment;filename=inventory.csv' in r.headers['Content-Disposition']
    text = r.get_data(as_text=True)
    assert text.startswith('Product Name')
    assert 'Material Name' in text

    assert client.get('/api/export/profit-loss.csv?period=today').status_code == 200
    assert client.get('/api/export/unknown.csv').status_code == 404


def test_storage_failure_is_server_error(client, monkeypatch):
    login(client)

    def failing_write(self, data):
        raise StorageError('disco lleno')

    monkeypatch.setattr(CustomerRepository, '_write_raw', failing_write)
    customer = {'name': 'Renombrado', 'email': 'r@example.com', 'phone': '1', 'address': 'Calle 1'}

    r = client.put('/api/customers/1', json=customer)
    assert r.status_code == 500
    assert r.get_json()['ok'] is False
    assert client.delete('/api/customers/1').status_code == 500
    assert client.post('/api/customers', json=customer).status_code == 500

    assert client.put('/api/customers/404', json=customer).status_code == 404
    assert client.delete('/api/customers/404').status_code == 404


def test_form_strings_and_bad_numbers(client):
    login(client)
    r = client.post('/api/products', json={'name': 'X', 'price': '10', 'cost': '5',
                                            'stock': '3', 'lowStockThreshold': '5'})
    assert r.status_code == 201
    assert r.get_json()['record']['stock'] == 3

    low = client.get('/api/stock-status').get_json()['lowStockProducts']
    assert r.get_json()['record']['id'] in [p['id'] for p in low]

    r = client.post('/api/products', json={'name': 'Y', 'price': 'caro', 'cost': 5})
    assert r.status_code == 400
    assert 'price' in r.get_json()['error']


def test_reset_requires_admin(client):
    assert client.post('/api/reset').status_code == 401

    login(client, 'staff', 'staff')
    assert client.post('/api/reset').status_code == 403

    login(client)
    assert client.delete('/api/products/1').status_code == 200
    assert len(client.get('/api/products').get_json()) == 7

    r = client.post('/api/reset')
    assert r.status_code == 200
    assert r.get_json()['ok'] is True
    assert len(client.get('/api/products').get_json()) == 8
