import pytest

from factory_dashboard.repositories.api_client import ApiError, UnauthorizedError


PAGES = ['/', '/login', '/inventory', '/inventory?tab=production', '/inventory?tab=distribute',
         '/financial', '/financial/ledger', '/financial/daily-report', '/hr', '/quality',
         '/warehouse', '/maintenance', '/maintenance-mode']


@pytest.mark.parametrize('path', PAGES)
def test_pages_render_with_empty_backend(client, path):
    r = client.get(path)
    assert r.status_code == 200
    assert r.headers['X-Frame-Options'] == 'DENY'
    assert r.headers['X-Content-Type-Options'] == 'nosniff'


def test_pages_render_with_data(client, fake_api):
    fake_api.seed('/warehouse', {'_id': 'w1', 'name': 'Main Store', 'capacity': 100, 'currentStock': 40})
    fake_api.seed('/inventory', {'_id': 'p1', 'productId': 'RM-ABCDEFGH1', 'name': 'Flour', 'batchQuantity': 5,
                                 'batchPrice': 2.0, 'batchDiscount': 20, 'minStock': 10, 'isRawMaterial': True,
                                 'warehouseId': 'w1'})
    fake_api.seed('/financial',
                  {'_id': 't1', 'type': 'expense', 'category': 'Pending Order', 'amount': 10, 'status': 'pending',
                   'productId': 'RM-ABCDEFGH1', 'date': '2024-03-01T10:00:00Z'},
                  {'_id': 't2', 'type': 'income', 'category': 'Dispatch', 'amount': 99, 'status': 'pending',
                   'dispatchType': 'dispatch', 'invoiceNumber': 'INV-0042'})
    fake_api.seed('/hr/employees', {'_id': 'e1', 'name': 'Ali Raza', 'salary': 1000})
    fake_api.seed('/quality', {'_id': 'q1', 'productId': 'RM-ABCDEFGH1', 'productName': 'Flour',
                               'totalQuantity': 10, 'goodQuantity': 9, 'defectiveQuantity': 1})
    fake_api.seed('/maintenance', {'_id': 'mx', 'equipmentName': 'Oven 3', 'nextMaintenance': '2000-01-01'})

    inventory = client.get('/inventory').get_data(as_text=True)
    assert 'RM-ABCDEFGH1' in inventory
    assert 'Main Store' in inventory
    assert 'Low stock' in inventory

    assert 'Flour' in client.get('/inventory?edit=p1').get_data(as_text=True)

    financial = client.get('/financial?complete=t1').get_data(as_text=True)
    assert 'Complete Pending Order' in financial
    assert 'INV-0042' in financial
    assert 'Record Payment' in client.get('/financial?pay=t2').get_data(as_text=True)

    assert 'Ali Raza' in client.get('/hr').get_data(as_text=True)
    assert '90.0%' in client.get('/quality').get_data(as_text=True)
    assert 'Main Store' in client.get('/warehouse').get_data(as_text=True)
    assert 'overdue' in client.get('/maintenance').get_data(as_text=True)


def test_add_product_posts_once_and_reloads(client, fake_api, csrf_token):
    token = csrf_token('/inventory')
    r = client.post('/inventory/products', data={
        'csrf_token': token, 'tab': 'raw', 'name': 'Sugar', 'category': 'Baking',
        'batchQuantity': '40', 'batchPrice': '1.5',
    }, follow_redirects=True)

    assert r.status_code == 200
    html = r.get_data(as_text=True)
    assert 'added.' in html
    assert 'Sugar' in html
    assert len(fake_api.calls_for('POST', '/inventory')) == 1
    assert fake_api.collections['/financial'][0]['status'] == 'pending'


def test_validation_error_is_flashed(client, fake_api, csrf_token):
    token = csrf_token('/inventory')
    r = client.post('/inventory/products', data={'csrf_token': token, 'name': 'Sugar'}, follow_redirects=True)
    assert 'Batch quantity must be a whole number' in r.get_data(as_text=True)
    assert fake_api.calls_for('POST') == []


@pytest.mark.parametrize('quantity', ['inf', 'nan'])
def test_non_finite_quantity_is_flashed(client, fake_api, csrf_token, quantity):
    token = csrf_token('/inventory')
    r = client.post('/inventory/products', data={
        'csrf_token': token, 'tab': 'raw', 'name': 'Sugar', 'category': 'Baking',
        'batchQuantity': quantity, 'batchPrice': '1.5',
    }, follow_redirects=True)

    assert r.status_code == 200
    assert 'Batch quantity must be a whole number' in r.get_data(as_text=True)
    assert fake_api.calls_for('POST') == []


def test_post_without_csrf_is_rejected(client, fake_api):
    client.get('/inventory')
    r = client.post('/inventory/products', data={'name': 'Sugar', 'category': 'Baking',
                                                 'batchQuantity': '1', 'batchPrice': '1'})
    assert r.status_code == 302
    assert fake_api.calls_for('POST') == []


def test_backend_error_is_flashed(client, fake_api, csrf_token):
    fake_api.seed('/inventory', {'_id': 'p1', 'productId': 'FP-1'})
    fake_api.responses[('DELETE', '/inventory/p1')] = ApiError('Product is referenced by an order', 409)
    token = csrf_token('/inventory')

    r = client.post('/inventory/products/p1/delete', data={'csrf_token': token}, follow_redirects=True)

    assert 'Product is referenced by an order' in r.get_data(as_text=True)
    assert len(fake_api.collections['/inventory']) == 1


def test_partial_order_is_reported(client, fake_api, csrf_token):
    fake_api.seed('/inventory', {'_id': 'p1', 'productId': 'RM-1', 'name': 'Flour', 'quantity': 5})
    fake_api.responses[('POST', '/financial')] = ApiError('ledger offline', 503)
    token = csrf_token('/financial')

    r = client.post('/financial/orders', data={
        'csrf_token': token, 'orderType': 'purchase', 'purchaseOrder': 'PO-1',
        'productId': 'RM-1', 'quantity': '2', 'unitPrice': '4',
    }, follow_redirects=True)

    html = r.get_data(as_text=True)
    assert 'partially saved' in html
    assert 'inventory quantity set to 7' in html


def test_ledger_csv_export(client, fake_api):
    fake_api.responses[('GET', '/financial/ledger')] = [
        {'_id': 'a', 'type': 'income', 'category': 'Sales', 'description': 'Bread', 'amount': 12,
         'date': '2024-03-01T10:00:00', 'invoiceNumber': 'INV-7'},
    ]
    r = client.get('/financial/ledger/export?period=week&date=2024-03-01&entity=North')

    assert r.status_code == 200
    assert r.mimetype == 'text/csv'
    assert 'ledger_week_2024-03-01.csv' in r.headers['Content-Disposition']
    text = r.get_data(as_text=True)
    assert 'INV-7' in text
    assert '12.00' in text
    assert fake_api.calls_for('GET', '/financial/ledger')[0][2]['entity'] == 'North'


def test_login_stores_token_and_401_clears_it(client, fake_api, csrf_token):
    token = csrf_token('/login')
    r = client.post('/login', data={'csrf_token': token, 'token': 'jwt-abc'})
    assert r.status_code == 302
    with client.session_transaction() as sess:
        assert sess['api_token'] == 'jwt-abc'

    fake_api.responses[('GET', '/inventory')] = UnauthorizedError('Your session has expired. Please sign in again.', 401)
    r = client.get('/inventory')
    assert r.status_code == 302
    assert r.headers['Location'].endswith('/login')
    with client.session_transaction() as sess:
        assert 'api_token' not in sess


def test_401_during_order_sends_to_login(client, fake_api, csrf_token):
    fake_api.seed('/inventory', {'_id': 'p1', 'productId': 'RM-1', 'name': 'Flour', 'quantity': 10})
    fake_api.responses[('POST', '/financial')] = UnauthorizedError('expired', 401)
    token = csrf_token('/financial')
    with client.session_transaction() as sess:
        sess['api_token'] = 'abc'

    r = client.post('/financial/orders', data={
        'csrf_token': token, 'orderType': 'purchase', 'purchaseOrder': 'PO-1',
        'productId': 'RM-1', 'quantity': '2', 'unitPrice': '4',
    })

    assert r.status_code == 302
    assert r.headers['Location'].endswith('/login')
    with client.session_transaction() as sess:
        assert 'api_token' not in sess


def test_401_after_product_created_sends_to_login(client, fake_api, csrf_token):
    fake_api.responses[('POST', '/financial')] = UnauthorizedError('expired', 401)
    token = csrf_token('/inventory')
    with client.session_transaction() as sess:
        sess['api_token'] = 'abc'

    r = client.post('/inventory/products', data={
        'csrf_token': token, 'tab': 'raw', 'name': 'Sugar', 'category': 'Baking',
        'batchQuantity': '40', 'batchPrice': '1.5',
    })

    assert r.status_code == 302
    assert r.headers['Location'].endswith('/login')
    assert len(fake_api.collections['/inventory']) == 1
    with client.session_transaction() as sess:
        assert 'api_token' not in sess


def test_api_stats_json(client, fake_api):
    fake_api.responses[('GET', '/dashboard/stats')] = {'quality': {'goodProducts': 3, 'badProducts': 1}}
    data = client.get('/api/dashboard/stats').get_json()
    assert data['ok'] is True
    assert data['qualityRate'] == 75.0
    assert data['stats']['inventory'] == {'total': 0, 'lowStock': 0}


def test_api_stats_backend_down(client, fake_api):
    fake_api.responses[('GET', '/dashboard/stats')] = ApiError('Could not reach the server', None)
    r = client.get('/api/dashboard/stats')
    assert r.status_code == 502
    assert r.get_json()['ok'] is False


def test_api_stats_unauthorized_is_json(client, fake_api):
    fake_api.responses[('GET', '/dashboard/stats')] = UnauthorizedError('expired', 401)
    r = client.get('/api/dashboard/stats')
    assert r.status_code == 401
    assert r.get_json() == {'ok': False, 'error': 'expired'}
    with client.session_transaction() as sess:
        assert '_flashes' not in sess


def test_maintenance_mode_activate(client, fake_api, csrf_token):
    fake_api.responses[('POST', '/maintenance-mode/activate')] = {'emailNotification': 'sent',
                                                                  'reminderScheduled': True}
    token = csrf_token('/maintenance-mode')
    r = client.post('/maintenance-mode/activate', data={'csrf_token': token, 'reason': 'Server move'},
                    follow_redirects=True)
    html = r.get_data(as_text=True)
    assert 'Maintenance mode activated successfully!' in html
    assert 'Reminder scheduled: Yes' in html


def test_logs_are_not_served(client):
    assert client.get('/logs/performance.log').status_code == 404
