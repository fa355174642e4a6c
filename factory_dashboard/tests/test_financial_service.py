import csv
import io

import pytest

from factory_dashboard.models.entities import Product, Transaction
from factory_dashboard.repositories.api_client import ApiError, UnauthorizedError
from factory_dashboard.services.financial_service import FinancialService
from factory_dashboard.services.validation import PartialUpdateError, ValidationError


def order_form(**overrides):
    form = {
        'orderType': 'purchase',
        'purchaseOrder': 'PO-77',
        'productId': 'RM-1',
        'quantity': '10',
        'unitPrice': '3',
        'supplier': 'Mills Co',
    }
    form.update(overrides)
    return form


@pytest.fixture
def stocked(fake_api):
    fake_api.seed('/warehouse', {'_id': 'w1', 'name': 'Main', 'capacity': 500, 'currentStock': 5})
    fake_api.seed('/inventory', {'_id': 'p1', 'productId': 'RM-1', 'name': 'Flour', 'quantity': 20,
                                 'price': 3.0, 'supplier': 'Mills Co', 'warehouseId': 'w1'})
    return fake_api


def test_summary_excludes_pending():
    transactions = [
        Transaction(type='income', amount=500, status='completed'),
        Transaction(type='expense', amount=120, status='completed'),
        Transaction(type='expense', amount=999, status='pending'),
        Transaction(type='income', amount=300, status='pending', dispatch_type='dispatch'),
        Transaction(type='income', amount=50),
    ]
    summary = FinancialService.summarize(transactions)
    assert summary.total_income == 550
    assert summary.total_expenses == 120
    assert summary.net_profit == 430
    assert len(summary.pending_orders) == 2
    assert len(summary.dispatch_orders) == 1


def test_purchase_order_adds_stock(stocked, container):
    transaction = container.financial_service.complete_order(order_form())

    product = stocked.collections['/inventory'][0]
    warehouse = stocked.collections['/warehouse'][0]
    assert product['quantity'] == 30
    assert warehouse['currentStock'] == 15
    assert transaction['type'] == 'expense'
    assert transaction['category'] == 'Purchase Order'
    assert transaction['amount'] == 30.0
    assert transaction['status'] == 'completed'
    assert 'PO: PO-77' in transaction['description']
    assert stocked.collections['/financial'][0]['purchaseOrder'] == 'PO-77'


def test_sale_removes_stock_and_clamps_warehouse(stocked, container):
    transaction = container.financial_service.complete_order(order_form(orderType='sale', quantity='15'))

    assert stocked.collections['/inventory'][0]['quantity'] == 5
    assert stocked.collections['/warehouse'][0]['currentStock'] == 0
    assert transaction['type'] == 'income'
    assert transaction['category'] == 'Sales Order'


def test_completing_pending_order_deletes_it(stocked, container):
    stocked.seed('/financial', {'_id': 'pend1', 'type': 'expense', 'status': 'pending', 'productId': 'RM-1'})

    container.financial_service.complete_order(order_form(), pending_id='pend1')

    remaining = stocked.collections['/financial']
    assert [t.get('_id') for t in remaining if t.get('status') == 'pending'] == []
    assert len(remaining) == 1


@pytest.mark.parametrize('overrides, message', [
    ({'purchaseOrder': ''}, 'Purchase Order number is required!'),
    ({'productId': 'RM-404'}, 'Product not found!'),
    ({'orderType': 'sale', 'quantity': '21'}, 'Insufficient inventory for this sale'),
])
def test_order_validation_writes_nothing(stocked, container, overrides, message):
    with pytest.raises(ValidationError) as exc:
        container.financial_service.complete_order(order_form(**overrides))
    assert str(exc.value) == message
    assert stocked.calls_for('PUT') == []
    assert stocked.calls_for('POST') == []


def test_order_partial_failure_reports_completed_steps(stocked, container):
    stocked.responses[('POST', '/financial')] = ApiError('ledger offline', 503)

    with pytest.raises(PartialUpdateError) as exc:
        container.financial_service.complete_order(order_form())

    # el inventario NO se revierte
    assert stocked.collections['/inventory'][0]['quantity'] == 30
    assert exc.value.completed == ['inventory quantity set to 30', 'warehouse stock set to 15']
    assert 'ledger offline' in str(exc.value)


def test_order_401_is_not_reported_as_partial(stocked, container):
    stocked.responses[('POST', '/financial')] = UnauthorizedError('expired', 401)

    with pytest.raises(UnauthorizedError):
        container.financial_service.complete_order(order_form())

    assert stocked.collections['/inventory'][0]['quantity'] == 30


def test_pending_order_prefill():
    pending = Transaction(id='t1', product_id='RM-1', status='pending')
    products = [Product(product_id='RM-1', price=3.5, supplier='Mills Co')]
    prefill = FinancialService.pending_order_prefill(pending, products)
    assert prefill == {
        'productId': 'RM-1', 'quantity': '1', 'unitPrice': '3.5', 'purchaseOrder': '',
        'orderType': 'purchase', 'supplier': 'Mills Co', 'pendingId': 't1',
    }


def test_dispatch_and_payment_return_invoice(fake_api, container):
    fake_api.responses[('POST', '/financial/dispatch')] = {'transaction': {'invoiceNumber': 'INV-0001'}}
    fake_api.responses[('POST', '/financial/payment')] = {'payment': {'invoiceNumber': 'PAY-0001'}}
    svc = container.financial_service

    invoice = svc.create_dispatch({'productId': 'FP-1', 'quantity': '2', 'supplier': 'North', 'unitPrice': '9'})
    paid = svc.process_payment({'dispatchId': 'd1', 'paymentAmount': '18'})

    assert invoice == 'INV-0001'
    assert paid == 'PAY-0001'
    assert fake_api.calls_for('POST', '/financial/dispatch')[0][2]['distributor'] == 'North'
    assert fake_api.calls_for('POST', '/financial/payment')[0][2] == {'dispatchId': 'd1', 'paymentAmount': 18.0}


def test_transaction_requires_valid_type(container):
    with pytest.raises(ValidationError):
        container.financial_service.save_transaction({'type': 'refund', 'category': 'x', 'amount': '1'})


@pytest.mark.parametrize('amount', ['nan', 'inf', '-inf'])
def test_transaction_rejects_non_finite_amount(fake_api, container, amount):
    with pytest.raises(ValidationError, match='Amount must be a number'):
        container.financial_service.save_transaction({'type': 'income', 'category': 'Sales', 'amount': amount})
    assert fake_api.calls_for('POST') == []


def test_edit_transaction_keeps_unknown_fields(fake_api, container):
    fake_api.seed('/financial', {'_id': 't1', 'type': 'income', 'category': 'Sales', 'amount': 10,
                                 'invoiceNumber': 'INV-9'})
    existing = container.financial_service.list_transactions()[0]

    container.financial_service.save_transaction({'type': 'expense', 'category': 'Repairs', 'amount': '40'}, existing)

    saved = fake_api.collections['/financial'][0]
    assert saved['type'] == 'expense'
    assert saved['amount'] == 40.0
    assert saved['invoiceNumber'] == 'INV-9'


def test_ledger_filters_defaults():
    filters = FinancialService.ledger_filters({'period': 'decade'})
    assert filters['period'] == 'month'
    assert filters['entity'] == ''
    assert len(filters['date']) == 10


def test_ledger_passes_filters(fake_api, container):
    fake_api.responses[('GET', '/financial/ledger')] = [{'_id': 'a', 'type': 'income', 'amount': 5}]
    entries = container.financial_service.ledger({'entity': 'North', 'period': 'week', 'date': '2024-03-01'})
    assert entries[0].amount == 5
    assert fake_api.calls_for('GET', '/financial/ledger')[0][2] == {
        'entity': 'North', 'period': 'week', 'date': '2024-03-01'}


def test_ledger_csv_signs_amounts():
    entries = [
        Transaction(type='income', category='Sales', description='Bread', amount=100,
                    date='2024-03-01T10:00:00', invoice_number='INV-1'),
        Transaction(type='expense', category='Repairs', description='Oven', amount=40.5,
                    date='2024-03-02T09:00:00'),
    ]
    rows = list(csv.reader(io.StringIO(FinancialService.ledger_csv(entries))))
    assert rows[0] == ['Date', 'Type', 'Category', 'Description', 'Amount', 'Invoice']
    assert rows[1] == ['2024-03-01', 'income', 'Sales', 'Bread', '100.00', 'INV-1']
    assert rows[2] == ['2024-03-02', 'expense', 'Repairs', 'Oven', '-40.50', '']


def test_payroll(fake_api, container):
    fake_api.responses[('GET', '/financial/payroll-status')] = {'isPending': 1}
    fake_api.responses[('POST', '/financial/process-payroll')] = {'message': 'ok'}

    assert container.financial_service.payroll_status() == {'isPending': True, 'isProcessed': False}
    container.financial_service.process_payroll()
    assert fake_api.calls_for('POST', '/financial/process-payroll')


def test_daily_report_fills_missing_sections(fake_api, container):
    fake_api.responses[('GET', '/financial/daily-report')] = {
        'financial': {'payrollTransactions': [{'amount': 1000}, {'amount': 500}]},
        'inventory': {'rawMaterials': [{'totalValue': 10, 'discountedValue': 8}]},
    }
    report = container.financial_service.daily_report()

    assert report['summary'] == {'netProfit': 0, 'topProducts': []}
    assert report['financial']['payrollTotal'] == 1500
    assert report['financial']['salesTransactions'] == []
    assert report['inventory']['rawMaterialsTotal'] == 10
    assert report['inventory']['rawMaterialsDiscounted'] == 8
    assert report['inventory']['finishedTotal'] == 0
    assert report['inventory']['batchSummary']['totalBatches'] == 0
