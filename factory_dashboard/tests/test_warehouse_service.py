import pytest

from factory_dashboard.models.entities import Product, QualityRecord, Warehouse
from factory_dashboard.services.validation import ValidationError
from factory_dashboard.services.warehouse_service import WarehouseService


def warehouse_form(**overrides):
    form = {'name': 'North', 'location': 'Lahore', 'capacity': '1000', 'currentStock': '250',
            'type': 'distribution', 'status': 'active'}
    form.update(overrides)
    return form


def test_create_and_update(fake_api, container):
    svc = container.warehouse_service
    svc.save_warehouse(warehouse_form())
    existing = svc.list_warehouses()[0]
    assert existing.utilization == 25.0

    svc.save_warehouse(warehouse_form(currentStock='900', status='maintenance'), existing)

    saved = fake_api.collections['/warehouse'][0]
    assert saved['currentStock'] == 900
    assert saved['status'] == 'maintenance'
    assert saved['defectiveItems'] == 0


@pytest.mark.parametrize('overrides', [
    {'type': 'cold-storage'},
    {'status': 'closed'},
    {'capacity': 'lots'},
    {'name': ''},
])
def test_invalid_warehouse(container, overrides):
    with pytest.raises(ValidationError):
        container.warehouse_service.save_warehouse(warehouse_form(**overrides))


def test_summary_and_contents():
    w1 = Warehouse(id='w1', capacity=100, current_stock=50, defective_items=3)
    w2 = Warehouse(id='w2', capacity=300, current_stock=150)
    summary = WarehouseService.summarize([w1, w2])
    assert summary.total_capacity == 400
    assert summary.utilization == 50.0
    assert summary.total_defective_items == 3

    products = [Product(product_id='FP-1', warehouse_id='w1'), Product(product_id='FP-2', warehouse_id='w2')]
    records = [QualityRecord(product_id='FP-1', defective_quantity=4),
               QualityRecord(product_id='FP-1', defective_quantity=1),
               QualityRecord(product_id='FP-2', defective_quantity=9)]
    assert [p.product_id for p in WarehouseService.products_in(w1, products)] == ['FP-1']
    assert WarehouseService.defective_count_for(w1, products, records) == 5


def test_empty_warehouse_has_zero_utilization():
    assert Warehouse(capacity=0, current_stock=10).utilization == 0.0
