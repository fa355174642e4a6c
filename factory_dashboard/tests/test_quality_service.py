import pytest

from factory_dashboard.models.entities import QualityRecord
from factory_dashboard.repositories.api_client import ApiError, UnauthorizedError
from factory_dashboard.services.quality_service import QualityService
from factory_dashboard.services.validation import ValidationError


def inspection(**overrides):
    form = {
        'productId': 'FP-1',
        'batchNumber': 'B-10',
        'totalQuantity': '100',
        'goodQuantity': '90',
        'defectiveQuantity': '10',
        'inspector': 'Sara',
    }
    form.update(overrides)
    return form


@pytest.fixture
def stocked(fake_api):
    fake_api.seed('/warehouse', {'_id': 'w1', 'name': 'Main', 'currentStock': 8, 'defectiveItems': 2})
    fake_api.seed('/inventory', {'_id': 'p1', 'productId': 'FP-1', 'name': 'Bread', 'quantity': 50,
                                 'warehouseId': 'w1'})
    return fake_api


def test_new_inspection_removes_defects(stocked, container):
    payload, warnings = container.quality_service.save_record(inspection())

    assert warnings == []
    assert payload['productName'] == 'Bread'
    assert stocked.collections['/quality'][0]['productName'] == 'Bread'
    assert stocked.collections['/inventory'][0]['quantity'] == 40
    warehouse = stocked.collections['/warehouse'][0]
    assert warehouse['currentStock'] == 0
    assert warehouse['defectiveItems'] == 12


def test_edit_only_applies_the_increase(stocked, container):
    stocked.seed('/quality', {'_id': 'q1', 'productId': 'FP-1', 'batchNumber': 'B-10', 'totalQuantity': 100,
                              'goodQuantity': 90, 'defectiveQuantity': 10, 'inspector': 'Sara'})
    existing = container.quality_service.list_records()[0]

    container.quality_service.save_record(inspection(goodQuantity='85', defectiveQuantity='15'), existing)

    assert stocked.collections['/inventory'][0]['quantity'] == 45
    assert stocked.collections['/warehouse'][0]['defectiveItems'] == 7
    assert stocked.collections['/quality'][0]['defectiveQuantity'] == 15


def test_edit_lowering_defects_changes_no_stock(stocked, container):
    stocked.seed('/quality', {'_id': 'q1', 'productId': 'FP-1', 'batchNumber': 'B-10', 'totalQuantity': 100,
                              'goodQuantity': 90, 'defectiveQuantity': 10, 'inspector': 'Sara'})
    existing = container.quality_service.list_records()[0]

    container.quality_service.save_record(inspection(goodQuantity='95', defectiveQuantity='5'), existing)

    assert stocked.calls_for('PUT', '/inventory/p1') == []
    assert stocked.calls_for('PUT', '/warehouse/w1') == []


def test_counts_cannot_exceed_total(container, fake_api):
    with pytest.raises(ValidationError):
        container.quality_service.save_record(inspection(goodQuantity='95', defectiveQuantity='10'))
    assert fake_api.calls_for('POST') == []


def test_inventory_failure_is_a_warning(stocked, container):
    stocked.responses[('PUT', '/inventory/p1')] = ApiError('locked', 409)

    payload, warnings = container.quality_service.save_record(inspection())

    assert len(stocked.collections['/quality']) == 1
    assert warnings == ['Inventory was not adjusted for defects: locked']


def test_inventory_401_is_not_a_warning(stocked, container):
    stocked.responses[('PUT', '/inventory/p1')] = UnauthorizedError('expired', 401)

    with pytest.raises(UnauthorizedError):
        container.quality_service.save_record(inspection())

    assert len(stocked.collections['/quality']) == 1


def test_summary_rate():
    records = [
        QualityRecord(total_quantity=100, good_quantity=90, defective_quantity=10),
        QualityRecord(total_quantity=50, good_quantity=45, defective_quantity=5),
    ]
    summary = QualityService.summarize(records)
    assert summary.total_inspected == 150
    assert summary.total_defective == 15
    assert summary.quality_rate == 90.0
    assert QualityService.summarize([]).quality_rate == 0.0
