from datetime import datetime, timedelta

import pytest

from factory_dashboard.models.entities import MaintenanceItem
from factory_dashboard.services.maintenance_service import MaintenanceService
from factory_dashboard.services.validation import ValidationError

NOW = datetime(2024, 6, 15, 12, 0, 0)


def item(days, status='pending', **kwargs):
    due = (NOW + timedelta(days=days)).isoformat()
    return MaintenanceItem(next_maintenance=due, status=status, **kwargs)


def test_overdue_and_due_soon():
    assert MaintenanceService.is_overdue(item(-1), NOW)
    assert not MaintenanceService.is_overdue(item(-1, 'completed'), NOW)
    assert MaintenanceService.is_due_soon(item(3), NOW)
    assert not MaintenanceService.is_due_soon(item(8), NOW)
    assert not MaintenanceService.is_due_soon(item(-1), NOW)
    assert not MaintenanceService.is_due_soon(item(3, 'completed'), NOW)


def test_classify():
    items = [item(-2, equipment_name='Oven'), item(2, 'in-progress', equipment_name='Mixer'),
             item(30, equipment_name='Fridge'), item(-10, 'completed', equipment_name='Slicer')]
    board = MaintenanceService.classify(items, NOW)
    assert [i.equipment_name for i in board.overdue] == ['Oven']
    assert [i.equipment_name for i in board.due_soon] == ['Mixer']
    assert [i.equipment_name for i in board.pending] == ['Oven', 'Fridge']
    assert [i.equipment_name for i in board.completed] == ['Slicer']


def test_save_item_defaults(fake_api, container):
    payload = container.maintenance_service.save_item({'equipmentName': 'Oven', 'nextMaintenance': '2024-07-01',
                                                      'cost': ''})
    assert payload['cost'] == 0.0
    assert payload['priority'] == 'medium'
    assert payload['status'] == 'pending'
    assert payload['maintenanceType'] == 'preventive'
    assert fake_api.collections['/maintenance'][0]['equipmentName'] == 'Oven'


def test_save_item_rejects_unknown_priority(container):
    with pytest.raises(ValidationError):
        container.maintenance_service.save_item({'equipmentName': 'Oven', 'nextMaintenance': '2024-07-01',
                                                 'priority': 'urgent'})
