import pytest

from factory_dashboard.repositories.api_client import ApiError, UnauthorizedError
from factory_dashboard.services.dashboard_service import DashboardService
from factory_dashboard.services.validation import ValidationError


def test_stats_fill_missing_values(fake_api, container):
    fake_api.responses[('GET', '/dashboard/stats')] = {
        'inventory': {'total': 12, 'lowStock': 3},
        'quality': {'goodProducts': 90},
    }
    stats = container.dashboard_service.stats()
    assert stats['inventory'] == {'total': 12, 'lowStock': 3}
    assert stats['employees'] == {'total': 0, 'present': 0}
    assert stats['quality'] == {'goodProducts': 90, 'badProducts': 0}
    assert DashboardService.quality_rate(stats) == 100.0


def test_quality_rate_without_data():
    stats = {'quality': {'goodProducts': 0, 'badProducts': 0}}
    assert DashboardService.quality_rate(stats) == 0.0


def test_module_cards_link_every_module():
    stats = {'inventory': {'total': 1, 'lowStock': 0}, 'employees': {'total': 2, 'present': 1},
             'quality': {'goodProducts': 3, 'badProducts': 1}, 'maintenance': {'pending': 4, 'overdue': 2}}
    cards = DashboardService.module_cards(stats)
    assert [c['endpoint'] for c in cards] == [
        'inventory_page', 'financial_page', 'hr_page', 'quality_page', 'warehouse_page', 'maintenance_page']
    assert cards[5]['stats'] == '4 pending, 2 overdue'


def test_mode_status(fake_api, container):
    fake_api.responses[('GET', '/maintenance-mode/status')] = {
        'isActive': True, 'data': {'_id': 'm1', 'reason': 'Upgrade', 'isActive': True}}
    status = container.maintenance_mode_service.status()
    assert status['isActive'] is True
    assert status['data'].reason == 'Upgrade'


def test_activate_requires_reason(fake_api, container):
    with pytest.raises(ValidationError):
        container.maintenance_mode_service.activate({'reason': '  '})
    assert fake_api.calls_for('POST') == []


def test_activate_sends_default_author(fake_api, container):
    fake_api.responses[('POST', '/maintenance-mode/activate')] = {'emailNotification': 'sent'}
    result = container.maintenance_mode_service.activate({'reason': 'Database upgrade', 'estimatedDuration': '2h'})
    body = fake_api.calls_for('POST', '/maintenance-mode/activate')[0][2]
    assert body['createdBy'] == 'System Administrator'
    assert body['estimatedDuration'] == '2h'
    assert result['emailNotification'] == 'sent'


def test_test_email_reports_failures(fake_api, container):
    fake_api.responses[('POST', '/maintenance-mode/test-email')] = ApiError('SMTP refused', 500)
    assert container.maintenance_mode_service.test_email() == {'success': False, 'error': 'SMTP refused'}

    fake_api.responses[('POST', '/maintenance-mode/test-email')] = {'success': True}
    assert container.maintenance_mode_service.test_email() == {'success': True, 'error': None}


def test_test_email_propagates_401(fake_api, container):
    fake_api.responses[('POST', '/maintenance-mode/test-email')] = UnauthorizedError('expired', 401)
    with pytest.raises(UnauthorizedError):
        container.maintenance_mode_service.test_email()
