# ==============================================================================
# SERVICIO DEL PANEL PRINCIPAL
# ==============================================================================
# Resumen de todos los módulos a partir de GET /dashboard/stats.
# ==============================================================================

from typing import Any, Dict, List

from factory_dashboard.repositories.dashboard_repository import DashboardRepository


# Secciones y contadores esperados (0 si el backend no los envía)
STATS_DEFAULTS = {
    'inventory': ('total', 'lowStock'),
    'employees': ('total', 'present'),
    'quality': ('goodProducts', 'badProducts'),
    'maintenance': ('pending', 'overdue'),
}


class DashboardService:

    def __init__(self, dashboard_repo: DashboardRepository):
        self.dashboard_repo = dashboard_repo

    def stats(self) -> Dict[str, Dict[str, Any]]:
        """Estadísticas con ceros donde el backend omite secciones o campos."""
        raw = self.dashboard_repo.stats()
        result = {}
        for section, keys in STATS_DEFAULTS.items():
            data = raw.get(section) if isinstance(raw.get(section), dict) else {}
            result[section] = {key: data.get(key) or 0 for key in keys}
        return result

    @staticmethod
    def quality_rate(stats: Dict[str, Dict[str, Any]]) -> float:
        """Buenos / (buenos + rechazados) × 100, con un decimal (0 sin datos)."""
        good = stats['quality']['goodProducts']
        bad = stats['quality']['badProducts']
        if not good + bad:
            return 0.0
        return round(good / (good + bad) * 100, 1)

    @staticmethod
    def module_cards(stats: Dict[str, Dict[str, Any]]) -> List[Dict[str, str]]:
        """Tarjetas de acceso a cada módulo con su resumen."""
        inv, emp = stats['inventory'], stats['employees']
        qual, mnt = stats['quality'], stats['maintenance']
        return [
            {
                'title': 'Inventory Management',
                'description': 'Manage all factory inventory with auto-generated Product IDs and warehouse assignment',
                'endpoint': 'inventory_page',
                'color': '#28a745',
                'stats': f"{inv['total']} items, {inv['lowStock']} low stock",
            },
            {
                'title': 'Financial Management',
                'description': 'Track expenses, revenue, and complete pending orders with purchase order requirements',
                'endpoint': 'financial_page',
                'color': '#17a2b8',
                'stats': 'View financial reports and pending orders',
            },
            {
                'title': 'Human Resources',
                'description': 'Employee management, attendance, and payroll',
                'endpoint': 'hr_page',
                'color': '#6f42c1',
                'stats': f"{emp['total']} employees, {emp['present']} present today",
            },
            {
                'title': 'Quality Management',
                'description': 'Product quality control with automatic defective item removal from inventory',
                'endpoint': 'quality_page',
                'color': '#fd7e14',
                'stats': f"{qual['goodProducts']} good, {qual['badProducts']} rejected",
            },
            {
                'title': 'Sale Management',
                'description': 'Manage warehouses with real-time product tracking and defective item monitoring',
                'endpoint': 'warehouse_page',
                'color': '#20c997',
                'stats': 'Manage warehouse operations and defective items',
            },
            {
                'title': 'Maintenance Management',
                'description': 'Equipment maintenance schedules and reminders',
                'endpoint': 'maintenance_page',
                'color': '#dc3545',
                'stats': f"{mnt['pending']} pending, {mnt['overdue']} overdue",
            },
        ]
