# ==============================================================================
# REPOSITORIO DEL PANEL PRINCIPAL
# ==============================================================================
# Encapsula GET /dashboard/stats (resumen de todos los módulos).
# ==============================================================================

from typing import Any, Dict

from factory_dashboard.repositories.api_client import ApiClient


class DashboardRepository:

    def __init__(self, client: ApiClient):
        self.client = client

    def stats(self) -> Dict[str, Any]:
        """
        Returns:
            {"inventory": {"total", "lowStock"}, "employees": {"total", "present"},
             "quality": {"goodProducts", "badProducts"},
             "maintenance": {"pending", "overdue"}}
        """
        return self.client.get('/dashboard/stats') or {}
