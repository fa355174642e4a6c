# ==============================================================================
# REPOSITORIO DE MODO MANTENIMIENTO
# ==============================================================================
# Encapsula el acceso a /maintenance-mode:
#   GET  /status      → {"isActive": bool, "data": {...} | null}
#   GET  /history     → periodos anteriores
#   POST /activate    → activa (envía email de inicio)
#   POST /deactivate  → desactiva (envía email de fin)
#   POST /test-email  → prueba la configuración de correo
# ==============================================================================

from typing import Any, Dict, List

from factory_dashboard.models.entities import MaintenanceModeRecord
from factory_dashboard.repositories.api_client import ApiClient


class MaintenanceModeRepository:
    """Repositorio del interruptor de mantenimiento del sistema."""

    resource = '/maintenance-mode'

    def __init__(self, client: ApiClient):
        self.client = client

    def status(self) -> Dict[str, Any]:
        return self.client.get(f"{self.resource}/status") or {}

    def history(self) -> List[MaintenanceModeRecord]:
        data = self.client.get(f"{self.resource}/history")
        if not isinstance(data, list):
            return []
        return [MaintenanceModeRecord.from_dict(item) for item in data if isinstance(item, dict)]

    def activate(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return self.client.post(f"{self.resource}/activate", json=data) or {}

    def deactivate(self) -> Dict[str, Any]:
        return self.client.post(f"{self.resource}/deactivate") or {}

    def test_email(self) -> Dict[str, Any]:
        return self.client.post(f"{self.resource}/test-email") or {}
