# ==============================================================================
# REPOSITORIO DE MANTENIMIENTO DE EQUIPOS
# ==============================================================================
# Encapsula el acceso a /maintenance.
# ==============================================================================

from factory_dashboard.models.entities import MaintenanceItem
from factory_dashboard.repositories.base import RestRepository


class MaintenanceRepository(RestRepository):
    resource = '/maintenance'
    entity = MaintenanceItem
