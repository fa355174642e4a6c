# ==============================================================================
# CAPA DE REPOSITORIOS - Acceso a datos
# ==============================================================================
# Esta capa encapsula todo el acceso al backend REST externo.
# El panel no tiene persistencia propia: cada repositorio es un recurso HTTP.
#
# ESTRUCTURA:
# ├── api_client.py                  → Cliente HTTP (token bearer, errores, 401)
# ├── interfaces.py                  → Protocolos (contratos para tests)
# ├── base.py                        → RestRepository (CRUD genérico)
# ├── inventory_repository.py        → /inventory
# ├── financial_repository.py        → /financial (+ ledger, despacho, pagos, planilla)
# ├── hr_repository.py               → /hr/employees, /hr/attendance
# ├── quality_repository.py          → /quality
# ├── warehouse_repository.py        → /warehouse
# ├── maintenance_repository.py      → /maintenance
# ├── maintenance_mode_repository.py → /maintenance-mode
# └── dashboard_repository.py        → /dashboard/stats
# ==============================================================================

from .api_client import ApiClient, ApiError, UnauthorizedError, ApiConnectionError

from .interfaces import (
    IApiClient,
    IRestRepository,
    IFinancialRepository,
    IMaintenanceModeRepository,
)

from .base import RestRepository
from .inventory_repository import InventoryRepository
from .financial_repository import FinancialRepository
from .hr_repository import EmployeeRepository, AttendanceRepository
from .quality_repository import QualityRepository
from .warehouse_repository import WarehouseRepository
from .maintenance_repository import MaintenanceRepository
from .maintenance_mode_repository import MaintenanceModeRepository
from .dashboard_repository import DashboardRepository

__all__ = [
    # Cliente
    'ApiClient',
    'ApiError',
    'UnauthorizedError',
    'ApiConnectionError',

    # Interfaces
    'IApiClient',
    'IRestRepository',
    'IFinancialRepository',
    'IMaintenanceModeRepository',

    # Implementaciones REST
    'RestRepository',
    'InventoryRepository',
    'FinancialRepository',
    'EmployeeRepository',
    'AttendanceRepository',
    'QualityRepository',
    'WarehouseRepository',
    'MaintenanceRepository',
    'MaintenanceModeRepository',
    'DashboardRepository',
]
