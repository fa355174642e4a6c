# ==============================================================================
# CAPA DE SERVICIOS - Lógica de negocio
# ==============================================================================
# Los servicios contienen TODA la lógica de negocio.
# Las rutas solo orquestan: request → service → flash/redirect.
#
# ESTRUCTURA:
# ├── validation.py               → Conversión de formularios y errores de negocio
# ├── inventory_service.py        → Productos, lotes, descuentos, producción
# ├── financial_service.py        → Transacciones, órdenes, pagos, planilla, reportes
# ├── hr_service.py               → Empleados y asistencia
# ├── quality_service.py          → Inspecciones y propagación de defectos
# ├── warehouse_service.py        → Almacenes y ocupación
# ├── maintenance_service.py      → Plan de mantenimiento
# ├── maintenance_mode_service.py → Interruptor de mantenimiento del sistema
# └── dashboard_service.py        → Resumen del panel principal
# ==============================================================================

from .validation import ValidationError, PartialUpdateError
from .inventory_service import InventoryService
from .financial_service import FinancialService, FinancialSummary
from .hr_service import HRService
from .quality_service import QualityService, QualitySummary
from .warehouse_service import WarehouseService, WarehouseSummary
from .maintenance_service import MaintenanceService, MaintenanceBoard
from .maintenance_mode_service import MaintenanceModeService
from .dashboard_service import DashboardService

__all__ = [
    'ValidationError',
    'PartialUpdateError',
    'InventoryService',
    'FinancialService',
    'FinancialSummary',
    'HRService',
    'QualityService',
    'QualitySummary',
    'WarehouseService',
    'WarehouseSummary',
    'MaintenanceService',
    'MaintenanceBoard',
    'MaintenanceModeService',
    'DashboardService',
]
