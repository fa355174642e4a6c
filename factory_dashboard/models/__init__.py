# ==============================================================================
# CAPA DE MODELOS - Estructuras de datos del sistema
# ==============================================================================
# Vista tipada (dataclasses) de los registros que entrega el backend REST.
# El panel no es dueño de ningún dato: los modelos se reconstruyen en cada
# petición a partir del JSON recibido.
# ==============================================================================

from .entities import (
    # Base
    Record,
    parse_date,
    date_input_value,

    # Inventario
    Product,

    # Finanzas
    Transaction,
    TransactionType,
    TransactionStatus,
    OrderType,

    # Recursos humanos
    Employee,
    AttendanceRecord,
    AttendanceStatus,

    # Calidad
    QualityRecord,

    # Almacenes
    Warehouse,
    WarehouseType,
    WarehouseStatus,

    # Mantenimiento
    MaintenanceItem,
    MaintenanceType,
    MaintenanceFrequency,
    MaintenanceStatus,
    MaintenanceModeRecord,
    Priority,
)

__all__ = [
    'Record',
    'parse_date',
    'date_input_value',
    'Product',
    'Transaction',
    'TransactionType',
    'TransactionStatus',
    'OrderType',
    'Employee',
    'AttendanceRecord',
    'AttendanceStatus',
    'QualityRecord',
    'Warehouse',
    'WarehouseType',
    'WarehouseStatus',
    'MaintenanceItem',
    'MaintenanceType',
    'MaintenanceFrequency',
    'MaintenanceStatus',
    'MaintenanceModeRecord',
    'Priority',
]
