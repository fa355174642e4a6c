# ==============================================================================
# ENTIDADES DEL DOMINIO - Definiciones de dataclasses
# ==============================================================================
# Cada entidad representa un registro del backend REST.
# El backend es el dueño de los datos: aquí solo hay una vista tipada.
#
# REGLA: los campos que no conocemos se conservan en `raw` y viajan de
# vuelta en los PUT (el backend recibe el registro completo).
# ==============================================================================

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, ClassVar, Dict, Optional


# ==============================================================================
# ENUMERACIONES - Estados y tipos válidos
# ==============================================================================

class TransactionType(str, Enum):
    """Tipo contable de una transacción."""
    INCOME = "income"
    EXPENSE = "expense"


class TransactionStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"


class OrderType(str, Enum):
    """Tipos de orden del formulario de órdenes financieras."""
    PURCHASE = "purchase"
    SALE = "sale"
    DISPATCH = "dispatch"


class AttendanceStatus(str, Enum):
    PRESENT = "present"
    ABSENT = "absent"
    LATE = "late"


class WarehouseType(str, Enum):
    STORAGE = "storage"
    DISTRIBUTION = "distribution"
    MANUFACTURING = "manufacturing"


class WarehouseStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    MAINTENANCE = "maintenance"


class MaintenanceType(str, Enum):
    PREVENTIVE = "preventive"
    CORRECTIVE = "corrective"
    EMERGENCY = "emergency"


class MaintenanceFrequency(str, Enum):
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    ANNUALLY = "annually"


class Priority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class MaintenanceStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


# Categorías fijas que usan los flujos entre módulos
PENDING_ORDER_CATEGORY = 'Pending Order'
PURCHASE_ORDER_CATEGORY = 'Purchase Order'
SALES_ORDER_CATEGORY = 'Sales Order'
FINISHED_PRODUCT_CATEGORY = 'Finished Product'
INTERNAL_SUPPLIER = 'Internal Production'


# ==============================================================================
# FECHAS
# ==============================================================================

def parse_date(value: Any) -> Optional[datetime]:
    """
    Parsea una fecha del backend (ISO 8601, con o sin zona horaria).
    Retorna None si no puede parsear.

    Las fechas con zona se convierten a hora local sin tzinfo para poder
    compararlas con datetime.now().
    """
    if not value:
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    text = str(value).strip()
    try:
        parsed = datetime.fromisoformat(text.replace('Z', '+00:00'))
    except (ValueError, TypeError):
        try:
            parsed = datetime.strptime(text[:10], '%Y-%m-%d')
        except ValueError:
            return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def date_input_value(value: Any) -> str:
    """Fecha en formato YYYY-MM-DD para un <input type="date">."""
    parsed = parse_date(value)
    return parsed.strftime('%Y-%m-%d') if parsed else ''


# ==============================================================================
# BASE
# ==============================================================================

@dataclass
class Record:
    """
    Registro genérico del backend.

    Attributes:
        id: Clave del backend (campo "_id")
        raw: Registro original completo tal como llegó
    """
    id: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    # {atributo_python: clave_json}
    WIRE_FIELDS: ClassVar[Dict[str, str]] = {}

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]):
        """Crea instancia desde el JSON del backend."""
        data = data or {}
        kwargs = {'id': data.get('_id') or data.get('id'), 'raw': dict(data)}
        for attr, key in cls.WIRE_FIELDS.items():
            if data.get(key) is not None:
                kwargs[attr] = data[key]
        return cls(**kwargs)

    def to_dict(self) -> Dict[str, Any]:
        """Convierte a JSON para el backend, conservando campos desconocidos."""
        d = dict(self.raw)
        for attr, key in self.WIRE_FIELDS.items():
            value = getattr(self, attr)
            d[key] = value.value if isinstance(value, Enum) else value
        if self.id is not None:
            d['_id'] = self.id
        return d


# ==============================================================================
# INVENTARIO
# ==============================================================================

@dataclass
class Product(Record):
    """
    Producto de inventario con los datos de su lote (batch).

    Los campos legacy `quantity` / `price` / `discount` se mantienen
    espejados con los del lote por compatibilidad con el backend.
    """
    product_id: str = ''
    batch_id: str = ''
    batch_quantity: int = 0
    batch_price: float = 0.0
    batch_discount: float = 0.0
    name: str = ''
    brand: str = ''
    category: str = ''
    quantity: int = 0
    min_stock: int = 0
    price: float = 0.0
    discount: float = 0.0
    supplier: str = ''
    distributor: str = ''
    warehouse_id: Optional[str] = None
    description: str = ''
    is_raw_material: bool = False
    discount_reason: str = ''

    WIRE_FIELDS: ClassVar[Dict[str, str]] = {
        'product_id': 'productId',
        'batch_id': 'batchId',
        'batch_quantity': 'batchQuantity',
        'batch_price': 'batchPrice',
        'batch_discount': 'batchDiscount',
        'name': 'name',
        'brand': 'brand',
        'category': 'category',
        'quantity': 'quantity',
        'min_stock': 'minStock',
        'price': 'price',
        'discount': 'discount',
        'supplier': 'supplier',
        'distributor': 'distributor',
        'warehouse_id': 'warehouseId',
        'description': 'description',
        'is_raw_material': 'isRawMaterial',
        'discount_reason': 'discountReason',
    }

    @property
    def stock(self) -> int:
        """Cantidad visible: la del lote, o la legacy si el lote está vacío."""
        return self.batch_quantity or self.quantity or 0

    @property
    def unit_price(self) -> float:
        """Precio del lote, o el legacy si no hay precio de lote."""
        return self.batch_price or self.price or 0.0

    @property
    def is_low_stock(self) -> bool:
        return self.stock <= (self.min_stock or 0)

    @property
    def batch_value(self) -> float:
        return round(self.unit_price * self.stock, 2)


# ==============================================================================
# FINANZAS
# ==============================================================================

@dataclass
class Transaction(Record):
    """
    Movimiento financiero: ingreso, gasto, orden pendiente o despacho.

    Una orden pendiente tiene status "pending"; un despacho además
    tiene dispatchType "dispatch" y espera un pago.
    """
    type: str = TransactionType.INCOME.value
    category: str = ''
    amount: float = 0.0
    description: str = ''
    date: str = ''
    product_id: str = ''
    batch_id: str = ''
    quantity: Any = ''
    purchase_order: str = ''
    supplier: str = ''
    status: str = ''
    dispatch_type: str = ''
    invoice_number: str = ''

    WIRE_FIELDS: ClassVar[Dict[str, str]] = {
        'type': 'type',
        'category': 'category',
        'amount': 'amount',
        'description': 'description',
        'date': 'date',
        'product_id': 'productId',
        'batch_id': 'batchId',
        'quantity': 'quantity',
        'purchase_order': 'purchaseOrder',
        'supplier': 'supplier',
        'status': 'status',
        'dispatch_type': 'dispatchType',
        'invoice_number': 'invoiceNumber',
    }

    @property
    def is_pending(self) -> bool:
        return self.status == TransactionStatus.PENDING.value

    @property
    def is_dispatch(self) -> bool:
        return self.dispatch_type == 'dispatch'

    @property
    def occurred_at(self) -> Optional[datetime]:
        return parse_date(self.date)


# ==============================================================================
# RECURSOS HUMANOS
# ==============================================================================

@dataclass
class Employee(Record):
    name: str = ''
    email: str = ''
    position: str = ''
    department: str = ''
    salary: float = 0.0
    hire_date: str = ''
    phone: str = ''

    WIRE_FIELDS: ClassVar[Dict[str, str]] = {
        'name': 'name',
        'email': 'email',
        'position': 'position',
        'department': 'department',
        'salary': 'salary',
        'hire_date': 'hireDate',
        'phone': 'phone',
    }


@dataclass
class AttendanceRecord(Record):
    """Marca de asistencia. `employee_id` puede venir poblado como objeto."""
    employee_id: Any = ''
    date: str = ''
    status: str = AttendanceStatus.PRESENT.value
    hours_worked: Any = 8

    WIRE_FIELDS: ClassVar[Dict[str, str]] = {
        'employee_id': 'employeeId',
        'date': 'date',
        'status': 'status',
        'hours_worked': 'hoursWorked',
    }

    @property
    def employee_name(self) -> str:
        if isinstance(self.employee_id, dict):
            return self.employee_id.get('name', '')
        return ''

    @property
    def employee_key(self) -> str:
        if isinstance(self.employee_id, dict):
            return self.employee_id.get('_id', '')
        return self.employee_id or ''


# ==============================================================================
# CALIDAD
# ==============================================================================

@dataclass
class QualityRecord(Record):
    product_id: str = ''
    product_name: str = ''
    batch_number: str = ''
    total_quantity: int = 0
    good_quantity: int = 0
    defective_quantity: int = 0
    defect_type: str = ''
    inspection_date: str = ''
    inspector: str = ''
    notes: str = ''

    WIRE_FIELDS: ClassVar[Dict[str, str]] = {
        'product_id': 'productId',
        'product_name': 'productName',
        'batch_number': 'batchNumber',
        'total_quantity': 'totalQuantity',
        'good_quantity': 'goodQuantity',
        'defective_quantity': 'defectiveQuantity',
        'defect_type': 'defectType',
        'inspection_date': 'inspectionDate',
        'inspector': 'inspector',
        'notes': 'notes',
    }

    @property
    def quality_rate(self) -> float:
        """Porcentaje de unidades buenas del lote inspeccionado."""
        if not self.total_quantity:
            return 0.0
        return round(self.good_quantity / self.total_quantity * 100, 1)


# ==============================================================================
# ALMACENES
# ==============================================================================

@dataclass
class Warehouse(Record):
    name: str = ''
    location: str = ''
    capacity: int = 0
    current_stock: int = 0
    manager: str = ''
    phone: str = ''
    email: str = ''
    type: str = WarehouseType.STORAGE.value
    status: str = WarehouseStatus.ACTIVE.value
    defective_items: int = 0

    WIRE_FIELDS: ClassVar[Dict[str, str]] = {
        'name': 'name',
        'location': 'location',
        'capacity': 'capacity',
        'current_stock': 'currentStock',
        'manager': 'manager',
        'phone': 'phone',
        'email': 'email',
        'type': 'type',
        'status': 'status',
        'defective_items': 'defectiveItems',
    }

    @property
    def utilization(self) -> float:
        """Ocupación en porcentaje (0 si la capacidad es 0)."""
        if not self.capacity:
            return 0.0
        return round(self.current_stock / self.capacity * 100, 1)


# ==============================================================================
# MANTENIMIENTO
# ==============================================================================

@dataclass
class MaintenanceItem(Record):
    equipment_name: str = ''
    description: str = ''
    maintenance_type: str = MaintenanceType.PREVENTIVE.value
    frequency: str = MaintenanceFrequency.MONTHLY.value
    last_maintenance: str = ''
    next_maintenance: str = ''
    assigned_to: str = ''
    priority: str = Priority.MEDIUM.value
    status: str = MaintenanceStatus.PENDING.value
    cost: float = 0.0
    notes: str = ''

    WIRE_FIELDS: ClassVar[Dict[str, str]] = {
        'equipment_name': 'equipmentName',
        'description': 'description',
        'maintenance_type': 'maintenanceType',
        'frequency': 'frequency',
        'last_maintenance': 'lastMaintenance',
        'next_maintenance': 'nextMaintenance',
        'assigned_to': 'assignedTo',
        'priority': 'priority',
        'status': 'status',
        'cost': 'cost',
        'notes': 'notes',
    }

    @property
    def next_due(self) -> Optional[datetime]:
        return parse_date(self.next_maintenance)

    @property
    def is_completed(self) -> bool:
        return self.status == MaintenanceStatus.COMPLETED.value


@dataclass
class MaintenanceModeRecord(Record):
    """Periodo de modo mantenimiento del sistema (activo o histórico)."""
    is_active: bool = False
    start_time: str = ''
    end_time: str = ''
    reason: str = ''
    estimated_duration: str = ''
    created_by: str = 'System Administrator'
    emails_sent: Dict[str, Any] = field(default_factory=dict)

    WIRE_FIELDS: ClassVar[Dict[str, str]] = {
        'is_active': 'isActive',
        'start_time': 'startTime',
        'end_time': 'endTime',
        'reason': 'reason',
        'estimated_duration': 'estimatedDuration',
        'created_by': 'createdBy',
        'emails_sent': 'emailsSent',
    }

    @property
    def start_notification_sent(self) -> bool:
        return bool(self.emails_sent.get('startNotification'))

    @property
    def reminder_scheduled(self) -> bool:
        return bool(self.emails_sent.get('reminderScheduled'))

    @property
    def end_notification_sent(self) -> bool:
        return bool(self.emails_sent.get('endNotification'))
