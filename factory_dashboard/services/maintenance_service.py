# ==============================================================================
# SERVICIO DE MANTENIMIENTO
# ==============================================================================
# Plan de mantenimiento de equipos: vencidos, próximos (7 días),
# pendientes y completados.
# ==============================================================================

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Dict, List, Mapping, Optional

from factory_dashboard.models.entities import (
    MaintenanceFrequency,
    MaintenanceItem,
    MaintenanceStatus,
    MaintenanceType,
    Priority,
)
from factory_dashboard.repositories.maintenance_repository import MaintenanceRepository
from factory_dashboard.services.validation import ValidationError, form_text, optional_float, require_text


DUE_SOON_DAYS = 7


@dataclass
class MaintenanceBoard:
    overdue: List[MaintenanceItem] = field(default_factory=list)
    due_soon: List[MaintenanceItem] = field(default_factory=list)
    pending: List[MaintenanceItem] = field(default_factory=list)
    completed: List[MaintenanceItem] = field(default_factory=list)


def _choice(form: Mapping[str, Any], key: str, enum_cls, default) -> str:
    value = form_text(form, key, default.value)
    if value not in {e.value for e in enum_cls}:
        raise ValidationError(f"Invalid value for {key}: {value}")
    return value


class MaintenanceService:
    """Servicio de mantenimiento de equipos."""

    def __init__(self, maintenance_repo: MaintenanceRepository):
        self.maintenance_repo = maintenance_repo

    def list_items(self) -> List[MaintenanceItem]:
        return self.maintenance_repo.list()

    def _item_payload(self, form: Mapping[str, Any]) -> Dict[str, Any]:
        return {
            'equipmentName': require_text(form, 'equipmentName', 'Equipment name'),
            'description': form_text(form, 'description'),
            'maintenanceType': _choice(form, 'maintenanceType', MaintenanceType, MaintenanceType.PREVENTIVE),
            'frequency': _choice(form, 'frequency', MaintenanceFrequency, MaintenanceFrequency.MONTHLY),
            'lastMaintenance': form_text(form, 'lastMaintenance'),
            'nextMaintenance': require_text(form, 'nextMaintenance', 'Next maintenance date'),
            'assignedTo': form_text(form, 'assignedTo'),
            'priority': _choice(form, 'priority', Priority, Priority.MEDIUM),
            'status': _choice(form, 'status', MaintenanceStatus, MaintenanceStatus.PENDING),
            # Costo vacío → 0
            'cost': optional_float(form, 'cost', 0.0),
            'notes': form_text(form, 'notes'),
        }

    def save_item(self, form: Mapping[str, Any], existing: Optional[MaintenanceItem] = None) -> Dict[str, Any]:
        payload = self._item_payload(form)
        if existing is not None:
            data = existing.to_dict()
            data.update(payload)
            self.maintenance_repo.update(existing.id, data)
            return data
        self.maintenance_repo.create(payload)
        return payload

    def delete_item(self, record_id: str) -> None:
        self.maintenance_repo.delete(record_id)

    @staticmethod
    def is_overdue(item: MaintenanceItem, now: Optional[datetime] = None) -> bool:
        now = now or datetime.now()
        due = item.next_due
        return bool(due) and due < now and not item.is_completed

    @staticmethod
    def is_due_soon(item: MaintenanceItem, now: Optional[datetime] = None) -> bool:
        now = now or datetime.now()
        due = item.next_due
        if not due or item.is_completed:
            return False
        return now < due < now + timedelta(days=DUE_SOON_DAYS)

    @classmethod
    def classify(cls, items: List[MaintenanceItem], now: Optional[datetime] = None) -> MaintenanceBoard:
        """Agrupa los ítems para los avisos y contadores de la pantalla."""
        now = now or datetime.now()
        board = MaintenanceBoard()
        for item in items:
            if cls.is_overdue(item, now):
                board.overdue.append(item)
            elif cls.is_due_soon(item, now):
                board.due_soon.append(item)
            if item.status == MaintenanceStatus.PENDING.value:
                board.pending.append(item)
            elif item.is_completed:
                board.completed.append(item)
        return board
