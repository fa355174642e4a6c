# ==============================================================================
# SERVICIO DE ALMACENES
# ==============================================================================
# Almacenes, su ocupación y los productos / defectuosos que contienen.
# (En la navegación la pantalla aparece como "Sale".)
# ==============================================================================

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

from factory_dashboard.models.entities import (
    Product,
    QualityRecord,
    Warehouse,
    WarehouseStatus,
    WarehouseType,
)
from factory_dashboard.repositories.warehouse_repository import WarehouseRepository
from factory_dashboard.services.validation import (
    ValidationError,
    form_text,
    optional_int,
    require_int,
    require_text,
)


@dataclass
class WarehouseSummary:
    total_capacity: int = 0
    total_current_stock: int = 0
    total_defective_items: int = 0

    @property
    def utilization(self) -> float:
        """Ocupación global en porcentaje con un decimal (0 sin capacidad)."""
        if not self.total_capacity:
            return 0.0
        return round(self.total_current_stock / self.total_capacity * 100, 1)


class WarehouseService:
    """Servicio de almacenes: CRUD, ocupación y contenido."""

    def __init__(self, warehouse_repo: WarehouseRepository):
        self.warehouse_repo = warehouse_repo

    def list_warehouses(self) -> List[Warehouse]:
        return self.warehouse_repo.list()

    def _warehouse_payload(self, form: Mapping[str, Any]) -> Dict[str, Any]:
        wh_type = form_text(form, 'type', WarehouseType.STORAGE.value)
        if wh_type not in {t.value for t in WarehouseType}:
            raise ValidationError("Unknown warehouse type")
        status = form_text(form, 'status', WarehouseStatus.ACTIVE.value)
        if status not in {s.value for s in WarehouseStatus}:
            raise ValidationError("Unknown warehouse status")
        return {
            'name': require_text(form, 'name', 'Name'),
            'location': require_text(form, 'location', 'Location'),
            'capacity': require_int(form, 'capacity', 'Capacity'),
            'currentStock': require_int(form, 'currentStock', 'Current stock'),
            'defectiveItems': optional_int(form, 'defectiveItems', 0),
            'manager': form_text(form, 'manager'),
            'phone': form_text(form, 'phone'),
            'email': form_text(form, 'email'),
            'type': wh_type,
            'status': status,
        }

    def save_warehouse(self, form: Mapping[str, Any], existing: Optional[Warehouse] = None) -> Dict[str, Any]:
        payload = self._warehouse_payload(form)
        if existing is not None:
            data = existing.to_dict()
            data.update(payload)
            self.warehouse_repo.update(existing.id, data)
            return data
        self.warehouse_repo.create(payload)
        return payload

    def delete_warehouse(self, record_id: str) -> None:
        self.warehouse_repo.delete(record_id)

    # =========================================================================
    # INDICADORES
    # =========================================================================

    @staticmethod
    def summarize(warehouses: List[Warehouse]) -> WarehouseSummary:
        summary = WarehouseSummary()
        for w in warehouses:
            summary.total_capacity += w.capacity or 0
            summary.total_current_stock += w.current_stock or 0
            summary.total_defective_items += w.defective_items or 0
        return summary

    @staticmethod
    def products_in(warehouse: Warehouse, products: List[Product]) -> List[Product]:
        return [p for p in products if p.warehouse_id == warehouse.id]

    @classmethod
    def defective_count_for(
        cls,
        warehouse: Warehouse,
        products: List[Product],
        records: List[QualityRecord]
    ) -> int:
        """Defectuosos según las inspecciones de los productos del almacén."""
        product_ids = {p.product_id for p in cls.products_in(warehouse, products)}
        return sum(r.defective_quantity or 0 for r in records if r.product_id in product_ids)
