# ==============================================================================
# SERVICIO DE CALIDAD
# ==============================================================================
# Inspecciones de calidad y propagación de defectos:
#   unidades defectuosas → salen del inventario del producto
#                        → salen del stock del almacén y suman a defectiveItems
# ==============================================================================

import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, List, Mapping, Optional, Tuple

from factory_dashboard.models.entities import QualityRecord
from factory_dashboard.performance_logger import profile_function
from factory_dashboard.repositories.api_client import ApiError, UnauthorizedError
from factory_dashboard.repositories.inventory_repository import InventoryRepository
from factory_dashboard.repositories.quality_repository import QualityRepository
from factory_dashboard.repositories.warehouse_repository import WarehouseRepository
from factory_dashboard.services.validation import (
    ValidationError,
    form_text,
    require_int,
    require_text,
)

logger = logging.getLogger(__name__)


@dataclass
class QualitySummary:
    total_inspected: int = 0
    total_good: int = 0
    total_defective: int = 0

    @property
    def quality_rate(self) -> float:
        """Unidades buenas / inspeccionadas × 100, con un decimal (0 sin inspecciones)."""
        if not self.total_inspected:
            return 0.0
        return round(self.total_good / self.total_inspected * 100, 1)


class QualityService:
    """
    Servicio de control de calidad.

    Responsabilidades:
    - CRUD de inspecciones
    - Descontar defectuosos del inventario y del almacén
    - Totales y tasa de calidad
    """

    def __init__(
        self,
        quality_repo: QualityRepository,
        inventory_repo: InventoryRepository,
        warehouse_repo: WarehouseRepository
    ):
        self.quality_repo = quality_repo
        self.inventory_repo = inventory_repo
        self.warehouse_repo = warehouse_repo

    def list_records(self) -> List[QualityRecord]:
        return self.quality_repo.list()

    @staticmethod
    def summarize(records: List[QualityRecord]) -> QualitySummary:
        summary = QualitySummary()
        for record in records:
            summary.total_inspected += record.total_quantity or 0
            summary.total_good += record.good_quantity or 0
            summary.total_defective += record.defective_quantity or 0
        return summary

    # =========================================================================
    # ALTA / EDICIÓN / BAJA
    # =========================================================================

    def _record_payload(self, form: Mapping[str, Any]) -> Dict[str, Any]:
        total = require_int(form, 'totalQuantity', 'Total quantity')
        good = require_int(form, 'goodQuantity', 'Good quantity')
        defective = require_int(form, 'defectiveQuantity', 'Defective quantity')
        if good + defective > total:
            raise ValidationError("Good and defective quantities exceed the total inspected")
        return {
            'productId': require_text(form, 'productId', 'Product'),
            'batchNumber': require_text(form, 'batchNumber', 'Batch number'),
            'totalQuantity': total,
            'goodQuantity': good,
            'defectiveQuantity': defective,
            'defectType': form_text(form, 'defectType'),
            'inspectionDate': form_text(form, 'inspectionDate') or date.today().isoformat(),
            'inspector': require_text(form, 'inspector', 'Inspector'),
            'notes': form_text(form, 'notes'),
        }

    @profile_function(name="Registrar inspección")
    def save_record(
        self,
        form: Mapping[str, Any],
        existing: Optional[QualityRecord] = None
    ) -> Tuple[Dict[str, Any], List[str]]:
        """
        Crea o edita una inspección.

        Defectos a descontar:
            - Alta: todos los defectuosos
            - Edición: solo el aumento respecto al valor anterior

        Returns:
            Tupla (registro_enviado, advertencias)
        """
        payload = self._record_payload(form)

        # Lectura fresca: el producto y el almacén pueden haber cambiado
        product = self.inventory_repo.find_by_product_id(payload['productId'])
        payload['productName'] = product.name if product else form_text(form, 'productName')

        if existing is not None:
            data = existing.to_dict()
            data.update(payload)
            self.quality_repo.update(existing.id, data)
            increase = payload['defectiveQuantity'] - (existing.defective_quantity or 0)
            payload = data
        else:
            self.quality_repo.create(payload)
            increase = payload['defectiveQuantity']

        warnings = []
        if increase > 0 and product is not None:
            try:
                self._apply_defects(product, increase)
            except UnauthorizedError:
                raise
            except ApiError as e:
                logger.error("No se pudieron descontar %s defectuosos de %s: %s", increase, product.product_id, e)
                warnings.append(f"Inventory was not adjusted for defects: {e.message}")
        return payload, warnings

    def _apply_defects(self, product, defects: int) -> None:
        product.quantity = max(0, (product.quantity or 0) - defects)
        self.inventory_repo.update(product.id, product.to_dict())

        if not product.warehouse_id:
            return
        warehouse = self.warehouse_repo.find(product.warehouse_id)
        if warehouse is None:
            return
        warehouse.current_stock = max(0, (warehouse.current_stock or 0) - defects)
        warehouse.defective_items = (warehouse.defective_items or 0) + defects
        self.warehouse_repo.update(warehouse.id, warehouse.to_dict())
        logger.info("%s defectuosos descontados de %s / %s", defects, product.product_id, warehouse.name)

    def delete_record(self, record_id: str) -> None:
        self.quality_repo.delete(record_id)
