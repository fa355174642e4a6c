# ==============================================================================
# REPOSITORIO DE ALMACENES
# ==============================================================================
# Encapsula el acceso a /warehouse.
# ==============================================================================

from typing import Optional

from factory_dashboard.models.entities import Warehouse
from factory_dashboard.repositories.base import RestRepository


class WarehouseRepository(RestRepository):
    """Repositorio de almacenes (capacidad, stock actual, defectuosos)."""

    resource = '/warehouse'
    entity = Warehouse

    def find(self, warehouse_id: str) -> Optional[Warehouse]:
        """
        Obtiene un almacén recién leído del backend.

        Args:
            warehouse_id: Clave _id del almacén

        Returns:
            Almacén o None si no existe
        """
        if not warehouse_id:
            return None
        for warehouse in self.list():
            if warehouse.id == warehouse_id:
                return warehouse
        return None
