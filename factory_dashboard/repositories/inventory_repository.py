# ==============================================================================
# REPOSITORIO DE INVENTARIO
# ==============================================================================
# Encapsula el acceso a /inventory (productos y sus lotes).
# ==============================================================================

from typing import Optional

from factory_dashboard.models.entities import Product
from factory_dashboard.repositories.base import RestRepository


class InventoryRepository(RestRepository):
    """
    Repositorio de productos.

    Formato de cada registro en el backend:
    {
        "_id": "...",
        "productId": "RM-AB12CD34E",
        "batchId": "BATCH-1717171717171-42",
        "batchQuantity": 100,
        "batchPrice": 12.5,
        ...
    }
    """

    resource = '/inventory'
    entity = Product

    def find_by_product_id(self, product_id: str) -> Optional[Product]:
        """
        Busca un producto por su ID de negocio (productId, no _id).

        Returns:
            Producto encontrado o None
        """
        for product in self.list():
            if product.product_id == product_id:
                return product
        return None
