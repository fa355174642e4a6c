# ==============================================================================
# SERVICIO DE INVENTARIO
# ==============================================================================
# Centraliza la lógica de negocio de productos y lotes (batches).
# Incluye los flujos que tocan otros módulos:
#   - Alta de producto → stock del almacén + orden pendiente en finanzas
#   - Producción       → consume materias primas + crea producto terminado
#   - Distribución     → orden de despacho en finanzas
#
# NINGÚN flujo es atómico: si un paso secundario falla, el producto queda
# creado y el fallo se informa como advertencia.
# ==============================================================================

import logging
import random
import string
import time
from datetime import datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from factory_dashboard.models.entities import (
    FINISHED_PRODUCT_CATEGORY,
    INTERNAL_SUPPLIER,
    PENDING_ORDER_CATEGORY,
    Product,
    TransactionStatus,
    TransactionType,
)
from factory_dashboard.performance_logger import profile_function
from factory_dashboard.repositories.api_client import ApiError, UnauthorizedError
from factory_dashboard.repositories.inventory_repository import InventoryRepository
from factory_dashboard.repositories.financial_repository import FinancialRepository
from factory_dashboard.repositories.warehouse_repository import WarehouseRepository
from factory_dashboard.services.validation import (
    ValidationError,
    form_text,
    optional_float,
    optional_int,
    require_float,
    require_int,
    require_text,
    to_int,
)

logger = logging.getLogger(__name__)


# Pestañas de la pantalla de inventario
INVENTORY_TABS = ('raw', 'production', 'storage', 'distribute')
DEFAULT_TAB = 'raw'

DISCOUNT_PERCENTAGE = 'percentage'
DISCOUNT_FIXED = 'fixed'

FINISHED_PRODUCT_MIN_STOCK = 10

_ID_ALPHABET = string.ascii_uppercase + string.digits


# ═══════════════════════════════════════════════════════════════════════════
# GENERADORES DE IDENTIFICADORES
# ═══════════════════════════════════════════════════════════════════════════

def generate_product_id(raw_material: bool) -> str:
    """
    ID de negocio del producto.

    Formato: RM-XXXXXXXXX (materia prima) o FP-XXXXXXXXX (terminado),
    9 caracteres alfanuméricos en mayúsculas.
    """
    prefix = 'RM-' if raw_material else 'FP-'
    return prefix + ''.join(random.choice(_ID_ALPHABET) for _ in range(9))


def generate_batch_id() -> str:
    """BATCH-<epoch en ms>-<0..999>"""
    return f"BATCH-{int(time.time() * 1000)}-{random.randint(0, 999)}"


# ═══════════════════════════════════════════════════════════════════════════
# ARITMÉTICA DE DESCUENTOS
# ═══════════════════════════════════════════════════════════════════════════

def compute_discount(original_price: float, discount_type: str, value: float) -> Tuple[float, float]:
    """
    Calcula el descuento de un lote.

    Args:
        original_price: Precio antes del descuento
        discount_type: 'percentage' o 'fixed'
        value: Porcentaje (0-100) o monto fijo

    Returns:
        Tupla (porcentaje_descuento, nuevo_precio)
    """
    if discount_type == DISCOUNT_FIXED:
        if original_price:
            percent = min(value / original_price * 100, 100)
        else:
            percent = 100.0
        return percent, max(0.0, original_price - value)
    return value, original_price * (1 - value / 100)


def original_price(current_price: float, discount: float) -> float:
    """Precio antes del descuento. Sin descuento (o con 100%) devuelve el actual."""
    if not discount or discount >= 100:
        return current_price
    return current_price / (1 - discount / 100)


def _unique(values: Iterable[str]) -> List[str]:
    """Valores no vacíos sin repetir, en orden de aparición."""
    seen = []
    for value in values:
        if value and value not in seen:
            seen.append(value)
    return seen


class InventoryService:
    """
    Servicio para gestión de inventario.

    Responsabilidades:
    - CRUD de productos (lotes)
    - Filtros por pestaña y búsqueda
    - Descuentos por lote
    - Producción y distribución
    - Mantener el stock del almacén y la orden pendiente al dar de alta
    """

    def __init__(
        self,
        inventory_repo: InventoryRepository,
        warehouse_repo: WarehouseRepository,
        financial_repo: FinancialRepository
    ):
        """
        Args:
            inventory_repo: Repositorio de productos
            warehouse_repo: Repositorio de almacenes (stock actual)
            financial_repo: Repositorio financiero (órdenes pendientes, despachos)
        """
        self.inventory_repo = inventory_repo
        self.warehouse_repo = warehouse_repo
        self.financial_repo = financial_repo

    # =========================================================================
    # CONSULTAS
    # =========================================================================

    def list_products(self) -> List[Product]:
        return self.inventory_repo.list()

    def get_product(self, record_id: str) -> Optional[Product]:
        for product in self.list_products():
            if product.id == record_id:
                return product
        return None

    @staticmethod
    def filter_products(products: List[Product], search: str = '', tab: str = DEFAULT_TAB) -> List[Product]:
        """
        Filtra productos por texto y pestaña activa.

        La búsqueda compara nombre, productId y categoría sin distinguir
        mayúsculas. Pestañas:
            raw / production → materias primas
            storage          → productos terminados
            distribute       → productos con distribuidor asignado
        """
        term = (search or '').strip().lower()

        def matches(p: Product) -> bool:
            if not term:
                return True
            return any(term in (value or '').lower() for value in (p.name, p.product_id, p.category))

        result = []
        for product in products:
            if not matches(product):
                continue
            if tab in ('raw', 'production') and not product.is_raw_material:
                continue
            if tab == 'storage' and product.is_raw_material:
                continue
            if tab == 'distribute' and not product.distributor:
                continue
            result.append(product)
        return result

    @staticmethod
    def low_stock(products: List[Product]) -> List[Product]:
        return [p for p in products if p.is_low_stock]

    @staticmethod
    def raw_materials(products: List[Product]) -> List[Product]:
        return [p for p in products if p.is_raw_material]

    @staticmethod
    def finished_products(products: List[Product]) -> List[Product]:
        return [p for p in products if not p.is_raw_material]

    @staticmethod
    def suppliers(products: List[Product]) -> List[str]:
        """Directorio de proveedores derivado de los productos."""
        return _unique(p.supplier for p in products)

    @staticmethod
    def distributors(products: List[Product]) -> List[str]:
        return _unique(p.distributor for p in products)

    # =========================================================================
    # ALTA / EDICIÓN / BAJA
    # =========================================================================

    def _product_payload(self, form: Mapping[str, Any], tab: str) -> Dict[str, Any]:
        """
        Convierte el formulario en el JSON del producto.
        Los campos de lote se espejan en quantity/price (legacy).
        """
        batch_quantity = require_int(form, 'batchQuantity', 'Batch quantity')
        batch_price = require_float(form, 'batchPrice', 'Batch price')
        return {
            'name': require_text(form, 'name', 'Name'),
            'brand': form_text(form, 'brand'),
            'category': require_text(form, 'category', 'Category'),
            'batchQuantity': batch_quantity,
            'batchPrice': batch_price,
            'batchDiscount': optional_float(form, 'batchDiscount', 0.0),
            'quantity': batch_quantity,
            'price': batch_price,
            'minStock': optional_int(form, 'minStock', 0),
            'supplier': form_text(form, 'supplier'),
            'distributor': form_text(form, 'distributor'),
            'warehouseId': form_text(form, 'warehouseId') or None,
            'description': form_text(form, 'description'),
            'isRawMaterial': tab == 'raw',
        }

    @profile_function(name="Agregar producto")
    def add_product(self, form: Mapping[str, Any], tab: str = DEFAULT_TAB) -> Tuple[Dict[str, Any], List[str]]:
        """
        Da de alta un lote nuevo.

        Pasos:
            1. POST /inventory
            2. currentStock del almacén += batchQuantity (si hay almacén)
            3. Orden pendiente en finanzas (gasto "Pending Order")

        Los pasos 2 y 3 son de mejor esfuerzo.

        Returns:
            Tupla (producto_enviado, advertencias)

        Raises:
            ValidationError: Datos del formulario inválidos
            ApiError: Falló el POST del producto (nada más se ejecuta)
        """
        payload = self._product_payload(form, tab)
        payload['productId'] = generate_product_id(tab == 'raw')
        payload['batchId'] = form_text(form, 'batchId') or generate_batch_id()

        self.inventory_repo.create(payload)
        logger.info("Producto %s creado (lote %s)", payload['productId'], payload['batchId'])

        warnings = []
        try:
            self._add_warehouse_stock(payload['warehouseId'], payload['batchQuantity'])
        except UnauthorizedError:
            raise
        except ApiError as e:
            logger.error("No se pudo actualizar el stock del almacén %s: %s", payload['warehouseId'], e)
            warnings.append(f"Warehouse stock was not updated: {e.message}")

        try:
            self._create_pending_order(payload)
        except UnauthorizedError:
            raise
        except ApiError as e:
            logger.error("No se pudo crear la orden pendiente de %s: %s", payload['productId'], e)
            warnings.append(f"Pending order was not created: {e.message}")

        return payload, warnings

    def _add_warehouse_stock(self, warehouse_id: Optional[str], quantity: int) -> None:
        warehouse = self.warehouse_repo.find(warehouse_id)
        if warehouse is None:
            return
        warehouse.current_stock = (warehouse.current_stock or 0) + quantity
        self.warehouse_repo.update(warehouse.id, warehouse.to_dict())

    def _create_pending_order(self, product: Dict[str, Any]) -> None:
        self.financial_repo.create({
            'type': TransactionType.EXPENSE.value,
            'category': PENDING_ORDER_CATEGORY,
            'amount': product['batchPrice'] * product['batchQuantity'],
            'description': f"Pending order for {product['name']} (ID: {product['productId']})",
            'date': datetime.now().isoformat(),
            'productId': product['productId'],
            'batchId': product['batchId'],
            'status': TransactionStatus.PENDING.value,
        })

    def update_product(self, existing: Product, form: Mapping[str, Any], tab: str = DEFAULT_TAB) -> Dict[str, Any]:
        """
        Edita un lote. Conserva productId/batchId, el tipo (materia prima
        o terminado) y los campos desconocidos. No toca almacén ni finanzas.
        """
        payload = existing.to_dict()
        payload.update(self._product_payload(form, tab))
        payload['productId'] = existing.product_id
        payload['batchId'] = existing.batch_id
        payload['isRawMaterial'] = existing.is_raw_material
        self.inventory_repo.update(existing.id, payload)
        return payload

    def delete_product(self, record_id: str) -> None:
        self.inventory_repo.delete(record_id)

    # =========================================================================
    # DESCUENTOS
    # =========================================================================

    def apply_discount(self, product: Product, form: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Aplica un descuento al lote y lo guarda.

        Args:
            product: Lote a descontar
            form: discountType ('percentage'/'fixed'), discountValue, reason

        Returns:
            Registro enviado al backend
        """
        discount_type = form_text(form, 'discountType', DISCOUNT_PERCENTAGE)
        if discount_type not in (DISCOUNT_PERCENTAGE, DISCOUNT_FIXED):
            raise ValidationError("Unknown discount type")
        value = require_float(form, 'discountValue', 'Discount value')
        if discount_type == DISCOUNT_PERCENTAGE and value > 100:
            raise ValidationError("Discount percentage cannot exceed 100")

        base_price = product.batch_price or product.price or 0.0
        percent, new_price = compute_discount(base_price, discount_type, value)

        payload = product.to_dict()
        payload.update({
            'batchDiscount': percent,
            'batchPrice': new_price,
            'price': new_price,
            'discountReason': form_text(form, 'reason'),
        })
        self.inventory_repo.update(product.id, payload)
        logger.info("Descuento %.2f%% aplicado a %s", percent, product.product_id)
        return payload

    # =========================================================================
    # PRODUCCIÓN Y DISTRIBUCIÓN
    # =========================================================================

    @profile_function(name="Registrar producción")
    def run_production(
        self,
        form: Mapping[str, Any],
        materials: List[Mapping[str, Any]]
    ) -> Tuple[Dict[str, Any], List[str]]:
        """
        Registra una corrida de producción.

        Args:
            form: productName, batchId (opcional), batchQuantity, batchPrice
            materials: [{productId, quantity}] materias primas consumidas

        Returns:
            Tupla (producto_terminado, advertencias). Una materia prima sin
            stock suficiente NO se descuenta y se informa como advertencia.
        """
        name = require_text(form, 'productName', 'Product name')
        batch_quantity = require_int(form, 'batchQuantity', 'Batch quantity')
        batch_price = require_float(form, 'batchPrice', 'Batch price')

        products = self.list_products()
        by_product_id = {p.product_id: p for p in products}
        warnings = []

        for material in materials:
            product_id = form_text(material, 'productId')
            quantity = to_int(form_text(material, 'quantity'))
            if not product_id or not quantity:
                continue
            raw = by_product_id.get(product_id)
            if raw is None:
                warnings.append(f"Raw material {product_id} not found")
                continue
            if raw.batch_quantity < quantity:
                warnings.append(f"Not enough {raw.name or product_id} in stock; it was not consumed")
                continue
            raw.batch_quantity -= quantity
            raw.quantity = (raw.quantity or 0) - quantity
            self.inventory_repo.update(raw.id, raw.to_dict())

        warehouses = self.warehouse_repo.list()
        finished = {
            'productId': generate_product_id(False),
            'batchId': form_text(form, 'batchId') or generate_batch_id(),
            'batchQuantity': batch_quantity,
            'batchPrice': batch_price,
            'name': name,
            'category': FINISHED_PRODUCT_CATEGORY,
            'quantity': batch_quantity,
            'minStock': FINISHED_PRODUCT_MIN_STOCK,
            'price': batch_price,
            'supplier': INTERNAL_SUPPLIER,
            'warehouseId': warehouses[0].id if warehouses else None,
            'isRawMaterial': False,
        }
        self.inventory_repo.create(finished)
        logger.info("Producción registrada: %s x%s", name, batch_quantity)
        return finished, warnings

    def distribute(self, form: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Crea una orden de despacho. El backend calcula el precio desde
        los lotes (unitPrice 0).
        """
        product_id = require_text(form, 'productId', 'Product')
        quantity = require_int(form, 'quantity', 'Quantity', minimum=1)
        distributor = require_text(form, 'distributor', 'Distributor')
        return self.financial_repo.dispatch(product_id, quantity, distributor, unit_price=0)
