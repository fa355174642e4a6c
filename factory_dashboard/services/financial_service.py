# ==============================================================================
# SERVICIO FINANCIERO
# ==============================================================================
# Transacciones, órdenes (compra/venta/despacho), pagos, planilla,
# libro mayor y reporte diario.
#
# Completar una orden encadena: inventario → almacén → transacción →
# borrar orden pendiente. Sin transacción ni rollback: si un paso falla,
# los anteriores quedan aplicados y se informa con PartialUpdateError.
# ==============================================================================

import csv
import io
import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, List, Mapping, Optional

from factory_dashboard.models.entities import (
    PURCHASE_ORDER_CATEGORY,
    SALES_ORDER_CATEGORY,
    OrderType,
    Product,
    Transaction,
    TransactionStatus,
    TransactionType,
)
from factory_dashboard.performance_logger import profile_function
from factory_dashboard.repositories.api_client import ApiError, UnauthorizedError
from factory_dashboard.repositories.financial_repository import FinancialRepository
from factory_dashboard.repositories.inventory_repository import InventoryRepository
from factory_dashboard.repositories.warehouse_repository import WarehouseRepository
from factory_dashboard.services.validation import (
    PartialUpdateError,
    ValidationError,
    form_text,
    require_float,
    require_int,
    require_text,
)

logger = logging.getLogger(__name__)


LEDGER_PERIODS = ('day', 'week', 'month', 'year')


@dataclass
class FinancialSummary:
    """Totales de la pantalla de finanzas (sin transacciones pendientes)."""
    total_income: float = 0.0
    total_expenses: float = 0.0
    pending_orders: List[Transaction] = field(default_factory=list)
    dispatch_orders: List[Transaction] = field(default_factory=list)

    @property
    def net_profit(self) -> float:
        return self.total_income - self.total_expenses


class FinancialService:
    """
    Servicio para gestión financiera.

    Responsabilidades:
    - CRUD de transacciones
    - Completar órdenes de compra/venta (ajusta inventario y almacén)
    - Despachos y pagos (facturas generadas por el backend)
    - Planilla, libro mayor y reporte diario
    """

    def __init__(
        self,
        financial_repo: FinancialRepository,
        inventory_repo: InventoryRepository,
        warehouse_repo: WarehouseRepository
    ):
        self.financial_repo = financial_repo
        self.inventory_repo = inventory_repo
        self.warehouse_repo = warehouse_repo

    # =========================================================================
    # CONSULTAS
    # =========================================================================

    def list_transactions(self) -> List[Transaction]:
        return self.financial_repo.list()

    @staticmethod
    def summarize(transactions: List[Transaction]) -> FinancialSummary:
        """
        Calcula totales. Ingresos y gastos excluyen las pendientes.
        Despachos = dispatchType "dispatch" y estado pendiente.
        """
        summary = FinancialSummary()
        for t in transactions:
            if t.is_pending:
                summary.pending_orders.append(t)
                if t.is_dispatch:
                    summary.dispatch_orders.append(t)
                continue
            amount = float(t.amount or 0)
            if t.type == TransactionType.INCOME.value:
                summary.total_income += amount
            elif t.type == TransactionType.EXPENSE.value:
                summary.total_expenses += amount
        return summary

    # =========================================================================
    # TRANSACCIONES
    # =========================================================================

    def _transaction_payload(self, form: Mapping[str, Any]) -> Dict[str, Any]:
        tx_type = form_text(form, 'type', TransactionType.INCOME.value)
        if tx_type not in (TransactionType.INCOME.value, TransactionType.EXPENSE.value):
            raise ValidationError("Type must be income or expense")
        return {
            'type': tx_type,
            'category': require_text(form, 'category', 'Category'),
            'amount': require_float(form, 'amount', 'Amount'),
            'description': form_text(form, 'description'),
            # La fecha del formulario se ignora: se registra el momento actual
            'date': datetime.now().isoformat(),
            'productId': form_text(form, 'productId'),
            'quantity': form_text(form, 'quantity'),
        }

    def save_transaction(self, form: Mapping[str, Any], existing: Optional[Transaction] = None) -> Dict[str, Any]:
        """
        Crea o edita una transacción manual.

        Args:
            form: type, category, amount, description, productId, quantity
            existing: Transacción a editar (None = nueva)
        """
        payload = self._transaction_payload(form)
        if existing is not None:
            data = existing.to_dict()
            data.update(payload)
            self.financial_repo.update(existing.id, data)
            return data
        self.financial_repo.create(payload)
        return payload

    def delete_transaction(self, record_id: str) -> None:
        self.financial_repo.delete(record_id)

    # =========================================================================
    # ÓRDENES
    # =========================================================================

    @staticmethod
    def pending_order_prefill(pending: Transaction, products: List[Product]) -> Dict[str, Any]:
        """
        Valores iniciales del formulario de orden al completar una pendiente.
        Cantidad 1; precio y proveedor del producto si existe.
        """
        product = next((p for p in products if p.product_id == pending.product_id), None)
        return {
            'productId': pending.product_id or '',
            'quantity': '1',
            'unitPrice': str(product.price) if product else '',
            'purchaseOrder': '',
            'orderType': OrderType.PURCHASE.value,
            'supplier': product.supplier if product else '',
            'pendingId': pending.id or '',
        }

    @profile_function(name="Completar orden")
    def complete_order(self, form: Mapping[str, Any], pending_id: Optional[str] = None) -> Dict[str, Any]:
        """
        Completa una orden de compra o venta.

        Pasos:
            1. Validar PO, producto y stock suficiente (venta)
            2. PUT /inventory/<id> con quantity ± cantidad
            3. PUT /warehouse/<id> con currentStock ± cantidad (mínimo 0)
            4. POST /financial (transacción completada)
            5. DELETE /financial/<pending_id> si se completa una pendiente

        Returns:
            Transacción registrada

        Raises:
            ValidationError: Falta PO, producto inexistente o stock insuficiente
            PartialUpdateError: Falló un paso después de modificar el inventario
        """
        order_type = form_text(form, 'orderType', OrderType.PURCHASE.value)
        if order_type not in (OrderType.PURCHASE.value, OrderType.SALE.value):
            raise ValidationError("Order type must be purchase or sale")
        purchase_order = form_text(form, 'purchaseOrder')
        if not purchase_order:
            raise ValidationError("Purchase Order number is required!")
        product_id = require_text(form, 'productId', 'Product')
        quantity = require_int(form, 'quantity', 'Quantity', minimum=1)
        unit_price = require_float(form, 'unitPrice', 'Unit price')

        product = self.inventory_repo.find_by_product_id(product_id)
        if product is None:
            raise ValidationError("Product not found!")

        is_purchase = order_type == OrderType.PURCHASE.value
        delta = quantity if is_purchase else -quantity
        new_quantity = (product.quantity or 0) + delta
        if new_quantity < 0:
            raise ValidationError("Insufficient inventory for this sale")

        product.quantity = new_quantity
        self.inventory_repo.update(product.id, product.to_dict())
        completed = [f"inventory quantity set to {new_quantity}"]

        label = 'Purchase' if is_purchase else 'Sale'
        transaction = {
            'type': TransactionType.EXPENSE.value if is_purchase else TransactionType.INCOME.value,
            'category': PURCHASE_ORDER_CATEGORY if is_purchase else SALES_ORDER_CATEGORY,
            'amount': unit_price * quantity,
            'description': f"{label} of {quantity} units - Product ID: {product_id} - PO: {purchase_order}",
            'date': datetime.now().isoformat(),
            'productId': product_id,
            'quantity': quantity,
            'purchaseOrder': purchase_order,
            'supplier': form_text(form, 'supplier'),
            'status': TransactionStatus.COMPLETED.value,
        }

        try:
            if product.warehouse_id:
                warehouse = self.warehouse_repo.find(product.warehouse_id)
                if warehouse is not None:
                    warehouse.current_stock = max(0, (warehouse.current_stock or 0) + delta)
                    self.warehouse_repo.update(warehouse.id, warehouse.to_dict())
                    completed.append(f"warehouse stock set to {warehouse.current_stock}")

            self.financial_repo.create(transaction)
            completed.append("transaction recorded")

            if pending_id:
                self.financial_repo.delete(pending_id)
                completed.append("pending order removed")
        except UnauthorizedError:
            logger.error("Orden %s interrumpida por 401 tras [%s]", purchase_order, ", ".join(completed))
            raise
        except ApiError as e:
            logger.error("Orden %s incompleta tras [%s]: %s", purchase_order, ', '.join(completed), e)
            raise PartialUpdateError(
                f"Order was only partially saved: {e.message}", completed=completed, cause=e
            ) from e

        logger.info("Orden %s completada (%s x%s)", purchase_order, product_id, quantity)
        return transaction

    # =========================================================================
    # DESPACHOS Y PAGOS
    # =========================================================================

    def create_dispatch(self, form: Mapping[str, Any]) -> str:
        """
        Orden de despacho desde el formulario de órdenes.
        El campo supplier se usa como distribuidor.

        Returns:
            Número de factura generado por el backend
        """
        product_id = require_text(form, 'productId', 'Product')
        quantity = require_int(form, 'quantity', 'Quantity', minimum=1)
        distributor = require_text(form, 'supplier', 'Distributor')
        unit_price = require_float(form, 'unitPrice', 'Unit price')
        response = self.financial_repo.dispatch(product_id, quantity, distributor, unit_price)
        return ((response or {}).get('transaction') or {}).get('invoiceNumber', '')

    def process_payment(self, form: Mapping[str, Any]) -> str:
        """
        Registra el pago de un despacho.

        Returns:
            Número de factura del pago
        """
        dispatch_id = require_text(form, 'dispatchId', 'Dispatch order')
        amount = require_float(form, 'paymentAmount', 'Payment amount')
        response = self.financial_repo.payment(dispatch_id, amount)
        return ((response or {}).get('payment') or {}).get('invoiceNumber', '')

    # =========================================================================
    # PLANILLA
    # =========================================================================

    def payroll_status(self) -> Dict[str, bool]:
        data = self.financial_repo.payroll_status()
        return {
            'isPending': bool(data.get('isPending')),
            'isProcessed': bool(data.get('isProcessed')),
        }

    def process_payroll(self) -> None:
        self.financial_repo.process_payroll()
        logger.info("Planilla procesada")

    # =========================================================================
    # LIBRO MAYOR
    # =========================================================================

    @staticmethod
    def ledger_filters(args: Mapping[str, Any]) -> Dict[str, str]:
        """Filtros del libro mayor con valores por defecto (mes actual)."""
        period = form_text(args, 'period', 'month')
        if period not in LEDGER_PERIODS:
            period = 'month'
        return {
            'entity': form_text(args, 'entity'),
            'period': period,
            'date': form_text(args, 'date') or date.today().isoformat(),
        }

    def ledger(self, filters: Mapping[str, str]) -> List[Transaction]:
        return self.financial_repo.ledger(filters['entity'], filters['period'], filters['date'])

    @staticmethod
    def ledger_csv(entries: List[Transaction]) -> str:
        """Libro mayor en CSV (ingresos en positivo, gastos en negativo)."""
        si = io.StringIO()
        writer = csv.writer(si)
        writer.writerow(['Date', 'Type', 'Category', 'Description', 'Amount', 'Invoice'])
        for t in entries:
            when = t.occurred_at
            amount = float(t.amount or 0)
            signed = amount if t.type == TransactionType.INCOME.value else -amount
            writer.writerow([
                when.strftime('%Y-%m-%d') if when else t.date,
                t.type,
                t.category,
                t.description,
                f"{signed:.2f}",
                t.invoice_number,
            ])
        return si.getvalue()

    # =========================================================================
    # REPORTE DIARIO
    # =========================================================================

    def daily_report(self) -> Dict[str, Any]:
        """
        Reporte diario del backend con valores por defecto en las secciones
        que falten, para que la plantilla no tenga que validar cada nivel.
        """
        report = dict(self.financial_repo.daily_report() or {})
        report.setdefault('date', date.today().isoformat())

        summary = dict(report.get('summary') or {})
        summary.setdefault('netProfit', 0)
        summary.setdefault('topProducts', [])
        report['summary'] = summary

        financial = dict(report.get('financial') or {})
        for key in ('totalIncome', 'totalExpenses', 'transactions'):
            financial.setdefault(key, 0)
        for key in ('salesTransactions', 'expenseTransactions', 'payrollTransactions', 'transactionDetails'):
            financial.setdefault(key, [])
        financial['payrollTotal'] = sum(float(t.get('amount') or 0) for t in financial['payrollTransactions'])
        report['financial'] = financial

        inventory = dict(report.get('inventory') or {})
        inventory.setdefault('totalValue', 0)
        inventory.setdefault('lowStock', 0)
        inventory.setdefault('rawMaterials', [])
        inventory.setdefault('finishedProducts', [])
        batch_summary = dict(inventory.get('batchSummary') or {})
        for key in ('totalBatches', 'totalBatchValue', 'totalDiscountValue', 'averageBatchSize'):
            batch_summary.setdefault(key, 0)
        inventory['batchSummary'] = batch_summary
        inventory['rawMaterialsTotal'] = sum(float(i.get('totalValue') or 0) for i in inventory['rawMaterials'])
        inventory['rawMaterialsDiscounted'] = sum(
            float(i.get('discountedValue') or 0) for i in inventory['rawMaterials']
        )
        inventory['finishedTotal'] = sum(float(i.get('totalValue') or 0) for i in inventory['finishedProducts'])
        inventory['finishedDiscounted'] = sum(
            float(i.get('discountedValue') or 0) for i in inventory['finishedProducts']
        )
        report['inventory'] = inventory
        return report
