# ==============================================================================
# REPOSITORIO FINANCIERO
# ==============================================================================
# Encapsula el acceso a /financial y a sus operaciones especiales:
#   GET  /financial/ledger          → libro mayor filtrado
#   GET  /financial/daily-report    → reporte diario
#   POST /financial/dispatch        → orden de despacho (genera factura)
#   POST /financial/payment         → pago de un despacho
#   POST /financial/process-payroll → procesa la planilla mensual
#   GET  /financial/payroll-status  → estado de la planilla
# ==============================================================================

from typing import Any, Dict, List, Optional

from factory_dashboard.models.entities import Transaction
from factory_dashboard.repositories.base import RestRepository


class FinancialRepository(RestRepository):
    """Repositorio de transacciones (ingresos, gastos, pendientes, despachos)."""

    resource = '/financial'
    entity = Transaction

    def ledger(self, entity: str = '', period: str = 'month', date: str = '') -> List[Transaction]:
        """
        Obtiene el libro mayor filtrado.

        Args:
            entity: Entidad (proveedor/distribuidor/cliente), vacío = todas
            period: 'day', 'week', 'month' o 'year'
            date: Fecha de referencia YYYY-MM-DD
        """
        params = {'entity': entity, 'period': period, 'date': date}
        data = self.client.get(f"{self.resource}/ledger", params=params)
        if not isinstance(data, list):
            return []
        return [Transaction.from_dict(item) for item in data if isinstance(item, dict)]

    def daily_report(self) -> Dict[str, Any]:
        """Reporte diario tal como lo arma el backend."""
        return self.client.get(f"{self.resource}/daily-report") or {}

    def dispatch(
        self,
        product_id: str,
        quantity: int,
        distributor: str,
        unit_price: float = 0.0
    ) -> Dict[str, Any]:
        """
        Crea una orden de despacho hacia un distribuidor.

        Returns:
            Respuesta del backend ({"transaction": {..., "invoiceNumber": ...}})
        """
        payload = {
            'productId': product_id,
            'quantity': quantity,
            'distributor': distributor,
            'unitPrice': unit_price,
        }
        return self.client.post(f"{self.resource}/dispatch", json=payload) or {}

    def payment(self, dispatch_id: str, payment_amount: float) -> Dict[str, Any]:
        """
        Registra el pago de un despacho pendiente.

        Returns:
            Respuesta del backend ({"payment": {..., "invoiceNumber": ...}})
        """
        payload = {'dispatchId': dispatch_id, 'paymentAmount': payment_amount}
        return self.client.post(f"{self.resource}/payment", json=payload) or {}

    def process_payroll(self) -> Optional[Dict[str, Any]]:
        return self.client.post(f"{self.resource}/process-payroll")

    def payroll_status(self) -> Dict[str, Any]:
        return self.client.get(f"{self.resource}/payroll-status") or {}
