# ==============================================================================
# INTERFACES DE REPOSITORIOS
# ==============================================================================
#
# Contratos (protocolos) que cumplen el cliente HTTP y los repositorios.
# Permiten:
#
# 1. INDEPENDENCIA DEL BACKEND
#    - Los servicios dependen de interfaces, NO de requests
#    - Un backend distinto solo requiere otro ApiClient
#
# 2. TESTING
#    - Un backend en memoria que implemente IApiClient reemplaza al real
#    - Tests sin red
#
# ==============================================================================

from typing import Any, Dict, List, Optional, Protocol, runtime_checkable


@runtime_checkable
class IApiClient(Protocol):
    """Cliente HTTP JSON hacia el backend."""

    def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        ...

    def post(self, path: str, json: Any = None) -> Any:
        ...

    def put(self, path: str, json: Any = None) -> Any:
        ...

    def delete(self, path: str) -> Any:
        ...


@runtime_checkable
class IRestRepository(Protocol):
    """
    Interfaz de los repositorios CRUD.
    Usado por: Inventario, Almacenes, Calidad, Mantenimiento, Empleados, Asistencia.
    """

    def list(self) -> List[Any]:
        """Obtiene todos los registros."""
        ...

    def get(self, record_id: Any) -> Any:
        """Obtiene un registro por su _id."""
        ...

    def create(self, data: Dict[str, Any]) -> Any:
        """Crea un registro."""
        ...

    def update(self, record_id: Any, data: Dict[str, Any]) -> Any:
        """Reemplaza un registro."""
        ...

    def delete(self, record_id: Any) -> None:
        """Elimina un registro."""
        ...


@runtime_checkable
class IFinancialRepository(IRestRepository, Protocol):
    """Transacciones más las operaciones especiales de finanzas."""

    def ledger(self, entity: str = '', period: str = 'month', date: str = '') -> List[Any]:
        ...

    def daily_report(self) -> Dict[str, Any]:
        ...

    def dispatch(self, product_id: str, quantity: int, distributor: str, unit_price: float = 0.0) -> Dict[str, Any]:
        ...

    def payment(self, dispatch_id: str, payment_amount: float) -> Dict[str, Any]:
        ...

    def process_payroll(self) -> Any:
        ...

    def payroll_status(self) -> Dict[str, Any]:
        ...


@runtime_checkable
class IMaintenanceModeRepository(Protocol):

    def status(self) -> Dict[str, Any]:
        ...

    def history(self) -> List[Any]:
        ...

    def activate(self, data: Dict[str, Any]) -> Dict[str, Any]:
        ...

    def deactivate(self) -> Dict[str, Any]:
        ...

    def test_email(self) -> Dict[str, Any]:
        ...
