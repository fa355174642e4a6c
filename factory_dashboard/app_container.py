# ==============================================================================
# CONTENEDOR DE DEPENDENCIAS - Inyección de servicios
# ==============================================================================
# Este módulo proporciona una forma centralizada de obtener instancias
# del cliente HTTP, los repositorios y los servicios. Facilita:
#   - Inyección de dependencias
#   - Testing (se inyecta un cliente en memoria en lugar del HTTP real)
#   - Cambiar de backend sin tocar servicios
#
# ═══════════════════════════════════════════════════════════════════════════════
# CAMBIAR DE BACKEND
# ═══════════════════════════════════════════════════════════════════════════════
#
# Todos los repositorios hablan con el backend a través de un único
# ApiClient. Para apuntar a otro backend basta con FACTORY_API_BASE_URL.
# Para tests:
#
#     AppContainer.reset_instance()
#     container = get_container(client=FakeApiClient())
#
# Los servicios NO cambian: dependen de los repositorios, no de requests.
# ==============================================================================

from typing import Callable, Optional

from factory_dashboard import config

# ═══════════════════════════════════════════════════════════════════════════════
# REPOSITORIOS - Recursos del backend REST
# ═══════════════════════════════════════════════════════════════════════════════
from factory_dashboard.repositories import (
    ApiClient,
    IApiClient,
    InventoryRepository,
    FinancialRepository,
    EmployeeRepository,
    AttendanceRepository,
    QualityRepository,
    WarehouseRepository,
    MaintenanceRepository,
    MaintenanceModeRepository,
    DashboardRepository,
)

# ═══════════════════════════════════════════════════════════════════════════════
# SERVICIOS - Capa de lógica de negocio
# ═══════════════════════════════════════════════════════════════════════════════
from factory_dashboard.services import (
    InventoryService,
    FinancialService,
    HRService,
    QualityService,
    WarehouseService,
    MaintenanceService,
    MaintenanceModeService,
    DashboardService,
)


class AppContainer:
    """
    Contenedor de dependencias de la aplicación.

    Implementa el patrón Singleton para asegurar una única instancia
    del cliente, de cada repositorio y de cada servicio.

    Uso:
        container = AppContainer(token_provider=lambda: session.get('api_token'))
        inventory_service = container.inventory_service
    """

    _instance: Optional['AppContainer'] = None

    def __new__(cls, token_provider=None, client=None):
        """Singleton pattern."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(
        self,
        token_provider: Optional[Callable[[], Optional[str]]] = None,
        client: Optional[IApiClient] = None
    ):
        """
        Inicializa el contenedor.

        Args:
            token_provider: Función que retorna el token bearer actual
            client: Cliente ya construido (tests); si no, se crea un ApiClient
        """
        if self._initialized:
            return

        self._token_provider = token_provider
        self._client = client

        # Repositorios (lazy loading)
        self._inventory_repo: Optional[InventoryRepository] = None
        self._financial_repo: Optional[FinancialRepository] = None
        self._employee_repo: Optional[EmployeeRepository] = None
        self._attendance_repo: Optional[AttendanceRepository] = None
        self._quality_repo: Optional[QualityRepository] = None
        self._warehouse_repo: Optional[WarehouseRepository] = None
        self._maintenance_repo: Optional[MaintenanceRepository] = None
        self._maintenance_mode_repo: Optional[MaintenanceModeRepository] = None
        self._dashboard_repo: Optional[DashboardRepository] = None

        # Servicios (lazy loading)
        self._inventory_service: Optional[InventoryService] = None
        self._financial_service: Optional[FinancialService] = None
        self._hr_service: Optional[HRService] = None
        self._quality_service: Optional[QualityService] = None
        self._warehouse_service: Optional[WarehouseService] = None
        self._maintenance_service: Optional[MaintenanceService] = None
        self._maintenance_mode_service: Optional[MaintenanceModeService] = None
        self._dashboard_service: Optional[DashboardService] = None

        self._initialized = True

    # =========================================================================
    # CLIENTE HTTP
    # =========================================================================

    @property
    def client(self) -> IApiClient:
        """Cliente compartido por todos los repositorios (singleton)."""
        if self._client is None:
            self._client = ApiClient(
                config.API_BASE_URL,
                token_provider=self._token_provider,
                timeout=config.API_TIMEOUT,
            )
        return self._client

    # =========================================================================
    # REPOSITORIOS
    # =========================================================================

    @property
    def inventory_repo(self) -> InventoryRepository:
        if self._inventory_repo is None:
            self._inventory_repo = InventoryRepository(self.client)
        return self._inventory_repo

    @property
    def financial_repo(self) -> FinancialRepository:
        if self._financial_repo is None:
            self._financial_repo = FinancialRepository(self.client)
        return self._financial_repo

    @property
    def employee_repo(self) -> EmployeeRepository:
        if self._employee_repo is None:
            self._employee_repo = EmployeeRepository(self.client)
        return self._employee_repo

    @property
    def attendance_repo(self) -> AttendanceRepository:
        if self._attendance_repo is None:
            self._attendance_repo = AttendanceRepository(self.client)
        return self._attendance_repo

    @property
    def quality_repo(self) -> QualityRepository:
        if self._quality_repo is None:
            self._quality_repo = QualityRepository(self.client)
        return self._quality_repo

    @property
    def warehouse_repo(self) -> WarehouseRepository:
        if self._warehouse_repo is None:
            self._warehouse_repo = WarehouseRepository(self.client)
        return self._warehouse_repo

    @property
    def maintenance_repo(self) -> MaintenanceRepository:
        if self._maintenance_repo is None:
            self._maintenance_repo = MaintenanceRepository(self.client)
        return self._maintenance_repo

    @property
    def maintenance_mode_repo(self) -> MaintenanceModeRepository:
        if self._maintenance_mode_repo is None:
            self._maintenance_mode_repo = MaintenanceModeRepository(self.client)
        return self._maintenance_mode_repo

    @property
    def dashboard_repo(self) -> DashboardRepository:
        if self._dashboard_repo is None:
            self._dashboard_repo = DashboardRepository(self.client)
        return self._dashboard_repo

    # =========================================================================
    # SERVICIOS
    # =========================================================================

    @property
    def inventory_service(self) -> InventoryService:
        """Servicio de inventario (singleton)."""
        if self._inventory_service is None:
            self._inventory_service = InventoryService(
                self.inventory_repo,
                self.warehouse_repo,
                self.financial_repo
            )
        return self._inventory_service

    @property
    def financial_service(self) -> FinancialService:
        """Servicio financiero (singleton)."""
        if self._financial_service is None:
            self._financial_service = FinancialService(
                self.financial_repo,
                self.inventory_repo,
                self.warehouse_repo
            )
        return self._financial_service

    @property
    def hr_service(self) -> HRService:
        if self._hr_service is None:
            self._hr_service = HRService(self.employee_repo, self.attendance_repo)
        return self._hr_service

    @property
    def quality_service(self) -> QualityService:
        """Servicio de calidad (singleton)."""
        if self._quality_service is None:
            self._quality_service = QualityService(
                self.quality_repo,
                self.inventory_repo,
                self.warehouse_repo
            )
        return self._quality_service

    @property
    def warehouse_service(self) -> WarehouseService:
        if self._warehouse_service is None:
            self._warehouse_service = WarehouseService(self.warehouse_repo)
        return self._warehouse_service

    @property
    def maintenance_service(self) -> MaintenanceService:
        if self._maintenance_service is None:
            self._maintenance_service = MaintenanceService(self.maintenance_repo)
        return self._maintenance_service

    @property
    def maintenance_mode_service(self) -> MaintenanceModeService:
        if self._maintenance_mode_service is None:
            self._maintenance_mode_service = MaintenanceModeService(self.maintenance_mode_repo)
        return self._maintenance_mode_service

    @property
    def dashboard_service(self) -> DashboardService:
        if self._dashboard_service is None:
            self._dashboard_service = DashboardService(self.dashboard_repo)
        return self._dashboard_service

    # =========================================================================
    # UTILIDADES
    # =========================================================================

    def reset(self) -> None:
        """
        Reinicia repositorios y servicios (el cliente se conserva).
        Útil para testing.
        """
        for attr in list(vars(self)):
            if attr.endswith('_repo') or attr.endswith('_service'):
                setattr(self, attr, None)

    @classmethod
    def get_instance(cls, token_provider=None, client=None) -> 'AppContainer':
        """
        Obtiene la instancia singleton del contenedor.

        Args:
            token_provider: Solo se usa en la primera llamada
            client: Solo se usa en la primera llamada
        """
        if cls._instance is None:
            return cls(token_provider, client)
        return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        """Elimina la instancia singleton (útil para tests)."""
        if cls._instance is not None:
            cls._instance.reset()
            cls._instance = None


# Función helper para obtener el contenedor global
def get_container(token_provider=None, client=None) -> AppContainer:
    """
    Obtiene el contenedor de dependencias global.

    Returns:
        Instancia del contenedor
    """
    return AppContainer.get_instance(token_provider, client)
