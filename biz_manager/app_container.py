# ==============================================================================
# CONTENEDOR DE DEPENDENCIAS - Inyección de servicios
# ==============================================================================
# Centraliza la construcción de repositorios y servicios. Facilita:
#   - Inyección de dependencias
#   - Testing (cada test crea su contenedor sobre tmp_path)
#   - Cambiar la persistencia sin tocar los servicios
#
# No hay instancia global: create_app() crea un contenedor por aplicación
# y los servicios reciben el mismo RecordStore por referencia.
# ==============================================================================

from typing import Optional

from biz_manager.config import Settings
from biz_manager.repositories import SessionRepository
from biz_manager.services import (
    RecordStore,
    StatsService,
    OrderService,
    CatalogService,
    UserService,
    ReportService,
)


class AppContainer:
    """
    Contenedor de dependencias de la aplicación.

    Uso:
        container = AppContainer(Settings(data_dir='/ruta/datos'))
        report = container.stats_service.profit_loss_report('month')
    """

    def __init__(self, settings: Settings = None):
        """
        Args:
            settings: Configuración efectiva (por defecto la del entorno)
        """
        self.settings = settings or Settings()

        # Inicialización perezosa
        self._store: Optional[RecordStore] = None
        self._session_repo: Optional[SessionRepository] = None

        self._stats_service: Optional[StatsService] = None
        self._order_service: Optional[OrderService] = None
        self._catalog_service: Optional[CatalogService] = None
        self._user_service: Optional[UserService] = None
        self._report_service: Optional[ReportService] = None

    # =========================================================================
    # PERSISTENCIA
    # =========================================================================

    @property
    def store(self) -> RecordStore:
        """Almacén de registros (uno por contenedor)."""
        if self._store is None:
            self._store = RecordStore.from_path(self.settings.data_dir)
        return self._store

    @property
    def session_repo(self) -> SessionRepository:
        if self._session_repo is None:
            self._session_repo = SessionRepository(self.settings.data_dir)
        return self._session_repo

    # =========================================================================
    # SERVICIOS
    # =========================================================================

    @property
    def stats_service(self) -> StatsService:
        if self._stats_service is None:
            self._stats_service = StatsService(self.store)
        return self._stats_service

    @property
    def order_service(self) -> OrderService:
        if self._order_service is None:
            self._order_service = OrderService(self.store, self.settings.default_gst_rate)
        return self._order_service

    @property
    def catalog_service(self) -> CatalogService:
        if self._catalog_service is None:
            self._catalog_service = CatalogService(self.store)
        return self._catalog_service

    @property
    def user_service(self) -> UserService:
        if self._user_service is None:
            self._user_service = UserService(self.session_repo)
        return self._user_service

    @property
    def report_service(self) -> ReportService:
        if self._report_service is None:
            self._report_service = ReportService(self.settings.currency_symbol)
        return self._report_service
