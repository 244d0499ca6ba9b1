# ==============================================================================
# CONTENEDOR DE DEPENDENCIAS - Inyección de servicios
# ==============================================================================
# Construye el manejador de base de datos, los repositorios y los servicios
# con dependencias explícitas. NO es un singleton: cada proceso (o cada test)
# crea su propio contenedor y se lo pasa a quien lo necesite.
#
# Uso:
#   container = AppContainer(Config.from_env())
#   container.init()                      # esquema + datos iniciales
#   container.sales_service.record_sale(1, 2, 1)
#   container.close()
# ==============================================================================

import logging
from datetime import datetime
from typing import Any, Callable, Dict, Optional

from kiosquito.config import Config
from kiosquito.performance_logger import log_function_stats_report, set_profiling_enabled
from kiosquito.repositories import (
    CurrencyRepository,
    Database,
    MigrationRepository,
    ProductRepository,
    SalesRepository,
    UserRepository,
)
from kiosquito.services import (
    CurrencyService,
    InventoryService,
    SalesService,
    SeedService,
    UserService,
)

logger = logging.getLogger(__name__)


class AppContainer:
    """
    Contenedor de dependencias de la aplicación.

    Uso:
        container = AppContainer(config)
        inventory_service = container.inventory_service
        sales_service = container.sales_service
    """

    def __init__(self, config: Optional[Config] = None, clock: Callable[[], datetime] = None):
        """
        Args:
            config: Configuración (por defecto Config.from_env())
            clock: Reloj inyectable para las marcas de tiempo (tests)
        """
        self.config = config or Config.from_env()
        self._clock = clock
        self._seed_report: Optional[Dict[str, Any]] = None

        self._db: Optional[Database] = None

        # Repositorios (lazy loading)
        self._user_repo: Optional[UserRepository] = None
        self._product_repo: Optional[ProductRepository] = None
        self._currency_repo: Optional[CurrencyRepository] = None
        self._sales_repo: Optional[SalesRepository] = None
        self._migration_repo: Optional[MigrationRepository] = None

        # Servicios (lazy loading)
        self._user_service: Optional[UserService] = None
        self._inventory_service: Optional[InventoryService] = None
        self._currency_service: Optional[CurrencyService] = None
        self._sales_service: Optional[SalesService] = None
        self._seed_service: Optional[SeedService] = None

    # =========================================================================
    # CICLO DE VIDA
    # =========================================================================

    def init(self) -> Dict[str, Any]:
        """
        Abre la base, crea el esquema y siembra los datos iniciales.
        Solo corre una vez por contenedor; llamadas siguientes retornan el
        mismo reporte.

        Returns:
            Reporte de SeedService.run()
        """
        if self._seed_report is not None:
            return self._seed_report

        set_profiling_enabled(self.config.enable_profiling)
        self.db.open()
        self.db.init_schema()
        self._seed_report = self.seed_service.run()
        logger.info("Núcleo inicializado sobre %s", self.config.db_path)
        return self._seed_report

    def close(self) -> None:
        """Cierra la base. El contenedor puede volver a init()."""
        if self.config.enable_profiling and self._seed_report is not None:
            log_function_stats_report()
        if self._db is not None:
            self._db.close()
        self._seed_report = None

    # =========================================================================
    # BASE DE DATOS Y REPOSITORIOS
    # =========================================================================

    @property
    def db(self) -> Database:
        """Manejador único de la base de datos."""
        if self._db is None:
            self._db = Database(self.config.db_path, clock=self._clock)
        return self._db

    @property
    def user_repo(self) -> UserRepository:
        if self._user_repo is None:
            self._user_repo = UserRepository(self.db)
        return self._user_repo

    @property
    def product_repo(self) -> ProductRepository:
        if self._product_repo is None:
            self._product_repo = ProductRepository(self.db)
        return self._product_repo

    @property
    def currency_repo(self) -> CurrencyRepository:
        if self._currency_repo is None:
            self._currency_repo = CurrencyRepository(self.db)
        return self._currency_repo

    @property
    def sales_repo(self) -> SalesRepository:
        if self._sales_repo is None:
            self._sales_repo = SalesRepository(self.db)
        return self._sales_repo

    @property
    def migration_repo(self) -> MigrationRepository:
        if self._migration_repo is None:
            self._migration_repo = MigrationRepository(self.db)
        return self._migration_repo

    # =========================================================================
    # SERVICIOS
    # =========================================================================

    @property
    def user_service(self) -> UserService:
        """Servicio de usuarios."""
        if self._user_service is None:
            self._user_service = UserService(self.user_repo)
        return self._user_service

    @property
    def inventory_service(self) -> InventoryService:
        """Servicio de inventario."""
        if self._inventory_service is None:
            self._inventory_service = InventoryService(self.product_repo)
        return self._inventory_service

    @property
    def currency_service(self) -> CurrencyService:
        """Servicio de monedas."""
        if self._currency_service is None:
            self._currency_service = CurrencyService(self.currency_repo)
        return self._currency_service

    @property
    def sales_service(self) -> SalesService:
        """Servicio de ventas."""
        if self._sales_service is None:
            self._sales_service = SalesService(
                self.db,
                self.sales_repo,
                self.product_repo,
                self.currency_repo
            )
        return self._sales_service

    @property
    def seed_service(self) -> SeedService:
        """Servicio de datos iniciales."""
        if self._seed_service is None:
            self._seed_service = SeedService(
                self.db,
                self.config,
                self.user_service,
                self.user_repo,
                self.product_repo,
                self.currency_repo,
                self.migration_repo
            )
        return self._seed_service
