# ==============================================================================
# SERVICIO DE DATOS INICIALES
# ==============================================================================
# Corre una vez al arrancar, después de init_schema() y antes de atender
# cualquier operación. Cada paso es idempotente: sembrar dos veces no
# duplica nada.
#
# ORDEN:
#   1. Usuario administrador
#   2. Moneda base CUP
#   3. Monedas de ejemplo (USD, MLC)           -> seed_example_currencies
#   4. Centinela heredado "__cleanup_done__"  -> se convierte en migración
#   5. Migración remove_example_products       -> una sola vez en la vida
#   6. Productos de ejemplo                    -> seed_example_products
#   7. Contraseñas en texto plano -> hash
# ==============================================================================

import logging
from typing import Any, Dict

from kiosquito.config import Config
from kiosquito.models.entities import BASE_CURRENCY_CODE, BASE_CURRENCY_NAME
from kiosquito.models.validation import CurrencyInput, ProductInput
from kiosquito.performance_logger import profile_function
from kiosquito.repositories.base import Database
from kiosquito.repositories.interfaces import (
    ICurrencyRepository,
    IMigrationRepository,
    IProductRepository,
    IUserRepository,
)
from kiosquito.services.user_service import UserService

logger = logging.getLogger(__name__)

# Usuario centinela que marcaba la limpieza en versiones anteriores
LEGACY_SENTINEL_USER = '__cleanup_done__'

REMOVE_EXAMPLE_PRODUCTS = 'remove_example_products'

EXAMPLE_CURRENCIES = (
    CurrencyInput(code='USD', name='Dólar Estadounidense', exchange_rate=120.0),
    CurrencyInput(code='MLC', name='Moneda Libremente Convertible', exchange_rate=125.0),
)

# Catálogo de ejemplo de la primera versión (precios en CUP)
EXAMPLE_PRODUCTS = (
    ProductInput('Coca Cola 355ml', 150.0, 50, 'Refresco de cola', 'Bebidas'),
    ProductInput('Agua Mineral 500ml', 50.0, 100, 'Agua natural', 'Bebidas'),
    ProductInput('Papas Fritas', 80.0, 30, 'Snack salado', 'Snacks'),
    ProductInput('Chocolate', 120.0, 25, 'Chocolate con leche', 'Dulces'),
    ProductInput('Pan Tostado', 60.0, 40, 'Pan para desayuno', 'Panadería'),
    ProductInput('Café Instantáneo', 200.0, 15, 'Café soluble', 'Bebidas'),
    ProductInput('Galletas María', 90.0, 35, 'Galletas dulces', 'Dulces'),
    ProductInput('Jugo de Naranja', 100.0, 20, 'Jugo natural', 'Bebidas'),
)


class SeedService:
    """
    Carga de datos iniciales y migraciones de datos.

    Uso:
        report = SeedService(db, config, ...).run()
    """

    def __init__(
        self,
        db: Database,
        config: Config,
        user_service: UserService,
        user_repo: IUserRepository,
        product_repo: IProductRepository,
        currency_repo: ICurrencyRepository,
        migration_repo: IMigrationRepository
    ):
        self.db = db
        self.config = config
        self.user_service = user_service
        self.user_repo = user_repo
        self.product_repo = product_repo
        self.currency_repo = currency_repo
        self.migration_repo = migration_repo

    @profile_function(name="Datos iniciales")
    def run(self) -> Dict[str, Any]:
        """
        Ejecuta todos los pasos en orden.

        Returns:
            Reporte con lo insertado/eliminado en esta corrida
        """
        report = {
            'admin_created': self.ensure_admin(),
            'base_currency_created': self.ensure_base_currency(),
            'currencies_created': [],
            'legacy_sentinel_migrated': False,
            'example_products_removed': 0,
            'example_products_created': 0,
            'passwords_migrated': 0,
        }

        if self.config.seed_example_currencies:
            report['currencies_created'] = self.ensure_example_currencies()

        report['legacy_sentinel_migrated'] = self.migrate_legacy_sentinel()
        report['example_products_removed'] = self.remove_example_products()

        if self.config.seed_example_products:
            report['example_products_created'] = self.seed_example_products()

        report['passwords_migrated'] = self.user_service.migrate_passwords_to_hash()

        logger.info("Datos iniciales: %s", report)
        return report

    # =========================================================================
    # PASOS
    # =========================================================================

    def ensure_admin(self) -> bool:
        """Crea el administrador si no existe. True si lo creó."""
        username = self.config.admin_username
        if self.user_repo.user_exists(username):
            return False
        self.user_service.create_user(username, self.config.admin_password)
        logger.info("Usuario administrador '%s' creado", username)
        return True

    def ensure_base_currency(self) -> bool:
        """Crea la moneda base CUP (tasa 1, activa) si no existe."""
        if self.currency_repo.get_by_code(BASE_CURRENCY_CODE) is not None:
            return False
        self.currency_repo.create_currency(
            CurrencyInput(code=BASE_CURRENCY_CODE, name=BASE_CURRENCY_NAME, exchange_rate=1.0)
        )
        logger.info("Moneda base %s creada", BASE_CURRENCY_CODE)
        return True

    def ensure_example_currencies(self) -> list:
        """Crea USD y MLC si faltan. Retorna los códigos creados."""
        created = []
        for currency in EXAMPLE_CURRENCIES:
            if self.currency_repo.get_by_code(currency.code) is None:
                self.currency_repo.create_currency(currency)
                created.append(currency.code)
        return created

    def migrate_legacy_sentinel(self) -> bool:
        """
        Bases creadas por versiones anteriores marcan la limpieza con un
        usuario centinela. Se registra como migración aplicada y se borra.
        """
        if not self.user_repo.user_exists(LEGACY_SENTINEL_USER):
            return False
        with self.db.transaction():
            self.migration_repo.mark_applied(REMOVE_EXAMPLE_PRODUCTS)
            self.user_repo.delete_user(LEGACY_SENTINEL_USER)
        logger.info("Centinela '%s' migrado a schema_migrations", LEGACY_SENTINEL_USER)
        return True

    def remove_example_products(self) -> int:
        """
        Migración única: elimina los productos de ejemplo que sembraban las
        primeras versiones. Nunca vuelve a correr sobre la misma base.

        Returns:
            Cantidad de productos eliminados
        """
        if self.migration_repo.is_applied(REMOVE_EXAMPLE_PRODUCTS):
            return 0
        with self.db.transaction():
            removed = self.product_repo.delete_by_names(p.name for p in EXAMPLE_PRODUCTS)
            self.migration_repo.mark_applied(REMOVE_EXAMPLE_PRODUCTS)
        if removed:
            logger.info("%d producto(s) de ejemplo eliminados", removed)
        return removed

    def seed_example_products(self) -> int:
        """Inserta los productos de ejemplo que falten (por nombre)."""
        created = 0
        for product in EXAMPLE_PRODUCTS:
            if self.product_repo.find_by_name(product.name) is None:
                self.product_repo.create_product(product)
                created += 1
        return created
