# ==============================================================================
# INTERFACES DE REPOSITORIOS
# ==============================================================================
#
# Contratos (protocolos) que cumplen los repositorios SQLite. Los servicios
# dependen de estas interfaces, no de las implementaciones concretas:
#
# 1. TESTING
#    - Fácil crear dobles que implementen estas interfaces
#
# 2. DOCUMENTACIÓN
#    - Contratos claros de qué hace cada repositorio
#
# ==============================================================================

from datetime import date
from typing import Iterable, List, Optional, Protocol, Tuple, runtime_checkable

from kiosquito.models.entities import Currency, Product, Sale, User
from kiosquito.models.validation import CurrencyInput, FieldMask, ProductInput


@runtime_checkable
class IUserRepository(Protocol):
    """Interfaz para el repositorio de usuarios."""

    def get_user(self, username: str) -> Optional[User]:
        """Obtiene un usuario por nombre."""
        ...

    def user_exists(self, username: str) -> bool:
        """Verifica si un usuario existe."""
        ...

    def list_users(self) -> List[User]:
        """Lista todos los usuarios."""
        ...

    def create_user(self, username: str, password_hash: str) -> int:
        """Crea un nuevo usuario."""
        ...

    def update_password(self, user_id: int, password_hash: str) -> bool:
        """Cambia el hash de contraseña de un usuario."""
        ...

    def delete_user(self, username: str) -> bool:
        """Elimina un usuario."""
        ...


@runtime_checkable
class IProductRepository(Protocol):
    """Interfaz para el repositorio de productos."""

    def list_products(self) -> List[Product]:
        """Todos los productos por nombre."""
        ...

    def list_in_stock(self) -> List[Product]:
        """Productos con stock > 0."""
        ...

    def get_product(self, pid: int) -> Optional[Product]:
        """Obtiene un producto por ID."""
        ...

    def find_by_name(self, name: str) -> Optional[Product]:
        """Busca un producto por nombre exacto."""
        ...

    def create_product(self, data: ProductInput) -> int:
        """Crea un producto validado."""
        ...

    def update_product(self, pid: int, mask: FieldMask) -> bool:
        """Actualiza los campos del mask."""
        ...

    def delete_product(self, pid: int) -> bool:
        """Elimina un producto."""
        ...

    def decrement_stock(self, pid: int, quantity: int) -> bool:
        """Descuenta stock sin dejarlo negativo."""
        ...

    def delete_by_names(self, names: Iterable[str]) -> int:
        """Elimina productos por nombre exacto."""
        ...


@runtime_checkable
class ICurrencyRepository(Protocol):
    """Interfaz para el repositorio de monedas."""

    def list_active(self) -> List[Currency]:
        ...

    def list_all(self) -> List[Currency]:
        ...

    def get_currency(self, cid: int) -> Optional[Currency]:
        ...

    def get_by_code(self, code: str) -> Optional[Currency]:
        ...

    def count_by_code(self, code: str) -> int:
        ...

    def create_currency(self, data: CurrencyInput) -> int:
        ...

    def update_currency(self, cid: int, mask: FieldMask) -> bool:
        ...

    def delete_currency(self, cid: int) -> bool:
        ...


@runtime_checkable
class ISalesRepository(Protocol):
    """Interfaz para el repositorio de ventas."""

    def create_sale(
        self,
        product_id: int,
        quantity: int,
        unit_price: float,
        currency_id: int,
        total_base: float
    ) -> int:
        """Inserta una venta, retorna su ID."""
        ...

    def get_sale(self, sale_id: int) -> Optional[Sale]:
        """Obtiene una venta con nombres resueltos."""
        ...

    def list_sales(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        limit: Optional[int] = None
    ) -> List[Sale]:
        """Lista ventas, más recientes primero."""
        ...

    def aggregate(self, start_date: date, end_date: date) -> Tuple[int, float, int]:
        """(cantidad, ingresos_base, unidades) en la ventana."""
        ...


@runtime_checkable
class IMigrationRepository(Protocol):
    """Interfaz para el registro de migraciones de datos."""

    def is_applied(self, migration_id: str) -> bool:
        ...

    def mark_applied(self, migration_id: str) -> None:
        ...

    def list_applied(self) -> List[str]:
        ...
