# ==============================================================================
# ENTIDADES DEL DOMINIO - Definiciones de dataclasses
# ==============================================================================
# Cada entidad representa una fila de la base local (SQLite).
# from_row() convierte una fila (sqlite3.Row o dict) en la entidad;
# to_dict() produce la forma serializable que consumen las rutas.
# ==============================================================================

from dataclasses import dataclass, asdict
from datetime import date
from enum import Enum
from typing import Any, Dict, Mapping, Optional


# Moneda de referencia: todos los montos guardados están en CUP
BASE_CURRENCY_CODE = 'CUP'
BASE_CURRENCY_NAME = 'Peso Cubano'

# Etiquetas para referencias huérfanas (producto o moneda eliminados)
DELETED_PRODUCT_LABEL = 'Producto eliminado'
DELETED_CURRENCY_LABEL = 'Moneda eliminada'


# ==============================================================================
# ENUMERACIONES
# ==============================================================================

class SummaryPeriod(str, Enum):
    """
    Ventanas móviles para resúmenes de ventas.
    El valor de days_back es cuántos días antes de hoy abarca la ventana.
    """
    DAY = 'day'
    WEEK = 'week'
    MONTH = 'month'

    @property
    def days_back(self) -> int:
        return {'day': 0, 'week': 7, 'month': 30}[self.value]


# Alias en español (versiones anteriores)
PERIOD_ALIASES = {
    'dia': SummaryPeriod.DAY,
    'día': SummaryPeriod.DAY,
    'semana': SummaryPeriod.WEEK,
    'mes': SummaryPeriod.MONTH,
}


# ==============================================================================
# ENTIDADES
# ==============================================================================

@dataclass
class User:
    """
    Usuario del sistema.

    Attributes:
        id: Clave sustituta
        username: Identificador único
        password_hash: Hash werkzeug de la contraseña
    """
    id: int
    username: str
    password_hash: str = ''

    def to_dict(self) -> Dict[str, Any]:
        """Nunca expone el hash."""
        return {'id': self.id, 'username': self.username}

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> 'User':
        return cls(
            id=row['id'],
            username=row['username'],
            password_hash=row['password'] or '',
        )


@dataclass
class Product:
    """
    Producto del catálogo.

    Attributes:
        id: Identificador del producto
        name: Nombre (no vacío)
        price: Precio en moneda base (> 0)
        stock: Unidades disponibles (>= 0)
        description: Descripción opcional
        category: Categoría opcional
        created_at: Fecha de alta
    """
    id: int
    name: str
    price: float
    stock: int = 0
    description: str = ''
    category: str = ''
    created_at: Optional[str] = None

    @property
    def in_stock(self) -> bool:
        return self.stock > 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> 'Product':
        return cls(
            id=row['id'],
            name=row['name'],
            price=float(row['price']),
            stock=int(row['stock']),
            description=row['description'] or '',
            category=row['category'] or '',
            created_at=row['created_at'],
        )


@dataclass
class Currency:
    """
    Moneda aceptada en ventas.

    Attributes:
        id: Identificador de la moneda
        code: Código corto en mayúsculas (CUP, USD, MLC...)
        name: Nombre legible
        exchange_rate: Unidades de moneda base por 1 unidad de esta moneda
        active: Si puede seleccionarse en nuevas ventas
    """
    id: int
    code: str
    name: str
    exchange_rate: float = 1.0
    active: bool = True

    @property
    def is_base(self) -> bool:
        """Verifica si es la moneda base (CUP)."""
        return self.code == BASE_CURRENCY_CODE

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d['is_base'] = self.is_base
        return d

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> 'Currency':
        return cls(
            id=row['id'],
            code=row['code'],
            name=row['name'],
            exchange_rate=float(row['exchange_rate']),
            active=bool(row['active']),
        )


@dataclass
class Sale:
    """
    Venta registrada. Nunca se actualiza ni se elimina.

    Attributes:
        id: Identificador de la venta
        product_id: Producto vendido (puede ya no existir)
        quantity: Unidades vendidas (> 0)
        unit_price: Precio unitario en moneda base al momento de la venta
        currency_id: Moneda en la que se cobró (puede ya no existir)
        total_base: unit_price * quantity, en moneda base
        created_at: Fecha de la venta
        product_name: Nombre resuelto al leer (o etiqueta de eliminado)
        currency_code: Código resuelto al leer (o etiqueta de eliminada)
    """
    id: int
    product_id: int
    quantity: int
    unit_price: float
    currency_id: int
    total_base: float
    created_at: Optional[str] = None
    product_name: str = DELETED_PRODUCT_LABEL
    currency_code: str = DELETED_CURRENCY_LABEL

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> 'Sale':
        keys = row.keys()
        product_name = row['product_name'] if 'product_name' in keys else None
        currency_code = row['currency_code'] if 'currency_code' in keys else None
        return cls(
            id=row['id'],
            product_id=row['product_id'],
            quantity=int(row['quantity']),
            unit_price=float(row['unit_price']),
            currency_id=row['currency_id'],
            total_base=float(row['total_base']),
            created_at=row['created_at'],
            product_name=product_name or DELETED_PRODUCT_LABEL,
            currency_code=currency_code or DELETED_CURRENCY_LABEL,
        )


@dataclass
class SalesSummary:
    """
    Agregado de ventas en una ventana de fechas (ambos extremos inclusive).
    """
    period: SummaryPeriod
    start_date: date
    end_date: date
    count: int = 0
    total_revenue_base: float = 0.0
    total_units_sold: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'period': self.period.value,
            'start_date': self.start_date.isoformat(),
            'end_date': self.end_date.isoformat(),
            'count': self.count,
            'total_revenue_base': self.total_revenue_base,
            'total_units_sold': self.total_units_sold,
        }
