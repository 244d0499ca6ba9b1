# ==============================================================================
# VALIDACIÓN DE ENTRADAS - Frontera del núcleo
# ==============================================================================
# Funciones puras: datos crudos -> objeto validado, o ValidationError.
# Los servicios las llaman SIEMPRE antes de tocar la base, así el núcleo es
# seguro aunque el llamador no valide nada.
#
# Las actualizaciones parciales usan FieldMask: solo los campos presentes en
# el patch llegan al UPDATE. Omitir un campo nunca lo escribe como NULL.
# ==============================================================================

import math
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, Iterator, Mapping, Optional, Tuple

from kiosquito.errors import ValidationError
from kiosquito.models.entities import PERIOD_ALIASES, SummaryPeriod

MAX_NAME_LENGTH = 120
MAX_CODE_LENGTH = 10

SQLITE_MIN_INT = -(2 ** 63)
SQLITE_MAX_INT = 2 ** 63 - 1

PRODUCT_FIELDS = ('name', 'price', 'stock', 'description', 'category')
CURRENCY_FIELDS = ('code', 'name', 'exchange_rate', 'active')

# Campos que se ignoran en un patch (los formularios los reenvían)
_IGNORED_PATCH_FIELDS = frozenset(['id'])


# ==============================================================================
# OBJETOS VALIDADOS
# ==============================================================================

@dataclass(frozen=True)
class ProductInput:
    """Datos de un producto nuevo, ya validados."""
    name: str
    price: float
    stock: int
    description: str = ''
    category: str = ''


@dataclass(frozen=True)
class CurrencyInput:
    """Datos de una moneda nueva, ya validados."""
    code: str
    name: str
    exchange_rate: float
    active: bool = True


@dataclass(frozen=True)
class SaleInput:
    """Solicitud de venta con forma válida (aún sin verificar stock)."""
    product_id: int
    quantity: int
    currency_id: int
    unit_price: Optional[float] = None


@dataclass
class FieldMask:
    """
    Conjunto explícito de columnas a actualizar.

    Attributes:
        values: {columna: valor validado}, solo campos presentes en el patch
    """
    values: Dict[str, Any] = field(default_factory=dict)

    def __contains__(self, column: str) -> bool:
        return column in self.values

    def __iter__(self) -> Iterator[Tuple[str, Any]]:
        return iter(self.values.items())

    def __len__(self) -> int:
        return len(self.values)

    def get(self, column: str, default: Any = None) -> Any:
        return self.values.get(column, default)


# ==============================================================================
# VALIDADORES DE CAMPOS
# ==============================================================================

def _text(value: Any, field_name: str, required: bool, max_length: int = MAX_NAME_LENGTH) -> str:
    if value is None:
        if required:
            raise ValidationError(f"El campo '{field_name}' es obligatorio", field_name)
        return ''
    if not isinstance(value, str):
        raise ValidationError(f"El campo '{field_name}' debe ser texto", field_name)
    text = value.strip()
    if required and not text:
        raise ValidationError(f"El campo '{field_name}' es obligatorio", field_name)
    if len(text) > max_length:
        raise ValidationError(
            f"El campo '{field_name}' supera {max_length} caracteres", field_name
        )
    return text


def _number(value: Any, field_name: str) -> float:
    if isinstance(value, bool) or value is None:
        raise ValidationError(f"El campo '{field_name}' debe ser un número", field_name)
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"El campo '{field_name}' debe ser un número", field_name)
    if math.isnan(number) or math.isinf(number):
        raise ValidationError(f"El campo '{field_name}' debe ser un número", field_name)
    return number


def _positive_amount(value: Any, field_name: str) -> float:
    # Se redondea antes de comparar: 0.001 queda en 0.0 y no es válido
    number = round(_number(value, field_name), 2)
    if number <= 0:
        raise ValidationError(
            f"El campo '{field_name}' debe ser un número válido mayor a 0", field_name
        )
    return number


def _integer(value: Any, field_name: str) -> int:
    if isinstance(value, int) and not isinstance(value, bool):
        number = value
    else:
        real = _number(value, field_name)
        if not real.is_integer():
            raise ValidationError(f"El campo '{field_name}' debe ser un entero", field_name)
        number = int(real)
    # SQLite guarda enteros de 64 bits con signo
    if not SQLITE_MIN_INT <= number <= SQLITE_MAX_INT:
        raise ValidationError(f"El campo '{field_name}' está fuera de rango", field_name)
    return number


def _non_negative_int(value: Any, field_name: str) -> int:
    number = _integer(value, field_name)
    if number < 0:
        raise ValidationError(
            f"El campo '{field_name}' debe ser un número válido mayor o igual a 0",
            field_name,
        )
    return number


def _positive_int(value: Any, field_name: str) -> int:
    number = _integer(value, field_name)
    if number <= 0:
        raise ValidationError(
            f"El campo '{field_name}' debe ser un entero mayor a 0", field_name
        )
    return number


def _boolean(value: Any, field_name: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str) and value.strip().lower() in ('1', 'true', '0', 'false'):
        return value.strip().lower() in ('1', 'true')
    raise ValidationError(f"El campo '{field_name}' debe ser verdadero o falso", field_name)


def _currency_code(value: Any) -> str:
    code = _text(value, 'code', required=True, max_length=MAX_CODE_LENGTH).upper()
    if not code.isalnum():
        raise ValidationError("El código de moneda solo admite letras y números", 'code')
    return code


def _check_mapping(data: Any) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise ValidationError("Se esperaba un objeto con los datos")
    return data


def _build_mask(data: Any, allowed: Tuple[str, ...], validators: Dict[str, Any]) -> FieldMask:
    data = _check_mapping(data)
    unknown = [k for k in data if k not in allowed and k not in _IGNORED_PATCH_FIELDS]
    if unknown:
        raise ValidationError(f"Campos no permitidos: {', '.join(sorted(unknown))}", unknown[0])

    mask = FieldMask()
    for column in allowed:
        if column in data:
            mask.values[column] = validators[column](data[column])
    if not mask:
        raise ValidationError("No hay campos para actualizar")
    return mask


# ==============================================================================
# PRODUCTOS
# ==============================================================================

_PRODUCT_VALIDATORS = {
    'name': lambda v: _text(v, 'name', required=True),
    'price': lambda v: _positive_amount(v, 'price'),
    'stock': lambda v: _non_negative_int(v, 'stock'),
    'description': lambda v: _text(v, 'description', required=False, max_length=500),
    'category': lambda v: _text(v, 'category', required=False),
}


def validate_product(data: Any) -> ProductInput:
    """
    Valida los datos de un producto nuevo.

    Reglas: nombre obligatorio, precio > 0, stock entero >= 0.

    Raises:
        ValidationError: Si algún campo es inválido
    """
    data = _check_mapping(data)
    return ProductInput(
        name=_PRODUCT_VALIDATORS['name'](data.get('name')),
        price=_PRODUCT_VALIDATORS['price'](data.get('price')),
        stock=_PRODUCT_VALIDATORS['stock'](data.get('stock', 0)),
        description=_PRODUCT_VALIDATORS['description'](data.get('description')),
        category=_PRODUCT_VALIDATORS['category'](data.get('category')),
    )


def validate_product_patch(data: Any) -> FieldMask:
    """Valida un patch parcial de producto y devuelve su FieldMask."""
    return _build_mask(data, PRODUCT_FIELDS, _PRODUCT_VALIDATORS)


# ==============================================================================
# MONEDAS
# ==============================================================================

_CURRENCY_VALIDATORS = {
    'code': _currency_code,
    'name': lambda v: _text(v, 'name', required=True),
    'exchange_rate': lambda v: _positive_amount_precise(v, 'exchange_rate'),
    'active': lambda v: _boolean(v, 'active'),
}


def _positive_amount_precise(value: Any, field_name: str) -> float:
    # Las tasas no se redondean a 2 decimales (ej. 0.0083)
    number = _number(value, field_name)
    if number <= 0:
        raise ValidationError(
            "La tasa de cambio debe ser un número válido mayor a 0", field_name
        )
    return number


def validate_currency(data: Any) -> CurrencyInput:
    """
    Valida los datos de una moneda nueva.

    Reglas: código obligatorio (se normaliza a mayúsculas), nombre
    obligatorio, tasa de cambio > 0.
    """
    data = _check_mapping(data)
    return CurrencyInput(
        code=_CURRENCY_VALIDATORS['code'](data.get('code')),
        name=_CURRENCY_VALIDATORS['name'](data.get('name')),
        exchange_rate=_CURRENCY_VALIDATORS['exchange_rate'](data.get('exchange_rate')),
        active=_CURRENCY_VALIDATORS['active'](data.get('active', True)),
    )


def validate_currency_patch(data: Any) -> FieldMask:
    """Valida un patch parcial de moneda y devuelve su FieldMask."""
    return _build_mask(data, CURRENCY_FIELDS, _CURRENCY_VALIDATORS)


# ==============================================================================
# VENTAS Y FECHAS
# ==============================================================================

def validate_sale(
    product_id: Any,
    quantity: Any,
    currency_id: Any,
    unit_price: Any = None
) -> SaleInput:
    """
    Valida la forma de una solicitud de venta.
    No consulta la base: existencia y stock los verifica SalesService.
    """
    return SaleInput(
        product_id=_positive_int(product_id, 'product_id'),
        quantity=_positive_int(quantity, 'quantity'),
        currency_id=_positive_int(currency_id, 'currency_id'),
        unit_price=None if unit_price is None else _positive_amount(unit_price, 'unit_price'),
    )


def parse_date(value: Any, field_name: str = 'date') -> Optional[date]:
    """
    Convierte date, datetime o texto 'YYYY-MM-DD' a date.
    None o cadena vacía devuelven None.
    """
    if value is None or value == '':
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return datetime.strptime(value.strip()[:10], '%Y-%m-%d').date()
        except ValueError:
            pass
    raise ValidationError(f"Fecha inválida en '{field_name}', use YYYY-MM-DD", field_name)


def parse_period(value: Any) -> SummaryPeriod:
    """
    Convierte 'day' | 'week' | 'month' (o 'dia' | 'semana' | 'mes') en
    SummaryPeriod.
    """
    if isinstance(value, SummaryPeriod):
        return value
    if isinstance(value, str):
        key = value.strip().lower()
        if key in PERIOD_ALIASES:
            return PERIOD_ALIASES[key]
        try:
            return SummaryPeriod(key)
        except ValueError:
            pass
    raise ValidationError(
        f"Período inválido: {value!r}. Use 'day', 'week' o 'month'", 'period'
    )
