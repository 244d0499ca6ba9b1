# ==============================================================================
# CAPA DE MODELOS - Estructuras de datos del sistema
# ==============================================================================
# Entidades del dominio (dataclasses) y validación de entradas.
# Independientes del mecanismo de persistencia.
# ==============================================================================

from .entities import (
    # Constantes
    BASE_CURRENCY_CODE,
    BASE_CURRENCY_NAME,
    DELETED_PRODUCT_LABEL,
    DELETED_CURRENCY_LABEL,

    # Entidades
    User,
    Product,
    Currency,
    Sale,
    SalesSummary,
    SummaryPeriod,
)

from .validation import (
    ProductInput,
    CurrencyInput,
    SaleInput,
    FieldMask,
    validate_product,
    validate_product_patch,
    validate_currency,
    validate_currency_patch,
    validate_sale,
    parse_date,
    parse_period,
)

__all__ = [
    'BASE_CURRENCY_CODE',
    'BASE_CURRENCY_NAME',
    'DELETED_PRODUCT_LABEL',
    'DELETED_CURRENCY_LABEL',

    'User',
    'Product',
    'Currency',
    'Sale',
    'SalesSummary',
    'SummaryPeriod',

    'ProductInput',
    'CurrencyInput',
    'SaleInput',
    'FieldMask',
    'validate_product',
    'validate_product_patch',
    'validate_currency',
    'validate_currency_patch',
    'validate_sale',
    'parse_date',
    'parse_period',
]
