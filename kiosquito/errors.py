# ==============================================================================
# ERRORES DEL NÚCLEO
# ==============================================================================
# Todas las fallas se propagan al llamador inmediato (rutas, tests).
# El núcleo no reintenta ni recupera en segundo plano; solo falla con
# suficiente detalle para construir el mensaje al usuario.
# ==============================================================================

from typing import Any, Optional


class KiosquitoError(Exception):
    """Excepción base de todas las fallas del núcleo."""
    pass


class NotInitializedError(KiosquitoError):
    """Se llamó al núcleo antes de que el esquema estuviera creado."""

    def __init__(self, message: str = 'Base de datos no inicializada'):
        super().__init__(message)


class ValidationError(KiosquitoError):
    """
    Entrada con forma inválida (precio no positivo, cantidad <= 0, etc.).

    Attributes:
        field: Campo que causó el rechazo (si aplica)
    """

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class DuplicateCurrencyError(ValidationError):
    """Ya existe una moneda con ese código (incluye un segundo CUP)."""

    def __init__(self, code: str):
        super().__init__(f"Ya existe una moneda con código {code}", field='code')
        self.code = code


class ProtectedCurrencyError(ValidationError):
    """Intento de modificar, desactivar o eliminar la moneda base."""
    pass


class NotFoundError(KiosquitoError):
    """El producto o la moneda referenciados no existen."""

    MESSAGES = {
        'product': 'Producto no encontrado',
        'currency': 'Moneda no encontrada',
        'sale': 'Venta no encontrada',
        'user': 'Usuario no encontrado',
    }

    def __init__(self, entity: str, entity_id: Any):
        message = self.MESSAGES.get(entity, f"{entity} no encontrado")
        super().__init__(f"{message} (id: {entity_id})")
        self.entity = entity
        self.entity_id = entity_id


class InsufficientStockError(KiosquitoError):
    """La cantidad solicitada supera el stock actual del producto."""

    def __init__(self, product_id: int, requested: int, available: int):
        super().__init__(
            f"Stock insuficiente para el producto {product_id}. "
            f"Solicitado: {requested}, Disponible: {available}"
        )
        self.product_id = product_id
        self.requested = requested
        self.available = available


class StorageError(KiosquitoError):
    """Error del motor de almacenamiento (disco, corrupción, restricción)."""
    pass
