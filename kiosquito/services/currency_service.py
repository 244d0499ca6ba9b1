# ==============================================================================
# SERVICIO DE MONEDAS
# ==============================================================================
# Monedas y tasas de cambio contra la moneda base (CUP).
#
# Convención de tasas: exchange_rate = cuántos CUP vale 1 unidad de la moneda.
#   - Un monto en CUP se muestra en otra moneda dividiendo por la tasa.
#   - Un monto en otra moneda pasa a CUP multiplicando por la tasa.
#
# Reglas de la moneda base:
#   - Existe exactamente una fila con código CUP
#   - No se puede desactivar, eliminar ni cambiar su código
#   - Su tasa es siempre 1.0
# ==============================================================================

import logging
from typing import Any, List, Mapping

from kiosquito.errors import (
    DuplicateCurrencyError,
    NotFoundError,
    ProtectedCurrencyError,
)
from kiosquito.models.entities import BASE_CURRENCY_CODE, Currency
from kiosquito.models.validation import validate_currency, validate_currency_patch
from kiosquito.performance_logger import profile_function
from kiosquito.repositories.interfaces import ICurrencyRepository

logger = logging.getLogger(__name__)


class CurrencyService:
    """
    Servicio para gestión de monedas.

    Responsabilidades:
    - CRUD de monedas con validación propia
    - Protección de la moneda base
    - Conversión de montos entre CUP y otras monedas
    """

    def __init__(self, currency_repo: ICurrencyRepository):
        """
        Args:
            currency_repo: Repositorio de monedas
        """
        self.currency_repo = currency_repo

    # =========================================================================
    # CONSULTAS
    # =========================================================================

    def list_currencies(self) -> List[Currency]:
        """Monedas activas, la base primero."""
        return self.currency_repo.list_active()

    def list_all_currencies(self) -> List[Currency]:
        """Todas las monedas (pantalla de administración)."""
        return self.currency_repo.list_all()

    def get_currency(self, cid: int) -> Currency:
        """
        Raises:
            NotFoundError: Si la moneda no existe
        """
        currency = self.currency_repo.get_currency(cid)
        if currency is None:
            raise NotFoundError('currency', cid)
        return currency

    def get_base_currency(self) -> Currency:
        """
        Retorna la moneda base.

        Raises:
            NotFoundError: Si aún no se cargaron los datos iniciales
        """
        currency = self.currency_repo.get_by_code(BASE_CURRENCY_CODE)
        if currency is None:
            raise NotFoundError('currency', BASE_CURRENCY_CODE)
        return currency

    # =========================================================================
    # ESCRITURA
    # =========================================================================

    @profile_function(name="Crear moneda")
    def create_currency(self, data: Mapping[str, Any]) -> int:
        """
        Crea una moneda.

        Args:
            data: {code, name, exchange_rate, active?}

        Returns:
            ID de la moneda creada

        Raises:
            ValidationError: Datos inválidos
            DuplicateCurrencyError: El código ya existe (incluye un segundo CUP)
        """
        currency = validate_currency(data)
        if self.currency_repo.count_by_code(currency.code) > 0:
            raise DuplicateCurrencyError(currency.code)

        cid = self.currency_repo.create_currency(currency)
        logger.info(
            "Moneda creada: #%s %s (tasa %s)", cid, currency.code, currency.exchange_rate
        )
        return cid

    @profile_function(name="Editar moneda")
    def update_currency(self, cid: int, patch: Mapping[str, Any]) -> Currency:
        """
        Actualiza solo los campos presentes en el patch.

        Returns:
            Moneda actualizada

        Raises:
            ValidationError: Campo inválido o patch vacío
            NotFoundError: Si la moneda no existe
            ProtectedCurrencyError: Cambio no permitido sobre la moneda base
            DuplicateCurrencyError: El nuevo código ya está en uso
        """
        mask = validate_currency_patch(patch)
        current = self.get_currency(cid)

        if current.is_base:
            if 'code' in mask and mask.get('code') != BASE_CURRENCY_CODE:
                raise ProtectedCurrencyError(
                    "No se puede cambiar el código de la moneda base", 'code'
                )
            if 'active' in mask and not mask.get('active'):
                raise ProtectedCurrencyError(
                    "No se puede desactivar la moneda base", 'active'
                )
            if 'exchange_rate' in mask and mask.get('exchange_rate') != 1.0:
                raise ProtectedCurrencyError(
                    "La tasa de la moneda base debe ser 1", 'exchange_rate'
                )

        new_code = mask.get('code')
        if new_code and new_code != current.code:
            if self.currency_repo.count_by_code(new_code) > 0:
                raise DuplicateCurrencyError(new_code)

        if not self.currency_repo.update_currency(cid, mask):
            raise NotFoundError('currency', cid)
        logger.info("Moneda #%s actualizada: %s", cid, ', '.join(mask.values))
        return self.get_currency(cid)

    def toggle_active(self, cid: int) -> Currency:
        """
        Activa o desactiva una moneda.

        Raises:
            ProtectedCurrencyError: Si es la moneda base
        """
        current = self.get_currency(cid)
        return self.update_currency(cid, {'active': not current.active})

    @profile_function(name="Eliminar moneda")
    def delete_currency(self, cid: int) -> None:
        """
        Elimina una moneda (borrado físico).
        Las ventas registradas en ella se conservan.

        Raises:
            NotFoundError: Si no existe
            ProtectedCurrencyError: Si es la moneda base
        """
        current = self.get_currency(cid)
        if current.is_base:
            raise ProtectedCurrencyError("No se puede eliminar la moneda base")

        if not self.currency_repo.delete_currency(cid):
            raise NotFoundError('currency', cid)
        logger.info("Moneda #%s (%s) eliminada", cid, current.code)

    # =========================================================================
    # CONVERSIÓN
    # =========================================================================

    def convert_from_base(self, amount_base: float, cid: int) -> float:
        """
        Convierte un monto en CUP a la moneda indicada (para mostrar).

        Ejemplo: 150 CUP con USD a 120 -> 1.25
        """
        currency = self.get_currency(cid)
        return round(float(amount_base) / currency.exchange_rate, 2)

    def convert_to_base(self, amount: float, cid: int) -> float:
        """Convierte un monto en la moneda indicada a CUP."""
        currency = self.get_currency(cid)
        return round(float(amount) * currency.exchange_rate, 2)
