# ==============================================================================
# REPOSITORIO DE MONEDAS
# ==============================================================================
# Encapsula todo el acceso a la tabla currencies.
# La protección de la moneda base (CUP) vive en CurrencyService.
# ==============================================================================

from typing import List, Optional

from kiosquito.models.entities import BASE_CURRENCY_CODE, Currency
from kiosquito.models.validation import CurrencyInput, FieldMask
from kiosquito.repositories.base import BaseRepository

# La moneda base siempre primero, el resto por código
_ORDER_BASE_FIRST = (
    f"ORDER BY CASE WHEN code = '{BASE_CURRENCY_CODE}' THEN 0 ELSE 1 END, code"
)


class CurrencyRepository(BaseRepository):
    """Repositorio para monedas y tasas de cambio."""

    table = 'currencies'
    entity = Currency
    updatable_columns = frozenset(['code', 'name', 'exchange_rate', 'active'])

    def list_active(self) -> List[Currency]:
        """Solo monedas activas (seleccionables en una venta)."""
        rows = self.db.fetch_all(
            f"SELECT * FROM currencies WHERE active = 1 {_ORDER_BASE_FIRST}"
        )
        return [Currency.from_row(r) for r in rows]

    def list_all(self) -> List[Currency]:
        """Todas las monedas, activas o no."""
        rows = self.db.fetch_all(f"SELECT * FROM currencies {_ORDER_BASE_FIRST}")
        return [Currency.from_row(r) for r in rows]

    def get_currency(self, cid: int) -> Optional[Currency]:
        return self.get_by_id(cid)

    def get_by_code(self, code: str) -> Optional[Currency]:
        row = self.db.fetch_one("SELECT * FROM currencies WHERE code = ?", (code,))
        return Currency.from_row(row) if row else None

    def count_by_code(self, code: str) -> int:
        return self.db.fetch_one(
            "SELECT COUNT(*) FROM currencies WHERE code = ?", (code,)
        )[0]

    def create_currency(self, data: CurrencyInput) -> int:
        """
        Inserta una moneda.

        Returns:
            ID generado
        """
        with self.db.transaction():
            return self._insert({
                'code': data.code,
                'name': data.name,
                'exchange_rate': data.exchange_rate,
                'active': 1 if data.active else 0,
            })

    def update_currency(self, cid: int, mask: FieldMask) -> bool:
        if 'active' in mask:
            mask = FieldMask(dict(mask.values, active=1 if mask.get('active') else 0))
        return self._update_fields(cid, mask)

    def delete_currency(self, cid: int) -> bool:
        return self.delete(cid)
