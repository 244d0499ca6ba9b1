# ==============================================================================
# REPOSITORIO DE VENTAS
# ==============================================================================
# Encapsula todo el acceso a la tabla sales.
# Las ventas solo se insertan (nunca se actualizan ni se eliminan).
# Al leer, nombre de producto y código de moneda se resuelven con LEFT JOIN:
# si la referencia ya no existe se muestra una etiqueta de eliminado.
# ==============================================================================

from datetime import date
from typing import List, Optional, Tuple

from kiosquito.models.entities import (
    DELETED_CURRENCY_LABEL,
    DELETED_PRODUCT_LABEL,
    Sale,
)
from kiosquito.repositories.base import BaseRepository

_SELECT_WITH_NAMES = f"""
    SELECT s.*,
           COALESCE(p.name, '{DELETED_PRODUCT_LABEL}') AS product_name,
           COALESCE(c.code, '{DELETED_CURRENCY_LABEL}') AS currency_code
    FROM sales s
    LEFT JOIN products p ON s.product_id = p.id
    LEFT JOIN currencies c ON s.currency_id = c.id
"""


def _date_filter(start_date: Optional[date], end_date: Optional[date],
                 column: str = 'created_at') -> Tuple[str, list]:
    """Construye el WHERE para una ventana de fechas inclusiva."""
    clauses = []
    params = []
    if start_date is not None:
        clauses.append(f"DATE({column}) >= ?")
        params.append(start_date.isoformat())
    if end_date is not None:
        clauses.append(f"DATE({column}) <= ?")
        params.append(end_date.isoformat())
    if not clauses:
        return '', params
    return ' WHERE ' + ' AND '.join(clauses), params


class SalesRepository(BaseRepository):
    """Repositorio para el libro de ventas."""

    table = 'sales'
    entity = Sale

    def create_sale(
        self,
        product_id: int,
        quantity: int,
        unit_price: float,
        currency_id: int,
        total_base: float
    ) -> int:
        """
        Inserta una venta. Debe llamarse dentro de la transacción que
        descuenta el stock (ver SalesService.record_sale).

        Returns:
            ID de la venta
        """
        return self._insert({
            'product_id': product_id,
            'quantity': quantity,
            'unit_price': unit_price,
            'currency_id': currency_id,
            'total_base': total_base,
            'created_at': self.db.now(),
        })

    def get_sale(self, sale_id: int) -> Optional[Sale]:
        row = self.db.fetch_one(f"{_SELECT_WITH_NAMES} WHERE s.id = ?", (sale_id,))
        return Sale.from_row(row) if row else None

    def list_sales(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        limit: Optional[int] = None
    ) -> List[Sale]:
        """
        Lista ventas de la más reciente a la más antigua.

        Args:
            start_date: Primer día incluido (opcional)
            end_date: Último día incluido (opcional)
            limit: Máximo de filas (opcional)
        """
        where, params = _date_filter(start_date, end_date, 's.created_at')
        sql = f"{_SELECT_WITH_NAMES}{where} ORDER BY s.created_at DESC, s.id DESC"
        if limit is not None:
            sql += " LIMIT ?"
            params.append(limit)
        return [Sale.from_row(r) for r in self.db.fetch_all(sql, params)]

    def aggregate(self, start_date: date, end_date: date) -> Tuple[int, float, int]:
        """
        Agrega ventas en la ventana [start_date, end_date].

        Returns:
            Tupla (cantidad_ventas, ingresos_base, unidades_vendidas)
        """
        where, params = _date_filter(start_date, end_date)
        row = self.db.fetch_one(
            f"""
            SELECT COUNT(*) AS sales_count,
                   COALESCE(SUM(total_base), 0) AS revenue,
                   COALESCE(SUM(quantity), 0) AS units
            FROM sales{where}
            """,
            params,
        )
        return int(row['sales_count']), round(float(row['revenue']), 2), int(row['units'])
