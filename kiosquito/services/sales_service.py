# ==============================================================================
# SERVICIO DE VENTAS
# ==============================================================================
# Libro de ventas: registro con descuento de stock y resúmenes por período.
#
# Ciclo de una venta:
#   Solicitada -> Validada -> Confirmada
#   Solicitada -> Rechazada (ValidationError, NotFoundError,
#                            InsufficientStockError)
#
# El descuento de stock y el INSERT de la venta ocurren en UNA transacción:
# si cualquiera falla, no queda ninguno de los dos.
#
# Montos: unit_price y total_base están SIEMPRE en moneda base (CUP).
# La moneda de la venta solo indica en qué se cobró; para mostrar el total
# en esa moneda se usa CurrencyService.convert_from_base().
# ==============================================================================

import logging
from datetime import date, timedelta
from typing import Any, List, Optional

from kiosquito.errors import InsufficientStockError, NotFoundError, ValidationError
from kiosquito.models.entities import Sale, SalesSummary
from kiosquito.models.validation import parse_date, parse_period, validate_sale
from kiosquito.performance_logger import profile_function
from kiosquito.repositories.base import Database
from kiosquito.repositories.interfaces import (
    ICurrencyRepository,
    IProductRepository,
    ISalesRepository,
)

logger = logging.getLogger(__name__)


class SalesService:
    """
    Servicio para el libro de ventas.

    Responsabilidades:
    - Registrar ventas validando producto, moneda y stock
    - Consultar ventas por rango de fechas
    - Resúmenes de día, semana y mes
    """

    def __init__(
        self,
        db: Database,
        sales_repo: ISalesRepository,
        product_repo: IProductRepository,
        currency_repo: ICurrencyRepository
    ):
        """
        Args:
            db: Manejador de base de datos (dueño de la transacción)
            sales_repo: Repositorio de ventas
            product_repo: Repositorio de productos (stock)
            currency_repo: Repositorio de monedas
        """
        self.db = db
        self.sales_repo = sales_repo
        self.product_repo = product_repo
        self.currency_repo = currency_repo

    # =========================================================================
    # REGISTRO DE VENTAS
    # =========================================================================

    @profile_function(name="Registrar venta")
    def record_sale(
        self,
        product_id: Any,
        quantity: Any,
        currency_id: Any,
        unit_price: Any = None
    ) -> int:
        """
        Registra una venta y descuenta el stock del producto.

        Args:
            product_id: ID del producto
            quantity: Unidades vendidas (> 0)
            currency_id: ID de la moneda en que se cobró
            unit_price: Precio unitario en CUP; por defecto el precio actual
                        del producto

        Returns:
            ID de la venta creada

        Raises:
            ValidationError: Forma de la solicitud inválida
            NotFoundError: Producto o moneda inexistentes
            InsufficientStockError: La cantidad supera el stock
        """
        request = validate_sale(product_id, quantity, currency_id, unit_price)

        with self.db.transaction():
            product = self.product_repo.get_product(request.product_id)
            if product is None:
                raise NotFoundError('product', request.product_id)

            currency = self.currency_repo.get_currency(request.currency_id)
            if currency is None:
                raise NotFoundError('currency', request.currency_id)

            if request.quantity > product.stock:
                raise InsufficientStockError(product.id, request.quantity, product.stock)

            if not self.product_repo.decrement_stock(product.id, request.quantity):
                # El guard del UPDATE detectó que el stock cambió
                current = self.product_repo.get_product(product.id)
                available = current.stock if current else 0
                raise InsufficientStockError(product.id, request.quantity, available)

            price = request.unit_price if request.unit_price is not None else product.price
            total_base = round(price * request.quantity, 2)
            sale_id = self.sales_repo.create_sale(
                product.id, request.quantity, price, currency.id, total_base
            )

        logger.info(
            "Venta #%s: %s x%s = %.2f %s (cobrada en %s)",
            sale_id, product.name, request.quantity, total_base,
            'CUP', currency.code,
        )
        return sale_id

    # =========================================================================
    # CONSULTAS
    # =========================================================================

    def get_sale(self, sale_id: int) -> Sale:
        """
        Raises:
            NotFoundError: Si la venta no existe
        """
        sale = self.sales_repo.get_sale(sale_id)
        if sale is None:
            raise NotFoundError('sale', sale_id)
        return sale

    @profile_function(name="Listar ventas")
    def list_sales(
        self,
        start_date: Any = None,
        end_date: Any = None,
        limit: Optional[int] = None
    ) -> List[Sale]:
        """
        Lista ventas de la más reciente a la más antigua.

        Args:
            start_date: Primer día incluido (date o 'YYYY-MM-DD'), opcional
            end_date: Último día incluido, opcional
            limit: Máximo de ventas a retornar

        Raises:
            ValidationError: Fechas inválidas o rango invertido
        """
        start = parse_date(start_date, 'start_date')
        end = parse_date(end_date, 'end_date')
        if start and end and start > end:
            raise ValidationError("La fecha inicial es posterior a la final", 'start_date')
        if limit is not None and (isinstance(limit, bool) or not isinstance(limit, int) or limit <= 0):
            raise ValidationError("El límite debe ser un entero mayor a 0", 'limit')
        return self.sales_repo.list_sales(start, end, limit)

    # =========================================================================
    # RESÚMENES
    # =========================================================================

    def period_window(self, period: Any, today: Optional[date] = None):
        """
        Calcula la ventana [inicio, fin] de un período.

        day = hoy, week = hoy-7 .. hoy, month = hoy-30 .. hoy
        """
        summary_period = parse_period(period)
        end = today or self.db.today()
        start = end - timedelta(days=summary_period.days_back)
        return summary_period, start, end

    @profile_function(name="Resumen de ventas")
    def summarize(self, period: Any) -> SalesSummary:
        """
        Resumen de ventas de un período.

        Args:
            period: 'day' | 'week' | 'month' (o 'dia' | 'semana' | 'mes')

        Returns:
            SalesSummary con cantidad de ventas, ingresos en CUP y unidades.
            Todo en cero si no hay ventas.

        Raises:
            ValidationError: Período desconocido
        """
        summary_period, start, end = self.period_window(period)
        count, revenue, units = self.sales_repo.aggregate(start, end)
        return SalesSummary(
            period=summary_period,
            start_date=start,
            end_date=end,
            count=count,
            total_revenue_base=revenue,
            total_units_sold=units,
        )
