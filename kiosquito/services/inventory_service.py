# ==============================================================================
# SERVICIO DE INVENTARIO
# ==============================================================================
# Centraliza la lógica de negocio del catálogo de productos.
# Toda entrada se valida aquí (models.validation) antes de llegar al
# repositorio, sin importar lo que haya validado el llamador.
# ==============================================================================

import logging
from typing import Any, List, Mapping

from kiosquito.errors import NotFoundError
from kiosquito.models.entities import Product
from kiosquito.models.validation import validate_product, validate_product_patch
from kiosquito.performance_logger import profile_function
from kiosquito.repositories.interfaces import IProductRepository

logger = logging.getLogger(__name__)


class InventoryService:
    """
    Servicio para gestión del catálogo.

    Responsabilidades:
    - CRUD de productos con validación propia
    - Consultas de productos disponibles para venta
    """

    def __init__(self, product_repo: IProductRepository):
        """
        Args:
            product_repo: Repositorio de productos
        """
        self.product_repo = product_repo

    # =========================================================================
    # CONSULTAS
    # =========================================================================

    @profile_function(name="Listar productos")
    def list_products(self) -> List[Product]:
        """Todos los productos ordenados por nombre."""
        return self.product_repo.list_products()

    def list_available_products(self) -> List[Product]:
        """Productos con stock > 0 (los que se pueden vender)."""
        return self.product_repo.list_in_stock()

    def get_product(self, pid: int) -> Product:
        """
        Obtiene un producto por su ID.

        Raises:
            NotFoundError: Si no existe
        """
        product = self.product_repo.get_product(pid)
        if product is None:
            raise NotFoundError('product', pid)
        return product

    def product_exists(self, pid: int) -> bool:
        return self.product_repo.get_product(pid) is not None

    # =========================================================================
    # ESCRITURA
    # =========================================================================

    @profile_function(name="Crear producto")
    def create_product(self, data: Mapping[str, Any]) -> int:
        """
        Crea un producto.

        Args:
            data: {name, price, stock, description?, category?}

        Returns:
            ID del producto creado

        Raises:
            ValidationError: Nombre vacío, precio <= 0 o stock < 0
        """
        product = validate_product(data)
        pid = self.product_repo.create_product(product)
        logger.info("Producto creado: #%s %s (stock %s)", pid, product.name, product.stock)
        return pid

    @profile_function(name="Editar producto")
    def update_product(self, pid: int, patch: Mapping[str, Any]) -> Product:
        """
        Actualiza solo los campos presentes en el patch.

        Returns:
            Producto actualizado

        Raises:
            ValidationError: Campo inválido, desconocido o patch vacío
            NotFoundError: Si el producto no existe
        """
        mask = validate_product_patch(patch)
        if not self.product_repo.update_product(pid, mask):
            raise NotFoundError('product', pid)
        logger.info("Producto #%s actualizado: %s", pid, ', '.join(mask.values))
        return self.get_product(pid)

    @profile_function(name="Eliminar producto")
    def delete_product(self, pid: int) -> None:
        """
        Elimina un producto (borrado físico).
        Sus ventas se conservan y quedan huérfanas.

        Raises:
            NotFoundError: Si el producto no existe
        """
        if not self.product_repo.delete_product(pid):
            raise NotFoundError('product', pid)
        logger.info("Producto #%s eliminado", pid)
