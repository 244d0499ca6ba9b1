# ==============================================================================
# REPOSITORIO DE PRODUCTOS
# ==============================================================================
# Encapsula todo el acceso a la tabla products.
# Recibe solo datos validados (ProductInput / FieldMask); la columna stock
# también la escribe SalesService a través de decrement_stock().
# ==============================================================================

from typing import Iterable, List, Optional

from kiosquito.models.entities import Product
from kiosquito.models.validation import FieldMask, ProductInput
from kiosquito.repositories.base import BaseRepository


class ProductRepository(BaseRepository):
    """Repositorio para el catálogo de productos."""

    table = 'products'
    entity = Product
    updatable_columns = frozenset(['name', 'price', 'stock', 'description', 'category'])

    def list_products(self) -> List[Product]:
        """
        Obtiene todos los productos ordenados por nombre.
        Sin filtros: el llamador decide (ej. solo con stock).
        """
        rows = self.db.fetch_all(
            "SELECT * FROM products ORDER BY name COLLATE NOCASE, id"
        )
        return [Product.from_row(r) for r in rows]

    def list_in_stock(self) -> List[Product]:
        """Productos con stock > 0, ordenados por nombre."""
        rows = self.db.fetch_all(
            "SELECT * FROM products WHERE stock > 0 ORDER BY name COLLATE NOCASE, id"
        )
        return [Product.from_row(r) for r in rows]

    def get_product(self, pid: int) -> Optional[Product]:
        return self.get_by_id(pid)

    def find_by_name(self, name: str) -> Optional[Product]:
        row = self.db.fetch_one(
            "SELECT * FROM products WHERE name = ? ORDER BY id LIMIT 1", (name,)
        )
        return Product.from_row(row) if row else None

    def create_product(self, data: ProductInput) -> int:
        """
        Inserta un producto.

        Returns:
            ID generado
        """
        with self.db.transaction():
            return self._insert({
                'name': data.name,
                'price': data.price,
                'stock': data.stock,
                'description': data.description,
                'category': data.category,
                'created_at': self.db.now(),
            })

    def update_product(self, pid: int, mask: FieldMask) -> bool:
        """
        Actualiza solo los campos del FieldMask.

        Returns:
            True si el producto existía
        """
        return self._update_fields(pid, mask)

    def delete_product(self, pid: int) -> bool:
        return self.delete(pid)

    def decrement_stock(self, pid: int, quantity: int) -> bool:
        """
        Descuenta stock solo si alcanza (nunca deja stock negativo).

        Returns:
            True si se descontó, False si el producto no existe o no alcanza
        """
        cursor = self.db.execute(
            "UPDATE products SET stock = stock - ? WHERE id = ? AND stock >= ?",
            (quantity, pid, quantity),
        )
        return cursor.rowcount == 1

    def delete_by_names(self, names: Iterable[str]) -> int:
        """
        Elimina todos los productos cuyo nombre coincide exactamente.

        Returns:
            Cantidad de productos eliminados
        """
        names = list(names)
        if not names:
            return 0
        placeholders = ', '.join('?' for _ in names)
        with self.db.transaction():
            cursor = self.db.execute(
                f"DELETE FROM products WHERE name IN ({placeholders})", names
            )
        return cursor.rowcount
