# ==============================================================================
# REPOSITORIO DE USUARIOS
# ==============================================================================
# Encapsula todo el acceso a la tabla users.
# Las contraseñas llegan YA hasheadas; el hash lo decide UserService.
# ==============================================================================

from typing import List, Optional

from kiosquito.models.entities import User
from kiosquito.repositories.base import BaseRepository


class UserRepository(BaseRepository):
    """Repositorio para gestión de usuarios."""

    table = 'users'
    entity = User
    updatable_columns = frozenset(['password'])

    def get_user(self, username: str) -> Optional[User]:
        """
        Obtiene un usuario por nombre.

        Args:
            username: Nombre de usuario

        Returns:
            Usuario o None si no existe
        """
        row = self.db.fetch_one("SELECT * FROM users WHERE username = ?", (username,))
        return User.from_row(row) if row else None

    def user_exists(self, username: str) -> bool:
        return self.get_user(username) is not None

    def list_users(self) -> List[User]:
        rows = self.db.fetch_all("SELECT * FROM users ORDER BY username")
        return [User.from_row(r) for r in rows]

    def create_user(self, username: str, password_hash: str) -> int:
        """
        Crea un nuevo usuario.

        Returns:
            ID generado
        """
        with self.db.transaction():
            return self._insert({'username': username, 'password': password_hash})

    def update_password(self, user_id: int, password_hash: str) -> bool:
        with self.db.transaction():
            cursor = self.db.execute(
                "UPDATE users SET password = ? WHERE id = ?", (password_hash, user_id)
            )
        return cursor.rowcount > 0

    def delete_user(self, username: str) -> bool:
        """Elimina un usuario por nombre. True si existía."""
        with self.db.transaction():
            cursor = self.db.execute("DELETE FROM users WHERE username = ?", (username,))
        return cursor.rowcount > 0
