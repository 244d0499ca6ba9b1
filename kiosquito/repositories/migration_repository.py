# ==============================================================================
# REPOSITORIO DE MIGRACIONES DE DATOS
# ==============================================================================
# Registro versionado de migraciones aplicadas (tabla schema_migrations).
# Cada migración se identifica por un id estable y corre a lo sumo una vez.
# ==============================================================================

from typing import List

from kiosquito.repositories.base import BaseRepository


class MigrationRepository(BaseRepository):
    """Repositorio para el registro de migraciones."""

    table = 'schema_migrations'

    def is_applied(self, migration_id: str) -> bool:
        row = self.db.fetch_one(
            "SELECT 1 FROM schema_migrations WHERE id = ?", (migration_id,)
        )
        return row is not None

    def mark_applied(self, migration_id: str) -> None:
        """Registra la migración como aplicada (idempotente)."""
        with self.db.transaction():
            self.db.execute(
                "INSERT OR IGNORE INTO schema_migrations (id, applied_at) VALUES (?, ?)",
                (migration_id, self.db.now()),
            )

    def list_applied(self) -> List[str]:
        rows = self.db.fetch_all("SELECT id FROM schema_migrations ORDER BY applied_at, id")
        return [r['id'] for r in rows]
