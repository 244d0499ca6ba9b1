# ==============================================================================
# REPOSITORIO BASE - Manejador SQLite y funcionalidad común de acceso a datos
# ==============================================================================
# Database: el ÚNICO manejador de almacenamiento del proceso. Se abre una vez
# al arrancar (AppContainer.init) y se inyecta en cada repositorio.
#
#   - init_schema(): crea las tablas con CREATE TABLE IF NOT EXISTS
#   - transaction(): BEGIN IMMEDIATE / COMMIT / ROLLBACK en cualquier salida
#   - connection: falla con NotInitializedError antes de init_schema()
#
# BaseRepository: consultas genéricas por id y UPDATE desde un FieldMask.
# ==============================================================================

import logging
import os
import sqlite3
import threading
from contextlib import contextmanager
from datetime import date, datetime
from typing import Any, Callable, Generator, List, Optional, Sequence, Type

from kiosquito.errors import NotInitializedError, StorageError, ValidationError
from kiosquito.models.validation import FieldMask

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = '%Y-%m-%d %H:%M:%S'

SCHEMA = """
-- Usuarios (la sesión se maneja fuera del núcleo)
CREATE TABLE IF NOT EXISTS users (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    username TEXT UNIQUE NOT NULL,
    password TEXT NOT NULL
);

-- Productos: precio en moneda base, stock nunca negativo
CREATE TABLE IF NOT EXISTS products (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL,
    price REAL NOT NULL CHECK (price > 0),
    stock INTEGER NOT NULL DEFAULT 0 CHECK (stock >= 0),
    description TEXT,
    category TEXT,
    created_at TEXT NOT NULL DEFAULT (datetime('now', 'localtime'))
);
CREATE INDEX IF NOT EXISTS idx_products_name ON products(name);

-- Monedas: tasa = unidades de CUP por 1 unidad de la moneda
CREATE TABLE IF NOT EXISTS currencies (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    code TEXT UNIQUE NOT NULL,
    name TEXT NOT NULL,
    exchange_rate REAL NOT NULL DEFAULT 1.0 CHECK (exchange_rate > 0),
    active INTEGER NOT NULL DEFAULT 1
);

-- Ventas: sin llaves foráneas, las referencias pueden quedar huérfanas
CREATE TABLE IF NOT EXISTS sales (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    product_id INTEGER NOT NULL,
    quantity INTEGER NOT NULL CHECK (quantity > 0),
    unit_price REAL NOT NULL,
    currency_id INTEGER NOT NULL,
    total_base REAL NOT NULL,
    created_at TEXT NOT NULL DEFAULT (datetime('now', 'localtime'))
);
CREATE INDEX IF NOT EXISTS idx_sales_created_at ON sales(created_at);
CREATE INDEX IF NOT EXISTS idx_sales_product_id ON sales(product_id);

-- Migraciones de datos aplicadas (una fila por id)
CREATE TABLE IF NOT EXISTS schema_migrations (
    id TEXT PRIMARY KEY,
    applied_at TEXT NOT NULL
);
"""


class Database:
    """
    Manejador del archivo SQLite.

    Una sola conexión en modo autocommit; las escrituras de varias
    sentencias se agrupan con transaction(). El lock serializa el acceso
    cuando Flask atiende peticiones en hilos distintos.
    """

    _lock = threading.RLock()

    def __init__(self, db_path: str, clock: Callable[[], datetime] = None):
        """
        Args:
            db_path: Ruta del archivo SQLite
            clock: Función que retorna la hora local actual (inyectable en tests)
        """
        self.db_path = str(db_path)
        self._clock = clock or datetime.now
        self._conn: Optional[sqlite3.Connection] = None
        self._initialized = False

    # =========================================================================
    # CICLO DE VIDA
    # =========================================================================

    def open(self) -> sqlite3.Connection:
        """Abre la conexión si aún no está abierta."""
        if self._conn is None:
            directory = os.path.dirname(os.path.abspath(self.db_path))
            os.makedirs(directory, exist_ok=True)
            try:
                conn = sqlite3.connect(
                    self.db_path,
                    isolation_level=None,
                    check_same_thread=False,
                    timeout=30.0,
                )
            except sqlite3.Error as e:
                raise StorageError(f"No se pudo abrir {self.db_path}: {e}") from e
            conn.row_factory = sqlite3.Row
            self._conn = conn
            logger.debug("Base de datos abierta en %s", self.db_path)
        return self._conn

    def init_schema(self) -> None:
        """
        Crea las tablas si no existen. Idempotente: puede ejecutarse en cada
        arranque sin fallar ni duplicar el esquema.
        """
        conn = self.open()
        with self._lock:
            try:
                conn.executescript(SCHEMA)
            except sqlite3.Error as e:
                raise StorageError(f"Error creando el esquema: {e}") from e
        self._initialized = True
        logger.info("Esquema listo en %s", self.db_path)

    def close(self) -> None:
        """Cierra la conexión. El manejador vuelve a estado no inicializado."""
        if self._conn is not None:
            self._conn.close()
            self._conn = None
        self._initialized = False

    @property
    def is_initialized(self) -> bool:
        return self._initialized and self._conn is not None

    @property
    def connection(self) -> sqlite3.Connection:
        """
        Conexión activa.

        Raises:
            NotInitializedError: Si init_schema() no se ha completado
        """
        if not self.is_initialized:
            raise NotInitializedError()
        return self._conn

    # =========================================================================
    # TIEMPO
    # =========================================================================

    def now(self) -> str:
        """Marca de tiempo local en formato SQLite (YYYY-MM-DD HH:MM:SS)."""
        return self._clock().strftime(TIMESTAMP_FORMAT)

    def today(self) -> date:
        return self._clock().date()

    # =========================================================================
    # EJECUCIÓN
    # =========================================================================

    @contextmanager
    def transaction(self) -> Generator[sqlite3.Connection, None, None]:
        """
        Ámbito transaccional: commit al salir normalmente, rollback ante
        cualquier excepción. Si ya hay una transacción abierta, se une a ella
        (la externa decide el commit).
        """
        conn = self.connection
        with self._lock:
            if conn.in_transaction:
                yield conn
                return

            self._run(conn.execute, "BEGIN IMMEDIATE")
            try:
                yield conn
            except BaseException:
                try:
                    conn.rollback()
                except sqlite3.Error:
                    logger.exception("Fallo el rollback en %s", self.db_path)
                raise
            else:
                try:
                    conn.commit()
                except sqlite3.Error as e:
                    conn.rollback()
                    raise StorageError(f"Error confirmando la transacción: {e}") from e

    def execute(self, sql: str, params: Sequence[Any] = ()) -> sqlite3.Cursor:
        """Ejecuta una sentencia y retorna el cursor."""
        conn = self.connection
        with self._lock:
            return self._run(conn.execute, sql, params)

    def fetch_one(self, sql: str, params: Sequence[Any] = ()) -> Optional[sqlite3.Row]:
        with self._lock:
            return self.execute(sql, params).fetchone()

    def fetch_all(self, sql: str, params: Sequence[Any] = ()) -> List[sqlite3.Row]:
        with self._lock:
            return self.execute(sql, params).fetchall()

    @staticmethod
    def _run(fn: Callable[..., Any], *args: Any) -> Any:
        try:
            return fn(*args)
        except sqlite3.Error as e:
            raise StorageError(str(e)) from e
        except OverflowError as e:
            # Enteros fuera de 64 bits (ej. un id enorme en la URL)
            raise ValidationError("Valor numérico fuera de rango") from e


class BaseRepository:
    """
    Clase base para todos los repositorios SQLite.

    Las subclases definen:
        table: Nombre de la tabla
        entity: Dataclass con from_row()
        updatable_columns: Columnas que acepta _update_fields()
    """

    table: str = ''
    entity: Type[Any] = None
    updatable_columns: frozenset = frozenset()

    def __init__(self, db: Database):
        """
        Args:
            db: Manejador de base de datos compartido
        """
        self.db = db

    def get_by_id(self, record_id: int) -> Optional[Any]:
        """
        Obtiene un registro por su ID.

        Returns:
            Entidad o None si no existe
        """
        row = self.db.fetch_one(f"SELECT * FROM {self.table} WHERE id = ?", (record_id,))
        return self.entity.from_row(row) if row else None

    def exists(self, record_id: int) -> bool:
        row = self.db.fetch_one(f"SELECT 1 FROM {self.table} WHERE id = ?", (record_id,))
        return row is not None

    def count(self) -> int:
        return self.db.fetch_one(f"SELECT COUNT(*) FROM {self.table}")[0]

    def delete(self, record_id: int) -> bool:
        """
        Elimina un registro (borrado físico, sin cascada).

        Returns:
            True si existía y se eliminó
        """
        with self.db.transaction():
            cursor = self.db.execute(f"DELETE FROM {self.table} WHERE id = ?", (record_id,))
        return cursor.rowcount > 0

    def _insert(self, values: dict) -> int:
        """Inserta una fila y retorna el id generado."""
        columns = ', '.join(values)
        placeholders = ', '.join('?' for _ in values)
        cursor = self.db.execute(
            f"INSERT INTO {self.table} ({columns}) VALUES ({placeholders})",
            tuple(values.values()),
        )
        return cursor.lastrowid

    def _update_fields(self, record_id: int, mask: FieldMask) -> bool:
        """
        Actualiza SOLO las columnas presentes en el FieldMask.

        Returns:
            True si la fila existía
        """
        assignments = []
        params = []
        for column, value in mask:
            if column not in self.updatable_columns:
                raise ValueError(f"Columna no actualizable en {self.table}: {column}")
            assignments.append(f"{column} = ?")
            params.append(value)

        if not assignments:
            return self.exists(record_id)

        params.append(record_id)
        with self.db.transaction():
            cursor = self.db.execute(
                f"UPDATE {self.table} SET {', '.join(assignments)} WHERE id = ?",
                params,
            )
        return cursor.rowcount > 0
