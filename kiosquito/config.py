# ==============================================================================
# CONFIGURACIÓN - Variables de entorno con valores por defecto
# ==============================================================================
# Toda la configuración se lee del entorno una sola vez al arrancar.
# Para tests se pueden pasar overrides: Config.from_env(db_path=...)
#
# Comando (producción):
#   export KIOSQUITO_SECRET_KEY="tu_clave_secreta_muy_larga_y_aleatoria"
#   export KIOSQUITO_DB_PATH="/ruta/a/kiosquito.db"
# ==============================================================================

import logging
import os
from dataclasses import dataclass, fields
from typing import Any, Optional

logger = logging.getLogger(__name__)

_DEFAULT_SECRET = "kiosquito_dev_secret_key_change_in_production"

_TRUE_VALUES = ('1', 'true', 'yes', 'on', 'si', 'sí')


def _env_bool(name: str, default: bool) -> bool:
    """Lee una variable de entorno booleana ('1', 'true', 'si'...)."""
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in _TRUE_VALUES


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    try:
        return int(raw) if raw is not None else default
    except ValueError:
        logger.warning("Valor inválido para %s=%r, usando %s", name, raw, default)
        return default


@dataclass
class Config:
    """
    Configuración de la aplicación.

    Attributes:
        db_path: Ruta del archivo SQLite (':memory:' no se recomienda, cada
                 conexión tendría su propia base)
        secret_key: Clave de sesiones Flask
        production_mode: True = sin productos de ejemplo ni logging DEBUG
        admin_username: Usuario administrador sembrado al inicio
        admin_password: Contraseña inicial del administrador
        seed_example_currencies: Sembrar USD y MLC con tasas de ejemplo
        seed_example_products: Sembrar el catálogo de ejemplo
        enable_profiling: Activa performance_logger
        log_level: Nivel de logging ('INFO', 'DEBUG'...)
        host, port, debug: Servidor de desarrollo Flask
    """
    db_path: str = 'kiosquito.db'
    secret_key: str = _DEFAULT_SECRET
    production_mode: bool = False
    admin_username: str = 'admin'
    admin_password: str = 'admin123'
    seed_example_currencies: bool = True
    seed_example_products: bool = False
    enable_profiling: bool = True
    log_level: str = 'INFO'
    host: str = '0.0.0.0'
    port: int = 5000
    debug: bool = False

    @classmethod
    def from_env(cls, **overrides: Any) -> 'Config':
        """
        Construye la configuración desde variables de entorno.

        Args:
            **overrides: Valores que reemplazan a los del entorno

        Returns:
            Instancia de Config
        """
        secret = os.environ.get('KIOSQUITO_SECRET_KEY')
        production = _env_bool('KIOSQUITO_PRODUCTION_MODE', False)
        seed_products = _env_bool('KIOSQUITO_SEED_EXAMPLE_PRODUCTS', False)
        log_level = os.environ.get('KIOSQUITO_LOG_LEVEL', 'INFO').upper()

        if production and not secret:
            logger.warning("PRODUCTION_MODE activo sin KIOSQUITO_SECRET_KEY definida")
            logger.warning("Define la variable de entorno para mayor seguridad")

        if production:
            if seed_products:
                logger.warning("PRODUCTION_MODE ignora KIOSQUITO_SEED_EXAMPLE_PRODUCTS")
                seed_products = False
            if log_level == 'DEBUG':
                log_level = 'INFO'

        config = cls(
            db_path=os.environ.get('KIOSQUITO_DB_PATH', 'kiosquito.db'),
            secret_key=secret or _DEFAULT_SECRET,
            production_mode=production,
            admin_username=os.environ.get('KIOSQUITO_ADMIN_USER', 'admin'),
            admin_password=os.environ.get('KIOSQUITO_ADMIN_PASSWORD', 'admin123'),
            seed_example_currencies=_env_bool('KIOSQUITO_SEED_EXAMPLE_CURRENCIES', True),
            seed_example_products=seed_products,
            enable_profiling=_env_bool('KIOSQUITO_PROFILING', True),
            log_level=log_level,
            host=os.environ.get('FLASK_HOST', '0.0.0.0'),
            port=_env_int('FLASK_PORT', 5000),
            debug=os.environ.get('FLASK_DEBUG', '0') == '1',
        )

        known = {f.name for f in fields(cls)}
        for key, value in overrides.items():
            if key not in known:
                raise TypeError(f"Opción de configuración desconocida: {key}")
            setattr(config, key, value)
        return config


def configure_logging(config: Optional[Config] = None) -> None:
    """
    Configura el logging raíz de la aplicación (consola).
    Llamar una sola vez al arrancar el proceso.
    """
    level_name = (config.log_level if config else 'INFO') or 'INFO'
    level = getattr(logging, level_name.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
    )
