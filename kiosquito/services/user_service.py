# ==============================================================================
# SERVICIO DE USUARIOS
# ==============================================================================
# Autenticación contra la tabla users. Frontera de login del núcleo:
# recibe (usuario, contraseña) y retorna el usuario o None.
# Recordar la sesión entre reinicios NO es responsabilidad de este servicio.
# ==============================================================================

import logging
from typing import List, Optional

from werkzeug.security import check_password_hash, generate_password_hash

from kiosquito.errors import ValidationError
from kiosquito.models.entities import User
from kiosquito.performance_logger import profile_function
from kiosquito.repositories.interfaces import IUserRepository

logger = logging.getLogger(__name__)

# Prefijos de los hashes que genera werkzeug
HASH_PREFIXES = ('pbkdf2:', 'scrypt:')


class UserService:
    """
    Servicio para gestión de usuarios.

    Responsabilidades:
    - Autenticación (login)
    - Alta de usuarios con contraseña hasheada
    - Migración de contraseñas legacy en texto plano
    """

    def __init__(self, user_repo: IUserRepository):
        """
        Args:
            user_repo: Repositorio de usuarios
        """
        self.user_repo = user_repo

    # =========================================================================
    # AUTENTICACIÓN
    # =========================================================================

    @profile_function(name="Iniciar sesión")
    def authenticate(self, username: str, password: str) -> Optional[User]:
        """
        Autentica un usuario.

        Args:
            username: Nombre de usuario
            password: Contraseña en texto plano

        Returns:
            Usuario si las credenciales son válidas, None si no
        """
        username = (username or '').strip()
        if not username or not password:
            return None

        user = self.user_repo.get_user(username)
        if not user:
            logger.info("Login fallido: usuario '%s' no existe", username)
            return None

        if self.is_password_hashed(user.password_hash):
            valid = check_password_hash(user.password_hash, password)
        else:
            # Texto plano (legacy, antes de migrate_passwords_to_hash)
            valid = user.password_hash == password

        if not valid:
            logger.info("Login fallido: contraseña incorrecta para '%s'", username)
            return None

        logger.info("Inicio de sesión: %s", username)
        return user

    def verify_password(self, username: str, password: str) -> bool:
        return self.authenticate(username, password) is not None

    # =========================================================================
    # CONSULTAS Y ALTAS
    # =========================================================================

    def get_user(self, username: str) -> Optional[User]:
        return self.user_repo.get_user(username)

    def user_exists(self, username: str) -> bool:
        return self.user_repo.user_exists(username)

    def list_users(self) -> List[User]:
        return self.user_repo.list_users()

    def create_user(self, username: str, password: str) -> int:
        """
        Crea un usuario con la contraseña hasheada.

        Raises:
            ValidationError: Usuario vacío, reservado o duplicado, o
                             contraseña vacía
        """
        username = (username or '').strip()
        if not username:
            raise ValidationError("El usuario es obligatorio", 'username')
        if username.startswith('__'):
            raise ValidationError("Nombre de usuario reservado", 'username')
        if not password:
            raise ValidationError("La contraseña es obligatoria", 'password')
        if self.user_repo.user_exists(username):
            raise ValidationError(f"El usuario '{username}' ya existe", 'username')

        user_id = self.user_repo.create_user(username, generate_password_hash(password))
        logger.info("Usuario creado: %s", username)
        return user_id

    # =========================================================================
    # SEGURIDAD
    # =========================================================================

    def is_password_hashed(self, password_value: str) -> bool:
        """Detecta si el valor guardado ya es un hash werkzeug."""
        return bool(password_value) and password_value.startswith(HASH_PREFIXES)

    def migrate_passwords_to_hash(self) -> int:
        """
        Migración de seguridad: convierte contraseñas en texto plano a hash.

        Returns:
            Cantidad de contraseñas migradas
        """
        migrated = 0
        for user in self.user_repo.list_users():
            if user.password_hash and not self.is_password_hashed(user.password_hash):
                logger.warning("Migrando contraseña de '%s' a hash seguro", user.username)
                self.user_repo.update_password(
                    user.id, generate_password_hash(user.password_hash)
                )
                migrated += 1

        if migrated:
            logger.warning("%d contraseña(s) migrada(s) a hash", migrated)
        return migrated
