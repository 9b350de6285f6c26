# ==============================================================================
# SERVICIO DE USUARIOS Y SESIÓN
# ==============================================================================
# Inicio de sesión por nombre de usuario + rol (sin contraseña).
#
# IMPORTANTE: el rol SOLO decide qué secciones se muestran. No es una
# barrera de seguridad: cualquiera puede iniciar sesión con cualquier rol
# y los datos son locales.
# ==============================================================================

import logging
from typing import Any, Dict, FrozenSet, List, Optional

from biz_manager.models import (
    Capability,
    User,
    UserRole,
    ValidationError,
    capabilities_for,
)
from biz_manager.repositories import (
    DEFAULT_USERS,
    ISessionRepository,
    StorageError,
)
from biz_manager.services.order_service import new_record_id


logger = logging.getLogger(__name__)


class UserService:
    """
    Servicio de sesión.

    Responsabilidades:
    - Login (usuario demo existente o usuario ad-hoc)
    - Persistir / restaurar / borrar el usuario actual
    - Consultar la tabla de visibilidad por rol
    """

    def __init__(self, session_repo: ISessionRepository, users: List[Dict[str, Any]] = None):
        """
        Args:
            session_repo: Repositorio del marcador de sesión
            users: Usuarios conocidos (por defecto los de demostración)
        """
        self.session_repo = session_repo
        self._users = [User.from_dict(u) for u in (users if users is not None else DEFAULT_USERS)]

    def get_users(self) -> List[User]:
        return list(self._users)

    def login(self, username: str, role: Any) -> User:
        """
        Inicia sesión.

        Si existe un usuario con el mismo nombre Y rol se reutiliza;
        si no, se crea uno nuevo con ese nombre.

        Args:
            username: Nombre de usuario
            role: admin / staff / accountant

        Returns:
            Usuario de la sesión

        Raises:
            ValidationError: Usuario vacío o rol inválido
        """
        username = (username or '').strip()
        if not username:
            raise ValidationError('Ingresa un nombre de usuario')
        try:
            role = UserRole(role)
        except ValueError:
            raise ValidationError(f'Rol inválido: {role}') from None

        user = next((u for u in self.get_users() if u.username == username and u.role == role), None)
        if user is None:
            user = User(id=new_record_id(), username=username, role=role, name=username)

        try:
            self.session_repo.save(user.to_dict())
        except StorageError as e:
            # La sesión sigue activa en memoria aunque no se pueda restaurar
            logger.error("No se pudo guardar la sesión de %s: %s", username, e)

        logger.info("Inicio de sesión: %s (%s)", user.username, user.role.value)
        return user

    def current_user(self) -> Optional[User]:
        """Usuario de la sesión guardada, o None si no hay sesión."""
        data = self.session_repo.load()
        if not data or not data.get('username'):
            return None
        return User.from_dict(data)

    def logout(self) -> None:
        try:
            self.session_repo.clear()
        except StorageError as e:
            logger.error("No se pudo cerrar la sesión: %s", e)

    @staticmethod
    def capabilities(role: Any) -> FrozenSet[Capability]:
        return capabilities_for(role)

    @staticmethod
    def visible_sections(role: Any) -> List[str]:
        """Secciones visibles en el orden del menú."""
        allowed = capabilities_for(role)
        return [c.value for c in Capability if c in allowed]
