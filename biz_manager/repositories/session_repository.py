# ==============================================================================
# REPOSITORIO DE SESIÓN
# ==============================================================================
# Guarda el usuario actual (currentUser.json) para restaurar la sesión
# al recargar. Ausencia del archivo = no hay sesión activa.
# ==============================================================================

import os
from typing import Any, Dict, Optional

from biz_manager.repositories.base import BaseRepository


class SessionRepository(BaseRepository):
    """
    Formato de currentUser.json:
    {"id": "1", "username": "admin", "role": "admin", "name": "Admin User"}
    """

    def __init__(self, base_path: str):
        file_path = os.path.join(base_path, 'currentUser.json')
        super().__init__(file_path)

    def _default_data(self) -> None:
        return None

    def load(self) -> Optional[Dict[str, Any]]:
        """
        Obtiene el usuario guardado.

        Returns:
            Diccionario del usuario o None si no hay sesión
        """
        data = self._read_raw()
        return data if isinstance(data, dict) else None

    def save(self, user_data: Dict[str, Any]) -> None:
        self._write_raw(user_data)
