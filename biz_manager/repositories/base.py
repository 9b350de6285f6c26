# ==============================================================================
# REPOSITORIO BASE - Funcionalidad común para acceso a archivos JSON
# ==============================================================================

import copy
import json
import logging
import os
from typing import Any, Dict, List, Optional
from abc import ABC, abstractmethod
import threading


logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Error al serializar o escribir datos en el almacenamiento."""
    pass


class BaseRepository(ABC):
    """
    Clase base abstracta para todos los repositorios.
    Proporciona lectura/escritura de un archivo JSON con un lock global.

    Un archivo ausente o corrupto NO es un error: se leen los datos
    por defecto. La escritura sí puede fallar (StorageError).
    """

    # Lock global para evitar escrituras concurrentes a archivos
    _file_lock = threading.RLock()

    def __init__(self, file_path: str):
        """
        Inicializa el repositorio con la ruta al archivo JSON.

        Args:
            file_path: Ruta absoluta al archivo JSON de datos
        """
        self.file_path = file_path
        self._ensure_dir_exists()

    def _ensure_dir_exists(self) -> None:
        """Crea el directorio de datos si no existe (el archivo no)."""
        directory = os.path.dirname(self.file_path)
        if directory:
            os.makedirs(directory, exist_ok=True)

    @abstractmethod
    def _default_data(self) -> Any:
        """
        Retorna los datos a usar cuando no hay nada persistido.
        Debe ser implementado por cada repositorio concreto.
        """
        pass

    def _read_raw(self) -> Any:
        """
        Lee los datos crudos del archivo JSON.

        Returns:
            Datos parseados, o los datos por defecto si el archivo
            no existe o no se puede leer
        """
        with self._file_lock:
            try:
                with open(self.file_path, 'r', encoding='utf-8') as f:
                    return json.load(f)
            except FileNotFoundError:
                return self._default_data()
            except (json.JSONDecodeError, OSError, UnicodeDecodeError) as e:
                logger.warning("Archivo ilegible %s (%s), usando datos por defecto",
                               self.file_path, e)
                return self._default_data()

    def _write_raw(self, data: Any) -> None:
        """
        Escribe datos al archivo JSON en una sola operación.

        Args:
            data: Datos a serializar y escribir

        Raises:
            StorageError: Si falla la serialización o la escritura.
                          El archivo original queda intacto.
        """
        with self._file_lock:
            # Serializar antes de tocar disco: un fallo aquí no deja temporales
            try:
                payload = json.dumps(data, indent=2, ensure_ascii=False)
            except (TypeError, ValueError) as e:
                raise StorageError(f"No se pudo serializar {self.file_path}: {e}") from e

            # Escribir a archivo temporal primero para atomicidad
            temp_path = self.file_path + '.tmp'
            try:
                with open(temp_path, 'w', encoding='utf-8') as f:
                    f.write(payload)
                os.replace(temp_path, self.file_path)
            except OSError as e:
                if os.path.exists(temp_path):
                    os.remove(temp_path)
                raise StorageError(f"No se pudo escribir {self.file_path}: {e}") from e

    def clear(self) -> None:
        """Elimina el archivo persistido (la próxima lectura da los defaults)."""
        with self._file_lock:
            try:
                os.remove(self.file_path)
            except FileNotFoundError:
                pass
            except OSError as e:
                raise StorageError(f"No se pudo eliminar {self.file_path}: {e}") from e


class ListRepository(BaseRepository):
    """
    Repositorio base para colecciones almacenadas como lista de registros
    con campo 'id'.

    Ejemplo: orders.json -> [{"id": "1700000000000", ...}, {...}]

    Subclases definen:
        DEFAULTS: registros semilla si no hay nada persistido
        PREPEND: True para insertar al inicio (más reciente primero)
    """

    DEFAULTS: List[Dict[str, Any]] = []
    PREPEND = False
    ID_FIELD = 'id'

    def _default_data(self) -> List[Dict[str, Any]]:
        """Copia de los datos semilla (nunca la lista original)."""
        return copy.deepcopy(self.DEFAULTS)

    def get_all(self) -> List[Dict[str, Any]]:
        """
        Obtiene todos los registros.

        Returns:
            Lista con todos los datos (defaults si no hay nada guardado)
        """
        data = self._read_raw()
        return data if isinstance(data, list) else self._default_data()

    def save_all(self, data: List[Dict[str, Any]]) -> None:
        """
        Guarda todos los registros (reemplazo completo).

        Args:
            data: Lista completa de datos
        """
        self._write_raw(list(data))

    def get_by_id(self, record_id: Any) -> Optional[Dict[str, Any]]:
        """Busca un registro por su ID (comparado como texto)."""
        for record in self.get_all():
            if str(record.get(self.ID_FIELD)) == str(record_id):
                return record
        return None

    def add(self, record: Dict[str, Any]) -> None:
        """
        Agrega un registro al inicio o al final según PREPEND.

        Args:
            record: Datos del nuevo registro
        """
        data = self.get_all()
        if self.PREPEND:
            data.insert(0, record)
        else:
            data.append(record)
        self._write_raw(data)

    def update(self, record: Dict[str, Any]) -> bool:
        """
        Reemplaza el registro con el mismo ID.

        Returns:
            True si existía y se reemplazó
        """
        data = self.get_all()
        record_id = str(record.get(self.ID_FIELD))
        for index, existing in enumerate(data):
            if str(existing.get(self.ID_FIELD)) == record_id:
                data[index] = record
                self._write_raw(data)
                return True
        return False

    def delete(self, record_id: Any) -> bool:
        """
        Elimina un registro por ID.

        Returns:
            True si se eliminó algo
        """
        data = self.get_all()
        remaining = [r for r in data if str(r.get(self.ID_FIELD)) != str(record_id)]
        if len(remaining) == len(data):
            return False
        self._write_raw(remaining)
        return True
