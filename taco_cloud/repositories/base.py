# ==============================================================================
# REPOSITORIO BASE - Funcionalidad común para almacenamiento en archivos JSON
# ==============================================================================
# Lo usan el backend documental, el backend columnar y el registro de
# actividad. El backend relacional no pasa por aquí (usa SQLAlchemy).
# ==============================================================================

import json
import os
import threading
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from taco_cloud.errors import StorageError


class BaseRepository(ABC):
    """
    Clase base abstracta para repositorios sobre un archivo JSON.

    Proporciona lectura/escritura con un lock global y escritura atómica
    (archivo temporal + os.replace).
    """

    # Lock global para evitar escrituras concurrentes a archivos
    _file_lock = threading.RLock()

    # Nombre del backend para los mensajes de StorageError
    backend_name = 'json'

    def __init__(self, file_path: str):
        """
        Args:
            file_path: Ruta absoluta al archivo JSON de datos
        """
        self.file_path = file_path
        self._ensure_file_exists()

    def _ensure_file_exists(self) -> None:
        """Crea el archivo (y su carpeta) con datos vacíos si no existe."""
        if not os.path.exists(self.file_path):
            try:
                os.makedirs(os.path.dirname(self.file_path) or '.', exist_ok=True)
            except OSError as exc:
                raise StorageError(
                    f'No se pudo crear {self.file_path}: {exc}', self.backend_name
                ) from exc
            self._write_raw(self._empty_data())

    @abstractmethod
    def _empty_data(self) -> Any:
        """Estructura vacía (dict, list) de este repositorio."""
        pass

    def _read_raw(self) -> Any:
        """
        Lee los datos crudos del archivo JSON.

        Returns:
            Datos parseados; estructura vacía si el archivo no existe

        Raises:
            StorageError: Si el archivo está corrupto o no se puede leer
        """
        with self._file_lock:
            try:
                with open(self.file_path, 'r', encoding='utf-8') as f:
                    return json.load(f)
            except FileNotFoundError:
                return self._empty_data()
            except (OSError, json.JSONDecodeError) as exc:
                raise StorageError(
                    f'No se pudo leer {self.file_path}: {exc}', self.backend_name
                ) from exc

    def _write_raw(self, data: Any) -> None:
        """
        Escribe datos al archivo JSON de forma atómica.

        Raises:
            StorageError: Si hay error de escritura
        """
        with self._file_lock:
            temp_path = self.file_path + '.tmp'
            try:
                with open(temp_path, 'w', encoding='utf-8') as f:
                    json.dump(data, f, indent=2, ensure_ascii=False)
                os.replace(temp_path, self.file_path)
            except (OSError, TypeError, ValueError) as exc:
                if os.path.exists(temp_path):
                    os.remove(temp_path)
                raise StorageError(
                    f'No se pudo escribir {self.file_path}: {exc}', self.backend_name
                ) from exc


class DictRepository(BaseRepository):
    """
    Repositorio base para datos almacenados como diccionario.
    El ID es la clave del diccionario (siempre string en JSON).

    Ejemplo: tacos.json -> {"5f2b...": {...}, "9c1a...": {...}}
    """

    def _empty_data(self) -> Dict:
        return {}

    def get_all(self) -> Dict[str, Any]:
        data = self._read_raw()
        return data if isinstance(data, dict) else {}

    def get_by_id(self, record_id: Any) -> Optional[Dict[str, Any]]:
        """
        Obtiene un registro por su ID.

        Returns:
            Datos del registro o None si no existe
        """
        if record_id is None:
            return None
        return self.get_all().get(str(record_id))

    def put(self, record_id: Any, record_data: Dict[str, Any]) -> None:
        """Inserta o reemplaza un registro."""
        with self._file_lock:
            data = self.get_all()
            data[str(record_id)] = record_data
            self._write_raw(data)

    def delete(self, record_id: Any) -> Optional[Dict[str, Any]]:
        """
        Elimina un registro.

        Returns:
            Datos del registro eliminado o None si no existía
        """
        with self._file_lock:
            data = self.get_all()
            removed = data.pop(str(record_id), None)
            if removed is not None:
                self._write_raw(data)
            return removed

    def find_by(self, field: str, value: Any) -> Optional[Dict[str, Any]]:
        """Primer registro cuyo campo coincide, o None."""
        for record in self.get_all().values():
            if record.get(field) == value:
                return record
        return None


class ListRepository(BaseRepository):
    """
    Repositorio base para datos almacenados como lista.

    Ejemplo: audit.json -> [{...}, {...}]
    """

    def _empty_data(self) -> List:
        return []

    def get_all(self) -> List[Dict[str, Any]]:
        data = self._read_raw()
        return data if isinstance(data, list) else []

    def save_all(self, data: List[Dict[str, Any]]) -> None:
        self._write_raw(data)
