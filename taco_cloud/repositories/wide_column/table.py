# ==============================================================================
# TABLA PARTICIONADA - Almacenamiento base del backend columnar
# ==============================================================================

import os
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from taco_cloud.models import parse_timestamp
from taco_cloud.repositories.base import DictRepository


_MIN_TIME = datetime.min.replace(tzinfo=timezone.utc)


class PartitionedTable(DictRepository):
    """
    Tabla con particiones y clave de agrupamiento.

    Formato del archivo <tabla>.json:
    {
        "jdoe": [
            {"id": "...", "placed_at": "2024-01-02T...", ...},
            {"id": "...", "placed_at": "2024-01-01T...", ...}
        ]
    }

    Las filas de cada partición se mantienen ordenadas al escribir,
    así una lectura nunca necesita reordenar.
    """

    backend_name = 'wide_column'

    def __init__(
        self,
        base_path: str,
        table_name: str,
        row_key: str = 'id',
        clustering_key: Optional[str] = None,
        descending: bool = True
    ):
        """
        Args:
            base_path: Carpeta del keyspace
            table_name: Nombre de la tabla (y del archivo)
            row_key: Campo que identifica la fila dentro de la partición
            clustering_key: Campo de fecha por el que se ordenan las filas
            descending: Orden de agrupamiento
        """
        self.table_name = table_name
        self.row_key = row_key
        self.clustering_key = clustering_key
        self.descending = descending
        super().__init__(os.path.join(base_path, f'{table_name}.json'))

    def _sort_rows(self, rows: List[Dict[str, Any]]) -> None:
        if self.clustering_key is None:
            return
        rows.sort(
            key=lambda r: (parse_timestamp(r.get(self.clustering_key)) or _MIN_TIME, str(r.get(self.row_key))),
            reverse=self.descending
        )

    def upsert(self, partition_key: Any, row: Dict[str, Any]) -> None:
        """
        Inserta una fila o reemplaza la que tenga la misma clave de fila.

        Args:
            partition_key: Clave de partición
            row: Fila completa
        """
        with self._file_lock:
            data = self.get_all()
            key = str(partition_key)
            rows = [r for r in data.get(key, []) if r.get(self.row_key) != row.get(self.row_key)]
            rows.append(row)
            self._sort_rows(rows)
            data[key] = rows
            self._write_raw(data)

    def select(self, partition_key: Any, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        """
        Lee las filas de una partición en orden de agrupamiento.

        Returns:
            Filas (lista vacía si la partición no existe)
        """
        rows = self.get_all().get(str(partition_key), [])
        return rows[:limit] if limit is not None else list(rows)

    def select_one(self, partition_key: Any) -> Optional[Dict[str, Any]]:
        """Primera fila de la partición, o None."""
        rows = self.select(partition_key, limit=1)
        return rows[0] if rows else None

    def partition_keys(self) -> List[str]:
        return list(self.get_all().keys())

    def remove_row(self, partition_key: Any, row_id: Any) -> None:
        """Elimina una fila de una partición (si existe)."""
        with self._file_lock:
            data = self.get_all()
            key = str(partition_key)
            if key not in data:
                return
            rows = [r for r in data[key] if r.get(self.row_key) != row_id]
            if rows:
                data[key] = rows
            else:
                del data[key]
            self._write_raw(data)
