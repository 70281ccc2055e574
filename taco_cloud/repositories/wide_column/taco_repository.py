# ==============================================================================
# REPOSITORIO DE TACOS (columnar)
# ==============================================================================
# Dos tablas escritas juntas:
#   tacos        → búsqueda por id
#   tacos_by_day → recientes: se recorren los días de más nuevo a más viejo
# ==============================================================================

from typing import Any, List, Optional

from taco_cloud.models import Taco, next_timestamp
from taco_cloud.repositories.wide_column.ids import new_time_uuid
from taco_cloud.repositories.wide_column.table import PartitionedTable


class WideColumnTacoRepository:
    """Repositorio de tacos sobre tablas particionadas."""

    def __init__(self, base_path: str):
        self.tacos = PartitionedTable(base_path, 'tacos')
        self.tacos_by_day = PartitionedTable(
            base_path, 'tacos_by_day', clustering_key='created_at'
        )

    @staticmethod
    def _day_bucket(taco: Taco) -> str:
        return taco.created_at.strftime('%Y-%m-%d')

    def save(self, taco: Taco) -> Taco:
        """
        Guarda un taco en ambas tablas.

        Returns:
            El taco con id (uuid1) y created_at asignados
        """
        if taco.id is None:
            taco.id = new_time_uuid()
        if taco.created_at is None:
            taco.created_at = next_timestamp()
        row = taco.to_dict()
        self.tacos.upsert(taco.id, row)
        self.tacos_by_day.upsert(self._day_bucket(taco), row)
        return taco

    def find_by_id(self, taco_id: Any) -> Optional[Taco]:
        if taco_id is None:
            return None
        row = self.tacos.select_one(taco_id)
        return Taco.from_dict(row) if row else None

    def find_recent(self, limit: int) -> List[Taco]:
        if limit <= 0:
            return []
        result: List[Taco] = []
        # Las claves YYYY-MM-DD ordenan igual como texto que como fecha
        for day in sorted(self.tacos_by_day.partition_keys(), reverse=True):
            rows = self.tacos_by_day.select(day, limit=limit - len(result))
            result.extend(Taco.from_dict(r) for r in rows)
            if len(result) >= limit:
                break
        return result
