# ==============================================================================
# REPOSITORIO DE TACOS (documental)
# ==============================================================================
# Encapsula el acceso a tacos.json
# Formato: {"<id>": {"id", "name", "created_at", "ingredients": [...]}}
# ==============================================================================

import os
from datetime import datetime, timezone
from typing import Any, List, Optional

from taco_cloud.models import Taco, next_timestamp, parse_timestamp
from taco_cloud.repositories.base import DictRepository
from taco_cloud.repositories.document.ids import new_document_id


_MIN_TIME = datetime.min.replace(tzinfo=timezone.utc)


class DocumentTacoRepository(DictRepository):
    """Repositorio de tacos sobre una colección de documentos JSON."""

    backend_name = 'document'

    def __init__(self, base_path: str):
        super().__init__(os.path.join(base_path, 'tacos.json'))

    def save(self, taco: Taco) -> Taco:
        """
        Guarda un taco. Asigna ID y fecha de creación si no los tiene.

        Returns:
            El mismo taco con ID asignado
        """
        if taco.id is None:
            taco.id = new_document_id()
        if taco.created_at is None:
            taco.created_at = next_timestamp()
        self.put(taco.id, taco.to_dict())
        return taco

    def find_by_id(self, taco_id: Any) -> Optional[Taco]:
        data = self.get_by_id(taco_id)
        return Taco.from_dict(data) if data else None

    def find_many(self, taco_ids: List[Any]) -> List[Taco]:
        """Tacos en el orden de los IDs pedidos; los inexistentes se omiten."""
        docs = self.get_all()
        return [
            Taco.from_dict(docs[str(tid)])
            for tid in taco_ids
            if str(tid) in docs
        ]

    def find_recent(self, limit: int) -> List[Taco]:
        if limit <= 0:
            return []
        docs = sorted(
            self.get_all().values(),
            key=lambda d: (parse_timestamp(d.get('created_at')) or _MIN_TIME, str(d.get('id'))),
            reverse=True
        )
        return [Taco.from_dict(d) for d in docs[:limit]]
