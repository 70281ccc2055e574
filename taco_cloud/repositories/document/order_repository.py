# ==============================================================================
# REPOSITORIO DE PEDIDOS (documental)
# ==============================================================================
# Encapsula el acceso a orders.json
# Cada documento guarda los IDs de sus tacos (referencias, no copias);
# al leer se resuelven contra la colección de tacos.
# ==============================================================================

import os
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from taco_cloud.models import Order, parse_timestamp
from taco_cloud.repositories.base import DictRepository
from taco_cloud.repositories.document.ids import new_document_id
from taco_cloud.repositories.document.taco_repository import DocumentTacoRepository


_MIN_TIME = datetime.min.replace(tzinfo=timezone.utc)


class DocumentOrderRepository(DictRepository):
    """
    Repositorio de pedidos.

    Formato de datos en orders.json:
    {
        "<id>": {
            "id": "...",
            "username": "jdoe",
            "placed_at": "2024-01-01T10:00:00+00:00",
            "status": "PLACED",
            "tacos": ["<taco id>", ...],
            "delivery_name": "...",
            ...
        }
    }
    """

    backend_name = 'document'

    def __init__(self, base_path: str, taco_repo: DocumentTacoRepository):
        """
        Args:
            base_path: Carpeta de datos
            taco_repo: Colección de tacos para resolver referencias
        """
        super().__init__(os.path.join(base_path, 'orders.json'))
        self.taco_repo = taco_repo

    def _to_document(self, order: Order) -> Dict[str, Any]:
        doc = order.to_dict()
        doc['tacos'] = [t.id for t in order.tacos]
        return doc

    def _from_document(self, doc: Dict[str, Any]) -> Order:
        taco_ids = doc.get('tacos') or []
        order = Order.from_dict(dict(doc, tacos=[]))
        order.tacos = self.taco_repo.find_many(taco_ids)
        return order

    def save(self, order: Order) -> Order:
        if order.id is None:
            order.id = new_document_id()
        self.put(order.id, self._to_document(order))
        return order

    def find_by_id(self, order_id: Any) -> Optional[Order]:
        doc = self.get_by_id(order_id)
        return self._from_document(doc) if doc else None

    def find_recent_by_user(self, username: str, page_size: int) -> List[Order]:
        if page_size <= 0:
            return []
        docs = [d for d in self.get_all().values() if d.get('username') == username]
        docs.sort(
            key=lambda d: (parse_timestamp(d.get('placed_at')) or _MIN_TIME, str(d.get('id'))),
            reverse=True
        )
        return [self._from_document(d) for d in docs[:page_size]]
