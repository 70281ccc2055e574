# ==============================================================================
# REPOSITORIO DE PEDIDOS (columnar)
# ==============================================================================
# El pedido se escribe completo (con sus tacos copiados) en:
#   orders          → búsqueda por id
#   orders_by_user  → historial del usuario, placed_at DESC
# La lectura del historial toma las primeras N filas de la partición:
# el orden y el límite salen directamente del agrupamiento.
# ==============================================================================

from typing import Any, List, Optional

from taco_cloud.models import Order
from taco_cloud.repositories.wide_column.ids import new_time_uuid
from taco_cloud.repositories.wide_column.table import PartitionedTable


class WideColumnOrderRepository:
    """Repositorio de pedidos desnormalizado por usuario."""

    def __init__(self, base_path: str):
        self.orders = PartitionedTable(base_path, 'orders')
        self.orders_by_user = PartitionedTable(
            base_path, 'orders_by_user', clustering_key='placed_at'
        )

    def save(self, order: Order) -> Order:
        if order.id is None:
            order.id = new_time_uuid()
        row = order.to_dict()
        previous = self.orders.select_one(order.id)
        if previous and previous.get('username') != order.username:
            self.orders_by_user.remove_row(previous.get('username'), order.id)
        self.orders.upsert(order.id, row)
        if order.username:
            self.orders_by_user.upsert(order.username, row)
        return order

    def find_by_id(self, order_id: Any) -> Optional[Order]:
        if order_id is None:
            return None
        row = self.orders.select_one(order_id)
        return Order.from_dict(row) if row else None

    def find_recent_by_user(self, username: str, page_size: int) -> List[Order]:
        if page_size <= 0:
            return []
        rows = self.orders_by_user.select(username, limit=page_size)
        return [Order.from_dict(r) for r in rows]
