# ==============================================================================
# REPOSITORIO DE PEDIDOS ABIERTOS
# ==============================================================================
# Encapsula el acceso a open_orders.json
# La cookie de sesión solo guarda la clave; los tacos del pedido abierto
# viven aquí, así el pedido puede crecer sin límite.
# Es independiente del backend elegido para tacos y pedidos.
# ==============================================================================

import os
from typing import Any, Dict, Optional

from taco_cloud.models import format_timestamp, next_timestamp

from .base import DictRepository


class OpenOrderRepository(DictRepository):
    """
    Pedidos abiertos por clave de sesión.

    Formato de datos en open_orders.json:
    {
        "<clave>": {
            "tacos": [{"id": ..., "name": ..., ...}],
            "updated_at": "2024-01-01T10:00:00+00:00"
        }
    }
    """

    def __init__(self, base_path: str):
        """
        Args:
            base_path: Carpeta de datos
        """
        super().__init__(os.path.join(base_path, 'open_orders.json'))

    def load(self, order_key: str) -> Optional[Dict[str, Any]]:
        """Datos del pedido abierto, o None si la clave no existe."""
        return self.get_by_id(order_key)

    def store(self, order_key: str, data: Dict[str, Any]) -> None:
        record = dict(data)
        record['updated_at'] = format_timestamp(next_timestamp())
        self.put(order_key, record)

    def discard(self, order_key: str) -> None:
        self.delete(order_key)
