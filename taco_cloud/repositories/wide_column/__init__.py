# ==============================================================================
# BACKEND COLUMNAR (wide-column)
# ==============================================================================
# Modela las tablas como particiones: {clave_de_partición: [filas]}.
# Dentro de cada partición las filas quedan ordenadas por su clave de
# agrupamiento (clustering), igual que en un almacén de columnas anchas.
#
# TABLAS:
# ├── ingredients      → partición = código del ingrediente
# ├── tacos            → partición = id del taco
# ├── tacos_by_day     → partición = día (YYYY-MM-DD), filas por created_at DESC
# ├── orders           → partición = id del pedido
# ├── orders_by_user   → partición = username, filas por placed_at DESC
# ├── users            → partición = username
# └── users_by_id      → partición = id del usuario (índice secundario)
#
# IDs: UUID basado en tiempo (uuid1) como string.
# Los pedidos copian los tacos dentro de la fila (desnormalizado).
# ==============================================================================

from .ids import new_time_uuid
from .table import PartitionedTable
from .ingredient_repository import WideColumnIngredientRepository
from .taco_repository import WideColumnTacoRepository
from .order_repository import WideColumnOrderRepository
from .user_repository import WideColumnUserRepository

__all__ = [
    'PartitionedTable',
    'WideColumnIngredientRepository',
    'WideColumnTacoRepository',
    'WideColumnOrderRepository',
    'WideColumnUserRepository',
    'new_time_uuid',
]
