# ==============================================================================
# CAPA DE REPOSITORIOS - Acceso a datos
# ==============================================================================
# Tres backends intercambiables que cumplen las mismas interfaces:
#
# ├── interfaces.py   → Protocolos (contrato común)
# ├── base.py         → Clases base para archivos JSON
# ├── relational/     → SQLAlchemy (tablas)
# ├── document/       → colecciones JSON de documentos
# ├── wide_column/    → tablas particionadas con orden de agrupamiento
# ├── audit_repository.py → registro de actividad (audit.json)
# └── open_order_repository.py → pedidos abiertos por sesión (open_orders.json)
#
# El backend se elige una sola vez en app_container.py según TACO_BACKEND.
# Los services NO conocen el backend (dependen de las interfaces).
# ==============================================================================

from .interfaces import (
    IIngredientRepository,
    ITacoRepository,
    IOrderRepository,
    IUserRepository,
)
from .base import BaseRepository, DictRepository, ListRepository
from .audit_repository import AuditRepository
from .open_order_repository import OpenOrderRepository

__all__ = [
    # Interfaces
    'IIngredientRepository',
    'ITacoRepository',
    'IOrderRepository',
    'IUserRepository',

    # Clases base
    'BaseRepository',
    'DictRepository',
    'ListRepository',

    'AuditRepository',
    'OpenOrderRepository',
]
