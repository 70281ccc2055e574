# ==============================================================================
# CAPA DE SERVICIOS - Lógica de negocio
# ==============================================================================
# PRINCIPIOS:
# 1. Los servicios orquestan operaciones entre repositorios
# 2. Aplican reglas de negocio y validaciones
# 3. Las rutas (controllers) solo llaman a servicios
# 4. Los servicios NO conocen el backend (relacional/documental/columnar)
#
# ESTRUCTURA:
# ├── catalog_service.py      → Ingredientes, agrupación por tipo, catálogo inicial
# ├── design_service.py       → Creación y validación de tacos
# ├── order_service.py        → Pedido abierto, checkout, historial
# ├── user_service.py         → Registro y autenticación
# ├── recent_tacos_service.py → Resúmenes para la API /tacos/recent
# └── audit_service.py        → Registro de actividad
# ==============================================================================

from taco_cloud.services.audit_service import AuditService
from taco_cloud.services.catalog_service import CatalogService, DEFAULT_INGREDIENTS
from taco_cloud.services.design_service import DesignService
from taco_cloud.services.order_service import OrderService
from taco_cloud.services.user_service import UserService
from taco_cloud.services.recent_tacos_service import (
    RecentTacosService,
    TacoSummary,
    IngredientSummary,
    recent_tacos_resource,
    taco_resource,
    links_for,
)

__all__ = [
    'AuditService',
    'CatalogService',
    'DEFAULT_INGREDIENTS',
    'DesignService',
    'OrderService',
    'UserService',
    'RecentTacosService',
    'TacoSummary',
    'IngredientSummary',
    'recent_tacos_resource',
    'taco_resource',
    'links_for',
]
