# ==============================================================================
# INTERFACES DE REPOSITORIOS - CONTRATO COMÚN A LOS TRES BACKENDS
# ==============================================================================
#
# Este archivo define los protocolos que todos los repositorios deben
# implementar, sin importar dónde guardan los datos:
#
#   - relational  → tablas SQL vía SQLAlchemy (IDs enteros)
#   - document    → colecciones JSON de documentos (IDs hex de 24 caracteres)
#   - wide_column → particiones JSON agrupadas por clave (IDs UUID por tiempo)
#
# REGLAS COMUNES:
# 1. save() asigna ID solo si la entidad no tiene; si ya tiene, reemplaza
#    el mismo registro.
# 2. La ausencia siempre se indica con None; los listados vacíos con [].
# 3. Los listados "recientes" se devuelven en orden descendente por fecha
#    y nunca exceden el límite pedido.
# 4. Un fallo del almacenamiento se propaga como StorageError.
#
# ==============================================================================

from typing import Any, List, Optional, Protocol, runtime_checkable

from taco_cloud.models import Ingredient, Order, Taco, User


@runtime_checkable
class IIngredientRepository(Protocol):
    """Catálogo de ingredientes (solo lectura para el flujo de pedidos)."""

    def save(self, ingredient: Ingredient) -> Ingredient:
        ...

    def find_by_id(self, ingredient_id: str) -> Optional[Ingredient]:
        ...

    def find_all(self) -> List[Ingredient]:
        ...

    def count(self) -> int:
        ...


@runtime_checkable
class ITacoRepository(Protocol):
    """Diseños de tacos."""

    def save(self, taco: Taco) -> Taco:
        ...

    def find_by_id(self, taco_id: Any) -> Optional[Taco]:
        ...

    def find_recent(self, limit: int) -> List[Taco]:
        """Tacos más recientes primero (created_at descendente)."""
        ...


@runtime_checkable
class IOrderRepository(Protocol):
    """Pedidos colocados."""

    def save(self, order: Order) -> Order:
        ...

    def find_by_id(self, order_id: Any) -> Optional[Order]:
        ...

    def find_recent_by_user(self, username: str, page_size: int) -> List[Order]:
        """Pedidos del usuario, más recientes primero (placed_at descendente)."""
        ...


@runtime_checkable
class IUserRepository(Protocol):
    """Usuarios registrados."""

    def save(self, user: User) -> User:
        ...

    def find_by_id(self, user_id: Any) -> Optional[User]:
        ...

    def find_by_username(self, username: str) -> Optional[User]:
        ...
