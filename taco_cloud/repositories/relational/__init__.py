# ==============================================================================
# BACKEND RELACIONAL (SQLAlchemy)
# ==============================================================================
# IDs: enteros autoincrementales asignados por la base de datos.
# La URL se toma de TACO_DATABASE_URL (SQLite por defecto).
# ==============================================================================

from .session import make_engine, make_session_factory, db_session
from .ingredient_repository import RelationalIngredientRepository
from .taco_repository import RelationalTacoRepository
from .order_repository import RelationalOrderRepository
from .user_repository import RelationalUserRepository

__all__ = [
    'make_engine',
    'make_session_factory',
    'db_session',
    'RelationalIngredientRepository',
    'RelationalTacoRepository',
    'RelationalOrderRepository',
    'RelationalUserRepository',
]
