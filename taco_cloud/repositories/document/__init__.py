# ==============================================================================
# BACKEND DOCUMENTAL
# ==============================================================================
# Cada colección es un archivo JSON {id: documento}.
# IDs: string hexadecimal de 24 caracteres, como un ObjectId.
# Los pedidos guardan referencias (IDs) a tacos y el username del usuario.
# ==============================================================================

from .ids import new_document_id
from .ingredient_repository import DocumentIngredientRepository
from .taco_repository import DocumentTacoRepository
from .order_repository import DocumentOrderRepository
from .user_repository import DocumentUserRepository

__all__ = [
    'DocumentIngredientRepository',
    'DocumentTacoRepository',
    'DocumentOrderRepository',
    'DocumentUserRepository',
    'new_document_id',
]
