# ==============================================================================
# REPOSITORIO DE INGREDIENTES (documental)
# ==============================================================================
# Encapsula el acceso a ingredients.json: {"FLTO": {...}, "GRBF": {...}}
# ==============================================================================

import os
from typing import List, Optional

from taco_cloud.models import Ingredient
from taco_cloud.repositories.base import DictRepository


class DocumentIngredientRepository(DictRepository):
    """Catálogo de ingredientes; la clave es el código corto."""

    backend_name = 'document'

    def __init__(self, base_path: str):
        super().__init__(os.path.join(base_path, 'ingredients.json'))

    def save(self, ingredient: Ingredient) -> Ingredient:
        self.put(ingredient.id, ingredient.to_dict())
        return ingredient

    def find_by_id(self, ingredient_id: str) -> Optional[Ingredient]:
        data = self.get_by_id(ingredient_id)
        return Ingredient.from_dict(data) if data else None

    def find_all(self) -> List[Ingredient]:
        return [Ingredient.from_dict(d) for d in self.get_all().values()]

    def count(self) -> int:
        return len(self.get_all())
