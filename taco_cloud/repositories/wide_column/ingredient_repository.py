# ==============================================================================
# REPOSITORIO DE INGREDIENTES (columnar)
# ==============================================================================

from typing import List, Optional

from taco_cloud.models import Ingredient
from taco_cloud.repositories.wide_column.table import PartitionedTable


class WideColumnIngredientRepository:
    """Una partición por ingrediente, con una sola fila."""

    def __init__(self, base_path: str):
        self.table = PartitionedTable(base_path, 'ingredients')

    def save(self, ingredient: Ingredient) -> Ingredient:
        self.table.upsert(ingredient.id, ingredient.to_dict())
        return ingredient

    def find_by_id(self, ingredient_id: str) -> Optional[Ingredient]:
        row = self.table.select_one(ingredient_id)
        return Ingredient.from_dict(row) if row else None

    def find_all(self) -> List[Ingredient]:
        return [
            Ingredient.from_dict(rows[0])
            for rows in self.table.get_all().values()
            if rows
        ]

    def count(self) -> int:
        return len(self.table.partition_keys())
