# ==============================================================================
# REPOSITORIO DE INGREDIENTES (relacional)
# ==============================================================================

from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import sessionmaker

from taco_cloud.models import Ingredient
from taco_cloud.repositories.relational.mapping import ingredient_from_row
from taco_cloud.repositories.relational.models import IngredientRow
from taco_cloud.repositories.relational.session import db_session


class RelationalIngredientRepository:
    """Tabla ingredient: id, name, type."""

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    def save(self, ingredient: Ingredient) -> Ingredient:
        with db_session(self.session_factory) as db:
            db.merge(IngredientRow(
                id=ingredient.id,
                name=ingredient.name,
                type=ingredient.type.value,
            ))
        return ingredient

    def find_by_id(self, ingredient_id: str) -> Optional[Ingredient]:
        if ingredient_id is None:
            return None
        with db_session(self.session_factory) as db:
            row = db.get(IngredientRow, str(ingredient_id))
            return ingredient_from_row(row) if row else None

    def find_all(self) -> List[Ingredient]:
        with db_session(self.session_factory) as db:
            rows = db.scalars(select(IngredientRow)).all()
            return [ingredient_from_row(r) for r in rows]

    def count(self) -> int:
        with db_session(self.session_factory) as db:
            return db.scalar(select(func.count()).select_from(IngredientRow)) or 0
