# ==============================================================================
# REPOSITORIO DE TACOS (relacional)
# ==============================================================================
# Tablas: taco (id autoincremental) + taco_ingredients (con posición).
# ==============================================================================

from typing import Any, List, Optional

from sqlalchemy import select
from sqlalchemy.orm import sessionmaker

from taco_cloud.models import Taco, next_timestamp
from taco_cloud.repositories.relational.mapping import taco_from_row, to_int_id
from taco_cloud.repositories.relational.models import TacoIngredientRow, TacoRow
from taco_cloud.repositories.relational.session import db_session


class RelationalTacoRepository:
    """Repositorio de tacos sobre SQLAlchemy."""

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    def save(self, taco: Taco) -> Taco:
        """
        Inserta el taco o actualiza la fila existente con su ID.

        Returns:
            El taco con ID entero asignado por la base de datos
        """
        if taco.created_at is None:
            taco.created_at = next_timestamp()

        with db_session(self.session_factory) as db:
            key = to_int_id(taco.id)
            row = db.get(TacoRow, key) if key is not None else None
            if row is None:
                row = TacoRow(id=key)
                db.add(row)
            else:
                # Se borran los vínculos viejos antes de reinsertar las mismas posiciones
                row.ingredient_links = []
                db.flush()
            row.name = taco.name
            row.created_at = taco.created_at
            row.ingredient_links = [
                TacoIngredientRow(position=i, ingredient_id=ingredient_id)
                for i, ingredient_id in enumerate(taco.ingredients)
            ]
            db.flush()
            taco.id = row.id
        return taco

    def find_by_id(self, taco_id: Any) -> Optional[Taco]:
        key = to_int_id(taco_id)
        if key is None:
            return None
        with db_session(self.session_factory) as db:
            row = db.get(TacoRow, key)
            return taco_from_row(row) if row else None

    def find_recent(self, limit: int) -> List[Taco]:
        if limit <= 0:
            return []
        with db_session(self.session_factory) as db:
            rows = db.scalars(
                select(TacoRow)
                .order_by(TacoRow.created_at.desc(), TacoRow.id.desc())
                .limit(limit)
            ).all()
            return [taco_from_row(r) for r in rows]
