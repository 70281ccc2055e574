# ==============================================================================
# REPOSITORIO DE PEDIDOS (relacional)
# ==============================================================================
# Tablas: taco_order + taco_order_tacos (referencias a taco con posición).
# ==============================================================================

from typing import Any, List, Optional

from sqlalchemy import select
from sqlalchemy.orm import sessionmaker

from taco_cloud.models import DELIVERY_FIELDS, Order
from taco_cloud.repositories.relational.mapping import order_from_row, to_int_id
from taco_cloud.repositories.relational.models import OrderRow, OrderTacoRow
from taco_cloud.repositories.relational.session import db_session


class RelationalOrderRepository:
    """Repositorio de pedidos sobre SQLAlchemy."""

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    def save(self, order: Order) -> Order:
        with db_session(self.session_factory) as db:
            key = to_int_id(order.id)
            row = db.get(OrderRow, key) if key is not None else None
            if row is None:
                row = OrderRow(id=key)
                db.add(row)
            else:
                row.taco_links = []
                db.flush()
            row.username = order.username
            row.placed_at = order.placed_at
            row.status = order.status.value
            for name in DELIVERY_FIELDS:
                setattr(row, name, getattr(order, name))
            row.taco_links = [
                OrderTacoRow(position=i, taco_id=to_int_id(taco.id))
                for i, taco in enumerate(order.tacos)
            ]
            db.flush()
            order.id = row.id
        return order

    def find_by_id(self, order_id: Any) -> Optional[Order]:
        key = to_int_id(order_id)
        if key is None:
            return None
        with db_session(self.session_factory) as db:
            row = db.get(OrderRow, key)
            return order_from_row(row) if row else None

    def find_recent_by_user(self, username: str, page_size: int) -> List[Order]:
        if page_size <= 0:
            return []
        with db_session(self.session_factory) as db:
            rows = db.scalars(
                select(OrderRow)
                .where(OrderRow.username == username)
                .order_by(OrderRow.placed_at.desc(), OrderRow.id.desc())
                .limit(page_size)
            ).all()
            return [order_from_row(r) for r in rows]
