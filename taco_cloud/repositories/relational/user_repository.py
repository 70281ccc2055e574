# ==============================================================================
# REPOSITORIO DE USUARIOS (relacional)
# ==============================================================================

from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.orm import sessionmaker

from taco_cloud.models import User
from taco_cloud.repositories.relational.mapping import to_int_id, user_from_row
from taco_cloud.repositories.relational.models import UserRow
from taco_cloud.repositories.relational.session import db_session

_USER_COLUMNS = ('username', 'password', 'fullname', 'street', 'city', 'state', 'zip', 'phone_number')


class RelationalUserRepository:
    """Tabla app_user; username es único."""

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    def save(self, user: User) -> User:
        with db_session(self.session_factory) as db:
            key = to_int_id(user.id)
            row = db.get(UserRow, key) if key is not None else None
            if row is None:
                row = UserRow(id=key)
                db.add(row)
            for name in _USER_COLUMNS:
                setattr(row, name, getattr(user, name))
            db.flush()
            user.id = row.id
        return user

    def find_by_id(self, user_id: Any) -> Optional[User]:
        key = to_int_id(user_id)
        if key is None:
            return None
        with db_session(self.session_factory) as db:
            row = db.get(UserRow, key)
            return user_from_row(row) if row else None

    def find_by_username(self, username: str) -> Optional[User]:
        with db_session(self.session_factory) as db:
            row = db.scalars(select(UserRow).where(UserRow.username == username)).first()
            return user_from_row(row) if row else None
