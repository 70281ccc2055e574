# ==============================================================================
# REPOSITORIO DE USUARIOS (columnar)
# ==============================================================================

from typing import Any, Optional

from taco_cloud.models import User
from taco_cloud.repositories.wide_column.ids import new_time_uuid
from taco_cloud.repositories.wide_column.table import PartitionedTable


class WideColumnUserRepository:
    """
    Usuarios particionados por username, con índice users_by_id.
    """

    def __init__(self, base_path: str):
        self.users = PartitionedTable(base_path, 'users', row_key='username')
        self.users_by_id = PartitionedTable(base_path, 'users_by_id')

    def save(self, user: User) -> User:
        if user.id is None:
            user.id = new_time_uuid()
        previous = self.users_by_id.select_one(user.id)
        if previous and previous.get('username') != user.username:
            self.users.remove_row(previous['username'], previous['username'])
        self.users.upsert(user.username, user.to_dict())
        self.users_by_id.upsert(user.id, {'id': user.id, 'username': user.username})
        return user

    def find_by_username(self, username: str) -> Optional[User]:
        row = self.users.select_one(username)
        return User.from_dict(row) if row else None

    def find_by_id(self, user_id: Any) -> Optional[User]:
        if user_id is None:
            return None
        index = self.users_by_id.select_one(user_id)
        return self.find_by_username(index['username']) if index else None
