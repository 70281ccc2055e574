# ==============================================================================
# REPOSITORIO DE USUARIOS (documental)
# ==============================================================================
# Encapsula el acceso a users.json
# La búsqueda por username recorre la colección (no hay índice).
# ==============================================================================

import os
from typing import Any, Optional

from taco_cloud.models import User
from taco_cloud.repositories.base import DictRepository
from taco_cloud.repositories.document.ids import new_document_id


class DocumentUserRepository(DictRepository):
    """Repositorio de usuarios."""

    backend_name = 'document'

    def __init__(self, base_path: str):
        super().__init__(os.path.join(base_path, 'users.json'))

    def save(self, user: User) -> User:
        if user.id is None:
            user.id = new_document_id()
        self.put(user.id, user.to_dict())
        return user

    def find_by_id(self, user_id: Any) -> Optional[User]:
        data = self.get_by_id(user_id)
        return User.from_dict(data) if data else None

    def find_by_username(self, username: str) -> Optional[User]:
        data = self.find_by('username', username)
        return User.from_dict(data) if data else None
