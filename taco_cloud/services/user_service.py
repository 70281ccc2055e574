# ==============================================================================
# SERVICIO DE USUARIOS
# ==============================================================================
# Registro y autenticación. Las contraseñas se guardan SOLO como hash
# (werkzeug.security); el repositorio nunca ve texto plano.
# ==============================================================================

from typing import Any, Mapping, Optional

from werkzeug.security import check_password_hash, generate_password_hash

from taco_cloud.errors import ValidationError
from taco_cloud.models import User, is_blank
from taco_cloud.repositories.interfaces import IUserRepository
from taco_cloud.services.audit_service import AuditService

# Campos opcionales del formulario de registro
PROFILE_FIELDS = ('fullname', 'street', 'city', 'state', 'zip', 'phone_number')


class UserService:
    """
    Servicio para gestión de usuarios.

    Responsabilidades:
    - Registro con validación de username único
    - Autenticación (login)
    """

    MIN_PASSWORD_LENGTH = 4

    def __init__(self, user_repo: IUserRepository, audit_service: AuditService = None):
        self.user_repo = user_repo
        self.audit_service = audit_service

    def get_user(self, username: str) -> Optional[User]:
        if not username:
            return None
        return self.user_repo.find_by_username(username)

    def register(self, form: Mapping[str, Any]) -> User:
        """
        Registra un usuario nuevo.

        Args:
            form: username, password, confirm y campos de perfil

        Returns:
            Usuario guardado (con hash de contraseña)

        Raises:
            ValidationError: Campos faltantes, confirmación distinta o username en uso
        """
        username = str(form.get('username') or '').strip()
        password = str(form.get('password') or '')
        confirm = str(form.get('confirm') or '')

        errors = {}
        if not username:
            errors['username'] = 'Username is required'
        elif self.user_repo.find_by_username(username) is not None:
            errors['username'] = 'Username already taken'
        if is_blank(password):
            errors['password'] = 'Password is required'
        elif len(password) < self.MIN_PASSWORD_LENGTH:
            errors['password'] = f'Password must be at least {self.MIN_PASSWORD_LENGTH} characters'
        elif password != confirm:
            errors['confirm'] = 'Passwords do not match'
        if errors:
            raise ValidationError(errors)

        user = User(
            username=username,
            password=generate_password_hash(password),
            **{name: str(form.get(name) or '').strip() for name in PROFILE_FIELDS}
        )
        saved = self.user_repo.save(user)

        if self.audit_service:
            self.audit_service.log_user_registered(username)
        return saved

    def authenticate(self, username: str, password: str) -> Optional[User]:
        """
        Verifica credenciales.

        Returns:
            El usuario si son válidas, None si no
        """
        user = self.get_user((username or '').strip())
        if user is None or not check_password_hash(user.password, password or ''):
            return None

        if self.audit_service:
            self.audit_service.log_user_login(user.username)
        return user
