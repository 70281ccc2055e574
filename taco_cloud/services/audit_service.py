# ==============================================================================
# SERVICIO DE AUDITORÍA
# ==============================================================================
# Centraliza el registro de actividad con mensajes humanizados.
# ==============================================================================

from typing import Any, Dict, List

from taco_cloud.models import Order, Taco
from taco_cloud.repositories.audit_repository import AuditRepository


class AuditService:
    """
    Servicio para registro y consulta de actividad.

    Categorías: LOGIN, REGISTRO, TACO, PEDIDO.
    """

    TYPE_LOGIN = 'LOGIN'
    TYPE_REGISTRO = 'REGISTRO'
    TYPE_TACO = 'TACO'
    TYPE_PEDIDO = 'PEDIDO'

    def __init__(self, audit_repo: AuditRepository):
        self.audit_repo = audit_repo

    def log(
        self,
        log_type: str,
        user: str,
        message: str,
        related_id: Any = '',
        details: Dict[str, Any] = None
    ) -> None:
        """Registra un evento genérico."""
        self.audit_repo.log(log_type, user, message, related_id, details)

    def log_user_login(self, username: str) -> None:
        self.log(self.TYPE_LOGIN, username, f'{username} inició sesión')

    def log_user_registered(self, username: str) -> None:
        self.log(self.TYPE_REGISTRO, username, f'Usuario {username} registrado')

    def log_taco_designed(self, username: str, taco: Taco) -> None:
        self.log(
            self.TYPE_TACO,
            username,
            f'Taco "{taco.name}" diseñado por {username or "anónimo"}',
            related_id=taco.id,
            details={'ingredients': list(taco.ingredients)}
        )

    def log_order_placed(self, username: str, order: Order) -> None:
        self.log(
            self.TYPE_PEDIDO,
            username,
            f'Pedido {order.id} colocado por {username} ({len(order.tacos)} tacos)',
            related_id=order.id,
            details={'tacos': [t.id for t in order.tacos]}
        )

    def get_recent(self, limit: int = 50) -> List[Dict[str, Any]]:
        """Últimos eventos, más recientes primero."""
        return self.audit_repo.load()[:limit]
