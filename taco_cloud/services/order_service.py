# ==============================================================================
# SERVICIO DE PEDIDOS
# ==============================================================================
# Flujo de dos pasos:
#   1. Diseño: cada taco guardado se agrega al pedido ABIERTO de la sesión.
#   2. Checkout: se valida y se persiste el pedido; pasa a COLOCADO.
#
# El pedido abierto es un valor que entra y sale de cada paso. Este
# servicio NO toca la sesión de Flask: las rutas guardan el resultado
# de to_session() y lo recuperan con from_session().
# ==============================================================================

from typing import Any, Dict, List, Mapping, Optional

from taco_cloud.errors import OrderStateError, ValidationError
from taco_cloud.models import (
    DELIVERY_FIELDS, Order, OrderStatus, Taco, User, next_timestamp, validate_delivery,
)
from taco_cloud.performance_logger import profile_function
from taco_cloud.repositories.interfaces import IOrderRepository
from taco_cloud.services.audit_service import AuditService


class OrderService:
    """
    Servicio para el ciclo de vida de los pedidos.

    Responsabilidades:
    - Crear pedidos abiertos y acumular tacos
    - Validar y colocar pedidos (checkout)
    - Historial de pedidos por usuario
    """

    DEFAULT_PAGE_SIZE = 20

    def __init__(
        self,
        order_repo: IOrderRepository,
        audit_service: AuditService = None,
        page_size: int = DEFAULT_PAGE_SIZE
    ):
        """
        Args:
            order_repo: Repositorio de pedidos (cualquier backend)
            audit_service: Servicio de auditoría (opcional)
            page_size: Tamaño de página del historial
        """
        self.order_repo = order_repo
        self.audit_service = audit_service
        self.page_size = page_size

    # =========================================================================
    # PEDIDO ABIERTO
    # =========================================================================

    def new_order(self) -> Order:
        return Order()

    def add_design(self, order: Order, taco: Taco) -> Order:
        """
        Agrega un taco al final del pedido abierto.

        Raises:
            OrderStateError: Si el pedido ya fue colocado
        """
        if not order.is_open:
            raise OrderStateError(f'El pedido {order.id} ya fue colocado')
        order.add_design(taco)
        return order

    # =========================================================================
    # CHECKOUT
    # =========================================================================

    @profile_function(name='Colocar pedido')
    def checkout(
        self,
        order: Order,
        user: Optional[User],
        delivery_fields: Mapping[str, Any]
    ) -> Order:
        """
        Valida y coloca el pedido.

        Si la validación falla, el pedido queda exactamente como estaba
        (ABIERTO) y no se guarda nada.

        Args:
            order: Pedido abierto de la sesión
            user: Usuario autenticado
            delivery_fields: Campos delivery_* y cc_* del formulario

        Returns:
            El mismo pedido, ya COLOCADO, con ID y placed_at

        Raises:
            OrderStateError: Si el pedido ya estaba colocado
            ValidationError: Sin tacos, sin usuario o campos inválidos
        """
        if not order.is_open:
            raise OrderStateError(f'El pedido {order.id} ya fue colocado')

        fields = {name: str(delivery_fields.get(name) or '').strip() for name in DELIVERY_FIELDS}
        errors = validate_delivery(fields)
        if not order.tacos:
            errors['tacos'] = 'You must design at least 1 taco'
        if user is None:
            errors['user'] = 'You must be logged in to place an order'
        if errors:
            raise ValidationError(errors)

        # Se guarda una copia: si el backend falla, el original sigue ABIERTO
        placed = Order(
            tacos=list(order.tacos),
            username=user.username,
            placed_at=next_timestamp(),
            status=OrderStatus.PLACED,
            **fields
        )
        placed = self.order_repo.save(placed)

        order.id = placed.id
        order.username = placed.username
        order.placed_at = placed.placed_at
        order.status = placed.status
        for name, value in fields.items():
            setattr(order, name, value)

        if self.audit_service:
            self.audit_service.log_order_placed(user.username, order)
        return order

    # =========================================================================
    # CONSULTAS
    # =========================================================================

    def find_by_id(self, order_id: Any) -> Optional[Order]:
        return self.order_repo.find_by_id(order_id)

    def recent_for_user(self, username: str, page_size: Optional[int] = None) -> List[Order]:
        """
        Historial del usuario, más recientes primero.

        Args:
            username: Usuario
            page_size: Máximo de pedidos (por defecto, el configurado)
        """
        size = self.page_size if page_size is None else page_size
        return self.order_repo.find_recent_by_user(username, size)

    # =========================================================================
    # SESIÓN
    # =========================================================================

    @staticmethod
    def to_session(order: Order) -> Dict[str, Any]:
        """
        Serializa el pedido abierto para el almacén de pedidos abiertos.
        Solo se guardan los tacos; los datos de pago nunca se guardan.
        """
        return {'tacos': [t.to_dict() for t in order.tacos]}

    def from_session(self, data: Optional[Mapping[str, Any]]) -> Order:
        """Reconstruye el pedido abierto; sin datos devuelve uno nuevo."""
        if not data:
            return self.new_order()
        return Order(tacos=[Taco.from_dict(t) for t in data.get('tacos') or []])
