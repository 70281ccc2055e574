# ==============================================================================
# CONVERSIÓN FILA ORM ↔ ENTIDAD
# ==============================================================================

from typing import Any, Optional

from taco_cloud.models import (
    DELIVERY_FIELDS, Ingredient, IngredientType, Order, OrderStatus, Taco, User,
    parse_timestamp,
)
from taco_cloud.repositories.relational.models import (
    IngredientRow, OrderRow, TacoRow, UserRow,
)

_INT64_MIN = -2 ** 63
_INT64_MAX = 2 ** 63 - 1


def to_int_id(value: Any) -> Optional[int]:
    """
    Normaliza un ID recibido (puede venir como string desde la URL).
    Fuera del rango de un INTEGER de 64 bits no puede existir en la tabla.

    Returns:
        Entero, o None si no es un ID numérico válido
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        number = int(value)
    except (TypeError, ValueError):
        return None
    if not _INT64_MIN <= number <= _INT64_MAX:
        return None
    return number


def ingredient_from_row(row: IngredientRow) -> Ingredient:
    return Ingredient(id=row.id, name=row.name, type=IngredientType(row.type))


def taco_from_row(row: TacoRow) -> Taco:
    return Taco(
        id=row.id,
        name=row.name,
        created_at=parse_timestamp(row.created_at),
        ingredients=[link.ingredient_id for link in row.ingredient_links],
    )


def order_from_row(row: OrderRow) -> Order:
    order = Order(
        id=row.id,
        username=row.username,
        placed_at=parse_timestamp(row.placed_at),
        status=OrderStatus(row.status),
        tacos=[taco_from_row(link.taco) for link in row.taco_links],
    )
    for name in DELIVERY_FIELDS:
        setattr(order, name, getattr(row, name) or '')
    return order


def user_from_row(row: UserRow) -> User:
    return User(
        id=row.id,
        username=row.username,
        password=row.password,
        fullname=row.fullname or '',
        street=row.street or '',
        city=row.city or '',
        state=row.state or '',
        zip=row.zip or '',
        phone_number=row.phone_number or '',
    )
