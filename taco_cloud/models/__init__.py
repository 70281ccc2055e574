# ==============================================================================
# CAPA DE MODELOS - Estructuras de datos del sistema
# ==============================================================================
# Entidades del dominio como dataclasses, independientes del backend
# de persistencia (relacional, documental o columnar).
# ==============================================================================

from .entities import (
    # Catálogo
    Ingredient,
    IngredientType,

    # Tacos
    Taco,

    # Pedidos
    Order,
    OrderStatus,
    DELIVERY_FIELDS,

    # Usuarios
    User,

    # Tiempo
    next_timestamp,
    parse_timestamp,
    format_timestamp,
)
from .validation import validate_delivery, luhn_valid, is_blank

__all__ = [
    'Ingredient',
    'IngredientType',
    'Taco',
    'Order',
    'OrderStatus',
    'DELIVERY_FIELDS',
    'User',
    'next_timestamp',
    'parse_timestamp',
    'format_timestamp',
    'validate_delivery',
    'luhn_valid',
    'is_blank',
]
