# ==============================================================================
# ENTIDADES DEL DOMINIO - Definiciones de dataclasses
# ==============================================================================
# Cada entidad representa un concepto del negocio.
# Diseñadas para ser independientes del mecanismo de persistencia:
# los tres backends (relacional, documental, columnar) convierten
# desde y hacia estas clases.
# ==============================================================================

import threading
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Dict, List, Optional


# ==============================================================================
# ENUMERACIONES
# ==============================================================================

class IngredientType(str, Enum):
    """Tipos de ingrediente del catálogo."""
    WRAP = "WRAP"
    PROTEIN = "PROTEIN"
    VEGGIES = "VEGGIES"
    CHEESE = "CHEESE"
    SAUCE = "SAUCE"


class OrderStatus(str, Enum):
    """Estados del ciclo de vida de un pedido."""
    OPEN = "OPEN"        # En sesión, se le pueden agregar tacos
    PLACED = "PLACED"    # Persistido, inmutable


# ==============================================================================
# MARCAS DE TIEMPO
# ==============================================================================
# Dos llamadas seguidas pueden caer en el mismo microsegundo; el orden
# descendente por fecha necesita valores estrictamente crecientes.

_clock_lock = threading.Lock()
_last_timestamp: Optional[datetime] = None


def next_timestamp() -> datetime:
    """
    Obtiene una marca de tiempo UTC estrictamente mayor que la anterior.

    Returns:
        datetime con zona horaria UTC
    """
    global _last_timestamp
    with _clock_lock:
        now = datetime.now(timezone.utc)
        if _last_timestamp is not None and now <= _last_timestamp:
            now = _last_timestamp + timedelta(microseconds=1)
        _last_timestamp = now
        return now


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Convierte ISO-8601 (o datetime sin zona) a datetime UTC."""
    if value is None or value == '':
        return None
    if isinstance(value, datetime):
        dt = value
    else:
        dt = datetime.fromisoformat(str(value).replace('Z', '+00:00'))
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def format_timestamp(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


# ==============================================================================
# CATÁLOGO
# ==============================================================================

@dataclass
class Ingredient:
    """
    Ingrediente del catálogo.

    Attributes:
        id: Código corto estable (ej: "FLTO"), inmutable
        name: Nombre visible
        type: Tipo de ingrediente
    """
    id: str
    name: str
    type: IngredientType

    def to_dict(self) -> Dict[str, Any]:
        return {'id': self.id, 'name': self.name, 'type': self.type.value}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Ingredient':
        return cls(
            id=data['id'],
            name=data.get('name', ''),
            type=IngredientType(data.get('type'))
        )


# ==============================================================================
# TACOS
# ==============================================================================

@dataclass
class Taco:
    """
    Taco diseñado por un usuario.

    Attributes:
        name: Nombre del diseño
        ingredients: IDs de ingredientes en el orden enviado
        id: Asignado por el repositorio al guardar
        created_at: Asignado al crearse
    """
    name: str
    ingredients: List[str] = field(default_factory=list)
    id: Optional[Any] = None
    created_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'created_at': format_timestamp(self.created_at),
            'ingredients': list(self.ingredients),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Taco':
        return cls(
            id=data.get('id'),
            name=data.get('name', ''),
            ingredients=list(data.get('ingredients') or []),
            created_at=parse_timestamp(data.get('created_at'))
        )


# ==============================================================================
# PEDIDOS
# ==============================================================================

# Campos de entrega y pago que llegan desde el formulario de checkout
DELIVERY_FIELDS = (
    'delivery_name',
    'delivery_street',
    'delivery_city',
    'delivery_state',
    'delivery_zip',
    'cc_number',
    'cc_expiration',
    'cc_cvv',
)


@dataclass
class Order:
    """
    Pedido de un usuario.

    Mientras está OPEN vive en la sesión y acumula tacos.
    Al hacer checkout pasa a PLACED y ya no se modifica.
    """
    tacos: List[Taco] = field(default_factory=list)
    id: Optional[Any] = None
    username: Optional[str] = None
    placed_at: Optional[datetime] = None
    status: OrderStatus = OrderStatus.OPEN
    delivery_name: str = ''
    delivery_street: str = ''
    delivery_city: str = ''
    delivery_state: str = ''
    delivery_zip: str = ''
    cc_number: str = ''
    cc_expiration: str = ''
    cc_cvv: str = ''

    @property
    def is_open(self) -> bool:
        return self.status == OrderStatus.OPEN

    def add_design(self, taco: Taco) -> None:
        self.tacos.append(taco)

    def delivery(self) -> Dict[str, str]:
        """Campos de entrega/pago como diccionario."""
        return {name: getattr(self, name) for name in DELIVERY_FIELDS}

    def to_dict(self) -> Dict[str, Any]:
        data = {
            'id': self.id,
            'username': self.username,
            'placed_at': format_timestamp(self.placed_at),
            'status': self.status.value,
            'tacos': [t.to_dict() for t in self.tacos],
        }
        data.update(self.delivery())
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Order':
        order = cls(
            id=data.get('id'),
            username=data.get('username'),
            placed_at=parse_timestamp(data.get('placed_at')),
            status=OrderStatus(data.get('status', OrderStatus.OPEN.value)),
            tacos=[Taco.from_dict(t) for t in data.get('tacos') or []],
        )
        for name in DELIVERY_FIELDS:
            setattr(order, name, data.get(name) or '')
        return order


# ==============================================================================
# USUARIOS
# ==============================================================================

@dataclass
class User:
    """
    Usuario registrado.

    Attributes:
        username: Identificador único
        password: Hash de la contraseña (nunca texto plano)
    """
    username: str
    password: str
    fullname: str = ''
    street: str = ''
    city: str = ''
    state: str = ''
    zip: str = ''
    phone_number: str = ''
    id: Optional[Any] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'username': self.username,
            'password': self.password,
            'fullname': self.fullname,
            'street': self.street,
            'city': self.city,
            'state': self.state,
            'zip': self.zip,
            'phone_number': self.phone_number,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'User':
        return cls(
            id=data.get('id'),
            username=data['username'],
            password=data.get('password', ''),
            fullname=data.get('fullname', ''),
            street=data.get('street', ''),
            city=data.get('city', ''),
            state=data.get('state', ''),
            zip=data.get('zip', ''),
            phone_number=data.get('phone_number', '')
        )
