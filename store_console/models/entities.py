# ==============================================================================
# ENTIDADES DEL DOMINIO - Definiciones de dataclasses
# ==============================================================================
# Cada entidad representa un concepto del negocio.
# Los constructores validan sus invariantes (precios y stock no negativos,
# total de pedido igual a la suma de sus líneas, etc.) y lanzan
# ValidationError antes de que cualquier dato llegue al almacén.
#
# to_dict()/from_dict() usan las claves camelCase del front.
# ==============================================================================

from dataclasses import dataclass, field, replace
from typing import Optional, List, Dict, Any
from enum import Enum


class ValidationError(ValueError):
    """Dato inválido detectado antes de tocar el almacén."""
    pass


# ==============================================================================
# ENUMERACIONES - Estados y roles válidos
# ==============================================================================

class UserRole(str, Enum):
    """Roles de usuario disponibles en la consola."""
    ADMIN = "admin"
    STORE_MEMBER = "store_member"


class OrderStatus(str, Enum):
    """Estados posibles de un pedido."""
    PENDING = "pending"      # Esperando aprobación
    APPROVED = "approved"    # Aprobado (terminal)
    REJECTED = "rejected"    # Rechazado (terminal)

    @property
    def is_terminal(self) -> bool:
        return self in (OrderStatus.APPROVED, OrderStatus.REJECTED)


# Transiciones permitidas: solo se sale de "pending"
ORDER_TRANSITIONS = {
    OrderStatus.PENDING: frozenset([OrderStatus.APPROVED, OrderStatus.REJECTED]),
    OrderStatus.APPROVED: frozenset(),
    OrderStatus.REJECTED: frozenset(),
}


def _require_text(value: Any, label: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(f'{label} es requerido')
    return str(value).strip()


def _require_non_negative(value: Any, label: str) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f'{label} inválido')
    if number < 0:
        raise ValidationError(f'{label} no puede ser negativo')
    return number


def money(value: float) -> float:
    """Redondea a céntimos (misma regla en carrito y pedidos)."""
    return round(value, 2)


# ==============================================================================
# TIENDAS Y MIEMBROS
# ==============================================================================

@dataclass
class Store:
    """
    Tienda administrada desde la consola.

    Attributes:
        id: Identificador interno
        store_id: Código visible (ej: ST001)
        name: Nombre de la tienda
        member_count: Cantidad informativa de miembros (no se deriva de Member)
    """
    id: str
    store_id: str
    name: str
    member_count: int = 0

    def __post_init__(self):
        self.name = _require_text(self.name, 'Nombre de tienda')
        self.store_id = _require_text(self.store_id, 'Código de tienda')
        try:
            self.member_count = int(self.member_count or 0)
        except (TypeError, ValueError):
            raise ValidationError('Cantidad de miembros inválida')
        if self.member_count < 0:
            raise ValidationError('Cantidad de miembros no puede ser negativa')

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'storeId': self.store_id,
            'name': self.name,
            'memberCount': self.member_count,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Store':
        return cls(
            id=str(data.get('id', '')),
            store_id=data.get('storeId', ''),
            name=data.get('name', ''),
            member_count=data.get('memberCount', 0),
        )


@dataclass
class Member:
    """
    Miembro de una tienda.

    store_name es una copia desnormalizada del nombre de la tienda al momento
    de escribir; si la tienda se renombra, los miembros existentes no se
    resincronizan.

    La contraseña se guarda en texto plano: solo demo.
    """
    id: str
    name: str
    email: str
    store_id: str
    store_name: str = ''
    password: str = ''
    created_at: str = ''

    def __post_init__(self):
        self.name = _require_text(self.name, 'Nombre')
        self.email = _require_text(self.email, 'Email')
        self.store_id = _require_text(self.store_id, 'Tienda')
        if '@' not in self.email:
            raise ValidationError('Email inválido')

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'email': self.email,
            'storeId': self.store_id,
            'storeName': self.store_name,
            'password': self.password,
            'createdAt': self.created_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Member':
        return cls(
            id=str(data.get('id', '')),
            name=data.get('name', ''),
            email=data.get('email', ''),
            store_id=data.get('storeId', ''),
            store_name=data.get('storeName', ''),
            password=data.get('password', ''),
            created_at=data.get('createdAt', ''),
        )


# ==============================================================================
# PRODUCTOS
# ==============================================================================

@dataclass
class Product:
    """
    Producto del catálogo.

    El stock no lo descuenta el almacén: es informativo para la UI.
    """
    id: str
    name: str
    price: float
    description: str = ''
    category: str = ''
    image: str = ''
    stock: int = 0

    def __post_init__(self):
        self.name = _require_text(self.name, 'Nombre de producto')
        self.price = _require_non_negative(self.price, 'Precio')
        if _require_non_negative(self.stock, 'Stock') != int(self.stock):
            raise ValidationError('Stock debe ser entero')
        self.stock = int(self.stock)

    @property
    def in_stock(self) -> bool:
        return self.stock > 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'description': self.description,
            'price': self.price,
            'category': self.category,
            'image': self.image,
            'stock': self.stock,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Product':
        return cls(
            id=str(data.get('id', '')),
            name=data.get('name', ''),
            price=data.get('price', 0.0),
            description=data.get('description', ''),
            category=data.get('category', ''),
            image=data.get('image', ''),
            stock=data.get('stock', 0),
        )


# ==============================================================================
# PEDIDOS
# ==============================================================================

@dataclass
class OrderItem:
    """Línea de un pedido (copia del producto al momento de pedir)."""
    product_id: str
    product_name: str
    quantity: int
    price: float

    def __post_init__(self):
        try:
            quantity = int(self.quantity)
        except (TypeError, ValueError):
            raise ValidationError('Cantidad inválida')
        if quantity != self.quantity or quantity < 1:
            raise ValidationError('Cantidad debe ser un entero mayor o igual a 1')
        self.quantity = quantity
        self.price = _require_non_negative(self.price, 'Precio')

    @property
    def line_total(self) -> float:
        return self.quantity * self.price

    def to_dict(self) -> Dict[str, Any]:
        return {
            'productId': self.product_id,
            'productName': self.product_name,
            'quantity': self.quantity,
            'price': self.price,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'OrderItem':
        return cls(
            product_id=str(data.get('productId', '')),
            product_name=data.get('productName', ''),
            quantity=data.get('quantity', 0),
            price=data.get('price', 0.0),
        )


def items_total(items: List[OrderItem]) -> float:
    """Σ cantidad × precio, redondeado a céntimos."""
    return money(sum(item.quantity * item.price for item in items))


@dataclass
class Order:
    """
    Pedido de un miembro.

    Invariantes:
        - Al menos una línea
        - total == Σ(cantidad × precio) al céntimo
        - status ∈ {pending, approved, rejected}
    """
    id: str
    member_id: str
    member_name: str
    store_id: str
    store_name: str
    items: List[OrderItem] = field(default_factory=list)
    total: float = 0.0
    status: OrderStatus = OrderStatus.PENDING
    created_at: str = ''

    def __post_init__(self):
        if not self.items:
            raise ValidationError('El pedido no tiene productos')
        self.items = [
            item if isinstance(item, OrderItem) else OrderItem.from_dict(item)
            for item in self.items
        ]
        try:
            self.status = OrderStatus(self.status)
        except ValueError:
            raise ValidationError(f'Estado de pedido inválido: {self.status}')
        total = _require_non_negative(self.total, 'Total')
        expected = items_total(self.items)
        if money(total) != expected:
            raise ValidationError(
                f'Total {total:.2f} no coincide con la suma de líneas {expected:.2f}'
            )
        self.total = total

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self.items)

    def can_transition_to(self, new_status: OrderStatus) -> bool:
        return new_status in ORDER_TRANSITIONS[self.status]

    def with_status(self, new_status: OrderStatus) -> 'Order':
        """Copia del pedido con otro estado (no valida la transición)."""
        return replace(self, status=OrderStatus(new_status), items=list(self.items))

    def matches_search(self, term: str) -> bool:
        if not term:
            return True
        needle = term.lower()
        return (
            needle in self.id.lower()
            or needle in self.member_name.lower()
            or needle in self.store_name.lower()
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'memberId': self.member_id,
            'memberName': self.member_name,
            'storeId': self.store_id,
            'storeName': self.store_name,
            'items': [item.to_dict() for item in self.items],
            'total': self.total,
            'status': self.status.value,
            'createdAt': self.created_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Order':
        return cls(
            id=str(data.get('id', '')),
            member_id=str(data.get('memberId', '')),
            member_name=data.get('memberName', ''),
            store_id=str(data.get('storeId', '')),
            store_name=data.get('storeName', ''),
            items=[OrderItem.from_dict(i) for i in data.get('items', [])],
            total=data.get('total', 0.0),
            status=data.get('status', OrderStatus.PENDING.value),
            created_at=data.get('createdAt', ''),
        )


# ==============================================================================
# SESIÓN Y CARRITO
# ==============================================================================

@dataclass(frozen=True)
class Session:
    """
    Identidad autenticada del proceso.
    Inmutable: el rol no cambia durante la vida de la sesión.
    """
    user_id: str
    name: str
    email: str
    role: UserRole
    store_id: Optional[str] = None
    store_name: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    def to_dict(self) -> Dict[str, Any]:
        d = {
            'id': self.user_id,
            'name': self.name,
            'email': self.email,
            'role': self.role.value,
        }
        if self.store_id is not None:
            d['storeId'] = self.store_id
        if self.store_name is not None:
            d['storeName'] = self.store_name
        return d


@dataclass
class CartLine:
    """Línea del carrito: copia del producto + cantidad (≥ 1)."""
    product: Product
    quantity: int = 1

    @property
    def subtotal(self) -> float:
        return self.product.price * self.quantity

    def to_order_item(self) -> OrderItem:
        return OrderItem(
            product_id=self.product.id,
            product_name=self.product.name,
            quantity=self.quantity,
            price=self.product.price,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'product': self.product.to_dict(),
            'quantity': self.quantity,
            'subtotal': money(self.subtotal),
        }


# ==============================================================================
# AUDITORÍA
# ==============================================================================

@dataclass
class AuditLog:
    """
    Registro de auditoría.

    Attributes:
        type: Tipo de evento (SESION, TIENDA, MIEMBRO, PEDIDO)
        user: Usuario que realizó la acción
        message: Mensaje descriptivo humanizado
        timestamp: Fecha y hora del evento
        related_id: ID relacionado (pedido, tienda, etc.)
        details: Detalles adicionales
    """
    type: str
    user: str
    message: str
    timestamp: str = ''
    related_id: str = ''
    details: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'type': self.type,
            'user': self.user,
            'message': self.message,
            'timestamp': self.timestamp,
            'related_id': self.related_id,
            'details': self.details
        }
