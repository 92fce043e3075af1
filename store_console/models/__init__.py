# ==============================================================================
# CAPA DE MODELOS - Estructuras de datos del sistema
# ==============================================================================
# Este módulo define todas las entidades del dominio usando dataclasses.
# Beneficios:
#   - Type hints para mejor documentación y autocompletado
#   - Validación de invariantes al construir
#   - Fácil serialización a dict (JSON) en la capa web
#   - Independiente del almacén (memoria ahora, API real después)
# ==============================================================================

from .entities import (
    # Errores
    ValidationError,

    # Roles y sesión
    UserRole,
    Session,

    # Tiendas y miembros
    Store,
    Member,

    # Catálogo
    Product,

    # Pedidos
    Order,
    OrderItem,
    OrderStatus,
    ORDER_TRANSITIONS,
    items_total,
    money,

    # Carrito
    CartLine,

    # Auditoría
    AuditLog,
)

__all__ = [
    'ValidationError',
    'UserRole',
    'Session',
    'Store',
    'Member',
    'Product',
    'Order',
    'OrderItem',
    'OrderStatus',
    'ORDER_TRANSITIONS',
    'items_total',
    'money',
    'CartLine',
    'AuditLog',
]
