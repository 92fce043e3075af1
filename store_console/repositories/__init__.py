# ==============================================================================
# CAPA DE REPOSITORIOS - Acceso a datos
# ==============================================================================
# Hoy los datos viven en memoria (MockBackingStore). Los servicios solo
# conocen IBackingStore, así que cambiar a una API real no los toca.
# ==============================================================================

from .base import BackingStoreError, NotFoundError, InvalidTransitionError, ListRepository
from .interfaces import IBackingStore, IAuditRepository
from .store_repository import StoreRepository
from .member_repository import MemberRepository
from .product_repository import ProductRepository
from .order_repository import OrderRepository
from .audit_repository import AuditRepository
from .backing_store import MockBackingStore

__all__ = [
    'BackingStoreError',
    'NotFoundError',
    'InvalidTransitionError',
    'ListRepository',
    'IBackingStore',
    'IAuditRepository',
    'StoreRepository',
    'MemberRepository',
    'ProductRepository',
    'OrderRepository',
    'AuditRepository',
    'MockBackingStore',
]
