# ==============================================================================
# CAPA DE SERVICIOS - Lógica de negocio
# ==============================================================================
# Los servicios dependen de IBackingStore y de la caché, nunca de la web.
# ==============================================================================

from .notifications import Notification, Notifier
from .audit_service import AuditService
from .query_cache import CacheEntry, FetchError, QueryCache, QueryResult, normalize_key
from .mutation_executor import (
    MutationExecutor, MutationInProgressError, MutationResult, OptimisticUpdate
)
from .pagination import Page, PaginationState, clamp_page, page_window, paginate
from .session_service import DEMO_IDENTITIES, SessionState
from .cart_service import CartService
from .store_service import StoreService
from .member_service import MemberService, generate_temp_password
from .product_service import ProductService
from .order_service import OrderService, OrdersView, filter_orders, is_empty_result
from .dashboard_service import DashboardService
from .checkout_service import CheckoutService

__all__ = [
    'Notification',
    'Notifier',
    'AuditService',
    'CacheEntry',
    'FetchError',
    'QueryCache',
    'QueryResult',
    'normalize_key',
    'MutationExecutor',
    'MutationInProgressError',
    'MutationResult',
    'OptimisticUpdate',
    'Page',
    'PaginationState',
    'clamp_page',
    'page_window',
    'paginate',
    'DEMO_IDENTITIES',
    'SessionState',
    'CartService',
    'StoreService',
    'MemberService',
    'generate_temp_password',
    'ProductService',
    'OrderService',
    'OrdersView',
    'filter_orders',
    'is_empty_result',
    'DashboardService',
    'CheckoutService',
]
