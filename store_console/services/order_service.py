# ==============================================================================
# SERVICIO DE PEDIDOS
# ==============================================================================
# Centraliza toda la lógica de pedidos:
#   - Listado cacheado, búsqueda (id / miembro / tienda) y filtro por estado
#   - Paginación del listado del administrador
#   - Aprobar / rechazar con actualización optimista de la caché
#   - Alta de pedidos (checkout) con invalidación de "orders"
#   - Historial del miembro (más recientes primero)
# ==============================================================================

from dataclasses import dataclass, replace
from typing import Any, Dict, List

from store_console import config
from store_console.models import Order, OrderStatus, ValidationError
from store_console.repositories.interfaces import IBackingStore
from .audit_service import AuditService
from .mutation_executor import MutationExecutor, MutationResult, OptimisticUpdate
from .notifications import Notifier
from .pagination import Page, paginate
from .query_cache import QueryCache, QueryResult
from .session_service import SessionState

ORDERS_KEY = 'orders'

STATUS_FILTERS = ('all', 'pending', 'approved', 'rejected')


def filter_orders(orders: List[Order], term: str = '', status: str = 'all') -> List[Order]:
    """
    Filtra pedidos.

    Args:
        orders: Pedidos
        term: Texto a buscar en id, memberName o storeName (sin mayúsculas)
        status: 'all' o un estado concreto
    """
    term = (term or '').strip()
    return [
        order for order in orders
        if order.matches_search(term) and (status in (None, '', 'all') or order.status.value == status)
    ]


def _set_status(orders: Any, order_id: str, status: OrderStatus) -> Any:
    if not orders:
        return orders
    return [order.with_status(status) if order.id == order_id else order for order in orders]


def _restore_order(orders: Any, order_id: str, previous: Any) -> Any:
    """Devuelve a `orders` solo la versión previa del pedido `order_id`."""
    before = next((o for o in previous or [] if o.id == order_id), None)
    if not orders or before is None:
        return orders
    return [before if order.id == order_id else order for order in orders]


@dataclass(frozen=True)
class OrdersView:
    """Una página del listado filtrado y el estado de la consulta."""
    result: QueryResult
    page: Page

    @property
    def is_empty_result(self) -> bool:
        """True cuando la consulta terminó bien y el filtro no dejó nada."""
        return is_empty_result(self.result)


def is_empty_result(result: QueryResult) -> bool:
    return not result.is_loading and result.error is None and result.data is not None and len(result.data) == 0


class OrderService:
    """
    Servicio para gestión de pedidos.

    IMPORTANTE: aprobar/rechazar escriben primero en la caché; si el almacén
    rechaza el cambio la caché vuelve al valor anterior.
    """

    def __init__(
        self,
        store: IBackingStore,
        cache: QueryCache,
        notifier: Notifier,
        session_state: SessionState,
        audit_service: AuditService = None,
    ):
        self.store = store
        self.cache = cache
        self.notifier = notifier
        self.session_state = session_state
        self.audit_service = audit_service

        self.approve_executor = self._status_executor('approve_order', OrderStatus.APPROVED,
                                                      'Pedido aprobado correctamente',
                                                      'No se pudo aprobar el pedido')
        self.reject_executor = self._status_executor('reject_order', OrderStatus.REJECTED,
                                                     'El pedido fue rechazado',
                                                     'No se pudo rechazar el pedido')
        self.add_executor = MutationExecutor(
            'add_order',
            lambda data: self.store.add_order(data),
            cache, notifier,
            invalidate=[ORDERS_KEY],
            success_title='Pedido enviado',
            success_message='Tu pedido quedó pendiente de aprobación',
            error_message='No se pudo registrar el pedido',
            on_success=lambda order, _data: self._audit_created(order),
        )

    def _status_executor(self, name: str, status: OrderStatus,
                         success_message: str, error_message: str) -> MutationExecutor:
        return MutationExecutor(
            name,
            lambda order_id: self.store.update_order_status(order_id, status),
            self.cache, self.notifier,
            optimistic=OptimisticUpdate(
                ORDERS_KEY,
                lambda orders, order_id: _set_status(orders, order_id, status),
                rollback=_restore_order,
            ),
            success_message=success_message,
            error_message=error_message,
            on_success=lambda order, order_id: self._audit_status(order_id, status),
        )

    def _user(self) -> str:
        session = self.session_state.current_session()
        return session.name if session else 'sistema'

    def _audit_status(self, order_id: str, status: OrderStatus) -> None:
        if self.audit_service:
            self.audit_service.log_order_status_change(
                self._user(), order_id, OrderStatus.PENDING.value, status.value
            )

    def _audit_created(self, order: Order) -> None:
        if self.audit_service:
            self.audit_service.log_order_created(self._user(), order.id, order.total, order.item_count)

    # =========================================================================
    # LECTURA
    # =========================================================================

    async def list_orders(self, stale_window: float = None, show_refresh: bool = False) -> QueryResult:
        window = config.STALE_ORDERS if stale_window is None else stale_window
        return await self.cache.query(ORDERS_KEY, self.store.get_orders, window, show_refresh=show_refresh)

    async def refresh_orders(self, show_refresh: bool = True) -> QueryResult:
        """Relee los pedidos ignorando la ventana de frescura."""
        return await self.cache.refetch(ORDERS_KEY, self.store.get_orders,
                                        config.STALE_ORDERS, show_refresh=show_refresh)

    async def filter_orders(self, term: str = '', status: str = 'all') -> QueryResult:
        if status not in STATUS_FILTERS:
            raise ValidationError(f'Filtro de estado inválido: {status}')
        result = await self.list_orders()
        return replace(result, data=filter_orders(result.data or [], term, status))

    async def orders_page(self, term: str = '', status: str = 'all',
                          page: Any = 1, page_size: int = None) -> OrdersView:
        """
        Página del listado de administración.

        Args:
            term: Búsqueda
            status: Filtro de estado
            page: Página pedida (se ajusta al rango)
            page_size: Tamaño de página (config.PAGE_SIZE por defecto)
        """
        result = await self.filter_orders(term, status)
        return OrdersView(result=result, page=paginate(result.data, page_size, page))

    async def orders_for_member(self, member_id: str) -> QueryResult:
        """Pedidos de un miembro, más recientes primero."""
        result = await self.list_orders()
        mine = [o for o in (result.data or []) if o.member_id == str(member_id)]
        mine.sort(key=lambda o: o.created_at, reverse=True)
        return replace(result, data=mine)

    async def get_order(self, order_id: str):
        orders = (await self.list_orders()).data or []
        return next((o for o in orders if o.id == order_id), None)

    # =========================================================================
    # ESCRITURA
    # =========================================================================

    async def approve_order(self, order_id: str) -> MutationResult:
        return await self.approve_executor.mutate(order_id)

    async def reject_order(self, order_id: str) -> MutationResult:
        return await self.reject_executor.mutate(order_id)

    async def add_order(self, data: Dict[str, Any]) -> MutationResult:
        return await self.add_executor.mutate(data)

    @property
    def is_updating(self) -> bool:
        return self.approve_executor.is_pending or self.reject_executor.is_pending
