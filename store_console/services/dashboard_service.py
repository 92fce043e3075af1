# ==============================================================================
# SERVICIO DEL PANEL PRINCIPAL
# ==============================================================================
# Contadores del administrador. Lee tiendas, miembros y pedidos en paralelo;
# los pedidos usan una ventana de frescura corta (1 min).
# ==============================================================================

import asyncio
from typing import Any, Dict

from store_console import config
from store_console.models import OrderStatus
from store_console.repositories.interfaces import IBackingStore
from .member_service import MEMBERS_KEY
from .order_service import ORDERS_KEY
from .query_cache import QueryCache
from .store_service import STORES_KEY


class DashboardService:
    """Estadísticas del panel de administración."""

    def __init__(self, store: IBackingStore, cache: QueryCache):
        self.store = store
        self.cache = cache

    async def get_stats(self) -> Dict[str, Any]:
        """
        Obtiene los contadores del panel.

        Returns:
            Dict con:
            - total_orders: pedidos aprobados
            - total_stores: tiendas
            - total_members: miembros
            - pending_orders: pedidos pendientes
            - is_loading / error: combinados de las tres consultas
        """
        stores, members, orders = await asyncio.gather(
            self.cache.query(STORES_KEY, self.store.get_stores, config.STALE_STORES),
            self.cache.query(MEMBERS_KEY, self.store.get_members, config.STALE_MEMBERS),
            self.cache.query(ORDERS_KEY, self.store.get_orders, config.STALE_ORDERS_DASHBOARD),
        )
        order_list = orders.data or []
        error = stores.error or members.error or orders.error
        return {
            'total_orders': sum(1 for o in order_list if o.status == OrderStatus.APPROVED),
            'total_stores': len(stores.data or []),
            'total_members': len(members.data or []),
            'pending_orders': sum(1 for o in order_list if o.status == OrderStatus.PENDING),
            'is_loading': stores.is_loading or members.is_loading or orders.is_loading,
            'error': error.message if error else None,
        }
