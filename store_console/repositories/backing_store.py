# ==============================================================================
# ALMACÉN SIMULADO (fachada)
# ==============================================================================
# Reúne los repositorios en memoria detrás del contrato IBackingStore.
# Cada llamada espera la latencia configurada y entrega copias.
# ==============================================================================

from typing import Any, Dict, List

from store_console.clock import SystemClock
from store_console.models import Member, Order, OrderStatus, Product, Store
from store_console.performance_logger import profile_function

from . import seed_data
from .member_repository import MemberRepository
from .order_repository import OrderRepository
from .product_repository import ProductRepository
from .store_repository import StoreRepository


class MockBackingStore:
    """
    Almacén en memoria de un solo proceso y un solo inquilino.

    Args:
        clock: Reloj para latencia y createdAt
        latency: Segundos simulados por llamada
        seeded: Si es True carga los datos de demostración
    """

    def __init__(self, clock=None, latency: float = 0.0, seeded: bool = True):
        self.clock = clock or SystemClock()
        self.latency = latency
        opts = {'clock': self.clock, 'latency': latency}
        self.stores = StoreRepository(seed=seed_data.seed_stores() if seeded else None, **opts)
        self.members = MemberRepository(seed=seed_data.seed_members(self.clock) if seeded else None, **opts)
        self.products = ProductRepository(seed=seed_data.seed_products() if seeded else None, **opts)
        self.orders = OrderRepository(seed=seed_data.seed_orders(self.clock) if seeded else None, **opts)

    def _timestamp(self) -> str:
        return self.clock.utcnow().isoformat()

    # =========================================================================
    # TIENDAS
    # =========================================================================

    @profile_function(name="Almacén: listar tiendas")
    async def get_stores(self) -> List[Store]:
        return await self.stores.get_all()

    @profile_function(name="Almacén: crear tienda")
    async def add_store(self, data: Dict[str, Any]) -> Store:
        return await self.stores.create(data)

    @profile_function(name="Almacén: editar tienda")
    async def update_store(self, store_id: str, data: Dict[str, Any]) -> Store:
        return await self.stores.patch(store_id, data)

    @profile_function(name="Almacén: eliminar tienda")
    async def delete_store(self, store_id: str) -> None:
        await self.stores.delete(store_id)

    # =========================================================================
    # MIEMBROS
    # =========================================================================

    @profile_function(name="Almacén: listar miembros")
    async def get_members(self) -> List[Member]:
        return await self.members.get_all()

    @profile_function(name="Almacén: crear miembro")
    async def add_member(self, data: Dict[str, Any]) -> Member:
        return await self.members.create(data, created_at=self._timestamp())

    @profile_function(name="Almacén: editar miembro")
    async def update_member(self, member_id: str, data: Dict[str, Any]) -> Member:
        return await self.members.patch(member_id, data)

    @profile_function(name="Almacén: eliminar miembro")
    async def delete_member(self, member_id: str) -> None:
        await self.members.delete(member_id)

    # =========================================================================
    # CATÁLOGO
    # =========================================================================

    @profile_function(name="Almacén: listar productos")
    async def get_products(self) -> List[Product]:
        return await self.products.get_all()

    # =========================================================================
    # PEDIDOS
    # =========================================================================

    @profile_function(name="Almacén: listar pedidos")
    async def get_orders(self) -> List[Order]:
        return await self.orders.get_all()

    @profile_function(name="Almacén: crear pedido")
    async def add_order(self, data: Dict[str, Any]) -> Order:
        return await self.orders.create(data, created_at=self._timestamp())

    @profile_function(name="Almacén: cambiar estado de pedido")
    async def update_order_status(self, order_id: str, status: OrderStatus) -> Order:
        return await self.orders.set_status(order_id, status)
