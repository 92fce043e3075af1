# ==============================================================================
# INTERFACES DEL ALMACÉN
# ==============================================================================
#
# Protocolos que debe cumplir cualquier almacén de datos. Los servicios
# dependen de estos contratos, NO de MockBackingStore:
#
# 1. INDEPENDENCIA DEL ALMACÉN
#    - Hoy: listas en memoria con latencia simulada
#    - Mañana: cliente HTTP contra una API real
#
# 2. TESTING
#    - Fácil crear dobles que fallen, tarden o respondan fuera de orden
#
# MIGRACIÓN A API REAL:
# 1. Crear una clase nueva que implemente IBackingStore
# 2. Cambiar instanciación en app_container.py
# 3. Los servicios NO requieren cambios
#
# ==============================================================================

from typing import Any, Dict, List, Protocol, runtime_checkable

from store_console.models import Member, Order, OrderStatus, Product, Store


@runtime_checkable
class IBackingStore(Protocol):
    """
    Contrato asíncrono del almacén.
    Cualquier fallo se reporta con BackingStoreError (o una subclase).
    """

    # --- Tiendas ---
    async def get_stores(self) -> List[Store]:
        ...

    async def add_store(self, data: Dict[str, Any]) -> Store:
        ...

    async def update_store(self, store_id: str, data: Dict[str, Any]) -> Store:
        ...

    async def delete_store(self, store_id: str) -> None:
        ...

    # --- Miembros ---
    async def get_members(self) -> List[Member]:
        ...

    async def add_member(self, data: Dict[str, Any]) -> Member:
        ...

    async def update_member(self, member_id: str, data: Dict[str, Any]) -> Member:
        ...

    async def delete_member(self, member_id: str) -> None:
        ...

    # --- Catálogo ---
    async def get_products(self) -> List[Product]:
        ...

    # --- Pedidos ---
    async def get_orders(self) -> List[Order]:
        ...

    async def add_order(self, data: Dict[str, Any]) -> Order:
        ...

    async def update_order_status(self, order_id: str, status: OrderStatus) -> Order:
        ...


@runtime_checkable
class IAuditRepository(Protocol):
    """Interfaz para el log de auditoría (más recientes primero)."""

    def log(self, log_type: str, user: str, message: str,
            related_id: str = '', details: Dict[str, Any] = None) -> None:
        ...

    def load(self) -> List[Dict[str, Any]]:
        ...
