# ==============================================================================
# SERVICIO DE CHECKOUT
# ==============================================================================
# Convierte el carrito del miembro en un pedido pendiente.
# El carrito se vacía SOLO si el almacén acepta el pedido: un fallo lo deja
# intacto para reintentar.
# ==============================================================================

from typing import Any, Dict

from store_console.models import OrderStatus, UserRole, ValidationError, items_total
from store_console.performance_logger import profile_function
from .cart_service import CartService
from .mutation_executor import MutationResult
from .order_service import OrderService
from .session_service import SessionState


class CheckoutService:
    """Checkout del carrito actual."""

    def __init__(self, cart: CartService, order_service: OrderService, session_state: SessionState):
        self.cart = cart
        self.order_service = order_service
        self.session_state = session_state

    def build_order(self) -> Dict[str, Any]:
        """
        Arma el pedido a partir de las líneas actuales del carrito.

        Raises:
            ValidationError: Sin sesión de miembro o carrito vacío
        """
        session = self.session_state.current_session()
        if session is None or session.role != UserRole.STORE_MEMBER:
            raise ValidationError('Solo un miembro de tienda puede hacer pedidos')
        if self.cart.is_empty():
            raise ValidationError('El carrito está vacío')

        items = [line.to_order_item() for line in self.cart.get_items()]
        return {
            'memberId': session.user_id,
            'memberName': session.name,
            'storeId': session.store_id or '',
            'storeName': session.store_name or '',
            'items': [item.to_dict() for item in items],
            'total': items_total(items),
            'status': OrderStatus.PENDING.value,
        }

    @profile_function(name="Confirmar pedido")
    async def checkout(self) -> MutationResult:
        """
        Envía el pedido.

        Returns:
            MutationResult con el Order creado si ok
        """
        order = self.build_order()
        result = await self.order_service.add_order(order)
        if result.ok:
            self.cart.clear_cart()
        return result
