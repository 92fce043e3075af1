# ==============================================================================
# REPOSITORIO DE PEDIDOS
# ==============================================================================
# Reglas que el almacén hace cumplir:
#   - Todo pedido nuevo entra como "pending"
#   - Solo pending → approved y pending → rejected
#   - El total debe coincidir con la suma de líneas (lo valida Order)
# ==============================================================================

from typing import Any, Dict

from store_console.models import Order, OrderStatus, ValidationError
from .base import ListRepository, InvalidTransitionError


class OrderRepository(ListRepository):
    """Colección de pedidos con ids 'order-N'."""

    ID_PREFIX = 'order-'

    async def create(self, data: Dict[str, Any], created_at: str) -> Order:
        """
        Registra un pedido nuevo.

        Args:
            data: Dict camelCase (memberId, memberName, storeId, storeName,
                  items, total, status?)
            created_at: Marca ISO asignada por el almacén

        Raises:
            ValidationError: Pedido mal formado (sin líneas, total erróneo)
            InvalidTransitionError: Si el pedido no entra como pending
        """
        status = data.get('status', OrderStatus.PENDING.value)
        if status != OrderStatus.PENDING.value:
            raise InvalidTransitionError(
                f'Un pedido nuevo debe entrar como pending (recibido: {status})'
            )

        def build(new_id: str) -> Order:
            payload = dict(data)
            payload['id'] = new_id
            payload['createdAt'] = created_at
            return Order.from_dict(payload)

        return await self.insert(build)

    async def set_status(self, order_id: str, status: Any) -> Order:
        """
        Cambia el estado respetando las transiciones permitidas.

        Raises:
            NotFoundError: Pedido inexistente
            InvalidTransitionError: Transición no permitida
            ValidationError: Estado desconocido
        """
        try:
            new_status = OrderStatus(status)
        except ValueError:
            raise ValidationError(f'Estado de pedido inválido: {status}')

        def apply(current: Order) -> Order:
            if not current.can_transition_to(new_status):
                raise InvalidTransitionError(
                    f'Pedido {current.id}: {current.status.value} → {new_status.value} no permitido'
                )
            return current.with_status(new_status)

        return await self.update(order_id, apply)
