# ==============================================================================
# REPOSITORIO DE MIEMBROS
# ==============================================================================
# storeName llega ya resuelto desde el servicio (copia al momento de escribir).
# ==============================================================================

from typing import Any, Dict

from store_console.models import Member
from .base import ListRepository


class MemberRepository(ListRepository):
    """Colección de miembros de tienda."""

    async def create(self, data: Dict[str, Any], created_at: str) -> Member:
        """
        Crea un miembro.

        Args:
            data: {'name', 'email', 'storeId', 'storeName', 'password'}
            created_at: Marca ISO asignada por el almacén
        """
        return await self.insert(lambda new_id: Member(
            id=new_id,
            name=data.get('name', ''),
            email=data.get('email', ''),
            store_id=data.get('storeId', ''),
            store_name=data.get('storeName', ''),
            password=data.get('password', ''),
            created_at=created_at,
        ))

    async def patch(self, member_id: str, data: Dict[str, Any]) -> Member:
        """Cambio parcial; id y createdAt no se pueden modificar."""
        def apply(current: Member) -> Member:
            merged = current.to_dict()
            merged.update({k: v for k, v in data.items() if k not in ('id', 'createdAt')})
            return Member.from_dict(merged)
        return await self.update(member_id, apply)
