# ==============================================================================
# REPOSITORIO DE TIENDAS
# ==============================================================================

from typing import Any, Dict

from store_console.models import Store
from .base import ListRepository


class StoreRepository(ListRepository):
    """
    Colección de tiendas.

    Los ids son numéricos en texto ('1', '2', ...).
    """

    async def create(self, data: Dict[str, Any]) -> Store:
        """
        Crea una tienda validando nombre y código.

        Args:
            data: {'name', 'storeId', 'memberCount'?}
        """
        return await self.insert(lambda new_id: Store(
            id=new_id,
            store_id=data.get('storeId', ''),
            name=data.get('name', ''),
            member_count=data.get('memberCount', 0),
        ))

    async def patch(self, store_id: str, data: Dict[str, Any]) -> Store:
        """Aplica un cambio parcial; los campos omitidos se conservan."""
        def apply(current: Store) -> Store:
            merged = current.to_dict()
            merged.update({k: v for k, v in data.items() if k != 'id'})
            merged['id'] = current.id
            return Store.from_dict(merged)
        return await self.update(store_id, apply)
