# ==============================================================================
# SERVICIO DE PRODUCTOS
# ==============================================================================
# Catálogo de la tienda (solo lectura).
# ==============================================================================

from dataclasses import replace
from typing import List, Optional

from store_console import config
from store_console.models import Product
from store_console.repositories.interfaces import IBackingStore
from .query_cache import QueryCache, QueryResult

PRODUCTS_KEY = 'products'


class ProductService:
    """Catálogo cacheado con búsqueda por texto y categoría."""

    def __init__(self, store: IBackingStore, cache: QueryCache):
        self.store = store
        self.cache = cache

    async def list_products(self) -> QueryResult:
        return await self.cache.query(PRODUCTS_KEY, self.store.get_products, config.STALE_PRODUCTS)

    async def get_product(self, product_id: str) -> Optional[Product]:
        """
        Busca un producto del catálogo.

        Returns:
            El producto o None si no existe (la vista muestra "no encontrado")
        """
        products = (await self.list_products()).data or []
        return next((p for p in products if p.id == str(product_id)), None)

    async def search_products(self, term: str = '', category: str = 'all') -> QueryResult:
        """Filtra por nombre/descripción y categoría ('all' = todas)."""
        result = await self.list_products()
        needle = (term or '').strip().lower()
        items: List[Product] = []
        for product in result.data or []:
            if needle and needle not in product.name.lower() and needle not in product.description.lower():
                continue
            if category and category != 'all' and product.category != category:
                continue
            items.append(product)
        return replace(result, data=items)

    async def categories(self) -> List[str]:
        products = (await self.list_products()).data or []
        return sorted({p.category for p in products if p.category})
