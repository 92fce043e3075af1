# ==============================================================================
# REPOSITORIO DE PRODUCTOS
# ==============================================================================
# Catálogo de solo lectura: la consola no crea ni edita productos.
# ==============================================================================

from .base import ListRepository


class ProductRepository(ListRepository):
    """Catálogo de productos (lectura)."""
    pass
