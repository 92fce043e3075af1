# ==============================================================================
# STORE CONSOLE
# ==============================================================================
# Núcleo de la consola de tiendas: caché de consultas, mutaciones,
# paginación, sesión y carrito sobre un almacén en memoria.
# ==============================================================================

__version__ = '0.1.0'
