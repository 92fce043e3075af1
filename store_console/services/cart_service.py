# ==============================================================================
# SERVICIO DE CARRITO
# ==============================================================================
# Centraliza toda la lógica del carrito de compras del miembro de tienda.
# El carrito vive en memoria (una instancia por contenedor) como un dict
# ordenado: id de producto → línea.
# ==============================================================================

from collections import OrderedDict
from typing import Any, Dict, List

from store_console.models import CartLine, Product, ValidationError, money


def _check_stock(product: Product, quantity: int) -> None:
    if quantity > product.stock:
        raise ValidationError(f'Stock insuficiente. Disponible: {product.stock}')


class CartService:
    """
    Servicio para gestión del carrito de compras.

    Responsabilidades:
    - Agregar/quitar productos
    - Cambiar cantidades
    - Calcular totales (siempre desde las líneas actuales)
    - Vaciar el carrito
    """

    def __init__(self):
        self._lines: "OrderedDict[str, CartLine]" = OrderedDict()

    # =========================================================================
    # ESCRITURA
    # =========================================================================

    def add_item(self, product: Product, quantity: int = 1) -> CartLine:
        """
        Agrega un producto al carrito.
        Si ya está, se suma la cantidad a la línea existente.

        Args:
            product: Producto (se guarda una copia)
            quantity: Cantidad a agregar (≥ 1)

        Returns:
            La línea resultante

        Raises:
            ValidationError: Si la cantidad no es un entero ≥ 1 o supera el stock
        """
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
            raise ValidationError('Cantidad debe ser un entero mayor o igual a 1')

        line = self._lines.get(product.id)
        if line is not None:
            new_quantity = line.quantity + quantity
            if new_quantity > product.stock:
                raise ValidationError(
                    f'Stock insuficiente. Ya tienes {line.quantity} en carrito. Disponible: {product.stock}'
                )
            line.quantity = new_quantity
            return line

        _check_stock(product, quantity)

        line = CartLine(product=Product.from_dict(product.to_dict()), quantity=quantity)
        self._lines[product.id] = line
        return line

    def remove_item(self, product_id: str) -> bool:
        """
        Quita una línea.

        Returns:
            True si existía
        """
        return self._lines.pop(str(product_id), None) is not None

    def update_quantity(self, product_id: str, quantity: int) -> None:
        """
        Fija la cantidad de una línea.
        Cantidad ≤ 0 equivale a remove_item; ids desconocidos se ignoran.

        Raises:
            ValidationError: Si la cantidad supera el stock del producto
        """
        product_id = str(product_id)
        if product_id not in self._lines:
            return
        if quantity <= 0:
            self.remove_item(product_id)
            return
        line = self._lines[product_id]
        _check_stock(line.product, int(quantity))
        line.quantity = int(quantity)

    def clear_cart(self) -> None:
        self._lines.clear()

    # =========================================================================
    # LECTURA
    # =========================================================================

    def get_items(self) -> List[CartLine]:
        return list(self._lines.values())

    def get_line(self, product_id: str):
        return self._lines.get(str(product_id))

    def get_total_items(self) -> int:
        return sum(line.quantity for line in self._lines.values())

    def get_total_price(self) -> float:
        """Σ(precio × cantidad) recalculado en cada llamada."""
        return money(sum(line.product.price * line.quantity for line in self._lines.values()))

    def is_empty(self) -> bool:
        return not self._lines

    def get_cart(self) -> Dict[str, Any]:
        """
        Obtiene el carrito con totales calculados.

        Returns:
            Dict con items, total_items, total_price, items_count
        """
        return {
            'items': [line.to_dict() for line in self._lines.values()],
            'total_items': self.get_total_items(),
            'total_price': self.get_total_price(),
            'items_count': len(self._lines),
        }
