# ==============================================================================
# PAGINACIÓN
# ==============================================================================
# Corta una colección ya filtrada en páginas para mostrarla.
# La página pedida nunca da error: se ajusta al rango [1, total_pages].
# ==============================================================================

import math
from dataclasses import dataclass
from typing import Any, List, Sequence

from store_console import config
from store_console.models import ValidationError


@dataclass(frozen=True)
class Page:
    """
    Resultado de paginar.

    Attributes:
        page_items: Elementos de la página actual
        total_pages: Total de páginas (mínimo 1, incluso sin elementos)
        current_page: Página actual ya ajustada al rango
        start_index: Índice (0-based) del primer elemento de la página
        end_index: Índice exclusivo del final de la página
        can_go_next: Hay página siguiente
        can_go_previous: Hay página anterior
        total_items: Elementos en la colección completa
    """
    page_items: List[Any]
    total_pages: int
    current_page: int
    start_index: int
    end_index: int
    can_go_next: bool
    can_go_previous: bool
    total_items: int

    @property
    def is_empty(self) -> bool:
        return self.total_items == 0

    def to_dict(self) -> dict:
        return {
            'totalPages': self.total_pages,
            'currentPage': self.current_page,
            'startIndex': self.start_index,
            'endIndex': self.end_index,
            'canGoNext': self.can_go_next,
            'canGoPrevious': self.can_go_previous,
            'totalItems': self.total_items,
            'pageWindow': page_window(self.current_page, self.total_pages),
        }


def total_pages_for(total_items: int, page_size: int) -> int:
    if page_size < 1:
        raise ValidationError('El tamaño de página debe ser al menos 1')
    return max(1, math.ceil(total_items / page_size))


def clamp_page(page: Any, total_pages: int) -> int:
    """Ajusta una página cualquiera (incluso texto inválido) a [1, total_pages]."""
    try:
        page = int(page)
    except (TypeError, ValueError):
        page = 1
    return min(max(page, 1), total_pages)


def paginate(items: Sequence[Any], page_size: int = None, current_page: Any = 1) -> Page:
    """
    Pagina una colección en memoria.

    Args:
        items: Colección (ya filtrada)
        page_size: Elementos por página (config.PAGE_SIZE por defecto)
        current_page: Página pedida (1-based); se ajusta al rango válido

    Returns:
        Page

    Raises:
        ValidationError: Si page_size < 1
    """
    size = config.PAGE_SIZE if page_size is None else page_size
    items = list(items)
    pages = total_pages_for(len(items), size)
    page = clamp_page(current_page, pages)
    start = (page - 1) * size
    end = min(start + size, len(items))
    return Page(
        page_items=items[start:end],
        total_pages=pages,
        current_page=page,
        start_index=start,
        end_index=end,
        can_go_next=page < pages,
        can_go_previous=page > 1,
        total_items=len(items),
    )


def page_window(current_page: int, total_pages: int, max_pages: int = None) -> List[int]:
    """
    Números de página a mostrar: como máximo max_pages, centrados en la
    página actual y desplazados para no salir de [1, total_pages].

    Ejemplo:
        page_window(1, 10)  → [1, 2, 3, 4, 5]
        page_window(6, 10)  → [4, 5, 6, 7, 8]
        page_window(10, 10) → [6, 7, 8, 9, 10]
    """
    limit = config.MAX_PAGE_LINKS if max_pages is None else max_pages
    total_pages = max(1, total_pages)
    current_page = clamp_page(current_page, total_pages)
    if total_pages <= limit:
        return list(range(1, total_pages + 1))
    start = current_page - limit // 2
    start = max(1, min(start, total_pages - limit + 1))
    return list(range(start, start + limit))


class PaginationState:
    """
    Página actual de una vista paginada.

    Se re-ajusta cada vez que cambia la colección filtrada, así la página
    mostrada nunca supera el nuevo total. reset() vuelve a la página 1
    (se usa al cambiar búsqueda o filtro).
    """

    def __init__(self, page_size: int = None):
        self.page_size = config.PAGE_SIZE if page_size is None else page_size
        total_pages_for(0, self.page_size)
        self.current_page = 1

    def go_to(self, page: Any) -> None:
        self.current_page = clamp_page(page, 10 ** 9)

    def next(self) -> None:
        self.current_page += 1

    def previous(self) -> None:
        self.current_page = max(1, self.current_page - 1)

    def reset(self) -> None:
        self.current_page = 1

    def apply(self, items: Sequence[Any]) -> Page:
        """Pagina `items` y guarda la página ya ajustada."""
        page = paginate(items, self.page_size, self.current_page)
        self.current_page = page.current_page
        return page
