# ==============================================================================
# NOTIFICACIONES AL USUARIO
# ==============================================================================
# Equivalente a los "toasts" de la interfaz: mensajes transitorios de éxito
# o error que la capa web entrega en la siguiente respuesta.
# ==============================================================================

from collections import deque
from dataclasses import dataclass
from typing import Any, Deque, Dict, List


@dataclass(frozen=True)
class Notification:
    title: str
    description: str
    variant: str = 'default'   # 'default' | 'destructive'

    @property
    def is_error(self) -> bool:
        return self.variant == 'destructive'

    def to_dict(self) -> Dict[str, Any]:
        return {'title': self.title, 'description': self.description, 'variant': self.variant}


class Notifier:
    """
    Cola de notificaciones pendientes de mostrar.

    Guarda como máximo MAX_PENDING; al pasar el límite se descartan las más viejas.
    """

    MAX_PENDING = 50

    def __init__(self, max_pending: int = None):
        self._pending: Deque[Notification] = deque(maxlen=max_pending or self.MAX_PENDING)

    def success(self, title: str, description: str = '') -> Notification:
        note = Notification(title, description)
        self._pending.append(note)
        return note

    def error(self, description: str, title: str = 'Error') -> Notification:
        note = Notification(title, description, 'destructive')
        self._pending.append(note)
        return note

    def peek(self) -> List[Notification]:
        return list(self._pending)

    def drain(self) -> List[Notification]:
        """Entrega y vacía las notificaciones pendientes."""
        pending = list(self._pending)
        self._pending.clear()
        return pending
