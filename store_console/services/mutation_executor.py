# ==============================================================================
# EJECUTOR DE MUTACIONES
# ==============================================================================
# Envuelve una escritura al almacén (crear tienda, aprobar pedido, ...):
#   - Marca "en curso" mientras la llamada está pendiente y rechaza
#     una segunda llamada del mismo tipo
#   - Modo invalidación: tras el éxito vence las claves indicadas
#   - Modo optimista: aplica el cambio a la caché ANTES de llamar al almacén
#     y lo revierte si la llamada falla
#   - Publica notificaciones de éxito / error para el usuario
# ==============================================================================

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Iterable, Optional

from store_console.performance_logger import profile_function
from .notifications import Notifier
from .query_cache import KeyLike, QueryCache


class MutationInProgressError(Exception):
    """Ya hay una mutación del mismo tipo en curso."""
    pass


@dataclass(frozen=True)
class MutationResult:
    ok: bool
    data: Any = None
    error: Optional[BaseException] = None

    @property
    def error_message(self) -> Optional[str]:
        return str(self.error) if self.error is not None else None


@dataclass(frozen=True)
class OptimisticUpdate:
    """
    Cambio a aplicar sobre una clave de la caché antes de escribir.

    transform recibe (datos_actuales, payload) y retorna los datos nuevos.
    rollback recibe (datos_actuales, payload, datos_previos) y deshace solo
    lo que tocó esta mutación; sin rollback se restaura la clave completa.
    """
    key: KeyLike
    transform: Callable[[Any, Any], Any]
    rollback: Optional[Callable[[Any, Any, Any], Any]] = None


class MutationExecutor:
    """
    Ejecuta un tipo de mutación.

    Args:
        name: Nombre del tipo (ej: 'approve_order')
        mutation_fn: Corrutina (payload) -> resultado del almacén
        cache: Caché de consultas a invalidar / actualizar
        notifier: Destino de las notificaciones
        invalidate: Claves a invalidar tras un éxito
        optimistic: Actualización optimista (opcional)
        success_title / success_message: Notificación de éxito (None = sin aviso)
        error_message: Texto por defecto si el fallo no trae motivo
        on_success: Callback (data, payload) tras un éxito
    """

    def __init__(
        self,
        name: str,
        mutation_fn: Callable[[Any], Awaitable[Any]],
        cache: QueryCache,
        notifier: Notifier = None,
        invalidate: Iterable[KeyLike] = (),
        optimistic: OptimisticUpdate = None,
        success_title: str = 'Éxito',
        success_message: str = None,
        error_message: str = 'No se pudo completar la operación',
        on_success: Callable[[Any, Any], None] = None,
    ):
        self.name = name
        self.mutation_fn = mutation_fn
        self.cache = cache
        self.notifier = notifier or Notifier()
        self.invalidate_keys = list(invalidate)
        self.optimistic = optimistic
        self.success_title = success_title
        self.success_message = success_message
        self.error_message = error_message
        self.on_success = on_success
        self._pending = False

    @property
    def is_pending(self) -> bool:
        return self._pending

    def describe_error(self, exc: BaseException) -> str:
        """Texto para el usuario: el motivo del fallo o el mensaje por defecto."""
        return str(exc).strip() or self.error_message

    async def mutate(self, payload: Any = None) -> MutationResult:
        """
        Ejecuta la mutación.

        Returns:
            MutationResult(ok=True, data) o MutationResult(ok=False, error)
        """
        if self._pending:
            return MutationResult(
                ok=False,
                error=MutationInProgressError(f'{self.name} ya está en curso'),
            )

        self._pending = True
        try:
            return await self._execute(payload)
        finally:
            self._pending = False

    @profile_function(name="Mutación")
    async def _execute(self, payload: Any) -> MutationResult:
        snapshot = None
        if self.optimistic is not None:
            snapshot = self.cache.snapshot(self.optimistic.key)
            transform = self.optimistic.transform
            self.cache.set_data(self.optimistic.key, lambda current: transform(current, payload))

        try:
            data = await self.mutation_fn(payload)
        except Exception as exc:
            if snapshot is not None:
                self._revert(snapshot, payload)
            self.notifier.error(self.describe_error(exc))
            return MutationResult(ok=False, error=exc)

        for key in self.invalidate_keys:
            self.cache.invalidate(key)
        if self.success_message:
            self.notifier.success(self.success_title, self.success_message)
        if self.on_success is not None:
            self.on_success(data, payload)
        return MutationResult(ok=True, data=data)

    def _revert(self, snapshot, payload: Any) -> None:
        rollback = self.optimistic.rollback
        if rollback is None or not snapshot.has_data:
            self.cache.restore(snapshot)
            return
        self.cache.set_data(snapshot.key, lambda current: rollback(current, payload, snapshot.data))
