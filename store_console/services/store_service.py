# ==============================================================================
# SERVICIO DE TIENDAS
# ==============================================================================
# Lectura cacheada de la colección "stores" y altas/ediciones/bajas
# que invalidan esa clave.
# ==============================================================================

from dataclasses import replace
from typing import Any, Dict, List

from store_console import config
from store_console.models import Store, ValidationError
from store_console.repositories.interfaces import IBackingStore
from .audit_service import AuditService
from .mutation_executor import MutationExecutor, MutationResult
from .notifications import Notifier
from .query_cache import QueryCache, QueryResult
from .session_service import SessionState

STORES_KEY = 'stores'


def _validate_store_fields(data: Dict[str, Any], partial: bool = False) -> Dict[str, Any]:
    """Nombre y código son obligatorios (en una edición, si vienen, no pueden ir vacíos)."""
    clean = dict(data or {})
    for field_name, label in (('name', 'Nombre de tienda'), ('storeId', 'Código de tienda')):
        if partial and field_name not in clean:
            continue
        value = clean.get(field_name)
        if value is None or not str(value).strip():
            raise ValidationError(f'{label} es requerido')
        clean[field_name] = str(value).strip()
    return clean


class StoreService:
    """
    Servicio para gestión de tiendas.

    Responsabilidades:
    - Listado cacheado y búsqueda por nombre o código
    - Crear / editar / eliminar (con invalidación de "stores")
    - Auditoría de cambios
    """

    def __init__(
        self,
        store: IBackingStore,
        cache: QueryCache,
        notifier: Notifier,
        session_state: SessionState,
        audit_service: AuditService = None,
    ):
        self.store = store
        self.cache = cache
        self.notifier = notifier
        self.session_state = session_state
        self.audit_service = audit_service

        self.add_executor = MutationExecutor(
            'add_store',
            lambda data: self.store.add_store(data),
            cache, notifier,
            invalidate=[STORES_KEY],
            success_message='Tienda creada correctamente',
            error_message='No se pudo crear la tienda',
            on_success=lambda store, _data: self._audit(store, 'creada'),
        )
        self.update_executor = MutationExecutor(
            'update_store',
            lambda payload: self.store.update_store(payload[0], payload[1]),
            cache, notifier,
            invalidate=[STORES_KEY],
            success_message='Tienda actualizada correctamente',
            error_message='No se pudo actualizar la tienda',
            on_success=lambda store, _payload: self._audit(store, 'editada'),
        )
        self.delete_executor = MutationExecutor(
            'delete_store',
            lambda store_id: self.store.delete_store(store_id),
            cache, notifier,
            invalidate=[STORES_KEY],
            success_message='Tienda eliminada correctamente',
            error_message='No se pudo eliminar la tienda',
            on_success=lambda _none, store_id: self._audit_id(store_id, 'eliminada'),
        )

    def _user(self) -> str:
        session = self.session_state.current_session()
        return session.name if session else 'sistema'

    def _audit(self, store: Store, action: str) -> None:
        if self.audit_service:
            self.audit_service.log_entity_change(
                AuditService.TYPE_TIENDA, self._user(), action, store.id, store.name
            )

    def _audit_id(self, store_id: str, action: str) -> None:
        if self.audit_service:
            self.audit_service.log_entity_change(AuditService.TYPE_TIENDA, self._user(), action, store_id)

    # =========================================================================
    # LECTURA
    # =========================================================================

    async def list_stores(self, stale_window: float = None, show_refresh: bool = False) -> QueryResult:
        """
        Lista de tiendas desde la caché.

        Args:
            stale_window: Ventana de frescura (config.STALE_STORES por defecto)
        """
        window = config.STALE_STORES if stale_window is None else stale_window
        return await self.cache.query(STORES_KEY, self.store.get_stores, window, show_refresh=show_refresh)

    @staticmethod
    def filter_stores(stores: List[Store], term: str) -> List[Store]:
        if not term:
            return list(stores)
        needle = term.strip().lower()
        return [s for s in stores if needle in s.name.lower() or needle in s.store_id.lower()]

    async def search_stores(self, term: str = '') -> QueryResult:
        """Lista filtrada por nombre o código (sin distinguir mayúsculas)."""
        result = await self.list_stores()
        return replace(result, data=self.filter_stores(result.data or [], term))

    # =========================================================================
    # ESCRITURA
    # =========================================================================

    async def add_store(self, data: Dict[str, Any]) -> MutationResult:
        """
        Crea una tienda.

        Raises:
            ValidationError: Falta nombre o código (antes de tocar el almacén)
        """
        return await self.add_executor.mutate(_validate_store_fields(data))

    async def update_store(self, store_id: str, data: Dict[str, Any]) -> MutationResult:
        return await self.update_executor.mutate((store_id, _validate_store_fields(data, partial=True)))

    async def delete_store(self, store_id: str) -> MutationResult:
        return await self.delete_executor.mutate(store_id)
