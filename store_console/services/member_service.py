# ==============================================================================
# SERVICIO DE MIEMBROS
# ==============================================================================
# Miembros de tienda: listado, filtro por texto y tienda, y CRUD.
#
# storeName se copia de la lista de tiendas cacheada al momento de escribir.
# Renombrar una tienda NO actualiza los miembros existentes.
#
# Contraseñas:
# - Alta sin contraseña → se genera una temporal "temp" + 6 caracteres
# - Edición sin contraseña → se conserva la actual
# ==============================================================================

import secrets
import string
from dataclasses import replace
from typing import Any, Dict, List, Optional

from store_console import config
from store_console.models import Member, Store, ValidationError
from store_console.repositories.interfaces import IBackingStore
from .audit_service import AuditService
from .mutation_executor import MutationExecutor, MutationResult
from .notifications import Notifier
from .query_cache import QueryCache, QueryResult
from .session_service import SessionState
from .store_service import STORES_KEY

MEMBERS_KEY = 'members'

_TEMP_ALPHABET = string.ascii_lowercase + string.digits


def generate_temp_password(length: int = 6) -> str:
    """Contraseña temporal: 'temp' + `length` alfanuméricos en minúscula."""
    return 'temp' + ''.join(secrets.choice(_TEMP_ALPHABET) for _ in range(length))


def filter_members(members: List[Member], term: str = '', store_id: str = 'all') -> List[Member]:
    """Filtra por nombre/email y por tienda ('all' = todas)."""
    needle = (term or '').strip().lower()
    result = []
    for member in members:
        if needle and needle not in member.name.lower() and needle not in member.email.lower():
            continue
        if store_id and store_id != 'all' and member.store_id != str(store_id):
            continue
        result.append(member)
    return result


class MemberService:
    """
    Servicio para gestión de miembros.

    Responsabilidades:
    - Listado cacheado y filtros
    - Alta / edición / baja (con invalidación de "members")
    - Resolución de storeName y contraseña temporal
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
            'add_member',
            lambda data: self.store.add_member(data),
            cache, notifier,
            invalidate=[MEMBERS_KEY],
            success_message='Miembro creado correctamente',
            error_message='No se pudo crear el miembro',
            on_success=lambda member, _data: self._audit(member.id, 'creado', member.name),
        )
        self.update_executor = MutationExecutor(
            'update_member',
            lambda payload: self.store.update_member(payload[0], payload[1]),
            cache, notifier,
            invalidate=[MEMBERS_KEY],
            success_message='Miembro actualizado correctamente',
            error_message='No se pudo actualizar el miembro',
            on_success=lambda member, _payload: self._audit(member.id, 'editado', member.name),
        )
        self.delete_executor = MutationExecutor(
            'delete_member',
            lambda member_id: self.store.delete_member(member_id),
            cache, notifier,
            invalidate=[MEMBERS_KEY],
            success_message='Miembro eliminado correctamente',
            error_message='No se pudo eliminar el miembro',
            on_success=lambda _none, member_id: self._audit(member_id, 'eliminado'),
        )

    def _audit(self, member_id: str, action: str, label: str = '') -> None:
        if self.audit_service:
            session = self.session_state.current_session()
            user = session.name if session else 'sistema'
            self.audit_service.log_entity_change(AuditService.TYPE_MIEMBRO, user, action, member_id, label)

    # =========================================================================
    # LECTURA
    # =========================================================================

    async def list_members(self, show_refresh: bool = False) -> QueryResult:
        return await self.cache.query(
            MEMBERS_KEY, self.store.get_members, config.STALE_MEMBERS, show_refresh=show_refresh
        )

    async def store_lookup(self) -> QueryResult:
        """Tiendas para el selector (ventana de frescura más larga)."""
        return await self.cache.query(STORES_KEY, self.store.get_stores, config.STALE_STORES_LOOKUP)

    async def filter_members(self, term: str = '', store_id: str = 'all') -> QueryResult:
        result = await self.list_members()
        return replace(result, data=filter_members(result.data or [], term, store_id))

    async def _store_name(self, store_id: str) -> str:
        stores: List[Store] = (await self.store_lookup()).data or []
        for store in stores:
            if store.id == str(store_id):
                return store.name
        return ''

    # =========================================================================
    # ESCRITURA
    # =========================================================================

    @staticmethod
    def validate_member_fields(data: Dict[str, Any], partial: bool = False) -> Dict[str, Any]:
        """
        Nombre, email y tienda son obligatorios.

        Raises:
            ValidationError: Campo faltante o email sin '@'
        """
        clean = {k: v for k, v in (data or {}).items() if k not in ('id', 'createdAt')}
        for field_name, label in (('name', 'Nombre'), ('email', 'Email'), ('storeId', 'Tienda')):
            if partial and field_name not in clean:
                continue
            value = clean.get(field_name)
            if value is None or not str(value).strip():
                raise ValidationError(f'{label} es requerido')
            clean[field_name] = str(value).strip()
        if 'email' in clean and '@' not in clean['email']:
            raise ValidationError('Email inválido')
        return clean

    async def add_member(self, data: Dict[str, Any]) -> MutationResult:
        """
        Crea un miembro.

        Raises:
            ValidationError: Antes de cualquier llamada al almacén
        """
        clean = self.validate_member_fields(data)
        if not (clean.get('password') or '').strip():
            clean['password'] = generate_temp_password()
        clean['storeName'] = await self._store_name(clean['storeId'])
        return await self.add_executor.mutate(clean)

    async def update_member(self, member_id: str, data: Dict[str, Any]) -> MutationResult:
        clean = self.validate_member_fields(data, partial=True)
        if not (clean.get('password') or '').strip():
            clean.pop('password', None)
        if 'storeId' in clean:
            clean['storeName'] = await self._store_name(clean['storeId'])
        return await self.update_executor.mutate((member_id, clean))

    async def delete_member(self, member_id: str) -> MutationResult:
        return await self.delete_executor.mutate(member_id)

    async def get_member(self, member_id: str) -> Optional[Member]:
        members = (await self.list_members()).data or []
        return next((m for m in members if m.id == str(member_id)), None)
