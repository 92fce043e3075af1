# ==============================================================================
# CACHÉ DE CONSULTAS
# ==============================================================================
# Memoriza lecturas del almacén por clave y decide cuándo volver a pedirlas.
#
# Reglas:
#   - Ventana de frescura por consulta: dentro de ella no se llama al almacén
#   - Lecturas concurrentes de la misma clave comparten una sola llamada
#   - Cada lectura lleva un número de secuencia por clave; una respuesta
#     más vieja que la última lectura iniciada se descarta (éxito o fallo)
#   - Si la lectura falla se conservan los datos previos y se expone el error
#   - Cada intento está acotado por fetch_timeout; los reintentos esperan
#     min(base * 2**intento, máximo) usando el reloj inyectado
#
# Claves: 'orders' equivale a ('orders',). Invalidar ('products',) invalida
# también ('products', '3').
# ==============================================================================

import asyncio
import copy
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Hashable, Optional, Tuple, Union

from store_console import config
from store_console.clock import SystemClock
from store_console.performance_logger import profile_function

CacheKey = Tuple[Hashable, ...]
KeyLike = Union[str, CacheKey, list]
Fetcher = Callable[[], Awaitable[Any]]


class FetchError(Exception):
    """
    Lectura fallida (error del almacén o timeout).

    Attributes:
        key: Clave de la consulta
        cause: Excepción original (None si fue timeout)
    """

    def __init__(self, key: CacheKey, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.key = key
        self.cause = cause

    @property
    def message(self) -> str:
        return str(self)


def normalize_key(key: KeyLike) -> CacheKey:
    """'orders' → ('orders',); listas → tuplas."""
    if isinstance(key, str):
        return (key,)
    return tuple(key)


@dataclass(frozen=True)
class QueryResult:
    """Vista inmutable de una entrada de la caché."""
    data: Any = None
    is_loading: bool = False
    is_fetching: bool = False
    error: Optional[FetchError] = None
    updated_at: Optional[float] = None

    @property
    def error_message(self) -> Optional[str]:
        return self.error.message if self.error else None


@dataclass
class CacheEntry:
    """
    Estado de una clave.

    seq es el número de la última lectura iniciada; task la tarea de esa
    lectura (compartida por todos los que la esperan).
    """
    key: CacheKey
    data: Any = None
    has_data: bool = False
    fetched_at: Optional[float] = None
    stale_after: float = 0.0
    error: Optional[FetchError] = None
    data_updated_at: Optional[float] = None
    invalidated: bool = False
    seq: int = 0
    task: Optional[asyncio.Task] = None
    show_refresh: bool = False

    @property
    def is_fetching(self) -> bool:
        return self.task is not None and not self.task.done()


@dataclass(frozen=True)
class CacheSnapshot:
    """Copia de una entrada para revertir una actualización optimista."""
    key: CacheKey
    has_data: bool
    data: Any
    data_updated_at: Optional[float]


class QueryCache:
    """
    Caché de consultas asíncrona.

    Args:
        clock: Reloj para ventanas de frescura y esperas entre reintentos
        fetch_timeout: Segundos máximos por intento
        retries: Intentos extra tras un fallo
        retry_base_delay: Espera base entre reintentos (segundos)
        retry_max_delay: Tope de la espera entre reintentos
    """

    def __init__(self, clock=None, fetch_timeout: float = None, retries: int = None,
                 retry_base_delay: float = None, retry_max_delay: float = None):
        self.clock = clock or SystemClock()
        self.fetch_timeout = config.FETCH_TIMEOUT if fetch_timeout is None else fetch_timeout
        self.retries = config.FETCH_RETRIES if retries is None else retries
        self.retry_base_delay = config.RETRY_BASE_DELAY if retry_base_delay is None else retry_base_delay
        self.retry_max_delay = config.RETRY_MAX_DELAY if retry_max_delay is None else retry_max_delay
        self._entries: Dict[CacheKey, CacheEntry] = {}

    # =========================================================================
    # LECTURA
    # =========================================================================

    async def query(self, key: KeyLike, fetcher: Fetcher, stale_window: float,
                    show_refresh: bool = False, force: bool = False) -> QueryResult:
        """
        Devuelve los datos de una clave, leyendo del almacén si hace falta.

        Args:
            key: Clave de la consulta
            fetcher: Corrutina sin argumentos que lee del almacén
            stale_window: Segundos durante los que los datos se consideran frescos
            show_refresh: Si es True, is_loading se activa también al refrescar
            force: Ignora la ventana de frescura (ver refetch)

        Returns:
            QueryResult con el estado tras la lectura
        """
        entry = self._entry(key)
        entry.stale_after = stale_window
        if force or self._needs_fetch(entry):
            await self._fetch(entry, fetcher, force=force, show_refresh=show_refresh)
        return self._result(entry)

    async def refetch(self, key: KeyLike, fetcher: Fetcher, stale_window: float = None,
                      show_refresh: bool = False) -> QueryResult:
        """Fuerza una lectura saltando la ventana de frescura una vez."""
        entry = self._entry(key)
        window = entry.stale_after if stale_window is None else stale_window
        return await self.query(key, fetcher, window, show_refresh=show_refresh, force=True)

    def peek(self, key: KeyLike) -> QueryResult:
        """Estado actual de la clave sin disparar lecturas."""
        entry = self._entries.get(normalize_key(key))
        if entry is None:
            return QueryResult()
        return self._result(entry)

    def get_data(self, key: KeyLike) -> Any:
        entry = self._entries.get(normalize_key(key))
        return entry.data if entry is not None else None

    def is_stale(self, key: KeyLike) -> bool:
        entry = self._entries.get(normalize_key(key))
        return entry is None or self._needs_fetch(entry)

    # =========================================================================
    # ESCRITURA DIRECTA (actualizaciones optimistas)
    # =========================================================================

    def set_data(self, key: KeyLike, updater: Union[Callable[[Any], Any], Any]) -> Any:
        """
        Reemplaza los datos de una clave sin llamar al almacén.

        Una lectura en curso para la clave queda superada: su respuesta
        se descarta y no pisa el valor escrito aquí.

        Args:
            key: Clave
            updater: Valor nuevo o función (datos_actuales) -> datos_nuevos
        """
        entry = self._entry(key)
        new_data = updater(entry.data) if callable(updater) else updater
        entry.data = new_data
        entry.has_data = True
        entry.data_updated_at = self.clock.now()
        if entry.is_fetching:
            entry.seq += 1
        return new_data

    def snapshot(self, key: KeyLike) -> CacheSnapshot:
        entry = self._entry(key)
        return CacheSnapshot(
            key=entry.key,
            has_data=entry.has_data,
            data=copy.deepcopy(entry.data),
            data_updated_at=entry.data_updated_at,
        )

    def restore(self, snapshot: CacheSnapshot) -> None:
        """Vuelve una entrada al valor guardado con snapshot()."""
        entry = self._entry(snapshot.key)
        entry.data = snapshot.data
        entry.has_data = snapshot.has_data
        entry.data_updated_at = snapshot.data_updated_at

    # =========================================================================
    # INVALIDACIÓN
    # =========================================================================

    def invalidate(self, key: KeyLike) -> int:
        """
        Marca como vencidas todas las claves que empiezan por `key`.

        Returns:
            Cantidad de entradas invalidadas
        """
        prefix = normalize_key(key)
        count = 0
        for entry_key, entry in self._entries.items():
            if entry_key[:len(prefix)] == prefix:
                entry.invalidated = True
                count += 1
        return count

    def remove(self, key: KeyLike) -> None:
        self._entries.pop(normalize_key(key), None)

    def clear(self) -> None:
        self._entries.clear()

    def keys(self):
        return list(self._entries.keys())

    # =========================================================================
    # INTERNOS
    # =========================================================================

    def _entry(self, key: KeyLike) -> CacheEntry:
        normalized = normalize_key(key)
        entry = self._entries.get(normalized)
        if entry is None:
            entry = CacheEntry(key=normalized)
            self._entries[normalized] = entry
        return entry

    def _needs_fetch(self, entry: CacheEntry) -> bool:
        if not entry.has_data or entry.invalidated or entry.fetched_at is None:
            return True
        return self.clock.now() - entry.fetched_at > entry.stale_after

    def _result(self, entry: CacheEntry) -> QueryResult:
        fetching = entry.is_fetching
        return QueryResult(
            data=entry.data,
            is_loading=fetching and (not entry.has_data or entry.show_refresh),
            is_fetching=fetching,
            error=entry.error,
            updated_at=entry.data_updated_at,
        )

    def retry_delay(self, attempt: int) -> float:
        """Espera antes del reintento número `attempt` (0-based)."""
        return min(self.retry_base_delay * 2 ** attempt, self.retry_max_delay)

    async def _fetch(self, entry: CacheEntry, fetcher: Fetcher, force: bool, show_refresh: bool) -> None:
        loop = asyncio.get_running_loop()
        running = entry.is_fetching and entry.task.get_loop() is loop
        if running and not force:
            await self._wait_latest(entry)
            return

        entry.seq += 1
        entry.show_refresh = show_refresh
        entry.task = loop.create_task(self._run(entry, fetcher, entry.seq))
        await self._wait_latest(entry)

    async def _wait_latest(self, entry: CacheEntry) -> None:
        """Espera hasta que termine la última lectura iniciada para la clave."""
        while True:
            task = entry.task
            await asyncio.shield(task)
            if entry.task is task:
                return

    async def _run(self, entry: CacheEntry, fetcher: Fetcher, seq: int) -> None:
        try:
            data = await self._attempts(entry.key, fetcher)
        except FetchError as exc:
            if seq == entry.seq:
                entry.error = exc
            return
        if seq != entry.seq:
            return
        now = self.clock.now()
        entry.data = data
        entry.has_data = True
        entry.fetched_at = now
        entry.data_updated_at = now
        entry.error = None
        entry.invalidated = False

    @profile_function(name="Caché: lectura del almacén")
    async def _attempts(self, key: CacheKey, fetcher: Fetcher) -> Any:
        attempts = max(0, self.retries) + 1
        last_error = None
        for attempt in range(attempts):
            try:
                return await asyncio.wait_for(fetcher(), timeout=self.fetch_timeout)
            except asyncio.TimeoutError:
                last_error = FetchError(
                    key, f'La lectura de {key[0]} superó {self.fetch_timeout:g} s'
                )
            except Exception as exc:
                last_error = FetchError(key, str(exc) or f'No se pudo leer {key[0]}', cause=exc)
            if attempt < attempts - 1:
                await self.clock.sleep(self.retry_delay(attempt))
        raise last_error
