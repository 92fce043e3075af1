# ==============================================================================
# REPOSITORIO BASE - Funcionalidad común del almacén en memoria
# ==============================================================================
# El almacén es una lista de entidades por colección, con latencia
# artificial inyectable a través del reloj.
#
# Al migrar a una API real:
# - Esta clase se reemplazará por un cliente HTTP
# - La latencia simulada desaparece (la pone la red)
# - Los servicios NO cambian (dependen de interfaces.py)
# ==============================================================================

import copy
from abc import ABC, abstractmethod
from typing import Any, Callable, List, Optional

from store_console.clock import SystemClock


class BackingStoreError(Exception):
    """Fallo genérico del almacén (lectura o escritura rechazada)."""
    pass


class NotFoundError(BackingStoreError):
    """El registro pedido no existe."""
    pass


class InvalidTransitionError(BackingStoreError):
    """Cambio de estado no permitido (ej: pedido ya aprobado)."""
    pass


class BaseRepository(ABC):
    """
    Clase base abstracta para todos los repositorios en memoria.

    Cada llamada pública espera la latencia configurada antes de tocar
    los datos, igual que lo haría una llamada de red.
    Los datos entregados son siempre copias: nadie fuera del repositorio
    puede mutar el almacén sin pasar por sus métodos.
    """

    def __init__(self, clock=None, latency: float = 0.0, seed: Optional[List[Any]] = None):
        """
        Inicializa el repositorio.

        Args:
            clock: Reloj (SystemClock por defecto)
            latency: Segundos de espera simulada por llamada
            seed: Datos iniciales (si es None se usan los de _empty_data)
        """
        self.clock = clock or SystemClock()
        self.latency = latency
        self._records: List[Any] = copy.deepcopy(seed) if seed is not None else self._empty_data()

    @abstractmethod
    def _empty_data(self) -> List[Any]:
        """
        Retorna la colección inicial cuando no se entrega semilla.
        Debe ser implementado por cada repositorio concreto.
        """
        pass

    async def _simulate_latency(self) -> None:
        """Espera la latencia configurada (usa el reloj inyectado)."""
        await self.clock.sleep(self.latency)


class ListRepository(BaseRepository):
    """
    Repositorio base para colecciones con campo `id`.

    Ejemplo: stores -> [Store(id='1', ...), Store(id='2', ...)]
    """

    # Prefijo para ids generados (ej: 'order-' → 'order-16')
    ID_PREFIX = ''

    def _empty_data(self) -> List[Any]:
        return []

    def _next_id(self) -> str:
        """Genera el siguiente id libre según ID_PREFIX."""
        highest = 0
        for record in self._records:
            raw = str(record.id)
            if self.ID_PREFIX and raw.startswith(self.ID_PREFIX):
                raw = raw[len(self.ID_PREFIX):]
            if raw.isdigit():
                highest = max(highest, int(raw))
        return f"{self.ID_PREFIX}{highest + 1}"

    def _index_of(self, record_id: str) -> int:
        for index, record in enumerate(self._records):
            if str(record.id) == str(record_id):
                return index
        raise NotFoundError(f'Registro {record_id} no encontrado')

    async def get_all(self) -> List[Any]:
        """
        Obtiene todos los registros.

        Returns:
            Copia de la lista completa
        """
        await self._simulate_latency()
        return copy.deepcopy(self._records)

    async def insert(self, build: Callable[[str], Any]) -> Any:
        """
        Agrega un registro nuevo.

        Args:
            build: Función que recibe el id generado y construye la entidad
                   (así la validación ocurre antes de insertar)

        Returns:
            Copia del registro insertado
        """
        await self._simulate_latency()
        record = build(self._next_id())
        self._records.append(record)
        return copy.deepcopy(record)

    async def update(self, record_id: str, apply: Callable[[Any], Any]) -> Any:
        """
        Actualiza un registro.

        Args:
            record_id: ID del registro
            apply: Función que recibe una copia del registro actual y
                   retorna el registro nuevo (validado)

        Returns:
            Copia del registro actualizado

        Raises:
            NotFoundError: Si el registro no existe
        """
        await self._simulate_latency()
        index = self._index_of(record_id)
        updated = apply(copy.deepcopy(self._records[index]))
        self._records[index] = updated
        return copy.deepcopy(updated)

    async def delete(self, record_id: str) -> Any:
        """
        Elimina un registro.

        Returns:
            El registro eliminado

        Raises:
            NotFoundError: Si el registro no existe
        """
        await self._simulate_latency()
        index = self._index_of(record_id)
        return self._records.pop(index)

