# ==============================================================================
# REPOSITORIO DE AUDITORÍA
# ==============================================================================
# Historial en memoria de la actividad de la consola.
# Se guarda como lista: [{log1}, {log2}, ...] con el más reciente primero.
# ==============================================================================

from typing import Any, Dict, List

from store_console.clock import SystemClock
from store_console.models import AuditLog


class AuditRepository:
    """
    Repositorio para el log de auditoría.

    Formato de cada registro:
        {
            "type": "PEDIDO",
            "user": "Admin User",
            "message": "Pedido order-3: pending → approved por Admin User",
            "timestamp": "2024-01-01 10:00:00",
            "related_id": "order-3",
            "details": {...}
        }
    """

    # Límite de registros para no crecer sin control
    MAX_LOGS = 1000

    def __init__(self, clock=None):
        self.clock = clock or SystemClock()
        self._logs: List[Dict[str, Any]] = []

    def load(self) -> List[Dict[str, Any]]:
        """
        Carga todos los logs de auditoría.

        Returns:
            Lista de logs (más recientes primero)
        """
        return [dict(entry) for entry in self._logs]

    def log(
        self,
        log_type: str,
        user: str,
        message: str,
        related_id: str = '',
        details: Dict[str, Any] = None
    ) -> None:
        """
        Registra un nuevo evento de auditoría.

        Args:
            log_type: Tipo de evento (SESION, TIENDA, MIEMBRO, PEDIDO)
            user: Usuario que realizó la acción
            message: Mensaje descriptivo humanizado
            related_id: ID relacionado (pedido, tienda, etc.)
            details: Detalles adicionales
        """
        entry = AuditLog(
            type=log_type,
            user=user or 'sistema',
            message=message,
            timestamp=self.clock.utcnow().strftime("%Y-%m-%d %H:%M:%S"),
            related_id=related_id,
            details=details or {},
        )
        self._logs.insert(0, entry.to_dict())
        if len(self._logs) > self.MAX_LOGS:
            del self._logs[self.MAX_LOGS:]

    def get_logs_by_type(self, log_type: str) -> List[Dict[str, Any]]:
        return [entry for entry in self.load() if entry.get('type') == log_type]

    def get_recent_logs(self, limit: int = 100) -> List[Dict[str, Any]]:
        return self.load()[:limit]
