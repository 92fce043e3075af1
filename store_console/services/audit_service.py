# ==============================================================================
# SERVICIO DE AUDITORÍA
# ==============================================================================
# Centraliza el registro de actividad de la consola.
# Formatea mensajes humanizados y categoriza eventos.
# ==============================================================================

from typing import Any, Dict, List

from store_console.repositories.interfaces import IAuditRepository


class AuditService:
    """
    Servicio para registro y consulta de auditoría.

    Centraliza:
    - Registro de eventos con mensajes humanizados
    - Categorización de eventos (SESION, TIENDA, MIEMBRO, PEDIDO)
    - Consulta de logs recientes
    """

    # Tipos de eventos de auditoría
    TYPE_SESION = 'SESION'
    TYPE_TIENDA = 'TIENDA'
    TYPE_MIEMBRO = 'MIEMBRO'
    TYPE_PEDIDO = 'PEDIDO'

    def __init__(self, audit_repo: IAuditRepository):
        """
        Inicializa el servicio de auditoría.

        Args:
            audit_repo: Repositorio de auditoría
        """
        self.audit_repo = audit_repo

    # =========================================================================
    # REGISTRO DE EVENTOS
    # =========================================================================

    def log(
        self,
        log_type: str,
        user: str,
        message: str,
        related_id: str = '',
        details: Dict[str, Any] = None
    ) -> None:
        """
        Registra un evento de auditoría genérico.

        Args:
            log_type: Tipo de evento (SESION, TIENDA, etc.)
            user: Usuario que realizó la acción
            message: Mensaje descriptivo humanizado
            related_id: ID relacionado (pedido, tienda, etc.)
            details: Detalles adicionales
        """
        self.audit_repo.log(log_type, user, message, related_id, details)

    def log_login(self, user: str, role: str) -> None:
        self.log(self.TYPE_SESION, user, f"Inicio de sesión de {user} ({role})", details={'role': role})

    def log_logout(self, user: str) -> None:
        self.log(self.TYPE_SESION, user, f"Cierre de sesión de {user}")

    def log_entity_change(self, log_type: str, user: str, action: str,
                          related_id: str, label: str = '') -> None:
        """
        Registra alta, edición o baja de una tienda o un miembro.

        Args:
            log_type: TYPE_TIENDA o TYPE_MIEMBRO
            user: Usuario que realizó el cambio
            action: 'creado', 'editado' o 'eliminado'
            related_id: ID del registro
            label: Nombre legible del registro (opcional)
        """
        kind = 'Tienda' if log_type == self.TYPE_TIENDA else 'Miembro'
        name_info = f" ({label})" if label else ''
        message = f"{kind} {related_id}{name_info} {action} por {user}"
        self.log(log_type, user, message, related_id, {'action': action})

    def log_order_status_change(self, user: str, order_id: str,
                                old_status: str, new_status: str) -> None:
        """
        Registra un cambio de estado de pedido.

        Args:
            user: Usuario que cambió el estado
            order_id: ID del pedido
            old_status: Estado anterior
            new_status: Nuevo estado
        """
        message = f"Pedido {order_id}: {old_status} → {new_status} por {user}"
        self.log(self.TYPE_PEDIDO, user, message, order_id,
                 {'from': old_status, 'to': new_status})

    def log_order_created(self, user: str, order_id: str, total: float, items_count: int) -> None:
        message = f"Pedido {order_id} creado por {user} - Total: $ {total:.2f} - {items_count} items"
        self.log(self.TYPE_PEDIDO, user, message, order_id,
                 {'total': total, 'items_count': items_count})

    # =========================================================================
    # CONSULTAS
    # =========================================================================

    def get_recent_logs(self, limit: int = 100) -> List[Dict[str, Any]]:
        return self.audit_repo.load()[:limit]

    def get_logs_by_type(self, log_type: str) -> List[Dict[str, Any]]:
        return [entry for entry in self.audit_repo.load() if entry.get('type') == log_type]
