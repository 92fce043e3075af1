# ==============================================================================
# SERVICIO DE SESIÓN
# ==============================================================================
# Identidad autenticada del proceso y control de acceso por rol.
#
# MODO DEMO:
# - Una sola credencial válida para todas las identidades conocidas
# - Sin bloqueo por intentos fallidos
# - update_password valida pero NO escribe en el almacén (pendiente de API real)
#
# Ningún otro componente guarda copia del rol: todos preguntan a
# current_session() en cada llamada, así un logout se nota al instante.
# ==============================================================================

from typing import List, Optional

from werkzeug.security import check_password_hash, generate_password_hash

from store_console import config
from store_console.models import Session, UserRole, ValidationError
from .audit_service import AuditService


# Directorio de identidades demo
DEMO_IDENTITIES: List[Session] = [
    Session(user_id='admin', name='Admin User', email='admin@example.com', role=UserRole.ADMIN),
    Session(user_id='1', name='John Smith', email='john@store1.com',
            role=UserRole.STORE_MEMBER, store_id='1', store_name='Downtown Store'),
    Session(user_id='2', name='Sarah Johnson', email='sarah@store2.com',
            role=UserRole.STORE_MEMBER, store_id='2', store_name='Mall Location'),
]


class SessionState:
    """
    Estado de sesión inyectable (una instancia por contenedor).

    Responsabilidades:
    - Login / logout contra el directorio demo
    - Control de acceso por rol
    - Cambio de contraseña (solo validación)
    """

    def __init__(
        self,
        identities: List[Session] = None,
        demo_password: str = None,
        audit_service: AuditService = None,
        cart=None,
    ):
        """
        Args:
            identities: Identidades conocidas (DEMO_IDENTITIES por defecto)
            demo_password: Credencial aceptada (config.DEMO_PASSWORD por defecto)
            audit_service: Servicio de auditoría (opcional)
            cart: Carrito a vaciar al cerrar sesión (opcional)
        """
        self.identities = list(DEMO_IDENTITIES if identities is None else identities)
        self._credential_hash = generate_password_hash(
            config.DEMO_PASSWORD if demo_password is None else demo_password
        )
        self.audit_service = audit_service
        self.cart = cart
        self._session: Optional[Session] = None

    # =========================================================================
    # AUTENTICACIÓN
    # =========================================================================

    def find_identity(self, email: str) -> Optional[Session]:
        """Busca una identidad por email (sin distinguir mayúsculas ni espacios)."""
        needle = (email or '').strip().lower()
        if not needle:
            return None
        for identity in self.identities:
            if identity.email.lower() == needle:
                return identity
        return None

    def login(self, email: str, credential: str) -> bool:
        """
        Inicia sesión.

        Args:
            email: Email de una identidad conocida
            credential: Debe coincidir con la credencial demo

        Returns:
            True si la sesión quedó iniciada; False en cualquier otro caso
            (la sesión anterior, si había, se conserva)
        """
        if not credential or not check_password_hash(self._credential_hash, credential):
            return False
        identity = self.find_identity(email)
        if identity is None:
            return False

        self._session = identity
        if self.audit_service:
            self.audit_service.log_login(identity.name, identity.role.value)
        return True

    def logout(self) -> None:
        """Cierra la sesión y vacía el carrito."""
        session = self._session
        self._session = None
        if self.cart is not None:
            self.cart.clear_cart()
        if session is not None and self.audit_service:
            self.audit_service.log_logout(session.name)

    def current_session(self) -> Optional[Session]:
        return self._session

    @property
    def is_authenticated(self) -> bool:
        return self._session is not None

    # =========================================================================
    # CONTROL DE ACCESO
    # =========================================================================

    def can_access(self, required_role) -> bool:
        """
        Acceso concedido solo si hay sesión y su rol es exactamente el pedido.

        Args:
            required_role: UserRole o su valor ('admin', 'store_member')
        """
        if self._session is None:
            return False
        try:
            role = UserRole(required_role)
        except ValueError:
            return False
        return self._session.role == role

    def require_role(self, required_role) -> Session:
        """
        Igual que can_access pero retorna la sesión o lanza PermissionError.
        """
        if not self.can_access(required_role):
            raise PermissionError(f'Se requiere rol {UserRole(required_role).value}')
        return self._session

    # =========================================================================
    # PERFIL
    # =========================================================================

    def validate_password_change(self, new_password: str, confirm_password: str) -> None:
        """
        Valida un cambio de contraseña.

        Raises:
            ValidationError: Campos vacíos, no coinciden o demasiado corta
        """
        if not new_password or not confirm_password:
            raise ValidationError('Completa ambos campos de contraseña')
        if new_password != confirm_password:
            raise ValidationError('Las contraseñas no coinciden')
        if len(new_password) < config.MIN_PASSWORD_LENGTH:
            raise ValidationError(
                f'La contraseña debe tener al menos {config.MIN_PASSWORD_LENGTH} caracteres'
            )

    async def update_password(self, new_password: str, confirm_password: str) -> bool:
        """
        Cambia la contraseña del usuario actual.

        Solo valida: el almacén aún no expone una operación para guardar
        contraseñas, así que no se escribe nada y se retorna True.

        Returns:
            True si la validación pasa y hay sesión; False sin sesión

        Raises:
            ValidationError: Ver validate_password_change
        """
        if self._session is None:
            return False
        self.validate_password_change(new_password, confirm_password)
        return True
