# ==============================================================================
# CONTENEDOR DE DEPENDENCIAS - Inyección de servicios
# ==============================================================================
# Punto único donde se construyen el almacén, la caché, la sesión, el carrito
# y los servicios. Facilita:
#   - Inyección de dependencias (reloj, latencia, almacén a medida)
#   - Testing: cada test crea su propio contenedor aislado
#   - Migración: cambiar MockBackingStore por un cliente real sin tocar servicios
#
# ═══════════════════════════════════════════════════════════════════════════════
# MIGRACIÓN A API REAL
# ═══════════════════════════════════════════════════════════════════════════════
# 1. Crear una clase que implemente IBackingStore (repositories/interfaces.py)
# 2. Pasarla como `store=` o cambiar la propiedad `store` de este archivo
# 3. Los servicios NO requieren cambios
# ==============================================================================

from typing import Optional

from store_console import config
from store_console.clock import SystemClock

# ═══════════════════════════════════════════════════════════════════════════════
# REPOSITORIOS - Almacén en memoria (API real después)
# ═══════════════════════════════════════════════════════════════════════════════
from store_console.repositories import AuditRepository, MockBackingStore

# ═══════════════════════════════════════════════════════════════════════════════
# SERVICIOS - Capa de lógica de negocio
# ═══════════════════════════════════════════════════════════════════════════════
from store_console.services import (
    AuditService,
    CartService,
    CheckoutService,
    DashboardService,
    MemberService,
    Notifier,
    OrderService,
    ProductService,
    QueryCache,
    SessionState,
    StoreService,
)


class AppContainer:
    """
    Contenedor de dependencias de la aplicación.

    Cada instancia es independiente (útil en tests); get_instance() entrega
    la instancia global que usa el servidor.

    Uso:
        container = AppContainer(clock=ManualClock(), latency=0)
        await container.order_service.approve_order('order-7')
    """

    _instance: Optional['AppContainer'] = None

    def __init__(self, clock=None, latency: float = None, store=None,
                 fetch_timeout: float = None, retries: int = None):
        """
        Inicializa el contenedor.

        Args:
            clock: Reloj (SystemClock por defecto)
            latency: Latencia simulada del almacén (config.SIMULATED_LATENCY)
            store: Almacén ya construido (si se omite se crea MockBackingStore)
            fetch_timeout: Timeout por lectura (config.FETCH_TIMEOUT)
            retries: Reintentos por lectura (config.FETCH_RETRIES)
        """
        self.clock = clock or SystemClock()
        self.latency = config.SIMULATED_LATENCY if latency is None else latency
        self.fetch_timeout = fetch_timeout
        self.retries = retries
        self._custom_store = store
        self.reset()

    # =========================================================================
    # ALMACÉN Y ESTADO COMPARTIDO
    # =========================================================================

    @property
    def store(self):
        """Almacén de datos (singleton por contenedor)."""
        if self._store is None:
            self._store = self._custom_store or MockBackingStore(clock=self.clock, latency=self.latency)
        return self._store

    @property
    def audit_repo(self) -> AuditRepository:
        if self._audit_repo is None:
            self._audit_repo = AuditRepository(clock=self.clock)
        return self._audit_repo

    @property
    def cache(self) -> QueryCache:
        """Caché de consultas (singleton por contenedor)."""
        if self._cache is None:
            self._cache = QueryCache(clock=self.clock, fetch_timeout=self.fetch_timeout,
                                     retries=self.retries)
        return self._cache

    @property
    def notifier(self) -> Notifier:
        if self._notifier is None:
            self._notifier = Notifier()
        return self._notifier

    @property
    def cart_service(self) -> CartService:
        """Carrito (singleton por contenedor)."""
        if self._cart_service is None:
            self._cart_service = CartService()
        return self._cart_service

    # =========================================================================
    # SERVICIOS
    # =========================================================================

    @property
    def audit_service(self) -> AuditService:
        if self._audit_service is None:
            self._audit_service = AuditService(self.audit_repo)
        return self._audit_service

    @property
    def session_state(self) -> SessionState:
        if self._session_state is None:
            self._session_state = SessionState(audit_service=self.audit_service, cart=self.cart_service)
        return self._session_state

    @property
    def store_service(self) -> StoreService:
        if self._store_service is None:
            self._store_service = StoreService(
                self.store, self.cache, self.notifier, self.session_state, self.audit_service
            )
        return self._store_service

    @property
    def member_service(self) -> MemberService:
        if self._member_service is None:
            self._member_service = MemberService(
                self.store, self.cache, self.notifier, self.session_state, self.audit_service
            )
        return self._member_service

    @property
    def product_service(self) -> ProductService:
        if self._product_service is None:
            self._product_service = ProductService(self.store, self.cache)
        return self._product_service

    @property
    def order_service(self) -> OrderService:
        if self._order_service is None:
            self._order_service = OrderService(
                self.store, self.cache, self.notifier, self.session_state, self.audit_service
            )
        return self._order_service

    @property
    def dashboard_service(self) -> DashboardService:
        if self._dashboard_service is None:
            self._dashboard_service = DashboardService(self.store, self.cache)
        return self._dashboard_service

    @property
    def checkout_service(self) -> CheckoutService:
        if self._checkout_service is None:
            self._checkout_service = CheckoutService(
                self.cart_service, self.order_service, self.session_state
            )
        return self._checkout_service

    # =========================================================================
    # UTILIDADES
    # =========================================================================

    def reset(self) -> None:
        """
        Reinicia todas las instancias.
        Útil para testing o para recargar datos.
        """
        self._store = None
        self._audit_repo = None
        self._cache = None
        self._notifier = None
        self._cart_service = None

        self._audit_service = None
        self._session_state = None
        self._store_service = None
        self._member_service = None
        self._product_service = None
        self._order_service = None
        self._dashboard_service = None
        self._checkout_service = None

    @classmethod
    def get_instance(cls) -> 'AppContainer':
        """
        Obtiene la instancia global del contenedor (la crea la primera vez).
        """
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        """Elimina la instancia global (útil para tests)."""
        if cls._instance is not None:
            cls._instance.reset()
            cls._instance = None


def get_container() -> AppContainer:
    """Obtiene el contenedor de dependencias global."""
    return AppContainer.get_instance()
