# ==============================================================================
# CONFIGURACIÓN DE LA CONSOLA
# ==============================================================================
# Todas las constantes ajustables del sistema viven aquí.
# Cada una puede sobrescribirse con una variable de entorno STORE_CONSOLE_*.
#
# Ejemplo:
#   export STORE_CONSOLE_FETCH_TIMEOUT=5
#   export STORE_CONSOLE_LATENCY=0
# ==============================================================================

import os


def _env_float(name: str, default: float) -> float:
    """Lee un float del entorno; si no es válido usa el valor por defecto."""
    raw = os.environ.get(name)
    if raw is None or raw.strip() == '':
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == '':
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in ('1', 'true', 'yes', 'on')


BASE = os.path.dirname(os.path.abspath(__file__))

# ═══════════════════════════════════════════════════════════════════════════════
# SESIÓN Y AUTENTICACIÓN (modo demo)
# ═══════════════════════════════════════════════════════════════════════════════
_DEFAULT_SECRET = "store_console_dev_secret_key_change_in_production"
SECRET_KEY = os.environ.get("STORE_CONSOLE_SECRET_KEY") or _DEFAULT_SECRET

# Credencial única aceptada para todas las identidades demo
DEMO_PASSWORD = os.environ.get("STORE_CONSOLE_DEMO_PASSWORD", "password")

# Longitud mínima al cambiar contraseña desde el perfil
MIN_PASSWORD_LENGTH = 6

# Punto de entrada al que se redirige cualquier acceso denegado
LOGIN_ROUTE = '/login'

# ═══════════════════════════════════════════════════════════════════════════════
# ALMACÉN EN MEMORIA
# ═══════════════════════════════════════════════════════════════════════════════
# Latencia artificial (segundos) de cada llamada al almacén
SIMULATED_LATENCY = _env_float("STORE_CONSOLE_LATENCY", 0.3)

# ═══════════════════════════════════════════════════════════════════════════════
# CACHÉ DE CONSULTAS
# ═══════════════════════════════════════════════════════════════════════════════
# Tiempo máximo (segundos) por intento de lectura antes de considerarla fallida
FETCH_TIMEOUT = _env_float("STORE_CONSOLE_FETCH_TIMEOUT", 10.0)

# Reintentos extra por lectura fallida (0 = sin reintentos)
FETCH_RETRIES = _env_int("STORE_CONSOLE_FETCH_RETRIES", 0)
RETRY_BASE_DELAY = _env_float("STORE_CONSOLE_RETRY_BASE_DELAY", 1.0)
RETRY_MAX_DELAY = _env_float("STORE_CONSOLE_RETRY_MAX_DELAY", 30.0)

# Ventanas de frescura por colección (segundos)
STALE_STORES = _env_float("STORE_CONSOLE_STALE_STORES", 2 * 60)
STALE_STORES_LOOKUP = _env_float("STORE_CONSOLE_STALE_STORES_LOOKUP", 5 * 60)
STALE_MEMBERS = _env_float("STORE_CONSOLE_STALE_MEMBERS", 2 * 60)
STALE_ORDERS = _env_float("STORE_CONSOLE_STALE_ORDERS", 5 * 60)
STALE_ORDERS_DASHBOARD = _env_float("STORE_CONSOLE_STALE_ORDERS_DASHBOARD", 1 * 60)
STALE_PRODUCTS = _env_float("STORE_CONSOLE_STALE_PRODUCTS", 5 * 60)

# ═══════════════════════════════════════════════════════════════════════════════
# PAGINACIÓN
# ═══════════════════════════════════════════════════════════════════════════════
PAGE_SIZE = _env_int("STORE_CONSOLE_PAGE_SIZE", 10)
MAX_PAGE_LINKS = 5

# ═══════════════════════════════════════════════════════════════════════════════
# PROFILING
# ═══════════════════════════════════════════════════════════════════════════════
ENABLE_PROFILING = _env_bool("STORE_CONSOLE_PROFILING", True)
LOGS_DIR = os.environ.get("STORE_CONSOLE_LOGS_DIR") or os.path.join(BASE, 'logs')

# ═══════════════════════════════════════════════════════════════════════════════
# SERVIDOR DE DESARROLLO
# ═══════════════════════════════════════════════════════════════════════════════
DEBUG = os.environ.get('FLASK_DEBUG', '0') == '1'
HOST = os.environ.get('FLASK_HOST', '127.0.0.1')
PORT = _env_int('FLASK_PORT', 5000)
