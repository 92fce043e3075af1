# ==============================================================================
# SISTEMA DE PROFILING INTERNO
# ==============================================================================
# Mide rendimiento de rutas, llamadas al almacén y lecturas de la caché
# sin afectar la experiencia del usuario.
# Guarda logs legibles en LOGS_DIR para análisis humano.
#
# ACTIVAR/DESACTIVAR: STORE_CONSOLE_PROFILING (config.ENABLE_PROFILING)
# ==============================================================================

import inspect
import os
import threading
import time
from collections import defaultdict
from datetime import datetime
from functools import wraps

from store_console import config

# ═══════════════════════════════════════════════════════════════════════════
# CONFIGURACIÓN
# ═══════════════════════════════════════════════════════════════════════════

ENABLE_PROFILING = config.ENABLE_PROFILING

# Umbrales de tiempo (en milisegundos)
THRESHOLD_WARNING = 300   # Advertencia si supera 300ms
THRESHOLD_CRITICAL = 700  # Crítico si supera 700ms

LOGS_DIR = config.LOGS_DIR

PERFORMANCE_LOG = os.path.join(LOGS_DIR, 'performance.log')
SLOW_ROUTES_LOG = os.path.join(LOGS_DIR, 'slow_routes.log')
SLOW_FUNCTIONS_LOG = os.path.join(LOGS_DIR, 'slow_functions.log')

# Mapeo de rutas a nombres legibles (para logs más humanos)
ROUTE_NAMES = {
    # Autenticación
    'GET /login': 'Ver sesión',
    'POST /login': 'Iniciar sesión',
    'POST /logout': 'Cerrar sesión',

    # Administración
    'GET /admin': 'Ver panel principal',
    'GET /admin/stores': 'Listar tiendas',
    'POST /admin/stores': 'Crear tienda',
    'PUT /admin/stores/<store_id>': 'Editar tienda',
    'DELETE /admin/stores/<store_id>': 'Eliminar tienda',
    'GET /admin/members': 'Listar miembros',
    'POST /admin/members': 'Crear miembro',
    'PUT /admin/members/<member_id>': 'Editar miembro',
    'DELETE /admin/members/<member_id>': 'Eliminar miembro',
    'GET /admin/orders': 'Ver pedidos',
    'POST /admin/orders/<order_id>/approve': 'Aprobar pedido',
    'POST /admin/orders/<order_id>/reject': 'Rechazar pedido',

    # Tienda
    'GET /store': 'Ver catálogo',
    'GET /store/product/<product_id>': 'Ver producto',
    'GET /store/cart': 'Ver carrito',
    'POST /store/cart': 'Agregar al carrito',
    'DELETE /store/cart': 'Vaciar carrito',
    'PUT /store/cart/<product_id>': 'Cambiar cantidad',
    'DELETE /store/cart/<product_id>': 'Quitar del carrito',
    'POST /store/checkout': 'Confirmar pedido',
    'GET /store/orders': 'Ver mis pedidos',
    'POST /store/profile/password': 'Cambiar contraseña',
}


# ═══════════════════════════════════════════════════════════════════════════
# ESTADÍSTICAS DE FUNCIONES (en memoria)
# ═══════════════════════════════════════════════════════════════════════════

# Estructura: {nombre_funcion: {calls: int, total_time: float, max_time: float}}
_function_stats = defaultdict(lambda: {'calls': 0, 'total_time': 0.0, 'max_time': 0.0})
_stats_lock = threading.Lock()
_write_lock = threading.Lock()


# ═══════════════════════════════════════════════════════════════════════════
# FUNCIONES DE LOGGING
# ═══════════════════════════════════════════════════════════════════════════

def _get_timestamp():
    """Obtiene timestamp legible"""
    return datetime.now().strftime('%Y-%m-%d %H:%M:%S')


def _write_log(filepath, content):
    """Escribe contenido a un archivo de log; crea LOGS_DIR la primera vez."""
    try:
        with _write_lock:
            os.makedirs(os.path.dirname(filepath), exist_ok=True)
            with open(filepath, 'a', encoding='utf-8') as f:
                f.write(content)
    except OSError:
        pass  # best-effort


def _get_route_name(method, path, rule=None):
    """
    Obtiene nombre legible para una ruta.
    Primero por ruta exacta, luego por la regla de Flask; si no, la ruta raw.
    """
    key = f"{method} {path}"
    if key in ROUTE_NAMES:
        return ROUTE_NAMES[key]

    if rule:
        rule_key = f"{method} {rule}"
        if rule_key in ROUTE_NAMES:
            return ROUTE_NAMES[rule_key]

    return f"{method} {path}"


# ═══════════════════════════════════════════════════════════════════════════
# 1️⃣ PROFILING DE RUTAS (Middleware Flask)
# ═══════════════════════════════════════════════════════════════════════════

def log_route_performance(method, path, rule, time_ms, user=None):
    """
    Registra el rendimiento de una ruta en performance.log

    Args:
        method: GET, POST, etc.
        path: Ruta solicitada (/store/cart)
        rule: Regla de Flask (/store/cart/<product_id>)
        time_ms: Tiempo en milisegundos
        user: Usuario que hizo la petición (opcional)
    """
    if not ENABLE_PROFILING:
        return

    action_name = _get_route_name(method, path, rule)
    user_str = user or 'anónimo'

    log_entry = f"""
════════════════════════════════════════
[PERFORMANCE] {_get_timestamp()}
────────────────────────────────────────
Acción: {action_name}
Usuario: {user_str}
Ruta: {method} {path}
Tiempo: {time_ms:.0f} ms
"""

    _write_log(PERFORMANCE_LOG, log_entry)


def log_slow_route(method, path, rule, time_ms, user=None, level='WARNING'):
    """
    Registra una ruta lenta en slow_routes.log

    Args:
        level: 'WARNING' (>300ms) o 'CRITICAL' (>700ms)
    """
    if not ENABLE_PROFILING:
        return

    action_name = _get_route_name(method, path, rule)
    severity = 'LENTA' if level == 'WARNING' else 'MUY LENTA'
    threshold = THRESHOLD_WARNING if level == 'WARNING' else THRESHOLD_CRITICAL

    log_entry = f"""
[{level}] {_get_timestamp()}
────────────────────────────────────────
Ruta {severity}: {action_name}
Usuario: {user or 'anónimo'}
Detalle: {method} {path}
Tiempo: {time_ms:.0f} ms (umbral: {threshold} ms)
────────────────────────────────────────
"""

    _write_log(SLOW_ROUTES_LOG, log_entry)


# ═══════════════════════════════════════════════════════════════════════════
# 2️⃣ HOOKS PARA FLASK (before/after request)
# ═══════════════════════════════════════════════════════════════════════════

def init_profiling(app, user_getter=None):
    """
    Inicializa el sistema de profiling en una app Flask.
    Registra hooks before_request y after_request.

    Args:
        app: Aplicación Flask
        user_getter: Función sin argumentos que retorna el nombre del
                     usuario actual (o None)
    """
    if not ENABLE_PROFILING:
        return

    @app.before_request
    def _start_timer():
        from flask import g
        g.start_time = time.perf_counter()

    @app.after_request
    def _log_request(response):
        from flask import g, request

        if not hasattr(g, 'start_time'):
            return response

        elapsed = (time.perf_counter() - g.start_time) * 1000  # ms

        method = request.method
        path = request.path
        rule = str(request.url_rule) if request.url_rule else path
        user = user_getter() if user_getter else None

        log_route_performance(method, path, rule, elapsed, user)

        if elapsed >= THRESHOLD_CRITICAL:
            log_slow_route(method, path, rule, elapsed, user, 'CRITICAL')
        elif elapsed >= THRESHOLD_WARNING:
            log_slow_route(method, path, rule, elapsed, user, 'WARNING')

        return response


# ═══════════════════════════════════════════════════════════════════════════
# 3️⃣ DECORADOR PARA FUNCIONES CLAVE
# ═══════════════════════════════════════════════════════════════════════════

def _record_call(func_name, elapsed_ms):
    with _stats_lock:
        stats = _function_stats[func_name]
        stats['calls'] += 1
        stats['total_time'] += elapsed_ms
        if elapsed_ms > stats['max_time']:
            stats['max_time'] = elapsed_ms

    if elapsed_ms >= THRESHOLD_WARNING:
        _log_slow_function_call(func_name, elapsed_ms)


def profile_function(func=None, name=None):
    """
    Decorador para medir rendimiento de funciones críticas.
    Funciona igual sobre funciones normales y corrutinas.

    Uso:
        @profile_function
        async def get_orders(self):
            ...

        @profile_function(name="Confirmar pedido")
        async def checkout(self):
            ...

    Registra:
        - Cantidad de llamadas
        - Tiempo promedio
        - Tiempo máximo
    """
    def decorator(fn):
        if not ENABLE_PROFILING:
            return fn

        func_name = name or fn.__qualname__

        if inspect.iscoroutinefunction(fn):
            @wraps(fn)
            async def async_wrapper(*args, **kwargs):
                start = time.perf_counter()
                try:
                    return await fn(*args, **kwargs)
                finally:
                    _record_call(func_name, (time.perf_counter() - start) * 1000)
            return async_wrapper

        @wraps(fn)
        def wrapper(*args, **kwargs):
            start = time.perf_counter()
            try:
                return fn(*args, **kwargs)
            finally:
                _record_call(func_name, (time.perf_counter() - start) * 1000)

        return wrapper

    # Permitir uso sin paréntesis: @profile_function
    if func is not None:
        return decorator(func)
    return decorator


def _log_slow_function_call(func_name, time_ms):
    """Registra una llamada lenta a una función"""
    severity = 'CRÍTICO' if time_ms >= THRESHOLD_CRITICAL else 'LENTO'

    log_entry = f"""
[{severity}] {_get_timestamp()}
Función: {func_name}
Tiempo: {time_ms:.0f} ms
────────────────────────────────────────
"""

    _write_log(SLOW_FUNCTIONS_LOG, log_entry)


# ═══════════════════════════════════════════════════════════════════════════
# 4️⃣ REPORTE DE ESTADÍSTICAS
# ═══════════════════════════════════════════════════════════════════════════

def get_function_stats():
    """
    Obtiene estadísticas de todas las funciones perfiladas.

    Returns:
        dict: {nombre: {calls, avg_time, max_time}}
    """
    with _stats_lock:
        result = {}
        for func_name, stats in _function_stats.items():
            calls = stats['calls']
            avg = stats['total_time'] / calls if calls > 0 else 0
            result[func_name] = {
                'calls': calls,
                'avg_time': round(avg, 2),
                'max_time': round(stats['max_time'], 2)
            }
        return result


def reset_stats():
    """Reinicia todas las estadísticas (útil para testing)"""
    with _stats_lock:
        _function_stats.clear()


__all__ = [
    'ENABLE_PROFILING',
    'init_profiling',
    'profile_function',
    'get_function_stats',
    'reset_stats',
]
