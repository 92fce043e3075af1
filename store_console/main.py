# ==============================================================================
# CAPA WEB - Rutas JSON de la consola
# ==============================================================================
# Las rutas solo orquestan: request → servicio → respuesta JSON.
# Toda la lógica vive en services/ y se obtiene del contenedor de la app.
#
# Acceso:
#   - /admin/*  → rol admin
#   - /store/*  → rol store_member
#   - Cualquier acceso sin el rol exacto redirige (302) a /login
# ==============================================================================

import traceback
from functools import wraps
from typing import Any, Dict

from flask import Blueprint, Flask, current_app, redirect, request
from werkzeug.exceptions import HTTPException

from store_console import config
from store_console.app_container import AppContainer, get_container
from store_console.models import UserRole, ValidationError
from store_console.performance_logger import init_profiling
from store_console.repositories import InvalidTransitionError, NotFoundError
from store_console.services import MutationInProgressError, MutationResult, QueryResult

console_bp = Blueprint('console', __name__)


# ═══════════════════════════════════════════════════════════════════════════════
# HELPERS
# ═══════════════════════════════════════════════════════════════════════════════

def _container() -> AppContainer:
    return current_app.extensions['store_console']


def to_int(value, default=None):
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _json_body() -> Dict[str, Any]:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError('Datos no recibidos o formato inválido')
    return data


def _respond(payload: Dict[str, Any], status: int = 200):
    """Agrega las notificaciones pendientes y responde JSON."""
    payload['notifications'] = [n.to_dict() for n in _container().notifier.drain()]
    return payload, status


def _serialize(value: Any) -> Any:
    if isinstance(value, list):
        return [_serialize(v) for v in value]
    if hasattr(value, 'to_dict'):
        return value.to_dict()
    return value


def _query_payload(result: QueryResult, name: str) -> Dict[str, Any]:
    """
    Estado de una consulta para la vista.
    Con error y datos previos se devuelven ambos (la vista muestra el aviso
    junto a los datos viejos).
    """
    items = result.data
    return {
        'ok': True,
        name: _serialize(items) if items is not None else None,
        'is_loading': result.is_loading,
        'is_fetching': result.is_fetching,
        'error': result.error_message,
        'no_results': (not result.is_loading and result.error is None
                       and items is not None and len(items) == 0),
    }


def _mutation_response(result: MutationResult, name: str, created: bool = False):
    if result.ok:
        payload = {'ok': True}
        if result.data is not None:
            payload[name] = _serialize(result.data)
        return _respond(payload, 201 if created else 200)

    error = result.error
    payload = {'ok': False, 'error': result.error_message}
    if isinstance(error, NotFoundError):
        payload['not_found'] = True
        return _respond(payload, 404)
    if isinstance(error, (InvalidTransitionError, MutationInProgressError)):
        return _respond(payload, 409)
    if isinstance(error, ValidationError):
        return _respond(payload, 400)
    return _respond(payload, 502)


def _not_found(message: str):
    return _respond({'ok': False, 'not_found': True, 'error': message}, 404)


# ═══════════════════════════════════════════════════════════════════════════════
# CONTROL DE ACCESO
# ═══════════════════════════════════════════════════════════════════════════════

def role_required(role):
    """
    Exige que la sesión actual tenga exactamente `role`.
    Sin sesión o con otro rol → redirección a /login.
    """
    required = UserRole(role)

    def deco(f):
        @wraps(f)
        async def wrapper(*args, **kwargs):
            if not _container().session_state.can_access(required):
                return redirect(config.LOGIN_ROUTE)
            return await f(*args, **kwargs)
        return wrapper
    return deco


# ═══════════════════════════════════════════════════════════════════════════════
# AUTENTICACIÓN
# ═══════════════════════════════════════════════════════════════════════════════

@console_bp.route('/login', methods=['GET'])
async def login_status():
    session = _container().session_state.current_session()
    return _respond({'ok': True, 'session': session.to_dict() if session else None})


@console_bp.route('/login', methods=['POST'])
async def login():
    data = request.get_json(silent=True) or request.form
    email = (data.get('email') or '').strip()
    password = data.get('password') or ''
    if not email or not password:
        return _respond({'ok': False, 'error': 'Email y contraseña requeridos'}, 400)

    state = _container().session_state
    if not state.login(email, password):
        return _respond({'ok': False, 'error': 'Email o contraseña incorrectos'}, 401)

    session = state.current_session()
    home = '/admin' if session.is_admin else '/store'
    return _respond({'ok': True, 'session': session.to_dict(), 'redirect': home})


@console_bp.route('/logout', methods=['POST'])
async def logout():
    _container().session_state.logout()
    return _respond({'ok': True, 'redirect': config.LOGIN_ROUTE})


# ═══════════════════════════════════════════════════════════════════════════════
# ADMINISTRACIÓN
# ═══════════════════════════════════════════════════════════════════════════════

@console_bp.route('/admin', methods=['GET'])
@role_required(UserRole.ADMIN)
async def admin_dashboard():
    stats = await _container().dashboard_service.get_stats()
    return _respond({'ok': True, 'stats': stats})


# --- Tiendas ---

@console_bp.route('/admin/stores', methods=['GET'])
@role_required(UserRole.ADMIN)
async def admin_stores():
    result = await _container().store_service.search_stores(request.args.get('q', ''))
    return _respond(_query_payload(result, 'stores'))


@console_bp.route('/admin/stores', methods=['POST'])
@role_required(UserRole.ADMIN)
async def admin_store_create():
    result = await _container().store_service.add_store(_json_body())
    return _mutation_response(result, 'store', created=True)


@console_bp.route('/admin/stores/<store_id>', methods=['PUT'])
@role_required(UserRole.ADMIN)
async def admin_store_update(store_id):
    result = await _container().store_service.update_store(store_id, _json_body())
    return _mutation_response(result, 'store')


@console_bp.route('/admin/stores/<store_id>', methods=['DELETE'])
@role_required(UserRole.ADMIN)
async def admin_store_delete(store_id):
    result = await _container().store_service.delete_store(store_id)
    return _mutation_response(result, 'store')


# --- Miembros ---

@console_bp.route('/admin/members', methods=['GET'])
@role_required(UserRole.ADMIN)
async def admin_members():
    service = _container().member_service
    result = await service.filter_members(request.args.get('q', ''), request.args.get('store', 'all'))
    stores = await service.store_lookup()
    payload = _query_payload(result, 'members')
    payload['stores'] = _serialize(stores.data or [])
    if stores.error and not payload['error']:
        payload['error'] = stores.error_message
    payload['is_loading'] = payload['is_loading'] or stores.is_loading
    return _respond(payload)


@console_bp.route('/admin/members', methods=['POST'])
@role_required(UserRole.ADMIN)
async def admin_member_create():
    result = await _container().member_service.add_member(_json_body())
    return _mutation_response(result, 'member', created=True)


@console_bp.route('/admin/members/<member_id>', methods=['PUT'])
@role_required(UserRole.ADMIN)
async def admin_member_update(member_id):
    result = await _container().member_service.update_member(member_id, _json_body())
    return _mutation_response(result, 'member')


@console_bp.route('/admin/members/<member_id>', methods=['DELETE'])
@role_required(UserRole.ADMIN)
async def admin_member_delete(member_id):
    result = await _container().member_service.delete_member(member_id)
    return _mutation_response(result, 'member')


# --- Pedidos ---

@console_bp.route('/admin/orders', methods=['GET'])
@role_required(UserRole.ADMIN)
async def admin_orders():
    service = _container().order_service
    if request.args.get('refresh') == '1':
        await service.refresh_orders()
    view = await service.orders_page(
        term=request.args.get('q', ''),
        status=request.args.get('status', 'all'),
        page=request.args.get('page', 1),
    )
    payload = _query_payload(view.result, 'orders')
    payload['orders'] = _serialize(view.page.page_items)
    payload['pagination'] = view.page.to_dict()
    payload['no_results'] = view.is_empty_result
    payload['is_updating'] = service.is_updating
    return _respond(payload)


@console_bp.route('/admin/orders/<order_id>/approve', methods=['POST'])
@role_required(UserRole.ADMIN)
async def admin_order_approve(order_id):
    result = await _container().order_service.approve_order(order_id)
    return _mutation_response(result, 'order')


@console_bp.route('/admin/orders/<order_id>/reject', methods=['POST'])
@role_required(UserRole.ADMIN)
async def admin_order_reject(order_id):
    result = await _container().order_service.reject_order(order_id)
    return _mutation_response(result, 'order')


# ═══════════════════════════════════════════════════════════════════════════════
# TIENDA (miembros)
# ═══════════════════════════════════════════════════════════════════════════════

@console_bp.route('/store', methods=['GET'])
@role_required(UserRole.STORE_MEMBER)
async def store_products():
    service = _container().product_service
    result = await service.search_products(request.args.get('q', ''), request.args.get('category', 'all'))
    payload = _query_payload(result, 'products')
    payload['categories'] = await service.categories()
    return _respond(payload)


@console_bp.route('/store/product/<product_id>', methods=['GET'])
@role_required(UserRole.STORE_MEMBER)
async def store_product_detail(product_id):
    product = await _container().product_service.get_product(product_id)
    if product is None:
        return _not_found('Producto no encontrado')
    return _respond({'ok': True, 'product': product.to_dict()})


# --- Carrito ---

@console_bp.route('/store/cart', methods=['GET'])
@role_required(UserRole.STORE_MEMBER)
async def store_cart():
    return _respond({'ok': True, 'cart': _container().cart_service.get_cart()})


@console_bp.route('/store/cart', methods=['POST'])
@role_required(UserRole.STORE_MEMBER)
async def store_cart_add():
    data = _json_body()
    quantity = to_int(data.get('quantity', 1))
    if quantity is None:
        raise ValidationError('Cantidad inválida')
    product = await _container().product_service.get_product(str(data.get('productId', '')))
    if product is None:
        return _not_found('Producto no encontrado')
    cart = _container().cart_service
    cart.add_item(product, quantity)
    return _respond({'ok': True, 'cart': cart.get_cart()})


@console_bp.route('/store/cart', methods=['DELETE'])
@role_required(UserRole.STORE_MEMBER)
async def store_cart_clear():
    cart = _container().cart_service
    cart.clear_cart()
    return _respond({'ok': True, 'cart': cart.get_cart()})


@console_bp.route('/store/cart/<product_id>', methods=['PUT'])
@role_required(UserRole.STORE_MEMBER)
async def store_cart_update(product_id):
    quantity = to_int(_json_body().get('quantity'))
    if quantity is None:
        raise ValidationError('Cantidad inválida')
    cart = _container().cart_service
    cart.update_quantity(product_id, quantity)
    return _respond({'ok': True, 'cart': cart.get_cart()})


@console_bp.route('/store/cart/<product_id>', methods=['DELETE'])
@role_required(UserRole.STORE_MEMBER)
async def store_cart_remove(product_id):
    cart = _container().cart_service
    cart.remove_item(product_id)
    return _respond({'ok': True, 'cart': cart.get_cart()})


@console_bp.route('/store/checkout', methods=['POST'])
@role_required(UserRole.STORE_MEMBER)
async def store_checkout():
    result = await _container().checkout_service.checkout()
    return _mutation_response(result, 'order', created=True)


# --- Historial y perfil ---

@console_bp.route('/store/orders', methods=['GET'])
@role_required(UserRole.STORE_MEMBER)
async def store_orders():
    container = _container()
    session = container.session_state.current_session()
    result = await container.order_service.orders_for_member(session.user_id)
    return _respond(_query_payload(result, 'orders'))


@console_bp.route('/store/profile/password', methods=['POST'])
@role_required(UserRole.STORE_MEMBER)
async def store_profile_password():
    data = _json_body()
    await _container().session_state.update_password(
        data.get('newPassword', ''), data.get('confirmPassword', '')
    )
    _container().notifier.success('Contraseña actualizada')
    return _respond({'ok': True})


# ═══════════════════════════════════════════════════════════════════════════════
# ERRORES
# ═══════════════════════════════════════════════════════════════════════════════

@console_bp.app_errorhandler(ValidationError)
def handle_validation_error(e):
    return _respond({'ok': False, 'error': str(e)}, 400)


@console_bp.app_errorhandler(NotFoundError)
def handle_not_found(e):
    return _not_found(str(e))


@console_bp.app_errorhandler(404)
def handle_unknown_route(e):
    return {'ok': False, 'not_found': True, 'error': 'Ruta no encontrada'}, 404


@console_bp.app_errorhandler(Exception)
def handle_unexpected(e):
    if isinstance(e, HTTPException):
        return {'ok': False, 'error': e.description}, e.code
    print(f"[ERROR] {type(e).__name__}: {e}")
    traceback.print_exc()
    return {'ok': False, 'error': 'Error interno. Por favor intenta de nuevo.'}, 500


# ═══════════════════════════════════════════════════════════════════════════════
# FÁBRICA DE LA APP
# ═══════════════════════════════════════════════════════════════════════════════

def create_app(container: AppContainer = None) -> Flask:
    """
    Crea la app Flask.

    Args:
        container: Contenedor a usar (por defecto el global)
    """
    container = container or get_container()

    app = Flask(__name__)
    app.secret_key = config.SECRET_KEY
    app.extensions['store_console'] = container

    def _current_user():
        session = container.session_state.current_session()
        return session.name if session else None

    # Mide rendimiento de rutas. Logs en LOGS_DIR
    init_profiling(app, user_getter=_current_user)

    @app.after_request
    def set_security_headers(response):
        response.headers['X-Frame-Options'] = 'DENY'
        response.headers['X-Content-Type-Options'] = 'nosniff'
        response.headers['Referrer-Policy'] = 'no-referrer-when-downgrade'
        return response

    app.register_blueprint(console_bp)
    return app


if __name__ == '__main__':
    # Un solo hilo: la caché y el carrito se comparten entre peticiones
    create_app().run(host=config.HOST, port=config.PORT, debug=config.DEBUG, threaded=False)
