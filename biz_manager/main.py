# ==============================================================================
# API JSON - Flask
# ==============================================================================
# Expone el almacén de registros, el flujo de pedidos y las métricas.
#
# El rol de la sesión decide qué secciones se pueden consultar
# (tabla ROLE_CAPABILITIES). Es visibilidad, no seguridad: cualquiera
# puede iniciar sesión con cualquier rol.
# ==============================================================================

import logging
from functools import wraps

from flask import Blueprint, Flask, Response, current_app, jsonify, request, session
from werkzeug.exceptions import HTTPException, NotFound

from biz_manager import config
from biz_manager.app_container import AppContainer
from biz_manager.config import Settings, configure_logging
from biz_manager.models import Capability, Order, User, ValidationError, capabilities_for
from biz_manager.performance_logger import init_profiling
from biz_manager.services.record_store import (
    COLLECTIONS,
    CUSTOMERS,
    EXPENSES,
    ORDERS,
    PRODUCTS,
    RAW_MATERIALS,
)


logger = logging.getLogger(__name__)

api = Blueprint('api', __name__, url_prefix='/api')


# Colección -> sección requerida
COLLECTION_CAPABILITIES = {
    CUSTOMERS: Capability.CUSTOMERS,
    PRODUCTS: Capability.INVENTORY,
    RAW_MATERIALS: Capability.INVENTORY,
    ORDERS: Capability.ORDERS,
    EXPENSES: Capability.EXPENSES,
}

# Reporte exportable -> sección requerida
EXPORT_CAPABILITIES = {
    'orders': Capability.ORDERS,
    'expenses': Capability.EXPENSES,
    'inventory': Capability.INVENTORY,
    'profit-loss': Capability.PROFIT_LOSS,
}


def _container() -> AppContainer:
    return current_app.extensions['biz_manager']


def _payload() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def _error(message, status):
    return jsonify({'ok': False, 'error': message}), status


def _result(result, success_status=200, failure_status=400):
    """Convierte un resultado {'ok', 'error'} de servicio en respuesta HTTP."""
    if result.get('ok'):
        return jsonify(result), success_status
    status = 500 if result.get('storage_error') else failure_status
    return jsonify({'ok': False, 'error': result.get('error')}), status


# ==============================================================================
# SESIÓN Y PERMISOS
# ==============================================================================

def _denied(capability):
    """Respuesta de error si la sesión no puede ver la sección, o None."""
    role = session.get('role')
    if not role:
        return _error('Debes iniciar sesión.', 401)
    if capability not in capabilities_for(role):
        return _error('Permiso denegado.', 403)
    return None


def capability_required(capability):
    def deco(f):
        @wraps(f)
        def wrapper(*args, **kwargs):
            denied = _denied(capability)
            if denied is not None:
                return denied
            return f(*args, **kwargs)
        return wrapper
    return deco


def _require_collection(collection):
    if collection not in COLLECTIONS:
        raise NotFound(f'Colección desconocida: {collection}')
    return _denied(COLLECTION_CAPABILITIES[collection])


def _session_payload(user):
    return {
        'ok': True,
        'user': user.to_dict(),
        'sections': _container().user_service.visible_sections(user.role),
    }


@api.route('/session', methods=['POST'])
def login():
    data = _payload()
    user = _container().user_service.login(data.get('username'), data.get('role'))
    session['user_id'] = user.id
    session['username'] = user.username
    session['role'] = user.role.value
    return jsonify(_session_payload(user))


@api.route('/session', methods=['GET'])
def current_session():
    user = _container().user_service.current_user()
    if user is None:
        return jsonify({'ok': True, 'user': None, 'sections': []})
    # Restaurar la cookie desde el marcador guardado
    session['user_id'] = user.id
    session['username'] = user.username
    session['role'] = user.role.value
    return jsonify(_session_payload(user))


@api.route('/session', methods=['DELETE'])
def logout():
    _container().user_service.logout()
    session.clear()
    return jsonify({'ok': True})


@api.route('/reset', methods=['POST'])
def reset_data():
    """Borra todos los datos guardados (solo admin). Vuelven las semillas."""
    if not session.get('role'):
        return _error('Debes iniciar sesión.', 401)
    user = User.from_dict({
        'id': session.get('user_id'),
        'username': session.get('username'),
        'role': session.get('role'),
    })
    if not user.is_admin():
        return _error('Permiso denegado.', 403)

    if not _container().store.reset():
        return _error('No se pudieron borrar los datos', 500)
    logger.warning("Datos reiniciados por %s", user.username)
    return jsonify({'ok': True})


# ==============================================================================
# PEDIDOS
# ==============================================================================

@api.route('/orders', methods=['POST'])
@capability_required(Capability.ORDERS)
def create_order():
    data = _payload()
    result = _container().order_service.create_order(
        data.get('customerId'),
        data.get('items') or [],
        payment_method=data.get('paymentMethod') or 'cash',
        payment_status=data.get('paymentStatus') or 'pending',
        status=data.get('status') or 'pending',
        gst_rate=data.get('gstRate'),
        notes=data.get('notes'),
    )
    return _result(result, success_status=201)


@api.route('/orders/<order_id>/status', methods=['POST'])
@capability_required(Capability.ORDERS)
def update_order_status(order_id):
    data = _payload()
    orders = _container().order_service
    if data.get('paymentStatus') == 'paid':
        result = orders.mark_paid(order_id)
        if not result.get('ok') or not data.get('status'):
            return _result(result, failure_status=404)
    if not data.get('status'):
        return _error('Indica status o paymentStatus', 400)
    result = orders.update_status(order_id, data['status'])
    return _result(result)


# ==============================================================================
# COLECCIONES
# ==============================================================================

@api.route('/<collection>', methods=['GET'])
def list_records(collection):
    denied = _require_collection(collection)
    if denied is not None:
        return denied
    return jsonify(_container().store.get(collection))


@api.route('/<collection>', methods=['POST'])
def create_record(collection):
    denied = _require_collection(collection)
    if denied is not None:
        return denied
    result = _container().catalog_service.create(
        collection, _payload(), created_by=session.get('username')
    )
    return _result(result, success_status=201)


@api.route('/<collection>/<record_id>', methods=['PUT'])
def update_record(collection, record_id):
    denied = _require_collection(collection)
    if denied is not None:
        return denied
    container = _container()
    if container.store.get_by_id(collection, record_id) is None:
        raise NotFound(f'Registro {record_id} no encontrado')

    data = _payload()
    if collection == ORDERS:
        order = Order.from_dict(dict(data, id=record_id))
        result = container.order_service.update_order(order)
    else:
        result = container.catalog_service.update(collection, record_id, data)
    return _result(result)


@api.route('/<collection>/<record_id>', methods=['DELETE'])
def delete_record(collection, record_id):
    denied = _require_collection(collection)
    if denied is not None:
        return denied
    if collection == ORDERS:
        result = _container().order_service.delete_order(record_id)
    else:
        result = _container().catalog_service.delete(collection, record_id)
    return _result(result, failure_status=404)


# ==============================================================================
# MÉTRICAS
# ==============================================================================

@api.route('/stock-status', methods=['GET'])
@capability_required(Capability.INVENTORY)
def stock_status():
    return jsonify(dict(_container().stats_service.stock_report(), ok=True))


@api.route('/reports/profit-loss', methods=['GET'])
@capability_required(Capability.PROFIT_LOSS)
def profit_loss():
    container = _container()
    report = container.stats_service.profit_loss_report(
        request.args.get('period', 'month'),
        request.args.get('start') or None,
        request.args.get('end') or None,
    )
    return jsonify({
        'ok': True,
        'report': report.to_dict(),
        'display': report.summary.display(container.settings.currency_symbol),
    })


@api.route('/analytics', methods=['GET'])
@capability_required(Capability.ANALYTICS)
def analytics():
    days = request.args.get('days', 30, type=int)
    report = _container().stats_service.analytics(days)
    return jsonify({'ok': True, 'analytics': report.to_dict()})


@api.route('/expenses/summary', methods=['GET'])
@capability_required(Capability.EXPENSES)
def expenses_summary():
    summary = _container().stats_service.expense_summary()
    return jsonify(dict(summary.to_dict(), ok=True))


# ==============================================================================
# EXPORTACIÓN CSV
# ==============================================================================

@api.route('/export/<report>.csv', methods=['GET'])
def export_csv(report):
    if report not in EXPORT_CAPABILITIES:
        raise NotFound(f'Reporte desconocido: {report}')
    denied = _denied(EXPORT_CAPABILITIES[report])
    if denied is not None:
        return denied

    container = _container()
    store = container.store
    reports = container.report_service
    if report == 'orders':
        tables = [reports.orders_report(store.orders())]
    elif report == 'expenses':
        tables = [reports.expenses_report(store.expenses())]
    elif report == 'inventory':
        tables = reports.inventory_report(store.products(), store.raw_materials())
    else:
        pl = container.stats_service.profit_loss_report(
            request.args.get('period', 'month'),
            request.args.get('start') or None,
            request.args.get('end') or None,
        )
        tables = [reports.profit_loss_report(pl)]

    return Response(reports.to_csv(*tables), mimetype='text/csv',
                    headers={'Content-Disposition': f'attachment;filename={report}.csv'})


# ==============================================================================
# ERRORES
# ==============================================================================

@api.app_errorhandler(ValidationError)
def handle_validation_error(e):
    return _error(str(e), 400)


@api.app_errorhandler(HTTPException)
def handle_http_error(e):
    return _error(e.description, e.code)


# ==============================================================================
# FÁBRICA DE LA APLICACIÓN
# ==============================================================================

def create_app(settings: Settings = None) -> Flask:
    """
    Crea la aplicación Flask con su propio contenedor de servicios.

    Args:
        settings: Configuración (por defecto la leída del entorno)
    """
    settings = settings or Settings()
    configure_logging(settings.production_mode)

    app = Flask(__name__)
    app.secret_key = settings.secret_key
    app.extensions['biz_manager'] = AppContainer(settings)
    app.register_blueprint(api)
    init_profiling(app)

    logger.info("Datos en %s", settings.data_dir)
    return app


if __name__ == "__main__":
    # En producción usar WSGI (gunicorn, waitress, etc.)
    create_app().run(host=config.FLASK_HOST, port=config.FLASK_PORT, debug=config.FLASK_DEBUG)
