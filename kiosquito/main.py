# ==============================================================================
# APLICACIÓN FLASK - API JSON del punto de venta
# ==============================================================================
# Capa delgada sobre los servicios: lee la petición, llama al servicio y
# serializa la respuesta. Ninguna regla de negocio vive aquí.
#
# Errores del núcleo -> JSON {"ok": false, "error": "..."}:
#   ValidationError                 400
#   sin sesión                      401
#   NotFoundError                   404
#   Duplicate/Protected/Stock       409
#   StorageError                    500
#   NotInitializedError             503
#
# Desarrollo:
#   python -m kiosquito.main
# Producción:
#   gunicorn wsgi:app
# ==============================================================================

import logging
from functools import wraps
from typing import Optional

from flask import Flask, current_app, jsonify, request, session

from kiosquito.app_container import AppContainer
from kiosquito.config import Config, configure_logging
from kiosquito.errors import (
    DuplicateCurrencyError,
    InsufficientStockError,
    KiosquitoError,
    NotFoundError,
    NotInitializedError,
    ProtectedCurrencyError,
    StorageError,
    ValidationError,
)
from kiosquito.performance_logger import get_function_stats, init_profiling

logger = logging.getLogger(__name__)

EXTENSION_KEY = 'kiosquito'

# El orden importa: las subclases antes que ValidationError
_ERROR_STATUS = (
    (DuplicateCurrencyError, 409),
    (ProtectedCurrencyError, 409),
    (InsufficientStockError, 409),
    (ValidationError, 400),
    (NotFoundError, 404),
    (NotInitializedError, 503),
    (StorageError, 500),
)


def _container() -> AppContainer:
    return current_app.extensions[EXTENSION_KEY]


def _json_body() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        # Formularios simples también se aceptan
        data = request.form.to_dict()
    if not isinstance(data, dict):
        raise ValidationError("Se esperaba un objeto JSON")
    return data


def _flag(name: str) -> bool:
    return (request.args.get(name) or '').strip().lower() in ('1', 'true', 'si', 'sí')


def login_required(f):
    @wraps(f)
    def wrapper(*args, **kwargs):
        if "user" not in session:
            return jsonify({"ok": False, "error": "Debes iniciar sesión."}), 401
        return f(*args, **kwargs)
    return wrapper


def handle_core_error(error: KiosquitoError):
    """Traduce una excepción del núcleo a respuesta JSON."""
    status = 500
    for error_type, code in _ERROR_STATUS:
        if isinstance(error, error_type):
            status = code
            break

    body = {"ok": False, "error": str(error)}
    field = getattr(error, 'field', None)
    if field:
        body["field"] = field

    if status >= 500:
        logger.error("%s en %s %s: %s", type(error).__name__,
                     request.method, request.path, error)
    return jsonify(body), status


def create_app(config: Optional[Config] = None, container: Optional[AppContainer] = None) -> Flask:
    """
    Construye la aplicación Flask.

    Args:
        config: Configuración (por defecto la del contenedor o el entorno)
        container: Contenedor ya construido (tests); si no, se crea uno

    Returns:
        App lista para servir, con esquema y datos iniciales cargados
    """
    if container is None:
        container = AppContainer(config or Config.from_env())
    config = container.config

    container.init()

    app = Flask(__name__)
    app.secret_key = config.secret_key

    # Configuración de cookies de sesión
    app.config.update(
        SESSION_COOKIE_HTTPONLY=True,      # Protege contra XSS
        SESSION_COOKIE_SECURE=False,       # False para HTTP local
        SESSION_COOKIE_SAMESITE='Lax',
        PERMANENT_SESSION_LIFETIME=86400,  # 24 horas
    )
    app.extensions[EXTENSION_KEY] = container

    if config.enable_profiling:
        init_profiling(app)

    app.register_error_handler(KiosquitoError, handle_core_error)
    _register_routes(app)
    return app


def _register_routes(app: Flask) -> None:

    # =========================================================================
    # SESIÓN
    # =========================================================================

    @app.route("/login", methods=["POST"])
    def login():
        data = _json_body()
        username = (data.get("username") or data.get("user") or "").strip()
        password = data.get("password") or ""
        if not username or not password:
            return jsonify({"ok": False, "error": "Usuario y contraseña requeridos."}), 400

        user = _container().user_service.authenticate(username, password)
        if user is None:
            return jsonify({"ok": False, "error": "Usuario o contraseña incorrecta."}), 401

        session.permanent = True
        session["user"] = user.username
        return jsonify({"ok": True, "user": user.to_dict()})

    @app.route("/logout", methods=["POST"])
    def logout():
        session.clear()
        return jsonify({"ok": True})

    @app.route("/me")
    @login_required
    def me():
        user = _container().user_service.get_user(session["user"])
        if user is None:
            session.clear()
            return jsonify({"ok": False, "error": "Debes iniciar sesión."}), 401
        return jsonify({"ok": True, "user": user.to_dict()})

    # =========================================================================
    # PRODUCTOS
    # =========================================================================

    @app.route("/api/products", methods=["GET"])
    @login_required
    def list_products():
        service = _container().inventory_service
        if _flag("available"):
            products = service.list_available_products()
        else:
            products = service.list_products()
        return jsonify({"ok": True, "products": [p.to_dict() for p in products]})

    @app.route("/api/products", methods=["POST"])
    @login_required
    def create_product():
        service = _container().inventory_service
        pid = service.create_product(_json_body())
        return jsonify({"ok": True, "id": pid, "product": service.get_product(pid).to_dict()}), 201

    @app.route("/api/products/<int:pid>", methods=["GET"])
    @login_required
    def get_product(pid):
        product = _container().inventory_service.get_product(pid)
        return jsonify({"ok": True, "product": product.to_dict()})

    @app.route("/api/products/<int:pid>", methods=["PATCH"])
    @login_required
    def update_product(pid):
        product = _container().inventory_service.update_product(pid, _json_body())
        return jsonify({"ok": True, "product": product.to_dict()})

    @app.route("/api/products/<int:pid>", methods=["DELETE"])
    @login_required
    def delete_product(pid):
        _container().inventory_service.delete_product(pid)
        return jsonify({"ok": True})

    # =========================================================================
    # MONEDAS
    # =========================================================================

    @app.route("/api/currencies", methods=["GET"])
    @login_required
    def list_currencies():
        service = _container().currency_service
        if _flag("all"):
            currencies = service.list_all_currencies()
        else:
            currencies = service.list_currencies()
        return jsonify({"ok": True, "currencies": [c.to_dict() for c in currencies]})

    @app.route("/api/currencies", methods=["POST"])
    @login_required
    def create_currency():
        service = _container().currency_service
        cid = service.create_currency(_json_body())
        return jsonify({"ok": True, "id": cid, "currency": service.get_currency(cid).to_dict()}), 201

    @app.route("/api/currencies/<int:cid>", methods=["PATCH"])
    @login_required
    def update_currency(cid):
        currency = _container().currency_service.update_currency(cid, _json_body())
        return jsonify({"ok": True, "currency": currency.to_dict()})

    @app.route("/api/currencies/<int:cid>/toggle", methods=["POST"])
    @login_required
    def toggle_currency(cid):
        currency = _container().currency_service.toggle_active(cid)
        return jsonify({"ok": True, "currency": currency.to_dict()})

    @app.route("/api/currencies/<int:cid>", methods=["DELETE"])
    @login_required
    def delete_currency(cid):
        _container().currency_service.delete_currency(cid)
        return jsonify({"ok": True})

    # =========================================================================
    # VENTAS
    # =========================================================================

    @app.route("/api/sales", methods=["GET"])
    @login_required
    def list_sales():
        limit = request.args.get("limit", type=int)
        sales = _container().sales_service.list_sales(
            request.args.get("start"), request.args.get("end"), limit
        )
        return jsonify({"ok": True, "sales": [s.to_dict() for s in sales]})

    @app.route("/api/sales", methods=["POST"])
    @login_required
    def record_sale():
        data = _json_body()
        service = _container().sales_service
        sale_id = service.record_sale(
            data.get("product_id"),
            data.get("quantity"),
            data.get("currency_id"),
            data.get("unit_price"),
        )
        return jsonify({"ok": True, "id": sale_id, "sale": service.get_sale(sale_id).to_dict()}), 201

    @app.route("/api/sales/<int:sale_id>", methods=["GET"])
    @login_required
    def get_sale(sale_id):
        container = _container()
        sale = container.sales_service.get_sale(sale_id)
        body = sale.to_dict()
        # Total expresado en la moneda de cobro, si aún existe
        try:
            body["total_in_currency"] = container.currency_service.convert_from_base(
                sale.total_base, sale.currency_id
            )
        except NotFoundError:
            body["total_in_currency"] = None
        return jsonify({"ok": True, "sale": body})

    @app.route("/api/sales/summary/<period>", methods=["GET"])
    @login_required
    def sales_summary(period):
        summary = _container().sales_service.summarize(period)
        return jsonify({"ok": True, "summary": summary.to_dict()})

    # =========================================================================
    # DIAGNÓSTICO
    # =========================================================================

    @app.route("/api/stats/performance", methods=["GET"])
    @login_required
    def performance_stats():
        return jsonify({"ok": True, "functions": get_function_stats()})


if __name__ == "__main__":
    # Configuración para desarrollo local y acceso desde red WiFi
    # En producción usar WSGI (gunicorn wsgi:app)
    _config = Config.from_env()
    configure_logging(_config)
    _app = create_app(_config)

    if not _config.debug:
        logger.info("Servidor iniciado en http://%s:%s", _config.host, _config.port)

    _app.run(host=_config.host, port=_config.port, debug=_config.debug)
