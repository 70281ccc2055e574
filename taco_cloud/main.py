from flask import Flask, render_template, request, redirect, url_for, session, flash, jsonify
from functools import wraps
import os
import uuid

# Sistema de profiling interno
from taco_cloud.performance_logger import init_profiling, log_error

# ═══════════════════════════════════════════════════════════════════════════
# CONTENEDOR DE DEPENDENCIAS - Servicios y Repositorios
# ═══════════════════════════════════════════════════════════════════════════
# Las rutas solo llaman a servicios. El backend (relacional, documental o
# columnar) se elige en el contenedor con TACO_BACKEND; las rutas no cambian.
# ═══════════════════════════════════════════════════════════════════════════
from taco_cloud.app_container import get_container
from taco_cloud.errors import StorageError, ValidationError
from taco_cloud.models import DELIVERY_FIELDS, IngredientType
from taco_cloud.services import OrderService, recent_tacos_resource, taco_resource

app = Flask(__name__)

# ═══════════════════════════════════════════════════════════════════════════
# INICIALIZAR SISTEMA DE PROFILING
# ═══════════════════════════════════════════════════════════════════════════
# Mide rendimiento de rutas y funciones. Logs en TACO_LOGS_DIR
# Para desactivar: TACO_PROFILING=0
init_profiling(app)

PRODUCTION_MODE = os.environ.get('TACO_PRODUCTION', '0') == '1'

# ═══════════════════════════════════════════════════════════════════════════════
# CONFIGURACIÓN DE SESIONES
# ═══════════════════════════════════════════════════════════════════════════════
# SECRET_KEY: En producción DEBE definirse via variable de entorno
# Comando: export TACO_SECRET_KEY="tu_clave_secreta_muy_larga_y_aleatoria"
_DEFAULT_SECRET = "taco_cloud_dev_secret_key_change_in_production"
_SECRET_KEY = os.environ.get("TACO_SECRET_KEY")

if PRODUCTION_MODE and not _SECRET_KEY:
    print("[ADVERTENCIA] TACO_PRODUCTION activo sin TACO_SECRET_KEY definida")
    print("[ADVERTENCIA] Define la variable de entorno para mayor seguridad")

app.secret_key = _SECRET_KEY or _DEFAULT_SECRET

# Configuración de cookies de sesión
app.config.update(
    SESSION_COOKIE_HTTPONLY=True,      # Protege contra XSS
    SESSION_COOKIE_SECURE=False,       # False para HTTP local (True solo para HTTPS)
    SESSION_COOKIE_SAMESITE='Lax',     # Protección CSRF básica
    PERMANENT_SESSION_LIFETIME=86400,  # 24 horas
)

# Clave de sesión con el identificador del pedido abierto.
# Los tacos se guardan en open_orders.json, nunca en la cookie.
ORDER_SESSION_KEY = 'order_key'

# Orden de las secciones del formulario de diseño
INGREDIENT_SECTIONS = [
    (IngredientType.WRAP, 'Designate your wrap'),
    (IngredientType.PROTEIN, 'Pick your protein'),
    (IngredientType.CHEESE, 'Choose your cheese'),
    (IngredientType.VEGGIES, 'Determine your veggies'),
    (IngredientType.SAUCE, 'Select your sauce'),
]

STORAGE_ERROR_MESSAGE = 'No se pudo acceder a los datos. Por favor intenta de nuevo.'


def login_required(f):
    @wraps(f)
    def wrapper(*args, **kwargs):
        if "user" not in session:
            flash("Debes iniciar sesión.", "warning")
            return redirect(url_for("login"))
        return f(*args, **kwargs)
    return wrapper


def generate_csrf_token():
    if 'csrf_token' not in session:
        session['csrf_token'] = uuid.uuid4().hex
    return session['csrf_token']


@app.context_processor
def inject_template_globals():
    return {
        'csrf_token': generate_csrf_token(),
        'current_user': session.get('user'),
    }


def verify_csrf(f):
    @wraps(f)
    def wrapper(*args, **kwargs):
        if request.method == 'POST':
            token = session.get('csrf_token')
            form_token = (
                request.form.get('csrf_token') or
                request.headers.get('X-CSRF-Token') or
                request.headers.get('X-CSRFToken')
            )
            if not token or not form_token or token != form_token:
                flash('Sesión expirada. Por favor intenta de nuevo.', 'warning')
                if 'user' not in session:
                    return redirect(url_for('login'))
                return redirect(url_for('home'))
        return f(*args, **kwargs)
    return wrapper


@app.after_request
def set_security_headers(response):
    response.headers['X-Frame-Options'] = 'DENY'
    response.headers['X-Content-Type-Options'] = 'nosniff'
    response.headers['Referrer-Policy'] = 'no-referrer-when-downgrade'
    response.headers['Permissions-Policy'] = 'geolocation=(), microphone=()'
    # HSTS solo con HTTPS real
    if request.is_secure:
        response.headers['Strict-Transport-Security'] = 'max-age=31536000; includeSubDomains'
    return response


@app.errorhandler(StorageError)
def handle_storage_error(exc):
    """Fallo del backend no capturado en la ruta: se registra y se responde 503."""
    log_error(f"{request.method} {request.path}", exc, session.get('user'))
    if request.path.startswith('/tacos/'):
        return jsonify({'error': 'storage_unavailable'}), 503
    flash(STORAGE_ERROR_MESSAGE, 'danger')
    return render_template('home.html'), 503


# ═══════════════════════════════════════════════════════════════════════════════
# PEDIDO ABIERTO EN SESIÓN
# ═══════════════════════════════════════════════════════════════════════════════

def _order_key(create=False):
    """Clave del pedido abierto guardada en la cookie."""
    key = session.get(ORDER_SESSION_KEY)
    if key is None and create:
        key = uuid.uuid4().hex
        session[ORDER_SESSION_KEY] = key
    return key


def load_session_order():
    """Pedido abierto del usuario (uno nuevo si la sesión no tiene)."""
    container = get_container()
    key = _order_key()
    data = container.open_order_repo.load(key) if key else None
    return container.order_service.from_session(data)


def store_session_order(order):
    get_container().open_order_repo.store(_order_key(create=True), OrderService.to_session(order))


def clear_session_order():
    key = session.pop(ORDER_SESSION_KEY, None)
    if key:
        get_container().open_order_repo.discard(key)


def _design_context(errors=None, name='', selected=None):
    catalog = get_container().catalog_service
    groups = catalog.group_by_type(catalog.list_all())
    return {
        'sections': [(label, groups[kind]) for kind, label in INGREDIENT_SECTIONS],
        'errors': errors or {},
        'name': name,
        'selected': set(selected or []),
    }


def _delivery_from_user(user):
    """Campos de entrega precargados con el perfil del usuario."""
    fields = {name: '' for name in DELIVERY_FIELDS}
    if user is not None:
        fields.update(
            delivery_name=user.fullname,
            delivery_street=user.street,
            delivery_city=user.city,
            delivery_state=user.state,
            delivery_zip=user.zip,
        )
    return fields


# ═══════════════════════════════════════════════════════════════════════════════
# INICIO Y AUTENTICACIÓN
# ═══════════════════════════════════════════════════════════════════════════════

@app.route("/")
def home():
    return render_template("home.html")


@app.route("/register", methods=["GET", "POST"])
@verify_csrf
def register():
    form = {}
    errors = {}
    if request.method == "POST":
        form = request.form.to_dict()
        try:
            user = get_container().user_service.register(form)
            flash(f"Usuario {user.username} registrado. Inicia sesión.", "success")
            return redirect(url_for("login"))
        except ValidationError as e:
            errors = e.errors
        except StorageError as e:
            log_error("Registrar usuario", e)
            flash(STORAGE_ERROR_MESSAGE, "danger")
            return render_template("register.html", form=form, errors={}), 503
        return render_template("register.html", form=form, errors=errors), 400
    return render_template("register.html", form=form, errors=errors)


@app.route("/login", methods=["GET", "POST"])
@verify_csrf
def login():
    if request.method == "POST":
        username = (request.form.get("username") or "").strip()
        password = request.form.get("password") or ""
        if not username or not password:
            flash("Usuario y contraseña requeridos.", "warning")
            return render_template("login.html", username=username), 400

        user = get_container().user_service.authenticate(username, password)
        if user is not None:
            session.permanent = True
            session["user"] = user.username
            flash(f"Bienvenido, {user.username}.", "success")
            return redirect(url_for("design"))
        flash("Usuario o contraseña incorrecta.", "danger")
        return render_template("login.html", username=username), 401
    return render_template("login.html", username="")


@app.route("/logout")
@login_required
def logout():
    clear_session_order()
    session.clear()
    flash("Sesión cerrada.", "info")
    return redirect(url_for("home"))


# ═══════════════════════════════════════════════════════════════════════════════
# DISEÑO DE TACOS
# ═══════════════════════════════════════════════════════════════════════════════

@app.route("/design", methods=["GET", "POST"])
@login_required
@verify_csrf
def design():
    if request.method == "GET":
        return render_template("design.html", **_design_context())

    name = request.form.get("name") or ""
    selected = request.form.getlist("ingredients")
    try:
        order = load_session_order()
        taco = get_container().design_service.create(name, selected, session.get("user"))
        get_container().order_service.add_design(order, taco)
        store_session_order(order)
    except ValidationError as e:
        return render_template(
            "design.html", **_design_context(e.errors, name, selected)
        ), 400
    except StorageError as e:
        log_error("Diseñar taco", e, session.get("user"))
        flash(STORAGE_ERROR_MESSAGE, "danger")
        return render_template(
            "design.html", **_design_context({}, name, selected)
        ), 503

    flash(f"Taco '{taco.name}' agregado al pedido.", "success")
    return redirect(url_for("current_order"))


# ═══════════════════════════════════════════════════════════════════════════════
# PEDIDOS
# ═══════════════════════════════════════════════════════════════════════════════

@app.route("/orders/current")
@login_required
def current_order():
    order = load_session_order()
    user = get_container().user_service.get_user(session.get("user"))
    return render_template(
        "order_form.html",
        order=order,
        form=_delivery_from_user(user),
        errors={}
    )


@app.route("/orders", methods=["GET", "POST"])
@login_required
@verify_csrf
def orders():
    container = get_container()
    username = session.get("user")

    if request.method == "GET":
        history = container.order_service.recent_for_user(username)
        return render_template("order_list.html", orders=history)

    form = {name: request.form.get(name) or '' for name in DELIVERY_FIELDS}
    order = load_session_order()
    try:
        user = container.user_service.get_user(username)
        container.order_service.checkout(order, user, form)
    except ValidationError as e:
        return render_template(
            "order_form.html", order=order, form=form, errors=e.errors
        ), 400
    except StorageError as e:
        log_error("Colocar pedido", e, username)
        flash(STORAGE_ERROR_MESSAGE, "danger")
        return render_template(
            "order_form.html", order=order, form=form, errors={}
        ), 503

    clear_session_order()
    flash("Pedido colocado. ¡Gracias!", "success")
    return redirect(url_for("home"))


# ═══════════════════════════════════════════════════════════════════════════════
# API DE TACOS RECIENTES (JSON, pública)
# ═══════════════════════════════════════════════════════════════════════════════

def _taco_href(taco_id):
    return url_for("taco_by_id", taco_id=taco_id, _external=True)


@app.route("/tacos/recent", methods=["GET"])
def recent_tacos():
    summaries = get_container().recent_tacos_service.recent_tacos()
    return jsonify(recent_tacos_resource(
        summaries,
        _taco_href,
        url_for("recent_tacos", _external=True)
    ))


@app.route("/tacos/<taco_id>", methods=["GET"])
def taco_by_id(taco_id):
    summary = get_container().recent_tacos_service.find_summary(taco_id)
    if summary is None:
        return jsonify({'error': 'not_found', 'id': taco_id}), 404
    return jsonify(taco_resource(summary, _taco_href))


if __name__ == "__main__":
    # Desarrollo local; en producción usar WSGI (gunicorn wsgi:app)
    DEBUG = os.environ.get('FLASK_DEBUG', '0') == '1'
    HOST = os.environ.get('FLASK_HOST', '127.0.0.1')
    PORT = int(os.environ.get('FLASK_PORT', 5000))

    if not DEBUG:
        print(f"\n{'='*50}")
        print(f"  Taco Cloud en http://{HOST}:{PORT}")
        print(f"  Backend: {get_container().backend}")
        print(f"{'='*50}\n")

    app.run(host=HOST, port=PORT, debug=DEBUG)
