# ==============================================================================
# SISTEMA DE PROFILING INTERNO
# ==============================================================================
# Mide rendimiento de rutas y funciones sin afectar la experiencia del usuario.
# Guarda logs legibles en logs/ para análisis humano:
#
#   performance.log     → cada petición atendida
#   slow_routes.log     → peticiones que superan los umbrales
#   slow_functions.log  → llamadas lentas a funciones perfiladas
#   errors.log          → fallos de almacenamiento y errores inesperados
#
# ACTIVAR/DESACTIVAR: variable de entorno TACO_PROFILING (1/0)
# DIRECTORIO:         variable de entorno TACO_LOGS_DIR
# ==============================================================================

import os
import time
import threading
import traceback
from datetime import datetime
from functools import wraps
from collections import defaultdict

# ═══════════════════════════════════════════════════════════════════════════
# CONFIGURACIÓN
# ═══════════════════════════════════════════════════════════════════════════

ENABLE_PROFILING = os.environ.get('TACO_PROFILING', '1').lower() not in ('0', 'false', 'no', 'off')

# Umbrales de tiempo (en milisegundos)
THRESHOLD_WARNING = 300   # Advertencia si supera 300ms
THRESHOLD_CRITICAL = 700  # Crítico si supera 700ms

LOGS_DIR = os.environ.get('TACO_LOGS_DIR') or os.path.join(os.path.dirname(__file__), 'logs')

PERFORMANCE_LOG = 'performance.log'
SLOW_ROUTES_LOG = 'slow_routes.log'
SLOW_FUNCTIONS_LOG = 'slow_functions.log'
ERRORS_LOG = 'errors.log'

ALL_LOGS = [PERFORMANCE_LOG, SLOW_ROUTES_LOG, SLOW_FUNCTIONS_LOG, ERRORS_LOG]

# Mapeo de rutas a nombres legibles (para logs más humanos)
ROUTE_NAMES = {
    # Inicio
    'GET /': 'Ver inicio',

    # Autenticación
    'GET /login': 'Ver formulario de acceso',
    'POST /login': 'Iniciar sesión',
    'GET /register': 'Ver formulario de registro',
    'POST /register': 'Registrar usuario',
    'GET /logout': 'Cerrar sesión',

    # Diseño
    'GET /design': 'Ver diseñador de tacos',
    'POST /design': 'Diseñar taco',

    # Pedidos
    'GET /orders/current': 'Ver pedido actual',
    'POST /orders': 'Colocar pedido',
    'GET /orders': 'Ver historial de pedidos',

    # API
    'GET /tacos/recent': 'API tacos recientes',
    'GET /tacos/<taco_id>': 'API obtener taco',
}


def configure(logs_dir=None, enabled=None):
    """
    Cambia directorio de logs y/o activación en tiempo de ejecución.

    Uso (tests):
        configure(logs_dir=str(tmp_path / 'logs'))
    """
    global LOGS_DIR, ENABLE_PROFILING
    if logs_dir is not None:
        LOGS_DIR = logs_dir
    if enabled is not None:
        ENABLE_PROFILING = bool(enabled)


def log_path(log_name):
    """Ruta absoluta de uno de los archivos de log"""
    return os.path.join(LOGS_DIR, log_name)


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


def _write_log(log_name, content):
    """Escribe contenido a un archivo de log (thread-safe)"""
    try:
        with _write_lock:
            os.makedirs(LOGS_DIR, exist_ok=True)
            with open(log_path(log_name), 'a', encoding='utf-8') as f:
                f.write(content)
    except OSError:
        pass  # Silenciar errores de escritura para no afectar la app


def _get_route_name(method, path, rule=None):
    """
    Obtiene nombre legible para una ruta.
    Intenta hacer match con ROUTE_NAMES, si no, devuelve la ruta raw.
    """
    key = f"{method} {path}"
    if key in ROUTE_NAMES:
        return ROUTE_NAMES[key]

    # La regla de Flask trae los parámetros sin resolver (/tacos/<taco_id>)
    if rule:
        rule_key = f"{method} {rule}"
        if rule_key in ROUTE_NAMES:
            return ROUTE_NAMES[rule_key]

    return f"{method} {path}"


# ═══════════════════════════════════════════════════════════════════════════
# 1️⃣ PROFILING DE RUTAS
# ═══════════════════════════════════════════════════════════════════════════

def log_route_performance(method, path, rule, time_ms, user=None, status=None):
    """
    Registra el rendimiento de una ruta en performance.log

    Args:
        method: GET, POST, etc.
        path: Ruta solicitada (/tacos/recent)
        rule: Regla de Flask (/tacos/<taco_id>)
        time_ms: Tiempo en milisegundos
        user: Usuario que hizo la petición (opcional)
        status: Código HTTP de la respuesta (opcional)
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
Estado: {status if status is not None else '-'}
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
    user_str = user or 'anónimo'

    emoji = '⚠️' if level == 'WARNING' else '🔴'
    severity = 'LENTA' if level == 'WARNING' else 'MUY LENTA'

    log_entry = f"""
{emoji} [{level}] {_get_timestamp()}
────────────────────────────────────────
Ruta {severity}: {action_name}
Usuario: {user_str}
Detalle: {method} {path}
Tiempo: {time_ms:.0f} ms (umbral: {THRESHOLD_WARNING if level == 'WARNING' else THRESHOLD_CRITICAL} ms)
────────────────────────────────────────
"""

    _write_log(SLOW_ROUTES_LOG, log_entry)


# ═══════════════════════════════════════════════════════════════════════════
# 2️⃣ HOOKS PARA FLASK (before/after request)
# ═══════════════════════════════════════════════════════════════════════════

def init_profiling(app):
    """
    Inicializa el sistema de profiling en una app Flask.
    Registra hooks before_request y after_request.

    Uso:
        from taco_cloud.performance_logger import init_profiling
        init_profiling(app)
    """

    @app.before_request
    def _start_timer():
        from flask import g
        g.start_time = time.perf_counter()

    @app.after_request
    def _log_request(response):
        from flask import g, request, session

        if not ENABLE_PROFILING or not hasattr(g, 'start_time'):
            return response

        elapsed = (time.perf_counter() - g.start_time) * 1000  # ms

        path = request.path
        if path.startswith('/static'):
            return response

        method = request.method
        rule = str(request.url_rule) if request.url_rule else path
        user = session.get('user')

        log_route_performance(method, path, rule, elapsed, user, response.status_code)

        if elapsed >= THRESHOLD_CRITICAL:
            log_slow_route(method, path, rule, elapsed, user, 'CRITICAL')
        elif elapsed >= THRESHOLD_WARNING:
            log_slow_route(method, path, rule, elapsed, user, 'WARNING')

        return response


# ═══════════════════════════════════════════════════════════════════════════
# 3️⃣ DECORADOR PARA FUNCIONES CLAVE
# ═══════════════════════════════════════════════════════════════════════════

def profile_function(func=None, name=None):
    """
    Decorador para medir rendimiento de funciones críticas.

    Uso:
        @profile_function
        def mi_funcion():
            ...

        @profile_function(name="Colocar pedido")
        def checkout(self, order, user, fields):
            ...

    Registra:
        - Cantidad de llamadas
        - Tiempo promedio
        - Tiempo máximo
    """
    def decorator(fn):
        func_name = name or fn.__name__

        @wraps(fn)
        def wrapper(*args, **kwargs):
            if not ENABLE_PROFILING:
                return fn(*args, **kwargs)

            start = time.perf_counter()
            try:
                return fn(*args, **kwargs)
            finally:
                elapsed_ms = (time.perf_counter() - start) * 1000

                with _stats_lock:
                    stats = _function_stats[func_name]
                    stats['calls'] += 1
                    stats['total_time'] += elapsed_ms
                    if elapsed_ms > stats['max_time']:
                        stats['max_time'] = elapsed_ms

                if elapsed_ms >= THRESHOLD_WARNING:
                    _log_slow_function_call(func_name, elapsed_ms)

        return wrapper

    # Permitir uso sin paréntesis: @profile_function
    if func is not None:
        return decorator(func)
    return decorator


def _log_slow_function_call(func_name, time_ms):
    """Registra una llamada lenta a una función"""
    severity = 'CRÍTICO' if time_ms >= THRESHOLD_CRITICAL else 'LENTO'
    emoji = '🔴' if time_ms >= THRESHOLD_CRITICAL else '⚠️'

    log_entry = f"""
{emoji} [{severity}] {_get_timestamp()}
Función: {func_name}
Tiempo: {time_ms:.0f} ms
────────────────────────────────────────
"""

    _write_log(SLOW_FUNCTIONS_LOG, log_entry)


# ═══════════════════════════════════════════════════════════════════════════
# 4️⃣ REGISTRO DE ERRORES
# ═══════════════════════════════════════════════════════════════════════════

def log_error(context, exc, user=None):
    """
    Registra un error en errors.log con su traceback.

    Se escribe aunque el profiling esté desactivado.

    Args:
        context: Qué se estaba haciendo ('Colocar pedido', 'GET /design')
        exc: Excepción capturada
        user: Usuario en sesión (opcional)
    """
    trace = ''.join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    log_entry = f"""
🔴 [ERROR] {_get_timestamp()}
────────────────────────────────────────
Contexto: {context}
Usuario: {user or 'anónimo'}
Error: {type(exc).__name__}: {exc}
{trace}────────────────────────────────────────
"""

    _write_log(ERRORS_LOG, log_entry)


# ═══════════════════════════════════════════════════════════════════════════
# 5️⃣ REPORTE DE ESTADÍSTICAS
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


def write_function_stats_report():
    """
    Escribe un reporte legible de estadísticas de funciones en slow_functions.log
    """
    stats = get_function_stats()
    if not ENABLE_PROFILING or not stats:
        return

    sorted_stats = sorted(stats.items(), key=lambda x: x[1]['avg_time'], reverse=True)

    report = f"""
╔══════════════════════════════════════════════════════════════════════════════╗
║  REPORTE DE RENDIMIENTO DE FUNCIONES
║  Generado: {_get_timestamp()}
╚══════════════════════════════════════════════════════════════════════════════╝

"""

    for func_name, data in sorted_stats:
        status = ''
        if data['avg_time'] >= THRESHOLD_CRITICAL:
            status = ' 🔴 CRÍTICO'
        elif data['avg_time'] >= THRESHOLD_WARNING:
            status = ' ⚠️ LENTO'
        elif data['max_time'] >= THRESHOLD_CRITICAL:
            status = ' ⚡ PICOS ALTOS'

        report += f"""┌──────────────────────────────────────────────────────────────────────────────┐
│ FUNCIÓN: {func_name}{status}
├──────────────────────────────────────────────────────────────────────────────┤
│ Llamadas totales: {data['calls']}
│ Tiempo promedio:  {data['avg_time']:.0f} ms
│ Tiempo máximo:    {data['max_time']:.0f} ms
└──────────────────────────────────────────────────────────────────────────────┘

"""

    _write_log(SLOW_FUNCTIONS_LOG, report)


def reset_stats():
    """Reinicia todas las estadísticas (útil para testing)"""
    with _stats_lock:
        _function_stats.clear()


# ═══════════════════════════════════════════════════════════════════════════
# 6️⃣ FUNCIONES DE UTILIDAD
# ═══════════════════════════════════════════════════════════════════════════

def clear_logs():
    """Limpia todos los archivos de log (útil para desarrollo)"""
    for log_name in ALL_LOGS:
        path = log_path(log_name)
        if os.path.exists(path):
            os.remove(path)


def get_log_summary():
    """
    Obtiene un resumen del estado actual de los logs.

    Returns:
        dict: {archivo: {exists, size_kb, lines}}
    """
    summary = {}
    for log_name in ALL_LOGS:
        path = log_path(log_name)
        key = log_name.rsplit('.', 1)[0]
        if os.path.exists(path):
            size = os.path.getsize(path) / 1024  # KB
            with open(path, 'r', encoding='utf-8') as f:
                lines = sum(1 for _ in f)
            summary[key] = {'exists': True, 'size_kb': round(size, 2), 'lines': lines}
        else:
            summary[key] = {'exists': False, 'size_kb': 0, 'lines': 0}
    return summary


# ═══════════════════════════════════════════════════════════════════════════
# EXPORTAR API PÚBLICA
# ═══════════════════════════════════════════════════════════════════════════

__all__ = [
    'ENABLE_PROFILING',
    'configure',
    'init_profiling',
    'profile_function',
    'log_error',
    'get_function_stats',
    'write_function_stats_report',
    'reset_stats',
    'clear_logs',
    'get_log_summary',
]
