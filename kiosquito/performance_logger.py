# ==============================================================================
# SISTEMA DE PROFILING INTERNO
# ==============================================================================
# Mide rendimiento de rutas y operaciones del núcleo sin afectar al usuario.
# Los registros van al logger "kiosquito.performance".
#
# ACTIVAR/DESACTIVAR: set_profiling_enabled() (lo llama AppContainer según
# Config.enable_profiling)
# ==============================================================================

import logging
import threading
import time
from collections import defaultdict
from functools import wraps

logger = logging.getLogger('kiosquito.performance')

# ═══════════════════════════════════════════════════════════════════════════
# CONFIGURACIÓN
# ═══════════════════════════════════════════════════════════════════════════

ENABLE_PROFILING = True

# Umbrales de tiempo (en milisegundos)
THRESHOLD_WARNING = 300   # Advertencia si supera 300ms
THRESHOLD_CRITICAL = 700  # Crítico si supera 700ms

# Estructura: {nombre_funcion: {calls: int, total_time: float, max_time: float}}
_function_stats = defaultdict(lambda: {'calls': 0, 'total_time': 0.0, 'max_time': 0.0})
_stats_lock = threading.Lock()


def set_profiling_enabled(enabled: bool) -> None:
    """Activa o desactiva el profiling en tiempo de ejecución."""
    global ENABLE_PROFILING
    ENABLE_PROFILING = bool(enabled)


def _log_slow_call(kind, name, time_ms):
    """Registra una llamada lenta (WARNING o CRITICAL según umbral)."""
    if time_ms >= THRESHOLD_CRITICAL:
        logger.critical("[MUY LENTA] %s %s: %.0f ms (umbral: %d ms)",
                        kind, name, time_ms, THRESHOLD_CRITICAL)
    else:
        logger.warning("[LENTA] %s %s: %.0f ms (umbral: %d ms)",
                       kind, name, time_ms, THRESHOLD_WARNING)


# ═══════════════════════════════════════════════════════════════════════════
# 1️⃣ HOOKS PARA FLASK (before/after request)
# ═══════════════════════════════════════════════════════════════════════════

def init_profiling(app):
    """
    Inicializa el profiling de rutas en una app Flask.
    Registra hooks before_request y after_request.
    """
    from flask import g, request, session

    @app.before_request
    def _start_timer():
        g.start_time = time.perf_counter()

    @app.after_request
    def _log_request(response):
        if not ENABLE_PROFILING or not hasattr(g, 'start_time'):
            return response

        elapsed = (time.perf_counter() - g.start_time) * 1000  # ms
        user = session.get('user') or 'anónimo'
        route = f"{request.method} {request.path}"

        logger.debug("%s usuario=%s status=%s %.0f ms",
                     route, user, response.status_code, elapsed)
        if elapsed >= THRESHOLD_WARNING:
            _log_slow_call('Ruta', route, elapsed)

        return response


# ═══════════════════════════════════════════════════════════════════════════
# 2️⃣ DECORADOR PARA OPERACIONES CLAVE
# ═══════════════════════════════════════════════════════════════════════════

def profile_function(func=None, name=None):
    """
    Decorador para medir rendimiento de operaciones críticas.

    Uso:
        @profile_function
        def list_products(self):
            ...

        @profile_function(name="Registrar venta")
        def record_sale(self, ...):
            ...

    Registra cantidad de llamadas, tiempo total y tiempo máximo.
    """
    def decorator(fn):
        func_name = name or fn.__qualname__

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
                    _log_slow_call('Función', func_name, elapsed_ms)

        return wrapper

    # Permitir uso sin paréntesis: @profile_function
    if func is not None:
        return decorator(func)
    return decorator


# ═══════════════════════════════════════════════════════════════════════════
# 3️⃣ REPORTE DE ESTADÍSTICAS
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


def log_function_stats_report():
    """Escribe un reporte de estadísticas en el logger, la más lenta primero."""
    stats = get_function_stats()
    if not stats:
        return

    sorted_stats = sorted(stats.items(), key=lambda x: x[1]['avg_time'], reverse=True)
    for func_name, data in sorted_stats:
        logger.info("%s: %d llamadas, promedio %.0f ms, máximo %.0f ms",
                    func_name, data['calls'], data['avg_time'], data['max_time'])


def reset_stats():
    """Reinicia todas las estadísticas (útil para testing)"""
    with _stats_lock:
        _function_stats.clear()


__all__ = [
    'ENABLE_PROFILING',
    'set_profiling_enabled',
    'init_profiling',
    'profile_function',
    'get_function_stats',
    'log_function_stats_report',
    'reset_stats',
]
