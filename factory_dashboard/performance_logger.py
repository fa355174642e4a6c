# ==============================================================================
# SISTEMA DE PROFILING INTERNO
# ==============================================================================
# Mide rendimiento de rutas y de los flujos que encadenan varias llamadas
# al backend (alta de producto, órdenes, defectos de calidad...).
# Guarda logs legibles en logs/ para análisis humano.
#
# ACTIVAR/DESACTIVAR: variable de entorno FACTORY_ENABLE_PROFILING
# ==============================================================================

import atexit
import logging
import os
import threading
import time
from collections import defaultdict
from functools import wraps

from factory_dashboard import config

# ═══════════════════════════════════════════════════════════════════════════
# CONFIGURACIÓN
# ═══════════════════════════════════════════════════════════════════════════

ENABLE_PROFILING = config.ENABLE_PROFILING

# Umbrales de tiempo (en milisegundos). Cada ruta hace al menos una llamada
# HTTP al backend, por eso son más altos que para una app con datos locales.
THRESHOLD_WARNING = 300
THRESHOLD_CRITICAL = 700

PERFORMANCE_LOGGER = 'factory_dashboard.performance'
SLOW_ROUTES_LOGGER = 'factory_dashboard.performance.slow_routes'
SLOW_FUNCTIONS_LOGGER = 'factory_dashboard.performance.slow_functions'

# Mapeo de rutas a nombres legibles (para logs más humanos)
ROUTE_NAMES = {
    'GET /': 'Ver panel principal',
    'GET /api/dashboard/stats': 'Consultar estadísticas',
    'GET /login': 'Ver inicio de sesión',
    'POST /login': 'Iniciar sesión',
    'GET /logout': 'Cerrar sesión',

    # Inventario
    'GET /inventory': 'Ver inventario',
    'POST /inventory/products': 'Agregar producto',
    'POST /inventory/products/<product_key>': 'Editar producto',
    'POST /inventory/products/<product_key>/delete': 'Eliminar producto',
    'POST /inventory/products/<product_key>/discount': 'Aplicar descuento',
    'POST /inventory/production': 'Registrar producción',
    'POST /inventory/distribute': 'Crear despacho',

    # Finanzas
    'GET /financial': 'Ver finanzas',
    'POST /financial/transactions': 'Registrar transacción',
    'POST /financial/transactions/<transaction_key>': 'Editar transacción',
    'POST /financial/transactions/<transaction_key>/delete': 'Eliminar transacción',
    'POST /financial/orders': 'Registrar orden',
    'POST /financial/payments': 'Registrar pago',
    'POST /financial/payroll': 'Procesar planilla',
    'GET /financial/ledger': 'Ver libro mayor',
    'GET /financial/ledger/export': 'Exportar libro mayor CSV',
    'GET /financial/daily-report': 'Ver reporte diario',

    # RRHH
    'GET /hr': 'Ver recursos humanos',
    'POST /hr/employees': 'Agregar empleado',
    'POST /hr/employees/<employee_key>': 'Editar empleado',
    'POST /hr/employees/<employee_key>/delete': 'Eliminar empleado',
    'POST /hr/attendance': 'Marcar asistencia',

    # Calidad
    'GET /quality': 'Ver calidad',
    'POST /quality/records': 'Registrar inspección',
    'POST /quality/records/<record_key>': 'Editar inspección',
    'POST /quality/records/<record_key>/delete': 'Eliminar inspección',

    # Almacenes
    'GET /warehouse': 'Ver almacenes',
    'POST /warehouse/warehouses': 'Agregar almacén',
    'POST /warehouse/warehouses/<warehouse_key>': 'Editar almacén',
    'POST /warehouse/warehouses/<warehouse_key>/delete': 'Eliminar almacén',

    # Mantenimiento
    'GET /maintenance': 'Ver mantenimiento',
    'POST /maintenance/items': 'Agregar mantenimiento',
    'POST /maintenance/items/<item_key>': 'Editar mantenimiento',
    'POST /maintenance/items/<item_key>/delete': 'Eliminar mantenimiento',
    'GET /maintenance-mode': 'Ver modo mantenimiento',
    'POST /maintenance-mode/activate': 'Activar modo mantenimiento',
    'POST /maintenance-mode/deactivate': 'Desactivar modo mantenimiento',
    'POST /maintenance-mode/test-email': 'Probar correo',
}


# ═══════════════════════════════════════════════════════════════════════════
# ESTADÍSTICAS DE FUNCIONES (en memoria)
# ═══════════════════════════════════════════════════════════════════════════

# Estructura: {nombre_funcion: {calls: int, total_time: float, max_time: float}}
_function_stats = defaultdict(lambda: {'calls': 0, 'total_time': 0.0, 'max_time': 0.0})
_stats_lock = threading.Lock()


# ═══════════════════════════════════════════════════════════════════════════
# FUNCIONES DE LOGGING
# ═══════════════════════════════════════════════════════════════════════════

def _attach_file_handler(logger_name, filepath):
    """Agrega un FileHandler al logger (una sola vez por archivo)."""
    target = logging.getLogger(logger_name)
    path = os.path.abspath(filepath)
    for handler in target.handlers:
        if isinstance(handler, logging.FileHandler) and handler.baseFilename == path:
            return target
    handler = logging.FileHandler(path, encoding='utf-8')
    handler.setFormatter(logging.Formatter('%(asctime)s [%(levelname)s] %(message)s'))
    target.addHandler(handler)
    target.setLevel(logging.INFO)
    return target


def _get_route_name(method, path, rule=None):
    """
    Obtiene nombre legible para una ruta.
    Intenta hacer match con ROUTE_NAMES, si no, devuelve la ruta raw.
    """
    key = f"{method} {path}"
    if key in ROUTE_NAMES:
        return ROUTE_NAMES[key]

    # La regla de Flask conserva los parámetros (<product_key>)
    if rule:
        rule_key = f"{method} {rule}"
        if rule_key in ROUTE_NAMES:
            return ROUTE_NAMES[rule_key]

    return key


def log_route_performance(method, path, rule, time_ms, user=None):
    """
    Registra el rendimiento de una ruta en performance.log

    Args:
        method: GET, POST, etc.
        path: Ruta solicitada (/inventory/products)
        rule: Regla de Flask (/inventory/products/<product_key>)
        time_ms: Tiempo en milisegundos
        user: Identificador de sesión (opcional)
    """
    action_name = _get_route_name(method, path, rule)
    logging.getLogger(PERFORMANCE_LOGGER).info(
        "%s | usuario=%s | %s %s | %.0f ms", action_name, user or 'anónimo', method, path, time_ms
    )

    if time_ms >= THRESHOLD_CRITICAL:
        logging.getLogger(SLOW_ROUTES_LOGGER).critical(
            "Ruta MUY LENTA: %s (%s %s) %.0f ms (umbral: %s ms)",
            action_name, method, path, time_ms, THRESHOLD_CRITICAL
        )
    elif time_ms >= THRESHOLD_WARNING:
        logging.getLogger(SLOW_ROUTES_LOGGER).warning(
            "Ruta LENTA: %s (%s %s) %.0f ms (umbral: %s ms)",
            action_name, method, path, time_ms, THRESHOLD_WARNING
        )


# ═══════════════════════════════════════════════════════════════════════════
# HOOKS PARA FLASK (before/after request)
# ═══════════════════════════════════════════════════════════════════════════

def init_profiling(app, logs_dir=None):
    """
    Inicializa el sistema de profiling en una app Flask.
    Registra hooks before_request y after_request, y los archivos
    performance.log, slow_routes.log y slow_functions.log.

    Uso:
        from factory_dashboard.performance_logger import init_profiling
        init_profiling(app)
    """
    if not ENABLE_PROFILING:
        return

    logs_dir = logs_dir or config.LOGS_DIR
    os.makedirs(logs_dir, exist_ok=True)
    _attach_file_handler(PERFORMANCE_LOGGER, os.path.join(logs_dir, 'performance.log'))
    _attach_file_handler(SLOW_ROUTES_LOGGER, os.path.join(logs_dir, 'slow_routes.log'))
    _attach_file_handler(SLOW_FUNCTIONS_LOGGER, os.path.join(logs_dir, 'slow_functions.log'))
    atexit.register(write_function_stats_report)

    @app.before_request
    def _start_timer():
        from flask import g
        g.start_time = time.perf_counter()

    @app.after_request
    def _log_request(response):
        from flask import g, request, session

        if not hasattr(g, 'start_time'):
            return response

        # Ignorar archivos estáticos
        if request.path.startswith('/static'):
            return response

        elapsed = (time.perf_counter() - g.start_time) * 1000
        rule = str(request.url_rule) if request.url_rule else request.path
        user = 'token' if session.get('api_token') else None
        log_route_performance(request.method, request.path, rule, elapsed, user)
        return response


# ═══════════════════════════════════════════════════════════════════════════
# DECORADOR PARA FUNCIONES CLAVE
# ═══════════════════════════════════════════════════════════════════════════

def profile_function(func=None, name=None):
    """
    Decorador para medir rendimiento de funciones críticas.

    Uso:
        @profile_function
        def mi_funcion():
            ...

        @profile_function(name="Completar orden")
        def complete_order():
            ...

    Registra:
        - Cantidad de llamadas
        - Tiempo promedio
        - Tiempo máximo
    """
    def decorator(fn):
        if not ENABLE_PROFILING:
            return fn

        func_name = name or fn.__name__

        @wraps(fn)
        def wrapper(*args, **kwargs):
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
    level = logging.CRITICAL if time_ms >= THRESHOLD_CRITICAL else logging.WARNING
    logging.getLogger(SLOW_FUNCTIONS_LOGGER).log(level, "Función: %s | Tiempo: %.0f ms", func_name, time_ms)


# ═══════════════════════════════════════════════════════════════════════════
# REPORTE DE ESTADÍSTICAS
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
    Escribe en slow_functions.log un resumen por función, ordenado por
    tiempo promedio (mayor primero). Se registra con atexit al iniciar
    el profiling.
    """
    stats = get_function_stats()
    if not stats:
        return

    target = logging.getLogger(SLOW_FUNCTIONS_LOGGER)
    target.info("REPORTE DE RENDIMIENTO DE FUNCIONES (%s funciones)", len(stats))
    for func_name, data in sorted(stats.items(), key=lambda x: x[1]['avg_time'], reverse=True):
        status = ''
        if data['avg_time'] >= THRESHOLD_CRITICAL:
            status = ' CRÍTICO'
        elif data['avg_time'] >= THRESHOLD_WARNING:
            status = ' LENTO'
        elif data['max_time'] >= THRESHOLD_CRITICAL:
            status = ' PICOS ALTOS'
        target.info(
            "Función: %s%s | Llamadas: %s | Promedio: %.0f ms | Máximo: %.0f ms",
            func_name, status, data['calls'], data['avg_time'], data['max_time'],
        )


def reset_stats():
    """Reinicia todas las estadísticas (útil para testing)"""
    with _stats_lock:
        _function_stats.clear()


__all__ = [
    'ENABLE_PROFILING',
    'init_profiling',
    'profile_function',
    'get_function_stats',
    'write_function_stats_report',
    'reset_stats',
]
