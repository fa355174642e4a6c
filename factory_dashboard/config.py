# ==============================================================================
# CONFIGURACIÓN - Variables de entorno del panel
# ==============================================================================
# Todas las opciones se leen de variables de entorno con valores por defecto.
# El panel NO guarda datos propios: todo vive en el backend REST externo.
#
# Variables principales:
#   FACTORY_API_BASE_URL    → URL base del backend (termina en /api)
#   FACTORY_API_TOKEN       → Token bearer por defecto (opcional)
#   FACTORY_API_TIMEOUT     → Timeout de cada llamada HTTP en segundos
#   FACTORY_SECRET_KEY      → Clave de sesión Flask (OBLIGATORIA en producción)
#   FACTORY_PRODUCTION_MODE → "1" para modo producción
# ==============================================================================

import os


def _env_bool(name: str, default: bool) -> bool:
    """Lee una variable de entorno booleana ("1", "true", "yes", "on")."""
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


def _env_float(name: str, default: float) -> float:
    try:
        return float(os.environ.get(name, default))
    except (TypeError, ValueError):
        return default


BASE_DIR = os.path.dirname(os.path.abspath(__file__))

# ═══════════════════════════════════════════════════════════════════════════════
# BACKEND REST
# ═══════════════════════════════════════════════════════════════════════════════
API_BASE_URL = os.environ.get('FACTORY_API_BASE_URL', 'https://frin-backend-1.onrender.com/api')
API_TOKEN = os.environ.get('FACTORY_API_TOKEN') or None
API_TIMEOUT = _env_float('FACTORY_API_TIMEOUT', 15.0)

# ═══════════════════════════════════════════════════════════════════════════════
# MODO PRODUCCIÓN Y SESIONES
# ═══════════════════════════════════════════════════════════════════════════════
# True = exige FACTORY_SECRET_KEY y no muestra trazas
# False = modo desarrollo con logging verbose
PRODUCTION_MODE = _env_bool('FACTORY_PRODUCTION_MODE', False)

DEFAULT_SECRET_KEY = 'factory_dashboard_dev_secret_key_change_in_production'
SECRET_KEY = os.environ.get('FACTORY_SECRET_KEY') or None

SESSION_LIFETIME = 8 * 3600  # 8 horas

# ═══════════════════════════════════════════════════════════════════════════════
# LOGGING Y PROFILING
# ═══════════════════════════════════════════════════════════════════════════════
LOG_LEVEL = os.environ.get('FACTORY_LOG_LEVEL', 'WARNING' if PRODUCTION_MODE else 'INFO').upper()
ENABLE_PROFILING = _env_bool('FACTORY_ENABLE_PROFILING', True)
LOGS_DIR = os.environ.get('FACTORY_LOGS_DIR', os.path.join(BASE_DIR, 'logs'))

# ═══════════════════════════════════════════════════════════════════════════════
# SERVIDOR DE DESARROLLO
# ═══════════════════════════════════════════════════════════════════════════════
HOST = os.environ.get('HOST', '0.0.0.0')
PORT = int(os.environ.get('PORT', 5000))

# Refresco automático del panel principal (segundos)
DASHBOARD_REFRESH_SECONDS = 30

# Moneda mostrada en importes
CURRENCY = os.environ.get('FACTORY_CURRENCY', 'PKR')

COMPANY_NAME = 'FIRN Bakers'
