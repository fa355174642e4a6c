# ==============================================================================
# FIRN BAKERS - Panel de administración de fábrica
# ==============================================================================
# Aplicación Flask que muestra y edita los datos del backend REST:
# inventario, finanzas, RRHH, calidad, almacenes y mantenimiento.
# ==============================================================================

__version__ = '1.0.0'
