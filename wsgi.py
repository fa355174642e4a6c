# ==============================================================================
# WSGI Entry Point - Para Gunicorn en producción
# ==============================================================================
# Este archivo es el punto de entrada para servidores WSGI como Gunicorn.
#
# USO:
#   gunicorn wsgi:app --bind 0.0.0.0:$PORT
#
# ESTRUCTURA DEL PROYECTO:
#   repo_root/                 <- Directorio de trabajo (en sys.path automáticamente)
#   ├── wsgi.py                <- Este archivo
#   ├── pyproject.toml
#   └── factory_dashboard/     <- Paquete Python
#       ├── main.py
#       ├── services/
#       └── repositories/
#
# La URL del backend y el token se configuran por variables de entorno
# (FACTORY_API_BASE_URL, FACTORY_API_TOKEN). Ver factory_dashboard/config.py
# ==============================================================================

from factory_dashboard.main import app

if __name__ == '__main__':
    app.run(debug=True, host='0.0.0.0', port=5000)
