# ==============================================================================
# WSGI Entry Point - Para Gunicorn en producción
# ==============================================================================
# USO:
#   gunicorn wsgi:app --bind 0.0.0.0:$PORT
#
# ESTRUCTURA DEL PROYECTO:
#   repo_root/           <- Directorio de trabajo (en sys.path automáticamente)
#   ├── wsgi.py          <- Este archivo
#   ├── pyproject.toml
#   └── taco_cloud/      <- Paquete Python
#       ├── main.py
#       ├── services/
#       └── repositories/
#
# El backend se elige con TACO_BACKEND antes de arrancar:
#   TACO_BACKEND=relational gunicorn wsgi:app
# ==============================================================================

from taco_cloud.main import app

if __name__ == '__main__':
    app.run(debug=True, host='127.0.0.1', port=5000)
