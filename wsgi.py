# ==============================================================================
# WSGI Entry Point
# ==============================================================================
# Punto de entrada para servidores WSGI:
#   gunicorn wsgi:app --bind 0.0.0.0:$PORT --workers 1 --threads 1
#
# Un solo worker y un solo hilo: la caché, la sesión y el carrito viven en
# memoria del proceso.
#
# ESTRUCTURA DEL PROYECTO:
#   repo_root/             <- Directorio de trabajo
#   ├── wsgi.py            <- Este archivo
#   ├── pyproject.toml
#   └── store_console/     <- Paquete Python
#       ├── main.py
#       ├── services/
#       └── repositories/
# ==============================================================================

from store_console import config
from store_console.main import create_app

app = create_app()

if __name__ == '__main__':
    app.run(host=config.HOST, port=config.PORT, debug=config.DEBUG, threaded=False)
