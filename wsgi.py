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
#   └── kiosquito/       <- Paquete Python
#       ├── main.py
#       ├── services/
#       └── repositories/
# ==============================================================================

from kiosquito.config import Config, configure_logging
from kiosquito.main import create_app

config = Config.from_env()
configure_logging(config)

app = create_app(config)

if __name__ == '__main__':
    app.run(debug=config.debug, host=config.host, port=config.port)
