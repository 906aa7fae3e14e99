"""
Entrypoint for running the API in development.
In production run create_app() behind a WSGI server (gunicorn/uwsgi).
"""
import os
from . import create_app

# Respect APP_ENV for configuration selection (handled in get_config())
app = create_app()

if __name__ == "__main__":
    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "3000"))
    debug = bool(os.getenv("FLASK_DEBUG", str(app.config.get("DEBUG", True))).lower() in ("1", "true", "yes"))
    try:
        # The reloader would start a second app (and a second sweeper) in a child process
        app.run(host=host, port=port, debug=debug, use_reloader=False)
    finally:
        app.extensions["token_sweeper"].stop()
        app.extensions["storage"].dispose()
