# course_chat/app_factory.py
from __future__ import annotations

from flask import Flask
from flask_cors import CORS

from course_chat.api.realtime.socket_handlers import register_socket_handlers
from course_chat.infrastructure.realtime.socketio_server import socketio
from course_chat.config.flask_config import configure_app
from course_chat.config.logging_config import configure_logging
from course_chat.config.settings import settings
from course_chat.api.routes import register_routes
from course_chat.api.middlewares.error_handler import register_error_handlers

import course_chat.infrastructure.database.models  # noqa: F401


# -------------------------
# Prefixes (subpath)
# -------------------------
APP_PREFIX = settings.app_prefix.rstrip("/")
API_PREFIX = f"{APP_PREFIX}/api"
SOCKET_PREFIX = f"{APP_PREFIX}/socket.io"


def create_app() -> Flask:
    configure_logging()

    app = Flask(__name__)

    # CORS first, before routes answer OPTIONS
    CORS(
        app,
        resources={rf"{API_PREFIX}/*": {"origins": settings.cors_origins}},
        allow_headers=["Content-Type", "Authorization"],
        methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    )

    configure_app(app)

    register_routes(app, api_prefix=API_PREFIX, app_prefix=APP_PREFIX)

    register_error_handlers(app)

    # Socket.IO on the subpath
    socketio.init_app(app, path=SOCKET_PREFIX)
    register_socket_handlers()

    return app
