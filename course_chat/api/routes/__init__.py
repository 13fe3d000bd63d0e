# course_chat/api/routes/__init__.py

from flask import Flask

from course_chat.api.routes.health_routes import bp_health
from course_chat.api.routes.message_routes import bp_msg


def register_routes(app: Flask, *, api_prefix: str, app_prefix: str) -> None:
    # health outside /api (but inside the app)
    app.register_blueprint(bp_health, url_prefix=f"{app_prefix}/health")

    app.register_blueprint(bp_msg, url_prefix=f"{api_prefix}/courses/<course_id>/messages")
