# course_chat/main.py
from __future__ import annotations

import eventlet

# must run before anything else imports socket/threading
eventlet.monkey_patch()

from course_chat.app_factory import create_app  # noqa: E402
from course_chat.infrastructure.realtime.socketio_server import socketio  # noqa: E402


app = create_app()

if __name__ == "__main__":
    # production runs under gunicorn, this is for local runs only
    socketio.run(app, host="0.0.0.0", port=5000, debug=True)
