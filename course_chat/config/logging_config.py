# course_chat/config/logging_config.py
import logging.config

from course_chat.config.settings import settings


def configure_logging(level: str | None = None) -> None:
    """Configure root logging once for the web process and background workers."""
    log_level = (level or settings.log_level or "INFO").upper()

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {
                    "format": "%(asctime)s %(levelname)s [%(threadName)s] %(name)s: %(message)s",
                },
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "default",
                },
            },
            "root": {
                "level": log_level,
                "handlers": ["console"],
            },
            "loggers": {
                # SQL echo is noisy, keep it opt-in
                "sqlalchemy.engine": {"level": "WARNING"},
                "engineio": {"level": "WARNING"},
                "socketio": {"level": "WARNING"},
            },
        }
    )
