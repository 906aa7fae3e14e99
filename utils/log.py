"""Process-wide logging setup (stdlib logging, configured once from the app config)."""
import logging.config

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    level = (level or "INFO").upper()
    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {"format": LOG_FORMAT}
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "standard",
                "stream": "ext://sys.stderr",
            }
        },
        "root": {
            "level": level,
            "handlers": ["console"]
        },
        "loggers": {
            # SQL echo is controlled by SQL_ECHO, keep the engine logger quiet otherwise
            "sqlalchemy.engine": {"level": "WARNING"},
            "werkzeug": {"level": "INFO"},
        }
    })
