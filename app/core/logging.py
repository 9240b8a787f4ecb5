# app/core/logging.py

import copy
import logging.config
import os

LOGGING_CONFIG = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "console": {
            "format": "[%(asctime)s] %(levelname)s | %(name)s | %(message)s",
            "datefmt": "%Y-%m-%d %H:%M:%S",
        },
        "file": {
            "format": (
                "%(asctime)s | %(levelname)s | %(process)d | %(threadName)s | "
                "%(name)s | %(message)s"
            ),
            "datefmt": "%Y-%m-%d %H:%M:%S",
        },
        "audit": {
            # Slug history writes only: created, reclaimed, purged
            "format": "%(asctime)s | AUDIT | %(message)s",
            "datefmt": "%Y-%m-%d %H:%M:%S",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "stream": "ext://sys.stdout",
            "formatter": "console",
            "level": "DEBUG",
        },
        "file": {
            "class": "logging.handlers.RotatingFileHandler",
            "filename": "logs/app.log",
            "formatter": "file",
            "level": "INFO",
            "maxBytes": 5 * 1024 * 1024,  # 5MB
            "backupCount": 5,
            "encoding": "utf-8",
        },
        "audit": {
            "class": "logging.handlers.RotatingFileHandler",
            "filename": "logs/audit.log",
            "formatter": "audit",
            "level": "INFO",
            "maxBytes": 5 * 1024 * 1024,
            "backupCount": 3,
            "encoding": "utf-8",
        },
    },
    "loggers": {
        "": {
            "handlers": ["console", "file"],
            "level": "INFO",
            "propagate": False,
        },
        "audit": {
            "handlers": ["audit"],
            "level": "INFO",
            "propagate": False,
        },
        # SQL echo stays off unless explicitly raised
        "sqlalchemy.engine": {
            "handlers": ["file"],
            "level": "WARNING",
            "propagate": False,
        },
    },
}


def init_logging(environment: str = "production"):
    """
    Initialize logging with the configuration above. Development runs also
    log the slug engine's DEBUG output (sequence decisions, lookups).
    """
    os.makedirs("logs", exist_ok=True)
    config = copy.deepcopy(LOGGING_CONFIG)
    if environment == "development":
        config["loggers"]["app.slugs"] = {
            "handlers": ["console", "file"],
            "level": "DEBUG",
            "propagate": False,
        }
    logging.config.dictConfig(config)
    logger = logging.getLogger(__name__)
    logger.info("Logging initialized")
