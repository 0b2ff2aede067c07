from .settings_template import *  # NOQA ignore=F405
from .settings_template import LOGGING

LOGGING["handlers"]["stream"]["level"] = "DEBUG"
LOGGING["handlers"]["file"]["level"] = "DEBUG"
LOGGING["handlers"]["celery"]["level"] = "DEBUG"
LOGGING["loggers"] = {
    "django": {"handlers": ["file", "stream"], "level": "DEBUG"},
    "celery": {"handlers": ["celery", "stream"], "level": "DEBUG"},
    "importer": {"handlers": ["file", "stream"], "level": "DEBUG"},
    "django.utils.autoreload": {"level": "INFO"},
    "django.template": {"level": "INFO"},
    "structlog": {
        "handlers": ["structlog_file", "structlog_console"],
        "level": "INFO",
    },
    "django_structlog": {
        "handlers": ["structlog_file", "structlog_console"],
        "level": "INFO",
    },
}

DEBUG = True

ALLOWED_HOSTS = ["127.0.0.1", "0.0.0.0", "*"]  # nosec
