import os

from .settings_template import *  # NOQA ignore=F405
from .settings_template import DATABASES, LOGGING

LOGGING["handlers"]["stream"]["level"] = "INFO"
LOGGING["handlers"]["file"]["level"] = "INFO"
LOGGING["handlers"]["file"]["filename"] = "./logs/jobfeeds-web.log"
LOGGING["handlers"]["celery"]["level"] = "INFO"
LOGGING["handlers"]["celery"]["filename"] = "./logs/jobfeeds-celery.log"
LOGGING["loggers"]["django"]["level"] = "INFO"
LOGGING["loggers"]["celery"]["level"] = "INFO"

SECRET_KEY = os.getenv("DJANGO_SECRET_KEY", "changeme")

DATABASES["default"].update({"CONN_MAX_AGE": 15 * 60})

SECURE_PROXY_SSL_HEADER = ("HTTP_X_FORWARDED_PROTO", "https")
CSRF_COOKIE_SECURE = True

CELERY_BROKER_URL = os.getenv("CELERY_BROKER_URL", CELERY_BROKER_URL)  # NOQA: F405
CELERY_RESULT_BACKEND = os.getenv(
    "CELERY_RESULT_BACKEND", CELERY_RESULT_BACKEND  # NOQA: F405
)
