import os

import sentry_sdk
import structlog
from celery.schedules import crontab
from django.core.management.utils import get_random_secret_key
from sentry_sdk.integrations.django import DjangoIntegration

from jobfeeds.version import get_jobfeeds_version

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# Build paths inside the project like this: os.path.join(SITE_ROOT_DIR, ...)
JOBFEEDS_APP_DIR = os.path.abspath(os.path.dirname(__file__))
SITE_ROOT_DIR = os.path.dirname(JOBFEEDS_APP_DIR)

SECRET_KEY = os.getenv("DJANGO_SECRET_KEY", get_random_secret_key())

JOBFEEDS_ENVIRONMENT = os.environ.get("JOBFEEDS_ENVIRONMENT", "development")

ALLOWED_HOSTS = ["*"]

DEBUG = False
CSRF_COOKIE_SECURE = False

LANGUAGE_CODE = "en-us"
ROOT_URLCONF = "jobfeeds.urls"
STATIC_ROOT = "static-files"
STATIC_URL = "/static/"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True
WSGI_APPLICATION = "jobfeeds.wsgi.application"

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.postgresql",
        "NAME": os.getenv("POSTGRESQL_DB", "jobfeeds"),
        "USER": os.getenv("POSTGRESQL_USER", "jobfeeds"),
        "PASSWORD": os.getenv("POSTGRESQL_PW"),
        "HOST": os.getenv("POSTGRESQL_HOST", "localhost"),
        "PORT": os.getenv("POSTGRESQL_PORT", "5432"),
        # Workers hold connections across tasks otherwise
        "CONN_MAX_AGE": 0,
    }
}

INSTALLED_APPS = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.humanize",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    "django_structlog",
    "rest_framework",
    "django_celery_beat",
    "importer",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
    "django_structlog.middlewares.RequestMiddleware",
]

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.debug",
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
            ],
        },
    }
]

REST_FRAMEWORK = {
    "DEFAULT_RENDERER_CLASSES": ["rest_framework.renderers.JSONRenderer"],
    "DEFAULT_PARSER_CLASSES": ["rest_framework.parsers.JSONParser"],
}

REDIS_ADDRESS = os.environ.get("REDIS_ADDRESS", "localhost")
REDIS_PORT = os.environ.get("REDIS_PORT", "")
if REDIS_PORT.isdigit():
    REDIS_PORT = int(REDIS_PORT)
else:
    REDIS_PORT = 6379

CELERY_BROKER_URL = f"redis://{REDIS_ADDRESS}:{REDIS_PORT}/0"
CELERY_RESULT_BACKEND = f"redis://{REDIS_ADDRESS}:{REDIS_PORT}/0"

CELERY_ACCEPT_CONTENT = ["json"]
CELERY_TASK_SERIALIZER = "json"
CELERY_IMPORTS = ("importer.tasks",)

CELERY_BROKER_HEARTBEAT = 0
CELERY_BROKER_CONNECTION_RETRY = True
CELERY_BROKER_CONNECTION_RETRY_ON_STARTUP = True
CELERY_BROKER_TRANSPORT_OPTIONS = {
    "confirm_publish": True,
    "max_retries": 3,
    "interval_start": 0,
    "interval_step": 0.2,
    "interval_max": 0.5,
}

# Each worker process holds a single import at a time
CELERY_WORKER_CONCURRENCY = int(os.environ.get("IMPORTER_WORKER_CONCURRENCY", "5"))
CELERY_WORKER_PREFETCH_MULTIPLIER = 1
CELERY_RESULT_EXTENDED = True
CELERY_RESULT_EXPIRES = None

CELERY_BEAT_SCHEDULER = "django_celery_beat.schedulers:DatabaseScheduler"
CELERY_BEAT_SCHEDULE = {
    "import-all-feeds-hourly": {
        "task": "importer.tasks.feeds.enqueue_all_feeds_task",
        "schedule": crontab(minute=0),
    },
}

IMPORTER = {
    # None means importer.feeds.DEFAULT_FEED_SOURCES
    "FEED_SOURCES": None,
    "DIRECT_TIMEOUT": float(os.environ.get("IMPORTER_DIRECT_TIMEOUT", "15")),
    "PROXY_TIMEOUT": float(os.environ.get("IMPORTER_PROXY_TIMEOUT", "20")),
    "PROXY_URL_TEMPLATE": os.environ.get(
        "IMPORTER_PROXY_URL_TEMPLATE", "https://api.allorigins.win/raw?url={url}"
    ),
    "USER_AGENT": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    ),
    "MAX_DELIVERIES": int(os.environ.get("IMPORTER_MAX_DELIVERIES", "3")),
    "RETRY_BACKOFF_SECONDS": float(
        os.environ.get("IMPORTER_RETRY_BACKOFF_SECONDS", "1")
    ),
}

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "filters": {
        "celery_task_id": {"()": "importer.logging.CeleryTaskIDFilter"},
    },
    "formatters": {
        "long": {
            "format": "[{asctime} {levelname} {name}:{lineno}{task_id}] {message}",
            "datefmt": "%Y-%m-%dT%H:%M:%S",
            "style": "{",
        },
        "short": {
            "format": "[{levelname} {name}] {message}",
            "datefmt": "%Y-%m-%dT%H:%M:%S",
            "style": "{",
        },
        "structlog_json": {
            "()": structlog.stdlib.ProcessorFormatter,
            "processor": structlog.processors.JSONRenderer(),
        },
        "structlog_console": {
            "()": structlog.stdlib.ProcessorFormatter,
            "processor": structlog.dev.ConsoleRenderer(),
        },
    },
    "handlers": {
        "stream": {
            "class": "logging.StreamHandler",
            "level": "INFO",
            "formatter": "long",
            "filters": ["celery_task_id"],
        },
        "null": {"level": "INFO", "class": "logging.NullHandler"},
        "file": {
            "class": "logging.handlers.TimedRotatingFileHandler",
            "level": "INFO",
            "formatter": "long",
            "filters": ["celery_task_id"],
            "filename": f"{SITE_ROOT_DIR}/logs/jobfeeds.log",
            "when": "H",
            "interval": 3,
            "backupCount": 16,
        },
        "celery": {
            "level": "INFO",
            "class": "logging.handlers.RotatingFileHandler",
            "filename": f"{SITE_ROOT_DIR}/logs/celery.log",
            "formatter": "long",
            "filters": ["celery_task_id"],
            "maxBytes": 1024 * 1024 * 100,  # 100 mb
        },
        "structlog_file": {
            "class": "logging.handlers.TimedRotatingFileHandler",
            "level": "DEBUG",
            "formatter": "structlog_json",
            "filename": f"{SITE_ROOT_DIR}/logs/jobfeeds-json.log",
            "when": "H",
            "interval": 3,
            "backupCount": 16,
        },
        "structlog_console": {
            "class": "logging.StreamHandler",
            "level": "DEBUG",
            "formatter": "structlog_console",
        },
    },
    "loggers": {
        "django": {"handlers": ["file"], "level": "INFO"},
        "celery": {"handlers": ["celery"], "level": "INFO"},
        "importer": {"handlers": ["file", "celery"], "level": "INFO"},
        "structlog": {
            "handlers": ["structlog_file"],
            "level": "DEBUG",
            "propagate": True,
        },
        "django_structlog": {
            "handlers": ["structlog_file"],
            "level": "DEBUG",
            "propagate": False,
        },
    },
}

structlog.configure(
    processors=[
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
    ],
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

SENTRY_BACKEND_DSN = os.environ.get("SENTRY_BACKEND_DSN", None)

if SENTRY_BACKEND_DSN:
    sentry_sdk.init(
        dsn=SENTRY_BACKEND_DSN,
        environment=JOBFEEDS_ENVIRONMENT,
        release=get_jobfeeds_version(),
        integrations=[DjangoIntegration()],
    )
