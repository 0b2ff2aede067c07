from .settings_template import *  # NOQA ignore=F405

DEBUG = False

SECRET_KEY = "jobfeeds-test-secret-key"  # nosec

ALLOWED_HOSTS = ["127.0.0.1", "0.0.0.0", "testserver"]  # nosec

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

CELERY_BROKER_URL = "memory://"
CELERY_RESULT_BACKEND = "cache+memory://"
CELERY_TASK_ALWAYS_EAGER = True
CELERY_TASK_EAGER_PROPAGATES = True

# No log files are written while testing
LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "handlers": {
        "null": {"level": "DEBUG", "class": "logging.NullHandler"},
    },
    "loggers": {
        "django": {"handlers": ["null"], "level": "INFO"},
        "celery": {"handlers": ["null"], "level": "INFO"},
        "importer": {"handlers": ["null"], "level": "DEBUG"},
        "structlog": {"handlers": ["null"], "level": "DEBUG"},
    },
}
