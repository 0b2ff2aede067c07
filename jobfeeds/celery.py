import importlib
import os
import pkgutil

import sentry_sdk
from celery import Celery
from sentry_sdk.integrations.celery import CeleryIntegration

from jobfeeds.version import get_jobfeeds_version

SENTRY_BACKEND_DSN = os.environ.get("SENTRY_BACKEND_DSN", None)

if SENTRY_BACKEND_DSN:
    JOBFEEDS_ENVIRONMENT = os.environ.get("JOBFEEDS_ENVIRONMENT", None)
    sentry_sdk.init(
        SENTRY_BACKEND_DSN,
        environment=JOBFEEDS_ENVIRONMENT,
        release=get_jobfeeds_version(),
        integrations=[CeleryIntegration()],
    )

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "jobfeeds.settings_template")

app = Celery("jobfeeds")

# Using a string here means the worker doesn't have to serialize
# the configuration object to child processes.
# - namespace='CELERY' means all celery-related configuration keys
#   should have a `CELERY_` prefix.
app.config_from_object("django.conf:settings", namespace="CELERY")

# Load task modules from all registered Django app configs.
app.autodiscover_tasks()


def import_all_submodules(package_name: str):
    """
    Import a package and recursively import all submodules.
    Used sparingly at Celery startup to ensure all task modules are loaded.
    """
    pkg = importlib.import_module(package_name)
    if not hasattr(pkg, "__path__"):
        return
    for mod in pkgutil.walk_packages(pkg.__path__, pkg.__name__ + "."):
        importlib.import_module(mod.name)


# Celery autodiscovery only finds tasks.py or tasks/__init__.py, so the
# submodules of importer.tasks are loaded once the app is finalized
@app.on_after_finalize.connect
def _load_all_task_modules(sender, **kwargs):
    import_all_submodules("importer.tasks")
