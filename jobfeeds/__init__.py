from jobfeeds.celery import app as celery_app

__all__ = ["celery_app"]


VERSION = (0, 1, 0)


def get_version():
    return ".".join(map(str, VERSION))
