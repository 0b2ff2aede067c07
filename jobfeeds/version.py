import functools
from importlib.metadata import PackageNotFoundError, version


@functools.lru_cache(maxsize=None)
def get_jobfeeds_version():
    try:
        return version("jobfeeds")
    except PackageNotFoundError:
        from jobfeeds import get_version

        return get_version()
