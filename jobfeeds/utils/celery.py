from celery import Task

from jobfeeds.celery import app as jobfeeds_celery_app


def get_registered_task(name: str) -> Task:
    """
    Retrieve a Celery task by its fully qualified name.

    Looking tasks up in the registry lets callers such as the import scheduler
    enqueue work without importing the task module directly, which avoids
    circular imports between models and tasks. Unlike ``app.send_task`` the
    returned task honours settings such as ``ALWAYS_EAGER``.

    Args:
        name (str): Fully qualified task name, for example
            "importer.tasks.feeds.import_feed_task".

    Returns:
        Task: The registered Celery task object.

    Raises:
        RuntimeError: If the task name is not found in the registry.
    """
    try:
        return jobfeeds_celery_app.tasks[name]
    except KeyError as err:
        raise RuntimeError(f"Task {name} is not registered. Did you typo it?") from err
