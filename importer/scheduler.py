from logging import getLogger

from django.db import DatabaseError
from kombu.exceptions import OperationalError

from jobfeeds.logging import StructuredLogger
from jobfeeds.utils.celery import get_registered_task

from .feeds import get_feed_sources
from .models import ImportLog

logger = getLogger(__name__)
structured_logger = StructuredLogger.get_logger(__name__)

IMPORT_TASK_NAME = "importer.tasks.feeds.import_feed_task"


class ImportScheduler:
    """
    Create import attempts and queue their work items.

    The Celery task which executes the work item is injected; by default it is
    looked up in the task registry, so importing this module never imports the
    task modules.
    """

    def __init__(self, task=None):
        self._task = task

    @property
    def task(self):
        if self._task is None:
            self._task = get_registered_task(IMPORT_TASK_NAME)
        return self._task

    def enqueue_import(self, feed_url, category=None):
        """
        Create a pending ImportLog for ``feed_url`` and queue one work item
        for it. The Celery task id is the import id, so broker-side records of
        an attempt can be found from the log and vice versa.

        Returns:
            ImportLog: The newly created, pending import attempt.
        """
        import_log = ImportLog.objects.create(
            feed_url=feed_url, category=category or ""
        )
        import_id = str(import_log.import_id)
        try:
            self.task.apply_async(
                kwargs={
                    "import_id": import_id,
                    "feed_url": feed_url,
                    "category": category,
                },
                task_id=import_id,
            )
        except OperationalError:
            # Nothing was queued, so no worker will ever pick this attempt up
            import_log.delete()
            raise

        structured_logger.info(
            "Import queued.",
            event_code="import_queued",
            import_log=import_log,
            feed_category=category,
        )
        return import_log

    def enqueue_all(self, sources=None):
        """
        Queue one import per feed source (the configured sources by default).
        A source which cannot be queued is logged and skipped so the others
        still run.

        Returns:
            list[ImportLog]: The attempts which were queued.
        """
        if sources is None:
            sources = get_feed_sources()

        import_logs = []
        for source in sources:
            try:
                import_logs.append(self.enqueue_import(source.url, source.category))
            except (OperationalError, DatabaseError) as exc:
                structured_logger.error(
                    "Could not queue feed import.",
                    event_code="import_queue_failed",
                    reason=str(exc),
                    reason_code="enqueue_error",
                    feed=source,
                )
        return import_logs
