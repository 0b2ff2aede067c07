from logging import getLogger

import requests
from django.conf import settings

from importer.fetch import FeedFetcher
from importer.models import ImportLog
from importer.pipeline import ImportPipeline
from importer.scheduler import ImportScheduler
from importer.upsert import JobUpserter
from jobfeeds.celery import app as celery_app
from jobfeeds.logging import StructuredLogger

logger = getLogger(__name__)
structured_logger = StructuredLogger.get_logger(__name__)

MAX_DELIVERIES = settings.IMPORTER["MAX_DELIVERIES"]


def build_pipeline(session):
    return ImportPipeline(FeedFetcher(session), JobUpserter())


def retry_countdown(retries):
    """Seconds to wait before redelivery number ``retries + 1``."""
    return settings.IMPORTER["RETRY_BACKOFF_SECONDS"] * (2**retries)


@celery_app.task(
    bind=True,
    acks_late=True,
    reject_on_worker_lost=True,
    ignore_result=True,
    store_errors_even_if_ignored=True,
    max_retries=MAX_DELIVERIES - 1,
)
def import_feed_task(self, import_id, feed_url, category=None):
    """
    Run one import attempt end to end.

    The pipeline reports failures as a result rather than raising them; this
    task decides what happens next. While deliveries remain the attempt is
    left in processing and the item is scheduled again with exponential
    backoff. On the last delivery the attempt is marked failed and the error
    is raised, so the broker keeps the failed item for inspection.
    """

    import_log = ImportLog.objects.get(import_id=import_id)

    if import_log.is_terminal:
        # Redelivery of an item whose attempt already finished
        logger.warning(
            "Import %s is already %s and will not be repeated",
            import_id,
            import_log.status,
        )
        return

    if import_log.feed_url != feed_url:
        logger.warning(
            "Work item for import %s names %s but the import is for %s",
            import_id,
            feed_url,
            import_log.feed_url,
        )

    with requests.Session() as session:
        result = build_pipeline(session).run(import_log, category=category)

    if result.ok:
        return result.outcome.as_dict()

    if self.request.retries < self.max_retries:
        countdown = retry_countdown(self.request.retries)
        import_log.note_retry(
            result.error, countdown=countdown, max_deliveries=self.max_retries + 1
        )
        structured_logger.info(
            "Import scheduled for redelivery.",
            event_code="import_retry_scheduled",
            import_log=import_log,
            countdown=countdown,
        )
        raise self.retry(exc=result.error, countdown=countdown)

    import_log.mark_failed(result.error)
    structured_logger.error(
        "Import failed.",
        event_code="import_failed",
        reason=import_log.error,
        reason_code=f"{result.error.stage}_error",
        import_log=import_log,
    )
    raise result.error


@celery_app.task(ignore_result=True)
def enqueue_all_feeds_task():
    """
    Create one import attempt per configured feed source and queue it.
    Registered with Celery beat to run hourly.
    """
    import_logs = ImportScheduler().enqueue_all()
    logger.info("Queued %d feed imports", len(import_logs))
