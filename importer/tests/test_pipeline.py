from unittest import mock

from django.test import TestCase

from importer.exceptions import FeedParseError, FetchError, StoreWriteError
from importer.fetch import FeedFetcher
from importer.models import ImportLog, Job
from importer.parser import parse_feed
from importer.pipeline import ImportOutcome, ImportPipeline
from importer.upsert import JobUpserter

from .mock_data import (
    JOBICY_FEED_URL,
    JOBICY_RSS,
    JOBICY_RSS_UPDATED,
    MALFORMED_XML,
    ONLY_INVALID_RSS,
)
from .utils import create_import_log


def mock_fetcher(*results):
    fetcher = mock.MagicMock(spec=FeedFetcher)
    fetcher.fetch.side_effect = list(results)
    return fetcher


class ImportPipelineTests(TestCase):
    def setUp(self):
        self.import_log = create_import_log()

    def test_successful_import(self):
        fetcher = mock_fetcher(JOBICY_RSS)
        result = ImportPipeline(fetcher, JobUpserter()).run(self.import_log)

        self.assertTrue(result.ok)
        self.assertEqual(
            result.outcome,
            ImportOutcome(total_fetched=3, new_jobs=2, updated_jobs=0, failed_count=1),
        )
        fetcher.fetch.assert_called_once_with(JOBICY_FEED_URL)

        self.import_log.refresh_from_db()
        self.assertEqual(self.import_log.status, ImportLog.Status.COMPLETED)
        self.assertEqual(self.import_log.deliveries, 1)
        self.assertEqual(self.import_log.total_fetched, 3)
        self.assertEqual(self.import_log.new_jobs, 2)
        self.assertEqual(self.import_log.failed_count, 1)

        jobs = Job.objects.order_by("job_id")
        self.assertEqual(jobs.count(), 2)
        self.assertEqual({job.source for job in jobs}, {"jobicy"})
        self.assertEqual(jobs[0].category, "Data Science")

    def test_second_import_updates(self):
        ImportPipeline(mock_fetcher(JOBICY_RSS), JobUpserter()).run(self.import_log)

        second_log = create_import_log()
        result = ImportPipeline(mock_fetcher(JOBICY_RSS_UPDATED), JobUpserter()).run(
            second_log
        )

        self.assertEqual(result.outcome.new_jobs, 1)
        self.assertEqual(result.outcome.updated_jobs, 2)
        self.assertEqual(Job.objects.count(), 3)
        self.assertEqual(
            Job.objects.get(
                job_id="https://jobicy.com/?post_type=job_listing&p=101"
            ).title,
            "Lead Data Scientist",
        )

    def test_category_argument_overrides_log(self):
        ImportPipeline(mock_fetcher(JOBICY_RSS), JobUpserter()).run(
            self.import_log, category="Analytics"
        )
        self.assertEqual(
            Job.objects.get(
                job_id="https://jobicy.com/?post_type=job_listing&p=101"
            ).category,
            "Analytics",
        )

    def test_only_invalid_items_still_completes(self):
        result = ImportPipeline(mock_fetcher(ONLY_INVALID_RSS), JobUpserter()).run(
            self.import_log
        )

        self.assertTrue(result.ok)
        self.assertEqual(result.outcome.failed_count, 2)
        self.import_log.refresh_from_db()
        self.assertEqual(self.import_log.status, ImportLog.Status.COMPLETED)
        self.assertFalse(Job.objects.exists())

    @mock.patch("importer.pipeline.structured_logger")
    def test_fetch_error_is_returned(self, mock_logger):
        error = FetchError(JOBICY_FEED_URL, "blocked")
        result = ImportPipeline(mock_fetcher(error), JobUpserter()).run(self.import_log)

        self.assertFalse(result.ok)
        self.assertIs(result.error, error)
        self.assertIsNone(result.outcome)

        self.import_log.refresh_from_db()
        self.assertEqual(self.import_log.status, ImportLog.Status.PROCESSING)
        self.assertIsNone(self.import_log.completed_at)

        bound = mock_logger.bind.return_value
        self.assertEqual(bound.warning.call_args.kwargs["reason_code"], "fetch_error")

    @mock.patch("importer.pipeline.structured_logger")
    def test_parse_error_is_returned(self, mock_logger):
        result = ImportPipeline(mock_fetcher(MALFORMED_XML), JobUpserter()).run(
            self.import_log
        )

        self.assertIsInstance(result.error, FeedParseError)
        self.assertFalse(Job.objects.exists())

    @mock.patch("importer.pipeline.structured_logger")
    def test_store_error_is_returned(self, mock_logger):
        upserter = mock.MagicMock(spec=JobUpserter)
        upserter.upsert.side_effect = StoreWriteError("constraint violated")

        result = ImportPipeline(mock_fetcher(JOBICY_RSS), upserter).run(self.import_log)

        self.assertIsInstance(result.error, StoreWriteError)
        self.import_log.refresh_from_db()
        self.assertEqual(self.import_log.status, ImportLog.Status.PROCESSING)

    def test_unexpected_error_propagates(self):
        fetcher = mock_fetcher(RuntimeError("bug"))

        with self.assertRaises(RuntimeError):
            ImportPipeline(fetcher, JobUpserter()).run(self.import_log)

        self.import_log.refresh_from_db()
        self.assertEqual(self.import_log.status, ImportLog.Status.PROCESSING)
        self.assertEqual(self.import_log.deliveries, 1)

    def test_custom_parse_function(self):
        parse = mock.MagicMock(wraps=parse_feed)
        ImportPipeline(mock_fetcher(JOBICY_RSS), JobUpserter(), parse=parse).run(
            self.import_log
        )

        parse.assert_called_once_with(JOBICY_RSS, "Data Science", source_name="jobicy")
