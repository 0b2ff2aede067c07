from types import SimpleNamespace
from unittest.mock import MagicMock

from django.test import TestCase

from jobfeeds.logging import StructuredLogger


class StructuredLoggerTests(TestCase):
    def setUp(self):
        self.mock_structlog_logger = MagicMock()
        self.logger = StructuredLogger(self.mock_structlog_logger)

    def test_info_logs_with_event(self):
        self.logger.info("info msg", event_code="info_event", key2="value2")
        self.mock_structlog_logger.info.assert_called_once()
        args, kwargs = self.mock_structlog_logger.info.call_args
        self.assertEqual(args[0], "info msg")
        self.assertEqual(kwargs["event_code"], "info_event")
        self.assertEqual(kwargs["key2"], "value2")

    def test_warning_requires_reason_and_reason_code(self):
        with self.assertRaises(TypeError):
            self.logger.warning(
                "warning msg", event_code="warn_event", reason="only_reason"
            )

        self.logger.warning(
            "warning msg",
            event_code="warn_event",
            reason="test reason",
            reason_code="warn_code",
        )
        args, kwargs = self.mock_structlog_logger.warning.call_args
        self.assertEqual(kwargs["reason"], "test reason")
        self.assertEqual(kwargs["reason_code"], "warn_code")

    def test_error_with_empty_reason_raises(self):
        with self.assertRaises(ValueError):
            self.logger.error(
                "error msg", event_code="error_event", reason="", reason_code="code"
            )

    def test_missing_event_code_raises(self):
        with self.assertRaises(ValueError):
            self.logger.info("msg", event_code=None)

    def test_missing_message_raises(self):
        with self.assertRaises(ValueError):
            self.logger.debug("", event_code="debug_event")

    def test_import_log_is_expanded(self):
        import_log = SimpleNamespace(
            import_id="0b7c", feed_url="https://example.com/rss", status="processing"
        )
        self.logger.info("msg", event_code="import_started", import_log=import_log)
        args, kwargs = self.mock_structlog_logger.info.call_args
        self.assertEqual(kwargs["import_id"], "0b7c")
        self.assertEqual(kwargs["feed_url"], "https://example.com/rss")
        self.assertEqual(kwargs["import_status"], "processing")
        self.assertNotIn("import_log", kwargs)

    def test_feed_and_job_are_expanded(self):
        feed = SimpleNamespace(
            url="https://example.com/rss", category="Ops", source="ex"
        )
        job = SimpleNamespace(job_id="job-1", source="ex")
        self.logger.info("msg", event_code="job_seen", feed=feed, job=job)
        args, kwargs = self.mock_structlog_logger.info.call_args
        self.assertEqual(kwargs["feed_category"], "Ops")
        self.assertEqual(kwargs["feed_source"], "ex")
        self.assertEqual(kwargs["job_id"], "job-1")

    def test_explicit_key_overrides_extracted(self):
        import_log = SimpleNamespace(import_id="0b7c", feed_url="a", status="pending")
        self.logger.info(
            "msg", event_code="test_event", import_log=import_log, feed_url="b"
        )
        args, kwargs = self.mock_structlog_logger.info.call_args
        self.assertEqual(kwargs["feed_url"], "b")

    def test_none_values_are_omitted(self):
        self.logger.info("msg", event_code="test_event", countdown=None)
        args, kwargs = self.mock_structlog_logger.info.call_args
        self.assertNotIn("countdown", kwargs)

    def test_bind_merges_context_into_logging(self):
        import_log = SimpleNamespace(import_id="0b7c", feed_url="a", status="pending")
        bound = self.logger.bind(import_log=import_log, worker="w1")
        self.assertIsInstance(bound, StructuredLogger)

        bound.info("msg", event_code="bound_event")
        args, kwargs = self.mock_structlog_logger.info.call_args
        self.assertEqual(kwargs["import_id"], "0b7c")
        self.assertEqual(kwargs["worker"], "w1")

    def test_zero_counts_are_kept(self):
        self.logger.info("msg", event_code="import_completed", new_jobs=0)
        args, kwargs = self.mock_structlog_logger.info.call_args
        self.assertEqual(kwargs["new_jobs"], 0)

    def test_bound_context_does_not_leak(self):
        self.logger.bind(worker="w1")
        self.logger.info("msg", event_code="test_event")
        args, kwargs = self.mock_structlog_logger.info.call_args
        self.assertNotIn("worker", kwargs)

    def test_get_logger_namespaces_name(self):
        logger = StructuredLogger.get_logger("importer.fetch")
        self.assertIsInstance(logger, StructuredLogger)
