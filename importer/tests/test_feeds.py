from django.test import TestCase, override_settings

from importer.feeds import (
    DEFAULT_FEED_SOURCES,
    FeedSource,
    get_feed_source,
    get_feed_sources,
    source_name_for_url,
)

from .mock_data import JOBICY_FEED_URL


class FeedSourceTests(TestCase):
    def test_defaults(self):
        sources = get_feed_sources()

        self.assertEqual(sources, list(DEFAULT_FEED_SOURCES))
        self.assertEqual(get_feed_source(JOBICY_FEED_URL).category, "Data Science")
        self.assertIsNone(get_feed_source("https://example.com/rss"))

    @override_settings(
        IMPORTER={
            "FEED_SOURCES": [
                {"url": "https://example.com/rss", "category": "Ops", "source": "ex"},
                FeedSource("https://example.org/rss", "Design", "org"),
            ]
        }
    )
    def test_configured_sources(self):
        self.assertEqual(
            get_feed_sources(),
            [
                FeedSource("https://example.com/rss", "Ops", "ex"),
                FeedSource("https://example.org/rss", "Design", "org"),
            ],
        )

    def test_source_name_for_url(self):
        self.assertEqual(source_name_for_url(JOBICY_FEED_URL), "jobicy")
        self.assertEqual(
            source_name_for_url("https://www.weworkremotely.com/remote-jobs.rss"),
            "weworkremotely.com",
        )
        self.assertEqual(source_name_for_url("not a url"), "")
