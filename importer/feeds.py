from dataclasses import dataclass
from urllib.parse import urlsplit

from django.conf import settings


@dataclass(frozen=True)
class FeedSource:
    """A configured external feed: where to fetch it and how to label its jobs."""

    url: str
    category: str
    source: str


DEFAULT_FEED_SOURCES = (
    FeedSource("https://jobicy.com/?feed=job_feed", "General", "jobicy"),
    FeedSource(
        "https://jobicy.com/?feed=job_feed&job_categories=smm&job_types=full-time",
        "SMM",
        "jobicy",
    ),
    FeedSource(
        "https://jobicy.com/?feed=job_feed&job_categories=seller"
        "&job_types=full-time&search_region=france",
        "Sales",
        "jobicy",
    ),
    FeedSource(
        "https://jobicy.com/?feed=job_feed&job_categories=design-multimedia",
        "Design & Multimedia",
        "jobicy",
    ),
    FeedSource(
        "https://jobicy.com/?feed=job_feed&job_categories=data-science",
        "Data Science",
        "jobicy",
    ),
    FeedSource(
        "https://jobicy.com/?feed=job_feed&job_categories=copywriting",
        "Copywriting",
        "jobicy",
    ),
    FeedSource(
        "https://jobicy.com/?feed=job_feed&job_categories=business",
        "Business",
        "jobicy",
    ),
    FeedSource(
        "https://jobicy.com/?feed=job_feed&job_categories=management",
        "Management",
        "jobicy",
    ),
    FeedSource(
        "https://www.higheredjobs.com/rss/articleFeed.cfm",
        "Education",
        "higheredjobs",
    ),
)


def get_feed_sources():
    """
    Return the configured feed sources. ``IMPORTER["FEED_SOURCES"]`` may hold
    FeedSource instances or dicts with url/category/source keys.
    """
    configured = settings.IMPORTER.get("FEED_SOURCES")
    if configured is None:
        return list(DEFAULT_FEED_SOURCES)
    return [
        source if isinstance(source, FeedSource) else FeedSource(**source)
        for source in configured
    ]


def get_feed_source(url):
    for source in get_feed_sources():
        if source.url == url:
            return source
    return None


def source_name_for_url(url):
    """Configured source name for a feed URL, else the feed's host name."""
    source = get_feed_source(url)
    if source is not None:
        return source.source
    host = urlsplit(url).hostname or ""
    return host[4:] if host.startswith("www.") else host
