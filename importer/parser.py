"""
Turn a fetched RSS document into job records.

Items are read from ``rss/channel/item``. Jobicy and similar boards publish
listing details in an extension namespace (``job_listing:company`` and so
on); those take precedence over the plain RSS element of the same name.
"""

import datetime
from email.utils import parsedate_to_datetime
from logging import getLogger

import defusedxml.ElementTree as ET
from defusedxml import DefusedXmlException
from django.utils import timezone
from django.utils.dateparse import parse_datetime

from .exceptions import FeedParseError, ItemValidationError
from .models import JOB_ID_MAX_LENGTH, LABEL_MAX_LENGTH
from .records import FailedItem, JobRecord, ParsedFeed

logger = getLogger(__name__)

MISSING_FIELDS_REASON = "Missing required fields: jobId or title"
JOB_ID_TOO_LONG_REASON = "jobId is longer than %d characters" % JOB_ID_MAX_LENGTH


def _local(tag):
    return tag.split("}", 1)[-1] if "}" in tag else tag


def _text(elem):
    if elem is None:
        return None
    value = "".join(elem.itertext()).strip()
    return value or None


def _child_text(item, name, *, namespaced):
    for child in item:
        if not isinstance(child.tag, str):
            continue
        if _local(child.tag) == name and child.tag.startswith("{") == namespaced:
            value = _text(child)
            if value:
                return value
    return None


def _listing_field(item, name, plain_name=None):
    return _child_text(item, name, namespaced=True) or _child_text(
        item, plain_name or name, namespaced=False
    )


def parse_published_date(value):
    """
    Parse an RSS ``pubDate`` (RFC 822) or an ISO-8601 timestamp. Returns None
    when the value is missing or unparseable.
    """
    if not value:
        return None
    try:
        parsed = parsedate_to_datetime(value)
    except (TypeError, ValueError, IndexError):
        try:
            parsed = parse_datetime(value.replace("Z", "+00:00"))
        except ValueError:
            parsed = None
    if parsed is None:
        return None
    if timezone.is_naive(parsed):
        parsed = timezone.make_aware(parsed, datetime.timezone.utc)
    return parsed


def item_identity(item):
    return (
        _child_text(item, "guid", namespaced=False)
        or _child_text(item, "id", namespaced=False)
        or _child_text(item, "link", namespaced=False)
    )


def build_record(item, default_category, source_name=""):
    """
    Build a JobRecord from one ``<item>`` element.

    Raises:
        ItemValidationError: If the item lacks an identity or a title, or its
            identity does not fit the job_id column.
    """
    job_id = item_identity(item)
    title = _child_text(item, "title", namespaced=False)
    if not job_id or not title:
        raise ItemValidationError(job_id or "unknown", MISSING_FIELDS_REASON)
    if len(job_id) > JOB_ID_MAX_LENGTH:
        raise ItemValidationError(job_id[:JOB_ID_MAX_LENGTH], JOB_ID_TOO_LONG_REASON)

    category = (
        _child_text(item, "category", namespaced=False)
        or _child_text(item, "category", namespaced=True)
        or default_category
    )

    return JobRecord(
        job_id=job_id,
        title=title,
        company=_listing_field(item, "company") or "Unknown",
        location=_listing_field(item, "location") or "Remote",
        description=_child_text(item, "description", namespaced=False) or "",
        job_type=_listing_field(item, "job_type", "jobType") or "",
        published_date=(
            parse_published_date(_child_text(item, "pubDate", namespaced=False))
            or timezone.now()
        ),
        url=_child_text(item, "link", namespaced=False) or "",
        source=source_name[:LABEL_MAX_LENGTH],
        category=(category or "")[:LABEL_MAX_LENGTH],
        salary=_listing_field(item, "salary"),
    )


def _feed_items(root):
    if _local(root.tag).lower() != "rss":
        return []
    channel = root.find("channel")
    if channel is None:
        return []
    return channel.findall("item")


def parse_feed(raw, default_category="General", *, source_name=""):
    """
    Parse raw feed bytes into valid job records and rejected items.

    Args:
        raw (bytes): The fetched document.
        default_category (str): Category used when an item carries none.
        source_name (str): Name stored on every record as its source.

    Returns:
        ParsedFeed: ``valid`` JobRecords and ``invalid`` FailedItems, both in
        document order.

    Raises:
        FeedParseError: If the document is not well-formed XML or uses
            constructs such as entity declarations which are refused.
    """
    try:
        root = ET.fromstring(raw)
    except (ET.ParseError, DefusedXmlException) as exc:
        raise FeedParseError("Could not parse feed XML: %s" % exc) from exc

    valid = []
    invalid = []
    for item in _feed_items(root):
        try:
            valid.append(build_record(item, default_category, source_name))
        except ItemValidationError as exc:
            logger.info("Skipping feed item %s: %s", exc.item_id, exc.reason)
            invalid.append(FailedItem(item_id=exc.item_id, reason=exc.reason))

    logger.info("Parsed %d valid jobs, %d failed jobs", len(valid), len(invalid))
    return ParsedFeed(valid=valid, invalid=invalid)
