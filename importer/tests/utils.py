from unittest import mock

import requests
from requests.models import Response

from importer.feeds import FeedSource
from importer.models import ImportLog
from importer.records import JobRecord

from .mock_data import JOBICY_FEED_URL


def create_import_log(*, feed_url=JOBICY_FEED_URL, category="Data Science", **kwargs):
    return ImportLog.objects.create(feed_url=feed_url, category=category, **kwargs)


def create_job_record(job_id="job-1", **kwargs):
    kwargs.setdefault("title", "Job %s" % job_id)
    return JobRecord(job_id=job_id, **kwargs)


def create_feed_source(url=JOBICY_FEED_URL, category="Data Science", source="jobicy"):
    return FeedSource(url=url, category=category, source=source)


def mock_response(content=b"", status_code=200, content_type="application/rss+xml"):
    response = mock.MagicMock(spec=Response)
    response.content = content
    response.status_code = status_code
    response.headers = {"Content-Type": content_type}
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.exceptions.HTTPError(
            "%s Error" % status_code
        )
    return response


def mock_session(*responses):
    session = mock.MagicMock(spec=requests.Session)
    session.get.side_effect = list(responses)
    return session
