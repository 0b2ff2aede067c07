from logging import getLogger
from urllib.parse import quote, urlsplit

import requests
from django.conf import settings

from jobfeeds.logging import StructuredLogger

from .exceptions import FetchError

logger = getLogger(__name__)
structured_logger = StructuredLogger.get_logger(__name__)

XML_MARKERS = (b"<rss", b"<?xml")


class NotXmlResponse(Exception):
    """The source answered, but not with an RSS/XML document."""


def looks_like_xml(content):
    return any(marker in content for marker in XML_MARKERS)


def origin_of(url):
    parts = urlsplit(url)
    if not parts.scheme or not parts.netloc:
        return None
    return f"{parts.scheme}://{parts.netloc}/"


class FeedFetcher:
    """
    Fetch raw feed bytes, first directly with browser-like headers and then,
    if the source blocks us or fails, through a pass-through proxy.

    The session is owned by the caller, so one fetcher may be shared by every
    import a worker process runs.
    """

    def __init__(
        self,
        session=None,
        *,
        direct_timeout=None,
        proxy_timeout=None,
        proxy_url_template=None,
        user_agent=None,
    ):
        config = settings.IMPORTER
        self.session = session or requests.Session()
        self.direct_timeout = direct_timeout or config["DIRECT_TIMEOUT"]
        self.proxy_timeout = proxy_timeout or config["PROXY_TIMEOUT"]
        self.proxy_url_template = proxy_url_template or config["PROXY_URL_TEMPLATE"]
        self.user_agent = user_agent or config["USER_AGENT"]

    def headers_for(self, url):
        headers = {
            "User-Agent": self.user_agent,
            "Accept": "application/rss+xml,application/xml;q=0.9,*/*;q=0.8",
            "Accept-Language": "en-US,en;q=0.9",
        }
        referer = origin_of(url)
        if referer:
            headers["Referer"] = referer
        return headers

    def proxied_url(self, url):
        return self.proxy_url_template.format(url=quote(url, safe=""))

    def _get(self, url, *, timeout, headers=None):
        resp = self.session.get(url, headers=headers, timeout=timeout)
        resp.raise_for_status()
        if not looks_like_xml(resp.content):
            raise NotXmlResponse(
                "Response from %s is not RSS/XML (HTTP %s, Content-Type %s)"
                % (url, resp.status_code, resp.headers.get("Content-Type"))
            )
        return resp.content

    def fetch_direct(self, url):
        return self._get(
            url, timeout=self.direct_timeout, headers=self.headers_for(url)
        )

    def fetch_via_proxy(self, url):
        return self._get(self.proxied_url(url), timeout=self.proxy_timeout)

    def fetch(self, url):
        """
        Return the raw bytes of the feed at ``url``.

        Raises:
            FetchError: If both the direct and the proxied request failed or
                returned something other than RSS/XML.
        """
        try:
            return self.fetch_direct(url)
        except (requests.RequestException, NotXmlResponse) as exc:
            structured_logger.warning(
                "Direct feed fetch failed, trying proxy.",
                event_code="feed_fetch_direct_failed",
                reason=str(exc),
                reason_code=(
                    "not_xml" if isinstance(exc, NotXmlResponse) else "request_error"
                ),
                feed_url=url,
            )
            direct_error = exc

        try:
            content = self.fetch_via_proxy(url)
        except NotXmlResponse as exc:
            raise FetchError(
                url,
                "Proxy also returned non-RSS content for %s; the source may be "
                "blocking all requests (direct attempt: %s)" % (url, direct_error),
            ) from exc
        except requests.RequestException as exc:
            raise FetchError(
                url,
                "Fetching %s failed directly (%s) and through the proxy (%s)"
                % (url, direct_error, exc),
            ) from exc

        logger.info("Fetched %s through the proxy", url)
        return content
