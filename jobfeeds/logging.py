from types import MappingProxyType
from typing import Any, Optional

import structlog


def _import_log_fields(import_log) -> dict[str, Any]:
    import_id = getattr(import_log, "import_id", None)
    return {
        "import_id": str(import_id) if import_id else None,
        "feed_url": getattr(import_log, "feed_url", None),
        "import_status": getattr(import_log, "status", None),
    }


def _feed_fields(feed) -> dict[str, Any]:
    return {
        "feed_url": getattr(feed, "url", None),
        "feed_category": getattr(feed, "category", None),
        "feed_source": getattr(feed, "source", None),
    }


def _job_fields(job) -> dict[str, Any]:
    return {
        "job_id": getattr(job, "job_id", None),
        "job_source": getattr(job, "source", None),
    }


# Context objects which are expanded into flat log fields
CONTEXT_EXTRACTORS = MappingProxyType(
    {
        "import_log": _import_log_fields,
        "feed": _feed_fields,
        "job": _job_fields,
    }
)

LEVELS_REQUIRING_REASON = ("warning", "error")


class StructuredLogger:
    """
    Thin structlog wrapper used by the importer.

    Every entry needs a message and an ``event_code``; warnings and errors
    also need ``reason`` and ``reason_code``. The ``import_log``, ``feed`` and
    ``job`` keywords take model or dataclass instances and are logged as their
    identifying fields:

    - ``import_log`` -> ``import_id``, ``feed_url``, ``import_status``
    - ``feed`` -> ``feed_url``, ``feed_category``, ``feed_source``
    - ``job`` -> ``job_id``, ``job_source``

    Explicit keywords win over expanded ones and ``None`` values are dropped::

        structured_logger = StructuredLogger.get_logger(__name__)
        structured_logger.warning(
            "Direct feed fetch failed, trying proxy.",
            event_code="feed_fetch_direct_failed",
            reason=str(exc),
            reason_code="not_xml",
            feed_url=url,
        )
    """

    def __init__(self, logger, context: Optional[dict[str, Any]] = None):
        self._logger = logger
        self._context = context or {}

    @classmethod
    def get_logger(cls, name: str) -> "StructuredLogger":
        """Logger for ``name``, routed through the ``structlog.`` namespace."""
        return cls(structlog.get_logger(f"structlog.{name}"))

    def bind(self, **kwargs: Any) -> "StructuredLogger":
        """Copy of this logger with ``kwargs`` added to every entry."""
        return StructuredLogger(self._logger, context={**self._context, **kwargs})

    def _fields(self, context: dict[str, Any]) -> dict[str, Any]:
        merged = {**self._context, **context}
        fields = {}
        for key, extract in CONTEXT_EXTRACTORS.items():
            obj = merged.pop(key, None)
            if obj:
                fields.update(extract(obj))
        fields.update(merged)
        return {key: value for key, value in fields.items() if value is not None}

    def log(
        self,
        level: str,
        message: str,
        *,
        event_code: str,
        reason: Optional[str] = None,
        reason_code: Optional[str] = None,
        **context: Any,
    ) -> None:
        """
        Emit one entry at ``level``.

        Raises:
            ValueError: If the message or event_code is empty, or a warning or
                error lacks its reason or reason_code.
        """
        if not message:
            raise ValueError("Log message is required.")
        if not event_code:
            raise ValueError("Structured logs must include an 'event_code' field.")
        if level in LEVELS_REQUIRING_REASON and not (reason and reason_code):
            raise ValueError(
                "Warnings and errors must include both 'reason' and 'reason_code'."
            )

        fields = self._fields(context)
        fields["event_code"] = event_code
        if reason:
            fields["reason"] = reason
        if reason_code:
            fields["reason_code"] = reason_code
        getattr(self._logger, level)(message, **fields)

    def debug(self, message: str, *, event_code: str, **kwargs):
        self.log("debug", message, event_code=event_code, **kwargs)

    def info(self, message: str, *, event_code: str, **kwargs):
        self.log("info", message, event_code=event_code, **kwargs)

    def warning(
        self, message: str, *, event_code: str, reason: str, reason_code: str, **kwargs
    ):
        self.log(
            "warning",
            message,
            event_code=event_code,
            reason=reason,
            reason_code=reason_code,
            **kwargs,
        )

    def error(
        self, message: str, *, event_code: str, reason: str, reason_code: str, **kwargs
    ):
        self.log(
            "error",
            message,
            event_code=event_code,
            reason=reason,
            reason_code=reason_code,
            **kwargs,
        )
