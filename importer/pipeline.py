from dataclasses import asdict, dataclass
from typing import Optional

from jobfeeds.logging import StructuredLogger

from .exceptions import ImportPipelineError
from .feeds import source_name_for_url
from .parser import parse_feed

structured_logger = StructuredLogger.get_logger(__name__)


@dataclass(frozen=True)
class ImportOutcome:
    total_fetched: int
    new_jobs: int
    updated_jobs: int
    failed_count: int

    def as_dict(self):
        return asdict(self)


@dataclass(frozen=True)
class ImportResult:
    """
    What one execution of the pipeline produced: an outcome when every stage
    returned, or the pipeline error which stopped it. Whether a failed
    execution is delivered again is up to the scheduler.
    """

    outcome: Optional[ImportOutcome] = None
    error: Optional[ImportPipelineError] = None

    @property
    def ok(self):
        return self.error is None


class ImportPipeline:
    """
    Fetch, parse and upsert one feed for one import attempt.

    The fetcher and upserter are passed in by the caller, which owns their
    connections; ``parse`` defaults to :func:`importer.parser.parse_feed`.
    """

    def __init__(self, fetcher, upserter, parse=parse_feed):
        self.fetcher = fetcher
        self.upserter = upserter
        self.parse = parse

    def run(self, import_log, category=None):
        """
        Move ``import_log`` to processing, run every stage and mark it
        completed when they all return.

        Items rejected by validation are recorded on the log and never fail
        the import, even when no item at all was valid. A pipeline error
        leaves the log in processing and is returned, not raised, so the
        caller can choose between redelivery and marking the import failed.
        """
        import_log.mark_processing()
        log = structured_logger.bind(import_log=import_log)
        log.info("Import started.", event_code="import_started")

        try:
            raw = self.fetcher.fetch(import_log.feed_url)
            parsed = self.parse(
                raw,
                category or import_log.category or "General",
                source_name=source_name_for_url(import_log.feed_url),
            )
            counts = self.upserter.upsert(parsed.valid)
        except ImportPipelineError as exc:
            log.warning(
                "Import stage failed.",
                event_code="import_stage_failed",
                reason=str(exc),
                reason_code=f"{exc.stage}_error",
            )
            return ImportResult(error=exc)

        import_log.mark_completed(
            total_fetched=parsed.total,
            new_jobs=counts.new,
            updated_jobs=counts.updated,
            failed_jobs=parsed.invalid,
        )
        outcome = ImportOutcome(
            total_fetched=parsed.total,
            new_jobs=counts.new,
            updated_jobs=counts.updated,
            failed_count=len(parsed.invalid),
        )
        log.info(
            "Import completed.",
            event_code="import_completed",
            **outcome.as_dict(),
        )
        return ImportResult(outcome=outcome)
