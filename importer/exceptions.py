class ImportPipelineError(Exception):
    """
    Raised when a stage of the feed import pipeline cannot run to completion.

    Subclasses identify the stage which failed. The import attempt is marked
    failed (or scheduled for redelivery) whenever one of these is raised by the
    fetcher, the parser or the upsert engine.
    """

    stage = "pipeline"


class FetchError(ImportPipelineError):
    """
    Raised when neither the direct request nor the proxied request returned
    something which looks like an XML/RSS document.
    """

    stage = "fetch"

    def __init__(self, url, message):
        super().__init__(message)
        self.url = url


class FeedParseError(ImportPipelineError):
    """Raised when the fetched document is not well-formed XML."""

    stage = "parse"


class StoreWriteError(ImportPipelineError):
    """Raised when the bulk upsert of job records is rejected by the database."""

    stage = "store"


class ItemValidationError(Exception):
    """
    Raised for a single feed item which lacks the fields needed to build a job
    record. This never fails an import; the item is reported in failed_jobs.
    """

    def __init__(self, item_id, reason):
        super().__init__(reason)
        self.item_id = item_id
        self.reason = reason


class InvalidImportTransition(Exception):
    def __init__(self, import_log, new_status):
        super().__init__(
            "Cannot move import %s from %s to %s"
            % (import_log.import_id, import_log.status, new_status)
        )
        self.current_status = import_log.status
        self.new_status = new_status
