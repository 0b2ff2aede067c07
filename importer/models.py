import uuid
from logging import getLogger

from django.core.serializers.json import DjangoJSONEncoder
from django.db import models
from django.utils import timezone

from .exceptions import InvalidImportTransition

logger = getLogger(__name__)

JOB_ID_MAX_LENGTH = 1024
LABEL_MAX_LENGTH = 255


class Job(models.Model):
    """
    Canonical, deduplicated job listing. ``job_id`` is the identity taken from
    the feed (guid, id or link) and is unique across every source.
    """

    created = models.DateTimeField(auto_now_add=True)
    modified = models.DateTimeField(auto_now=True)

    job_id = models.CharField(max_length=JOB_ID_MAX_LENGTH, unique=True)
    title = models.TextField()
    company = models.TextField(default="Unknown")
    location = models.TextField(blank=True, default="")
    description = models.TextField(blank=True, default="")
    job_type = models.TextField(blank=True, default="")
    published_date = models.DateTimeField(null=True, blank=True)
    url = models.TextField(blank=True, default="", verbose_name="Source URL")
    source = models.CharField(max_length=LABEL_MAX_LENGTH, blank=True, default="")
    category = models.CharField(
        max_length=LABEL_MAX_LENGTH, blank=True, default="", db_index=True
    )
    salary = models.TextField(blank=True, default="")

    # Fields overwritten when a feed re-encounters an existing job_id
    MUTABLE_FIELDS = (
        "title",
        "company",
        "location",
        "description",
        "job_type",
        "published_date",
        "url",
        "source",
        "category",
        "salary",
        "modified",
    )

    class Meta:
        ordering = ["-published_date"]

    def __str__(self):
        return "Job(job_id=%s, title=%s)" % (self.job_id, self.title)


class ImportLog(models.Model):
    """
    Audit record for one import attempt of one feed.

    The status only ever moves forward: pending -> processing ->
    completed | failed. Redeliveries of the same work item re-enter
    processing, but nothing leaves a terminal state. An attempt stuck in
    processing (a worker crash, or an exception other than an
    ImportPipelineError such as a DatabaseError while completing) is never
    reconciled automatically; its deliveries and logs show how far it got.
    """

    class Status(models.TextChoices):
        PENDING = "pending", "Pending"
        PROCESSING = "processing", "Processing"
        COMPLETED = "completed", "Completed"
        FAILED = "failed", "Failed"

    # Keyed by the stored string values
    ALLOWED_TRANSITIONS = {
        "pending": {"processing"},
        "processing": {"processing", "completed", "failed"},
        "completed": set(),
        "failed": set(),
    }

    created = models.DateTimeField(auto_now_add=True, db_index=True)
    modified = models.DateTimeField(auto_now=True)

    import_id = models.UUIDField(default=uuid.uuid4, unique=True, editable=False)
    feed_url = models.URLField(max_length=2048)
    category = models.CharField(max_length=255, blank=True, default="")

    status = models.CharField(
        max_length=20, choices=Status.choices, default=Status.PENDING, db_index=True
    )

    total_fetched = models.PositiveIntegerField(default=0)
    new_jobs = models.PositiveIntegerField(default=0)
    updated_jobs = models.PositiveIntegerField(default=0)
    failed_count = models.PositiveIntegerField(default=0)

    failed_jobs = models.JSONField(
        help_text="Feed items rejected by validation, as item_id/reason pairs",
        encoder=DjangoJSONEncoder,
        default=list,
        blank=True,
    )
    error = models.TextField(
        help_text="Message of the error which stopped the import, if any",
        blank=True,
        default="",
    )
    logs = models.JSONField(
        help_text="Narrative notes appended while the import ran",
        encoder=DjangoJSONEncoder,
        default=list,
        blank=True,
    )

    deliveries = models.PositiveIntegerField(
        help_text="Number of times a worker picked up this import", default=0
    )
    started_at = models.DateTimeField(
        help_text="Time when a worker first started processing this import",
        null=True,
        blank=True,
    )
    completed_at = models.DateTimeField(
        help_text="Time when the import reached completed or failed",
        null=True,
        blank=True,
    )

    class Meta:
        ordering = ["-created"]

    def __str__(self):
        return "ImportLog(import_id=%s, feed_url=%s, status=%s)" % (
            self.import_id,
            self.feed_url,
            self.status,
        )

    @property
    def is_terminal(self):
        return self.status in (self.Status.COMPLETED, self.Status.FAILED)

    def _transition(self, new_status):
        if str(new_status) not in self.ALLOWED_TRANSITIONS[str(self.status)]:
            raise InvalidImportTransition(self, new_status)
        self.status = new_status

    def add_note(self, reason, do_save=True):
        self.logs.append({"reason": reason, "at": timezone.now().isoformat()})
        if do_save:
            self.save(update_fields=["logs", "modified"])

    def mark_processing(self):
        self._transition(self.Status.PROCESSING)
        self.deliveries += 1
        if self.started_at is None:
            self.started_at = timezone.now()
        self.save(update_fields=["status", "deliveries", "started_at", "modified"])

    def mark_completed(self, *, total_fetched, new_jobs, updated_jobs, failed_jobs):
        """
        Record a successful run. ``failed_jobs`` holds the items rejected by
        validation; they do not make the import itself fail.
        """
        self._transition(self.Status.COMPLETED)
        self.total_fetched = total_fetched
        self.new_jobs = new_jobs
        self.updated_jobs = updated_jobs
        self.failed_jobs = [
            {"item_id": item.item_id, "reason": item.reason} for item in failed_jobs
        ]
        self.failed_count = len(self.failed_jobs)
        self.error = ""
        self.completed_at = timezone.now()
        self.add_note(
            "Successfully processed %s. Valid: %d, Failed: %d."
            % (self.feed_url, total_fetched - self.failed_count, self.failed_count),
            do_save=False,
        )
        self.save()

    def mark_failed(self, error):
        self._transition(self.Status.FAILED)
        # The run stopped before validation results were known
        self.failed_count = 0
        self.failed_jobs = []
        self.error = str(error) or error.__class__.__name__
        self.completed_at = timezone.now()
        self.add_note("Import crashed: %s" % self.error, do_save=False)
        self.save()

    def note_retry(self, error, *, countdown, max_deliveries):
        """
        Record a failed delivery which the scheduler will redeliver. The import
        stays in processing until a later delivery finishes it.
        """
        self.error = str(error) or error.__class__.__name__
        self.add_note(
            "Delivery %d of %d failed: %s. Retrying in %ss."
            % (self.deliveries, max_deliveries, self.error, countdown),
            do_save=False,
        )
        self.save(update_fields=["error", "logs", "modified"])

    def as_dict(self):
        return {
            "import_id": str(self.import_id),
            "feed_url": self.feed_url,
            "category": self.category,
            "status": self.status,
            "total_fetched": self.total_fetched,
            "new_jobs": self.new_jobs,
            "updated_jobs": self.updated_jobs,
            "failed_count": self.failed_count,
            "failed_jobs": self.failed_jobs,
            "error": self.error,
            "logs": self.logs,
            "deliveries": self.deliveries,
            "started_at": self.started_at,
            "completed_at": self.completed_at,
            "created": self.created,
        }
