from logging import getLogger

from django.db import DatabaseError, transaction

from .exceptions import StoreWriteError
from .models import Job
from .records import UpsertCounts

logger = getLogger(__name__)


class JobUpserter:
    """
    Merge job records into the Job table keyed by ``job_id``.

    One batch is written with a single INSERT ... ON CONFLICT DO UPDATE, so
    every row is either inserted whole or overwritten whole. Concurrent
    imports touching the same job_id resolve as last writer wins.

    The new and updated counts come from a lookup made before the write, so
    under READ COMMITTED two concurrent imports of the same unseen job_id can
    both count it as new. Only the counts are approximate; the stored row is
    still the last one written.
    """

    def __init__(self, using="default"):
        self.using = using

    def upsert(self, records):
        """
        Write ``records`` and report how many job_ids were new and how many
        already existed. A job_id present in the batch counts as updated even
        when none of its fields changed.

        Raises:
            StoreWriteError: If the database rejects the batch.
        """
        # One write per job_id; the last occurrence in the feed wins
        by_job_id = {}
        for record in records:
            by_job_id[record.job_id] = record

        if not by_job_id:
            return UpsertCounts()

        jobs = [Job(**record.as_model_kwargs()) for record in by_job_id.values()]

        try:
            with transaction.atomic(using=self.using):
                existing = set(
                    Job.objects.using(self.using)
                    .filter(job_id__in=list(by_job_id))
                    .values_list("job_id", flat=True)
                )
                Job.objects.using(self.using).bulk_create(
                    jobs,
                    update_conflicts=True,
                    unique_fields=["job_id"],
                    update_fields=list(Job.MUTABLE_FIELDS),
                )
        except DatabaseError as exc:
            raise StoreWriteError(
                "Bulk upsert of %d jobs failed: %s" % (len(jobs), exc)
            ) from exc

        counts = UpsertCounts(
            new=len(by_job_id) - len(existing),
            updated=len(existing),
        )
        logger.info(
            "Upserted %d jobs (%d new, %d updated)",
            len(jobs),
            counts.new,
            counts.updated,
        )
        return counts
