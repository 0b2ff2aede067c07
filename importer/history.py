from django.core.paginator import EmptyPage, Paginator
from django.db.models import Count, Q, Sum
from django.db.models.functions import Coalesce

from .models import ImportLog

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100


def _positive_int(value, default):
    try:
        value = int(value)
    except (TypeError, ValueError):
        return default
    return value if value > 0 else default


def get_import_history(page=1, limit=DEFAULT_PAGE_SIZE):
    """
    Return one page of import attempts, newest first.

    Args:
        page (int): 1-based page number; invalid values fall back to 1.
        limit (int): Page size; invalid values fall back to 10.

    Returns:
        dict: ``items`` (serialized ImportLogs), ``total``, ``total_pages``,
        ``page`` and ``limit``. A page past the end has no items.
    """
    page = _positive_int(page, 1)
    limit = min(_positive_int(limit, DEFAULT_PAGE_SIZE), MAX_PAGE_SIZE)

    paginator = Paginator(ImportLog.objects.order_by("-created", "-pk"), limit)
    total = paginator.count
    try:
        items = [import_log.as_dict() for import_log in paginator.page(page)]
    except EmptyPage:
        items = []

    return {
        "items": items,
        "total": total,
        "total_pages": paginator.num_pages if total else 0,
        "page": page,
        "limit": limit,
    }


def get_import_statistics():
    """Totals across every import attempt, computed from the full table."""
    return ImportLog.objects.aggregate(
        total_imports=Count("pk"),
        completed_imports=Count("pk", filter=Q(status=ImportLog.Status.COMPLETED)),
        total_new_jobs=Coalesce(Sum("new_jobs"), 0),
        total_updated_jobs=Coalesce(Sum("updated_jobs"), 0),
        total_failed_jobs=Coalesce(Sum("failed_count"), 0),
    )
