from django.contrib import admin, messages
from django.contrib.humanize.templatetags.humanize import naturaltime
from django.db.models import QuerySet
from django.http import HttpRequest

from .models import ImportLog, Job
from .scheduler import ImportScheduler


@admin.action(description="Import these feeds again")
def reimport_feeds(
    modeladmin: admin.ModelAdmin,
    request: HttpRequest,
    queryset: QuerySet[ImportLog],
) -> None:
    """
    Queue a new import attempt for the feed of each selected ImportLog.

    Finished attempts are never reopened; every feed gets a fresh, pending
    ImportLog instead.
    """
    scheduler = ImportScheduler()
    feeds = queryset.order_by().values_list("feed_url", "category").distinct()
    for feed_url, category in feeds:
        scheduler.enqueue_import(feed_url, category or None)
    messages.add_message(request, messages.INFO, "Queued %d imports" % len(feeds))


class CompletedFilter(admin.SimpleListFilter):
    """Filter by whether an import reached a terminal state."""

    title = "Completed at"
    parameter_name = "completed_at"

    def lookups(self, request, model_admin):
        return (("null", "Unfinished"), ("not-null", "Finished"))

    def queryset(self, request, queryset):
        if self.value() == "null":
            return queryset.filter(completed_at__isnull=True)
        elif self.value() == "not-null":
            return queryset.exclude(completed_at__isnull=True)
        return queryset


def natural_timestamp(field_name: str):
    """
    Build a `naturaltime` display function for a timestamp field, suitable for
    `list_display`.
    """

    def inner(obj):
        value = getattr(obj, field_name, None)
        if value:
            return naturaltime(value)
        return value

    inner.short_description = field_name.replace("_", " ").title()
    inner.admin_order_field = field_name
    return inner


@admin.register(ImportLog)
class ImportLogAdmin(admin.ModelAdmin):
    """
    Admin configuration for `ImportLog`.

    Everything is read-only: import attempts are written by workers only.
    """

    readonly_fields = [field.name for field in ImportLog._meta.fields]
    list_display = (
        "import_id",
        natural_timestamp("created"),
        natural_timestamp("started_at"),
        natural_timestamp("completed_at"),
        "feed_url",
        "status",
        "total_fetched",
        "new_jobs",
        "updated_jobs",
        "failed_count",
        "deliveries",
    )
    list_filter = ("status", "category", CompletedFilter)
    search_fields = ("import_id", "feed_url", "error")
    actions = (reimport_feeds,)

    def has_add_permission(self, request):
        return False


@admin.register(Job)
class JobAdmin(admin.ModelAdmin):
    """Admin configuration for `Job`."""

    readonly_fields = ("created", "modified")
    list_display = (
        "job_id",
        "title",
        "company",
        "location",
        "category",
        "source",
        natural_timestamp("published_date"),
        natural_timestamp("modified"),
    )
    list_filter = ("category", "source", "job_type")
    search_fields = ("job_id", "title", "company")
