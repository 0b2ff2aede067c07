from logging import getLogger

from kombu.exceptions import OperationalError
from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from .history import get_import_history, get_import_statistics
from .scheduler import ImportScheduler

logger = getLogger(__name__)


@api_view(["POST"])
def trigger_import(request):
    feed_url = request.data.get("feedUrl")
    if not feed_url:
        return Response(
            {"message": "feedUrl is required"}, status=status.HTTP_400_BAD_REQUEST
        )

    try:
        import_log = ImportScheduler().enqueue_import(
            feed_url, request.data.get("category")
        )
    except OperationalError as exc:
        logger.warning("Could not queue import of %s: %s", feed_url, exc)
        return Response(
            {"message": "Import queue is unavailable, try again later"},
            status=status.HTTP_503_SERVICE_UNAVAILABLE,
        )

    return Response(
        {
            "message": "Import started successfully",
            "data": {"importId": str(import_log.import_id)},
        }
    )


@api_view(["POST"])
def import_all_feeds(request):
    import_logs = ImportScheduler().enqueue_all()
    return Response(
        {
            "message": "Started %d imports" % len(import_logs),
            "data": [
                {
                    "url": import_log.feed_url,
                    "status": "queued",
                    "importId": str(import_log.import_id),
                }
                for import_log in import_logs
            ],
        }
    )


@api_view(["GET"])
def import_history(request):
    history = get_import_history(
        request.query_params.get("page"), request.query_params.get("limit")
    )
    return Response(
        {
            "message": "History fetched successfully",
            "data": history["items"],
            "stats": get_import_statistics(),
            "pagination": {
                "total": history["total"],
                "totalPages": history["total_pages"],
                "page": history["page"],
                "limit": history["limit"],
            },
        }
    )
