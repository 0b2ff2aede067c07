import logging

from celery import current_task


class CeleryTaskIDFilter(logging.Filter):
    """
    Put the id of the Celery task being executed on each record as
    ``task_id``. Import work items use the import id as their task id, so
    worker log lines can be matched to their ImportLog.
    """

    def filter(self, record):
        task_id = current_task.request.id if current_task else None
        record.task_id = f"/[{task_id}]" if task_id else ""
        return True
