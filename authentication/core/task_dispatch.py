import logging

logger = logging.getLogger(__name__)


def dispatch_task(task, *args, fallback_sync=True, **kwargs):
    """
    Enqueue a Celery task, running it in-process when the broker is unreachable.

    Returns True when the task was queued or ran successfully, else False.
    Callers never see broker errors: email and notification fan-out must not
    break the request that triggered it.
    """
    task_name = getattr(task, "name", str(task))
    try:
        task.delay(*args, **kwargs)
        return True
    except Exception as queue_error:
        logger.error(
            "Failed to queue task %s with args=%s kwargs=%s: %s",
            task_name, args, kwargs, queue_error,
            exc_info=True,
        )
        if not fallback_sync:
            return False

    try:
        result = task.apply(args=args, kwargs=kwargs)
    except Exception as sync_error:
        logger.error("Fallback execution crashed for task %s: %s", task_name, sync_error, exc_info=True)
        return False

    if result.failed():
        logger.error("Fallback execution failed for task %s: %s", task_name, result.result)
        return False
    return True
