from crossbridge.observability.logging import log
from crossbridge.settings import settings


def enqueue_relayer_event(event: str, requester_id: str) -> bool:
    """
    Queue a relayer notification for a committed create/transition.
    Returns True when a job was enqueued. Failures are logged and never
    propagate: the state change is already durable.
    """
    if not settings.RELAYER_CALLBACK_URL:
        return False

    # Lazy imports keep rq out of the request path when notifications are off
    from crossbridge.queue.jobs import send_relayer_event_job
    from crossbridge.queue.rq_conn import get_queue

    try:
        q = get_queue()
        job = q.enqueue(send_relayer_event_job, event, requester_id)
    except Exception as e:
        log(event="relayer_enqueue_failed", relayerEvent=event, requester=requester_id,
            errorType=type(e).__name__, error=str(e)[:200])
        return False

    log(event="relayer_enqueued", relayerEvent=event, requester=requester_id,
        rq_job_id=getattr(job, "id", "") or "")
    return True
