from crossbridge.observability.logging import log
from crossbridge.relayer.client import post_relayer_event
from crossbridge.relayer.payloads import build_relayer_event
from crossbridge.store.request_repo import RedisRequestStore


def send_relayer_event_job(event: str, requester_id: str):
    """
    Background job: reload the requester's record and push it to the relayer.
    """
    try:
        log(event="relayer_job_start", relayerEvent=event, requester=requester_id)
        request = RedisRequestStore().get(requester_id)
        payload = build_relayer_event(event, requester_id, request)
        post_relayer_event(payload)
    except Exception as e:
        log(event="relayer_job_exception", relayerEvent=event, requester=requester_id, error=str(e))
        raise
