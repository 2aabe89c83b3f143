import time
import httpx
from crossbridge.settings import settings
from crossbridge.observability.logging import log


def post_relayer_event(payload: dict) -> int:
    """
    POST one event to the relayer. Returns the status code on 2xx, raises
    otherwise so the RQ job is marked failed and can be retried.
    """
    if not settings.RELAYER_CALLBACK_URL:
        raise RuntimeError("RELAYER_CALLBACK_URL is not set")

    headers = {
        "X-Event-Version": str(settings.RELAYER_EVENT_VERSION),
        "Content-Type": "application/json",
    }
    start = time.time()
    with httpx.Client(timeout=settings.RELAYER_TIMEOUT_SEC) as client:
        resp = client.post(settings.RELAYER_CALLBACK_URL, json=payload, headers=headers)
    elapsed_ms = int((time.time() - start) * 1000)

    if 200 <= resp.status_code < 300:
        log(
            event="relayer_send_success",
            relayerEvent=payload.get("event"),
            requester=payload.get("requester"),
            statusCode=int(resp.status_code),
            elapsedMs=elapsed_ms,
        )
        return resp.status_code

    log(
        event="relayer_send_failed",
        relayerEvent=payload.get("event"),
        requester=payload.get("requester"),
        statusCode=int(resp.status_code),
        elapsedMs=elapsed_ms,
        responseText=(resp.text or "")[:500],
    )
    raise RuntimeError(f"Relayer callback failed: {resp.status_code} {resp.text[:200]}")
