from typing import Any, Dict, Optional

from crossbridge.settings import settings
from crossbridge.store.codec import request_to_dict
from crossbridge.store.models import BridgeRequest
from crossbridge.utils.time import now_ms

# Events the relayer can subscribe to
EVENT_CREATED = "request_created"
EVENT_DOING = "request_doing"
EVENT_DONE = "request_done"
EVENT_ERROR = "request_error"


def build_relayer_event(event: str, requester_id: str, request: Optional[BridgeRequest]) -> Dict[str, Any]:
    """
    Snapshot sent to the relayer. The record is re-read by the worker, so
    `request` reflects the latest committed state, not necessarily `event`'s.
    """
    return {
        "version": settings.RELAYER_EVENT_VERSION,
        "event": event,
        "requester": requester_id,
        "request": request_to_dict(request) if request is not None else None,
        "emittedAtMs": now_ms(),
    }
