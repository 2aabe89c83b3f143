from fastapi import APIRouter, Depends
from starlette.concurrency import run_in_threadpool

from crossbridge.api.auth import attached_value, caller_identity, require_admin, require_api_key
from crossbridge.api.schemas import (
    AckResponse,
    BridgeRequestOut,
    CreateBridgeRequest,
    InitRequest,
    MarkDoingRequest,
    MarkErrorRequest,
    QueryResponse,
)
from crossbridge.core.errors import BridgeError
from crossbridge.core.lifecycle import BridgeLifecycle
from crossbridge.relayer.notify import enqueue_relayer_event
from crossbridge.relayer.payloads import EVENT_CREATED, EVENT_DOING, EVENT_DONE, EVENT_ERROR
from crossbridge.store.codec import request_to_dict
from crossbridge.store.request_repo import RedisRequestStore
from crossbridge.utils.lock import LockNotAcquired, RedisKeyLock
import crossbridge.observability.metrics as metrics

router = APIRouter(dependencies=[Depends(require_api_key)])


def get_request_store():
    return RedisRequestStore()


def get_locks():
    return RedisKeyLock()


def get_lifecycle(store=Depends(get_request_store), locks=Depends(get_locks)) -> BridgeLifecycle:
    return BridgeLifecycle.load(store, locks=locks)


def _apply(op: str, event, requester_id, fn, *args, **kwargs):
    """
    Blocking half of a mutating endpoint: the lifecycle call, its outcome
    counter and the post-commit relayer enqueue. Runs in the threadpool.
    """
    try:
        result = fn(*args, **kwargs)
    except BridgeError as e:
        metrics.record_outcome(op, e.kind)
        raise
    except LockNotAcquired:
        metrics.record_outcome(op, "Busy")
        raise
    metrics.record_outcome(op, "ok")
    if event is not None:
        enqueue_relayer_event(event, requester_id)
    return result


async def _run(op: str, event, requester_id, fn, *args, **kwargs):
    return await run_in_threadpool(_apply, op, event, requester_id, fn, *args, **kwargs)


@router.post("/init", response_model=AckResponse, dependencies=[Depends(require_admin)])
async def init_bridge(
    body: InitRequest,
    store=Depends(get_request_store),
    locks=Depends(get_locks),
):
    await _run("construct", None, None, BridgeLifecycle.construct, store, body.operator_id, locks=locks)
    return AckResponse()


@router.post("/requests", response_model=AckResponse)
async def create_request(
    body: CreateBridgeRequest,
    caller: str = Depends(caller_identity),
    value: int = Depends(attached_value),
    lifecycle: BridgeLifecycle = Depends(get_lifecycle),
):
    await _run(
        "create_request",
        EVENT_CREATED,
        caller,
        lifecycle.create_request,
        caller,
        body.to_blockchain,
        body.to_token,
        body.to_address,
        from_token_address=body.from_token_address,
        attached_value=value,
    )
    return AckResponse()


@router.post("/requests/{requester_id}/doing", response_model=AckResponse)
async def mark_doing(
    requester_id: str,
    body: MarkDoingRequest,
    caller: str = Depends(caller_identity),
    lifecycle: BridgeLifecycle = Depends(get_lifecycle),
):
    await _run("mark_doing", EVENT_DOING, requester_id, lifecycle.mark_doing, caller, requester_id, body.to_txn_hash)
    return AckResponse()


@router.post("/requests/{requester_id}/done", response_model=AckResponse)
async def mark_done(
    requester_id: str,
    caller: str = Depends(caller_identity),
    lifecycle: BridgeLifecycle = Depends(get_lifecycle),
):
    await _run("mark_done", EVENT_DONE, requester_id, lifecycle.mark_done, caller, requester_id)
    return AckResponse()


@router.post("/requests/{requester_id}/error", response_model=AckResponse)
async def mark_error(
    requester_id: str,
    body: MarkErrorRequest,
    caller: str = Depends(caller_identity),
    lifecycle: BridgeLifecycle = Depends(get_lifecycle),
):
    await _run("mark_error", EVENT_ERROR, requester_id, lifecycle.mark_error, caller, requester_id, body.error)
    return AckResponse()


@router.get("/requests/{requester_id}", response_model=QueryResponse)
async def query_request(requester_id: str, lifecycle: BridgeLifecycle = Depends(get_lifecycle)):
    """Read-only; no caller identity required."""
    request = await run_in_threadpool(lifecycle.query, requester_id)
    if request is None:
        return QueryResponse(requester=requester_id, request=None)
    return QueryResponse(
        requester=requester_id,
        request=BridgeRequestOut.model_validate(request_to_dict(request)),
    )
