"""
Byte-stable record encoding for the request store.

Records are stored as canonical JSON (sorted keys, compact separators, ASCII
only) wrapped in a versioned envelope:

    {"from_amount_atom":"0","from_token_address":null,"status":{"kind":"Created"},
     "to_address":"...","to_blockchain":"Algorand","to_token":"goNEAR","v":1}

decode_request() only accepts the canonical form of a well-formed record, so
encode_request(decode_request(raw)) == raw for anything it returns.
"""
from __future__ import annotations

import json
from typing import Any, Dict, Union

from crossbridge.store.models import (
    CREATED,
    DOING,
    DONE,
    ERROR,
    BridgeRequest,
    Created,
    Doing,
    Done,
    Error,
    RequestStatus,
)

FORMAT_VERSION = 1

_REQUEST_FIELDS = {
    "v",
    "to_blockchain",
    "to_token",
    "to_address",
    "from_token_address",
    "from_amount_atom",
    "status",
}

# kind -> payload fields
_STATUS_FIELDS = {
    CREATED: (),
    DOING: ("to_txn_hash",),
    ERROR: ("to_txn_hash", "error"),
    DONE: ("to_txn_hash",),
}


class CodecError(ValueError):
    pass


def _dumps(obj: Any) -> bytes:
    return json.dumps(obj, ensure_ascii=True, sort_keys=True, separators=(",", ":")).encode("ascii")


def _status_to_dict(status: RequestStatus) -> Dict[str, str]:
    if isinstance(status, Created):
        return {"kind": CREATED}
    if isinstance(status, Doing):
        return {"kind": DOING, "to_txn_hash": status.to_txn_hash}
    if isinstance(status, Error):
        return {"kind": ERROR, "to_txn_hash": status.to_txn_hash, "error": status.error}
    if isinstance(status, Done):
        return {"kind": DONE, "to_txn_hash": status.to_txn_hash}
    raise CodecError(f"cannot encode status {status!r}")


def _status_from_dict(data: Any) -> RequestStatus:
    if not isinstance(data, dict):
        raise CodecError("status must be an object")
    kind = data.get("kind")
    if kind not in _STATUS_FIELDS:
        raise CodecError(f"unknown status kind: {kind!r}")
    expected = {"kind", *_STATUS_FIELDS[kind]}
    if set(data.keys()) != expected:
        raise CodecError(f"status {kind} fields mismatch: {sorted(data.keys())}")
    for name in _STATUS_FIELDS[kind]:
        if not isinstance(data[name], str):
            raise CodecError(f"status field {name} must be a string")

    if kind == CREATED:
        return Created()
    if kind == DOING:
        return Doing(to_txn_hash=data["to_txn_hash"])
    if kind == ERROR:
        return Error(to_txn_hash=data["to_txn_hash"], error=data["error"])
    return Done(to_txn_hash=data["to_txn_hash"])


def request_to_dict(request: BridgeRequest) -> Dict[str, Any]:
    """Plain-dict view without the version envelope (used by API and relayer payloads)."""
    return {
        "to_blockchain": request.to_blockchain,
        "to_token": request.to_token,
        "to_address": request.to_address,
        "from_token_address": request.from_token_address,
        "from_amount_atom": request.from_amount_atom,
        "status": _status_to_dict(request.status),
    }


def encode_request(request: BridgeRequest) -> bytes:
    data = request_to_dict(request)
    data["v"] = FORMAT_VERSION
    return _dumps(data)


def decode_request(raw: Union[bytes, str]) -> BridgeRequest:
    if isinstance(raw, str):
        raw = raw.encode("utf-8")
    try:
        data = json.loads(raw)
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise CodecError(f"malformed record: {e}") from e

    if not isinstance(data, dict):
        raise CodecError("record must be an object")
    if data.get("v") != FORMAT_VERSION:
        raise CodecError(f"unsupported record version: {data.get('v')!r}")
    if set(data.keys()) != _REQUEST_FIELDS:
        raise CodecError(f"record fields mismatch: {sorted(data.keys())}")

    for name in ("to_blockchain", "to_token", "to_address", "from_amount_atom"):
        if not isinstance(data[name], str):
            raise CodecError(f"{name} must be a string")
    if data["from_token_address"] is not None and not isinstance(data["from_token_address"], str):
        raise CodecError("from_token_address must be a string or null")

    request = BridgeRequest(
        to_blockchain=data["to_blockchain"],
        to_token=data["to_token"],
        to_address=data["to_address"],
        from_token_address=data["from_token_address"],
        from_amount_atom=data["from_amount_atom"],
        status=_status_from_dict(data["status"]),
    )

    # Whitespace, key order or escaping variants decode fine but would not
    # survive a rewrite byte-for-byte.
    if encode_request(request) != raw:
        raise CodecError("record is not in canonical encoding")
    return request
