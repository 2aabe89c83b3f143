from __future__ import annotations

from typing import Dict, Optional

from crossbridge.settings import settings
from crossbridge.store.codec import decode_request, encode_request
from crossbridge.store.models import BridgeRequest
from crossbridge.store.redis_conn import get_redis


class InMemoryRequestStore:
    """Dict-backed store. Records are kept encoded so reads never alias writes."""

    def __init__(self) -> None:
        self._operator: Optional[str] = None
        self._requests: Dict[str, bytes] = {}

    def get_operator(self) -> Optional[str]:
        return self._operator

    def init_operator(self, operator_id: str) -> bool:
        if self._operator is not None:
            return False
        self._operator = operator_id
        return True

    def get(self, requester_id: str) -> Optional[BridgeRequest]:
        raw = self._requests.get(requester_id)
        if raw is None:
            return None
        return decode_request(raw)

    def get_raw(self, requester_id: str) -> Optional[bytes]:
        return self._requests.get(requester_id)

    def put(self, requester_id: str, request: BridgeRequest) -> None:
        self._requests[requester_id] = encode_request(request)


class RedisRequestStore:
    """
    Redis-backed store, one string key per requester plus one operator key.
    No locking here: the lifecycle controller serializes writers per requester.
    """

    def __init__(self, redis=None, prefix: Optional[str] = None) -> None:
        self._redis = redis
        self._prefix = settings.STORE_KEY_PREFIX if prefix is None else prefix

    def _r(self):
        if self._redis is None:
            self._redis = get_redis()
        return self._redis

    def _operator_key(self) -> str:
        return f"{self._prefix}operator"

    def _request_key(self, requester_id: str) -> str:
        return f"{self._prefix}request:{requester_id}"

    def get_operator(self) -> Optional[str]:
        raw = self._r().get(self._operator_key())
        if not raw:
            return None
        return raw.decode("utf-8") if isinstance(raw, (bytes, bytearray)) else str(raw)

    def init_operator(self, operator_id: str) -> bool:
        # SET NX: first writer wins, later constructs see AlreadyInitialized
        return bool(self._r().set(self._operator_key(), operator_id, nx=True))

    def get(self, requester_id: str) -> Optional[BridgeRequest]:
        raw = self._r().get(self._request_key(requester_id))
        if raw is None:
            return None
        return decode_request(raw)

    def get_raw(self, requester_id: str) -> Optional[bytes]:
        raw = self._r().get(self._request_key(requester_id))
        if raw is None:
            return None
        return raw.encode("utf-8") if isinstance(raw, str) else bytes(raw)

    def put(self, requester_id: str, request: BridgeRequest) -> None:
        self._r().set(self._request_key(requester_id), encode_request(request))
