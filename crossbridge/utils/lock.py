from contextlib import contextmanager
import threading
import time
import uuid
from crossbridge.settings import settings
from crossbridge.observability.logging import log
from crossbridge.store.redis_conn import get_redis

_RELEASE_SCRIPT = """
if redis.call("get", KEYS[1]) == ARGV[1] then
    return redis.call("del", KEYS[1])
else
    return 0
end
"""


class LockNotAcquired(RuntimeError):
    pass


class RedisKeyLock:
    """
    Distributed lock to ensure single-writer per requester key.
    Usage: `with locks("requester:alice"): ...`

    The lease is a fixed LOCK_TTL_MS with no renewal and no fencing token.
    A body that outlives the TTL is no longer exclusive, so LOCK_TTL_MS must
    stay well above the slowest store round trip. Keep bodies to a single
    get and put.
    """

    def __init__(self, redis=None, prefix: str = "lock:", ttl_ms: int = None,
                 retries: int = None, retry_delay_sec: float = None):
        self._redis = redis
        self._prefix = prefix
        self._ttl_ms = int(ttl_ms if ttl_ms is not None else settings.LOCK_TTL_MS)
        self._retries = int(retries if retries is not None else settings.LOCK_RETRY_COUNT)
        self._retry_delay = float(retry_delay_sec if retry_delay_sec is not None else settings.LOCK_RETRY_DELAY_SEC)

    @contextmanager
    def __call__(self, key: str):
        r = self._redis if self._redis is not None else get_redis()
        lock_key = f"{self._prefix}{key}"
        token = uuid.uuid4().hex
        acquired = bool(r.set(lock_key, token, px=self._ttl_ms, nx=True))

        try:
            if not acquired:
                # Short spin; calls are bounded units of work so contention clears fast.
                for _ in range(self._retries):
                    time.sleep(self._retry_delay)
                    if r.set(lock_key, token, px=self._ttl_ms, nx=True):
                        acquired = True
                        break

                if not acquired:
                    raise LockNotAcquired(f"Could not acquire lock for {key}")

            yield
        finally:
            if acquired:
                # Release only if we still own it (TTL may have expired)
                try:
                    r.eval(_RELEASE_SCRIPT, 1, lock_key, token)
                except Exception as e:
                    # Never mask the operation's outcome; a stale lock expires after its TTL.
                    log(event="lock_release_failed", key=key, error_type=type(e).__name__)


class LocalKeyLocks:
    """In-process per-key locks for a single-process deployment or tests."""

    def __init__(self, timeout_sec: float = 5.0):
        self._guard = threading.Lock()
        self._locks = {}
        self._timeout = timeout_sec

    def _lock_for(self, key: str) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.Lock()
                self._locks[key] = lock
            return lock

    @contextmanager
    def __call__(self, key: str):
        lock = self._lock_for(key)
        if not lock.acquire(timeout=self._timeout):
            raise LockNotAcquired(f"Could not acquire lock for {key}")
        try:
            yield
        finally:
            lock.release()
