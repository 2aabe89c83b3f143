import threading
import pytest
from unittest.mock import patch, MagicMock
from crossbridge.settings import settings
from crossbridge.utils.lock import LocalKeyLocks, LockNotAcquired, RedisKeyLock


def test_redis_lock_acquires_and_releases():
    r = MagicMock()
    r.set.return_value = True
    locks = RedisKeyLock(redis=r, ttl_ms=1000, retries=0, retry_delay_sec=0)

    with locks("requester:alice"):
        args, kwargs = r.set.call_args
        assert args[0] == "lock:requester:alice"
        assert kwargs == {"px": 1000, "nx": True}

    token = r.set.call_args.args[1]
    r.eval.assert_called_once()
    assert r.eval.call_args.args[1:] == (1, "lock:requester:alice", token)


@patch("crossbridge.utils.lock.time.sleep")
def test_redis_lock_spins_then_acquires(mock_sleep):
    r = MagicMock()
    r.set.side_effect = [None, None, True]
    locks = RedisKeyLock(redis=r, retries=5, retry_delay_sec=0.1)

    with locks("requester:alice"):
        pass
    assert r.set.call_count == 3
    assert mock_sleep.call_count == 2
    r.eval.assert_called_once()


@patch("crossbridge.utils.lock.time.sleep")
def test_redis_lock_gives_up_without_running_body(mock_sleep):
    r = MagicMock()
    r.set.return_value = None
    locks = RedisKeyLock(redis=r, retries=3, retry_delay_sec=0.1)
    body = MagicMock()

    with pytest.raises(LockNotAcquired):
        with locks("requester:alice"):
            body()
    assert not body.called
    assert r.set.call_count == 4
    assert not r.eval.called


def test_redis_lock_released_when_body_raises():
    r = MagicMock()
    r.set.return_value = True
    locks = RedisKeyLock(redis=r, retries=0)

    with pytest.raises(ValueError):
        with locks("k"):
            raise ValueError("boom")
    r.eval.assert_called_once()


@patch("crossbridge.utils.lock.log")
def test_redis_lock_release_failure_is_logged_not_raised(mock_log):
    r = MagicMock()
    r.set.return_value = True
    r.eval.side_effect = ConnectionError("gone")
    locks = RedisKeyLock(redis=r, retries=0)

    with locks("k"):
        pass
    assert mock_log.call_args.kwargs["event"] == "lock_release_failed"


def test_local_locks_are_per_key():
    locks = LocalKeyLocks(timeout_sec=0.05)
    with locks("a"):
        with locks("b"):
            pass


def test_local_lock_times_out_when_held():
    locks = LocalKeyLocks(timeout_sec=0.05)
    held = threading.Event()
    release = threading.Event()

    def holder():
        with locks("a"):
            held.set()
            release.wait(2)

    t = threading.Thread(target=holder)
    t.start()
    try:
        assert held.wait(2)
        with pytest.raises(LockNotAcquired):
            with locks("a"):
                pass
    finally:
        release.set()
        t.join()

    with locks("a"):
        pass


def test_redis_lock_lease_defaults_to_configured_ttl():
    r = MagicMock()
    r.set.return_value = True
    with patch.object(settings, "LOCK_TTL_MS", 1234):
        locks = RedisKeyLock(redis=r, retries=0)
    with locks("k"):
        pass
    assert r.set.call_args.kwargs["px"] == 1234
    assert "LOCK_TTL_MS" in RedisKeyLock.__doc__
