import pytest
from unittest.mock import patch, MagicMock
from crossbridge.queue.jobs import send_relayer_event_job
from crossbridge.relayer.client import post_relayer_event
from crossbridge.relayer.notify import enqueue_relayer_event
from crossbridge.relayer.payloads import EVENT_CREATED, EVENT_DOING, build_relayer_event
from crossbridge.store.models import BridgeRequest, Doing


def _req():
    return BridgeRequest(
        to_blockchain="Algorand",
        to_token="goNEAR",
        to_address="ADDR1",
        from_token_address=None,
        from_amount_atom="0",
        status=Doing(to_txn_hash="HASH1"),
    )


def test_build_relayer_event():
    payload = build_relayer_event(EVENT_DOING, "alice", _req())
    assert payload["event"] == "request_doing"
    assert payload["requester"] == "alice"
    assert payload["request"]["status"] == {"kind": "Doing", "to_txn_hash": "HASH1"}
    assert payload["emittedAtMs"] > 0

    assert build_relayer_event(EVENT_DOING, "ghost", None)["request"] is None


@patch("crossbridge.relayer.notify.settings")
def test_enqueue_skipped_without_url(mock_settings):
    mock_settings.RELAYER_CALLBACK_URL = ""
    with patch("crossbridge.queue.rq_conn.get_queue") as mock_get_queue:
        assert enqueue_relayer_event(EVENT_CREATED, "alice") is False
        assert not mock_get_queue.called


@patch("crossbridge.relayer.notify.log")
@patch("crossbridge.relayer.notify.settings")
def test_enqueue_relayer_event(mock_settings, mock_log):
    mock_settings.RELAYER_CALLBACK_URL = "http://relayer.local/events"
    mock_queue = MagicMock()
    mock_queue.enqueue.return_value = MagicMock(id="job-1")
    with patch("crossbridge.queue.rq_conn.get_queue", return_value=mock_queue):
        assert enqueue_relayer_event(EVENT_CREATED, "alice") is True

    mock_queue.enqueue.assert_called_once_with(send_relayer_event_job, EVENT_CREATED, "alice")
    assert mock_log.call_args.kwargs["event"] == "relayer_enqueued"
    assert mock_log.call_args.kwargs["rq_job_id"] == "job-1"


@patch("crossbridge.relayer.notify.log")
@patch("crossbridge.relayer.notify.settings")
def test_enqueue_failure_does_not_raise(mock_settings, mock_log):
    mock_settings.RELAYER_CALLBACK_URL = "http://relayer.local/events"
    with patch("crossbridge.queue.rq_conn.get_queue", side_effect=ConnectionError("redis down")):
        assert enqueue_relayer_event(EVENT_CREATED, "alice") is False
    assert mock_log.call_args.kwargs["event"] == "relayer_enqueue_failed"


@patch("crossbridge.queue.jobs.log")
@patch("crossbridge.queue.jobs.post_relayer_event")
@patch("crossbridge.queue.jobs.RedisRequestStore")
def test_send_relayer_event_job(mock_store_cls, mock_post, mock_log):
    mock_store_cls.return_value.get.return_value = _req()
    send_relayer_event_job(EVENT_DOING, "alice")

    mock_store_cls.return_value.get.assert_called_with("alice")
    payload = mock_post.call_args.args[0]
    assert payload["event"] == EVENT_DOING
    assert payload["request"]["to_blockchain"] == "Algorand"
    assert mock_log.call_args_list[0].kwargs["event"] == "relayer_job_start"


@patch("crossbridge.queue.jobs.log")
@patch("crossbridge.queue.jobs.post_relayer_event", side_effect=RuntimeError("Relayer callback failed: 500"))
@patch("crossbridge.queue.jobs.RedisRequestStore")
def test_send_relayer_event_job_reraises(mock_store_cls, mock_post, mock_log):
    mock_store_cls.return_value.get.return_value = _req()
    with pytest.raises(RuntimeError):
        send_relayer_event_job(EVENT_DOING, "alice")
    assert mock_log.call_args.kwargs["event"] == "relayer_job_exception"


def _mock_client(status_code, text=""):
    resp = MagicMock(status_code=status_code, text=text)
    client = MagicMock()
    client.__enter__.return_value = client
    client.post.return_value = resp
    return client


@patch("crossbridge.relayer.client.log")
@patch("crossbridge.relayer.client.settings")
@patch("crossbridge.relayer.client.httpx.Client")
def test_post_relayer_event_success(mock_client_cls, mock_settings, mock_log):
    mock_settings.RELAYER_CALLBACK_URL = "http://relayer.local/events"
    mock_settings.RELAYER_TIMEOUT_SEC = 2
    mock_settings.RELAYER_EVENT_VERSION = "1.0.0"
    client = _mock_client(202)
    mock_client_cls.return_value = client

    assert post_relayer_event({"event": "request_done", "requester": "alice"}) == 202
    mock_client_cls.assert_called_once_with(timeout=2)
    args, kwargs = client.post.call_args
    assert args[0] == "http://relayer.local/events"
    assert kwargs["headers"]["X-Event-Version"] == "1.0.0"


@patch("crossbridge.relayer.client.log")
@patch("crossbridge.relayer.client.settings")
@patch("crossbridge.relayer.client.httpx.Client")
def test_post_relayer_event_non_2xx_raises(mock_client_cls, mock_settings, mock_log):
    mock_settings.RELAYER_CALLBACK_URL = "http://relayer.local/events"
    mock_settings.RELAYER_TIMEOUT_SEC = 2
    mock_settings.RELAYER_EVENT_VERSION = "1.0.0"
    mock_client_cls.return_value = _mock_client(500, "oops")

    with pytest.raises(RuntimeError, match="500"):
        post_relayer_event({"event": "request_done", "requester": "alice"})
    assert mock_log.call_args.kwargs["event"] == "relayer_send_failed"


@patch("crossbridge.relayer.client.settings")
def test_post_relayer_event_requires_url(mock_settings):
    mock_settings.RELAYER_CALLBACK_URL = ""
    with pytest.raises(RuntimeError, match="not set"):
        post_relayer_event({})
