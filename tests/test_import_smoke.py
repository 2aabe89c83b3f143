import sys
import pytest
from unittest.mock import patch


@pytest.mark.parametrize("relayer_url", ["", "http://relayer.local/events"])
def test_import_graph_smoke(relayer_url):
    """
    Verify that the app can be imported without crashing,
    regardless of relayer configuration.
    """
    with patch.dict("os.environ", {
        "RELAYER_CALLBACK_URL": relayer_url,
        "REDIS_URL": "redis://localhost:6379/0",  # harmless default
    }):
        for mod in ("crossbridge.main", "crossbridge.queue.jobs", "crossbridge.relayer.notify"):
            sys.modules.pop(mod, None)

        try:
            import crossbridge.main
            import crossbridge.queue.jobs
            import crossbridge.relayer.notify
        except ImportError as e:
            pytest.fail(f"Import failed with relayer_url={relayer_url!r}: {e}")


def test_uvicorn_importable():
    """
    Simulate uvicorn import string loading.
    """
    from crossbridge.main import app
    assert app is not None
