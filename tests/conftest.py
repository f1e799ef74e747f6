import os
from typing import Any, Dict, Callable
import pytest

# tests/conftest.py

# Keep log output on the console only unless a test opts in
os.environ.pop("MSGCONTRACT_LOG_DIR", None)

from msgcontract.protocol import registry as demo_registry


@pytest.fixture(scope="session")
def registry():
    """The join/leave/error protocol served by the demo host."""
    return demo_registry


@pytest.fixture
def contracts(registry):
    """(to_host, to_peer) contracts of the demo protocol."""
    return registry.contracts


@pytest.fixture
def make_frame() -> Callable[..., Dict[str, Any]]:
    """
    Return a helper to construct an inbound frame.
    Usage: frame = make_frame("join", id="1", name="a")
    """
    def _make(message_name: str, **payload: Any) -> Dict[str, Any]:
        return {"type": message_name, "payload": payload}
    return _make


@pytest.fixture(autouse=True)
def isolate_env(monkeypatch):
    """
    Ensure config keys are stable across tests; individual tests can
    monkeypatch their own values.
    """
    for key in ("MSGCONTRACT_EXTRA_FIELDS", "MSGCONTRACT_LOG_LEVEL", "MSGCONTRACT_CHANNEL_MAXSIZE", "MSGCONTRACT_LOG_DIR"):
        monkeypatch.delenv(key, raising=False)
    yield
