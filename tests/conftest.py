import json
import os
from typing import Any, Callable, Dict

import pytest
from fastapi.testclient import TestClient

# tests/conftest.py

# Ensure tests never try to reach a real Kafka cluster unless explicitly overridden
os.environ.setdefault("BROKER_ADAPTER", "memory")
os.environ.setdefault("KAFKAGATE_LOG_DIR", "")

import kafkagate.main as main_mod
from kafkagate.broker import InMemoryBroker


@pytest.fixture(scope="session")
def app():
    """FastAPI app instance."""
    return main_mod.app


@pytest.fixture
def broker(app) -> InMemoryBroker:
    """Fresh in-memory broker wired into the app for the duration of a test."""
    b = InMemoryBroker()
    app.dependency_overrides[main_mod.get_broker] = lambda: b
    yield b
    app.dependency_overrides.pop(main_mod.get_broker, None)


@pytest.fixture
def client(app, broker) -> TestClient:
    """TestClient for the FastAPI app."""
    return TestClient(app)


@pytest.fixture
def make_body() -> Callable[..., bytes]:
    """
    Return a helper that encodes an envelope the way a producer would.
    Usage: body = make_body("new_user", {"name": "Bob"})
    """
    def _make(type_id: Any, content: Any = None, **extra: Any) -> bytes:
        envelope: Dict[str, Any] = {"type": type_id, "content": content}
        envelope.update(extra)
        return json.dumps(envelope).encode("utf-8")
    return _make


@pytest.fixture
def user_content() -> Dict[str, str]:
    return {"name": "A", "email": "a@b.com", "phone": "1", "address": "X"}


@pytest.fixture
def payment_content() -> Dict[str, Any]:
    return {"id": "p1", "amount": 5, "status": "ok"}
