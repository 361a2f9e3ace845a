from __future__ import annotations

import os
import sys
from dataclasses import replace
from pathlib import Path

import pytest


def pytest_configure():
    # Ensure project root is on sys.path for absolute imports like 'pipelines.dispatcher'
    root = Path(__file__).resolve().parents[1]
    if str(root) not in sys.path:
        sys.path.insert(0, str(root))
    # Set test environment knobs
    os.environ.setdefault("RUN_ENV", "test")
    os.environ.setdefault("ENRICH_CREDENTIALS", "test-key:test-secret")


@pytest.fixture(autouse=True)
def _fresh_settings():
    from config.settings import get_settings
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings(tmp_path):
    """Settings pointed at tmp_path, thread workers, small pools."""
    from config.settings import get_settings
    return replace(
        get_settings(),
        output_path=str(tmp_path / "output.txt"),
        log_dir=str(tmp_path / "logs"),
        log_path=str(tmp_path / "logs" / "log.jsonl"),
        error_log_path=str(tmp_path / "logs" / "error_log.jsonl"),
        raw_log_path=str(tmp_path / "logs" / "raw_log.jsonl"),
        worker_mode="thread",
        max_concurrent_requests=4,
    )


class FakeClient:
    """Scripted stand-in for EnrichmentClient: pops one result per call."""

    def __init__(self, results=None, default=None):
        self.results = list(results or [])
        self.default = default
        self.calls = []
        self.closed = False

    def enrich(self, payload):
        self.calls.append(payload)
        result = self.results.pop(0) if self.results else self.default
        if isinstance(result, Exception):
            raise result
        return result

    def close(self):
        self.closed = True


@pytest.fixture
def fake_client_cls():
    return FakeClient


SAMPLE_LINE = "ID1;01/15/1980;John Middle Doe;123 Main St;Springfield;IL;62704;217-555-0101|;john@doe.com|;"

SAMPLE_RESPONSE = {
    "person": {
        "name": {"firstName": "John", "lastName": "Doe"},
        "emails": [{"email": "jdoe@gmail.com", "isValidated": True}],
        "phones": [{"number": "(217) 555-0199", "type": "mobile"}],
        "addresses": [{"street": "9 Elm St", "city": "Chicago", "state": "IL", "zip": "60601"}],
    },
    "isError": False,
}
