# ==============================================
# Pytest Configuration and Fixtures
# ==============================================
#
# Shared fixtures for all tests.
#
# FIXTURES:
# ---------
# - clean_environment (autouse)
#     Unset SOURCE, proxy variables and LOGSHIP_* settings,
#     and drop the cached config, so no test sees the host's.
#
# - log_records
#     Capture loguru records emitted during a test.
#
# - sample_raw_record / app_config / fake_client / failing_client
#
# ==============================================

import os

import pytest
from loguru import logger

from logship.config import AppConfig, BufferConfig, PluginConfig, reset_config
from logship.errors import DeliveryError

PROXY_VARIABLES = [
    "HTTP_PROXY", "HTTPS_PROXY", "NO_PROXY", "ALL_PROXY",
    "http_proxy", "https_proxy", "no_proxy", "all_proxy",
]


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    monkeypatch.delenv("SOURCE", raising=False)
    for name in PROXY_VARIABLES:
        monkeypatch.delenv(name, raising=False)
    for name in list(os.environ):
        if name.startswith("LOGSHIP_"):
            monkeypatch.delenv(name, raising=False)
    reset_config()
    yield
    reset_config()


@pytest.fixture
def log_records():
    """Collect loguru records (dicts with "level" and "message")."""
    records = []
    handler_id = logger.add(lambda message: records.append(message.record), level="DEBUG")
    yield records
    logger.remove(handler_id)


@pytest.fixture
def sample_raw_record():
    """A record shaped like the agent emits it: byte values, nested maps."""
    return {
        "log": b"GET /healthz 200",
        "level": "info",
        "pid": 4312,
        "kubernetes": {
            b"pod_name": b"web-6f7d9",
            "labels": {"app": b"web", "tier": "frontend"},
        },
    }


@pytest.fixture
def app_config():
    return AppConfig(
        plugin=PluginConfig(version="1.2.3", source="test-source"),
        buffer=BufferConfig(buffer_size=3, buffer_timeout_seconds=3600.0),
    )


class FakeClient:
    def __init__(self, fail_with=None):
        self.payloads = []
        self.fail_with = fail_with

    def send(self, payload):
        if self.fail_with is not None:
            raise DeliveryError(self.fail_with, status_code=503)
        self.payloads.append(payload)
        return 202


@pytest.fixture
def fake_client():
    return FakeClient()


@pytest.fixture
def failing_client():
    return FakeClient(fail_with="HTTP 503 from endpoint")
