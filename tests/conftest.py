"""
Shared test fixtures — catalog payloads, environment helpers, event capture.
All tests run against in-memory strings and monkeypatched os.environ.
"""

import json
import logging
import os
import sys
from typing import Dict, List

import pytest

# Ensure the project root is on the path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from cf_services import config  # noqa: E402


SERVICE_A_JSON = """{
  "serviceA": [
    {
      "name": "service_a",
      "credentials": {
        "uri": "example_uri",
        "port": 8080
      }
    }
  ]
}"""

DB_JSON = '{"db": [{"name":"db-1","label":"postgres","credentials":{"uri":"postgres://x"}}]}'

# Shaped like a real platform payload: nulls, tags, plan, volume_mounts
PLATFORM_JSON = json.dumps({
    "p.config-server": [
        {
            "binding_guid": "7d4d6f5f-4c1a-4d2b-9a55-2c1bd5a9ae33",
            "binding_name": None,
            "credentials": {
                "uri": "https://config-server.example.com",
                "client_id": "config-client",
                "client_secret": "s3cr3t",
                "access_token_uri": "https://uaa.example.com/oauth/token",
            },
            "instance_guid": "0c3e1ad0-33a7-4a88-8d8b-0d0a4f2f1f11",
            "instance_name": "config",
            "label": "p.config-server",
            "name": "config",
            "plan": "standard",
            "provider": None,
            "syslog_drain_url": None,
            "tags": ["configuration", "spring-cloud"],
            "volume_mounts": [],
        }
    ],
    "postgres": [
        {
            "name": "orders-db",
            "label": "postgres",
            "plan": "small",
            "tags": ["sql"],
            "credentials": {
                "jdbcUrl": "jdbc:postgresql://db1:5432/orders",
                "hostname": "db1",
                "port": 5432,
                "username": "orders",
                "password": "pw1",
                "name": "orders",
            },
        },
        {
            "name": "orders-db-replica",
            "label": "postgres",
            "credentials": {"hostname": "db2", "port": 5433},
        },
    ],
})


@pytest.fixture
def vcap_env(monkeypatch):
    """Set VCAP_SERVICES to the given text for the duration of a test."""

    def _set(value: str, var_name: str = config.VCAP_SERVICES) -> None:
        monkeypatch.setenv(var_name, value)

    monkeypatch.delenv(config.VCAP_SERVICES, raising=False)
    return _set


class ListHandler(logging.Handler):
    """Collects structured event payloads emitted by cf_services.tracing."""

    def __init__(self):
        super().__init__(level=logging.DEBUG)
        self.events: List[Dict] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.events.append(dict(getattr(record, "structured_data", {})))


@pytest.fixture
def captured_events():
    """Capture every event the library logs, restoring logger state afterwards."""
    logger = logging.getLogger(config.LOGGER_NAME)
    saved = (list(logger.handlers), logger.level, logger.propagate)
    handler = ListHandler()
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
    yield handler.events
    logger.handlers[:] = saved[0]
    logger.setLevel(saved[1])
    logger.propagate = saved[2]
