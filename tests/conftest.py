"""
Shared fixtures for the AppSignal MCP tests.
"""
from __future__ import annotations

from typing import Any

import pytest

from core.client import AppSignalClient
from core.config import Config

from fakes import TEST_TOKEN, FakeOpener


@pytest.fixture
def config() -> Config:
    return Config(api_token=TEST_TOKEN)


@pytest.fixture
def make_client(config: Config):
    """Build a client wired to a FakeOpener: make_client(payload=..., status=...)."""

    def _make(config: Config = config, **opener_kwargs: Any):
        opener = FakeOpener(**opener_kwargs)
        return AppSignalClient(config, opener=opener), opener

    return _make


@pytest.fixture
def error_sample_payload() -> dict[str, Any]:
    return {
        "id": "abc123",
        "action": "PostsController#show",
        "path": "/posts/1",
        "status": 500,
        "duration": 125.5,
        "hostname": "web-1",
        "time": 1700000000,
        "end": 1700000001,
        "is_exception": True,
        "kind": "http_request",
        "request_method": "GET",
        "environment": {"RAILS_ENV": "production"},
        "params": {"id": "1"},
        "session_data": {"user_id": 7},
        "tags": {"region": "eu"},
        "exception": {
            "message": "boom",
            "name": "RuntimeError",
            "backtrace": ["a.rb:1"],
        },
    }


@pytest.fixture
def performance_sample_payload() -> dict[str, Any]:
    return {
        "id": "perf42",
        "action": "PostsController#index",
        "path": "/posts",
        "status": 200,
        "duration": 812.0,
        "hostname": "web-2",
        "time": 1700000100,
        "end": 1700000101,
        "is_exception": None,
        "exception": None,
        "db_runtime": 610.2,
        "view_runtime": 150.1,
        "allocation_count": 52000,
        "environment": {},
        "params": {},
        "session_data": {},
        "events": [
            {
                "action": "PostsController#index",
                "duration": 600.0,
                "group": "active_record",
                "name": "sql.active_record",
                "payload": {"sql": "SELECT * FROM posts"},
                "time": 1700000100.1,
                "end": 1700000100.7,
                "digest": 123456,
                "allocation_count": 900,
            }
        ],
    }


@pytest.fixture
def samples_index_payload() -> dict[str, Any]:
    return {
        "count": 2,
        "log_entries": [
            {
                "id": "abc123",
                "action": "PostsController#show",
                "path": "/posts/1",
                "duration": 125.5,
                "status": 500,
                "time": 1700000000,
                "is_exception": True,
                "exception": {"name": "RuntimeError"},
            },
            {
                "id": "perf42",
                "action": "PostsController#index",
                "path": "/posts",
                "duration": None,
                "status": None,
                "time": 1700000100,
                "is_exception": False,
                "exception": {"name": None},
            },
        ],
    }
