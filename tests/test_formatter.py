"""
Tests for core.formatter: parsing payloads and projecting them for tools.
"""
from __future__ import annotations

import copy

import pytest

from core.formatter import (
    format_error_sample,
    format_sample,
    format_search_result,
    parse_error_sample,
    parse_sample,
    parse_samples_response,
)
from core.models import ErrorSample, PerformanceSample, SampleType


class TestParseSample:
    def test_truthy_flag_is_error_sample(self, error_sample_payload):
        sample = parse_sample(error_sample_payload)
        assert isinstance(sample, ErrorSample)
        assert sample.is_exception is True
        assert sample.exception.name == "RuntimeError"

    def test_null_flag_is_performance_sample(self, performance_sample_payload):
        sample = parse_sample(performance_sample_payload)
        assert isinstance(sample, PerformanceSample)
        assert sample.is_exception is False
        assert sample.events[0].digest == 123456

    def test_missing_flag_is_performance_sample(self):
        assert isinstance(parse_sample({"id": "x"}), PerformanceSample)

    @pytest.mark.parametrize("payload", [None, [], "sample", 42])
    def test_non_object_payload_is_rejected(self, payload):
        with pytest.raises(TypeError):
            parse_sample(payload)
        with pytest.raises(TypeError):
            parse_error_sample(payload)

    def test_non_object_search_payload_is_rejected(self):
        with pytest.raises(TypeError):
            parse_samples_response(None)


class TestFormatErrorSample:
    def test_projects_example_sample(self, error_sample_payload):
        result = format_error_sample(parse_error_sample(error_sample_payload))

        assert result == {
            "id": "abc123",
            "action": "PostsController#show",
            "path": "/posts/1",
            "status": 500,
            "duration": 125.5,
            "hostname": "web-1",
            "time": 1700000000,
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

    def test_drops_unmodelled_fields(self, error_sample_payload):
        result = format_error_sample(parse_error_sample(error_sample_payload))
        assert "kind" not in result
        assert "request_method" not in result
        assert "end" not in result

    def test_missing_optional_fields_get_defaults(self):
        result = format_error_sample(parse_error_sample({"id": "bare", "is_exception": True}))

        assert result["environment"] == {}
        assert result["params"] == {}
        assert result["session_data"] == {}
        assert result["tags"] == {}
        assert result["exception"] is None
        assert result["duration"] is None

    def test_exception_without_backtrace(self):
        payload = {"id": "e1", "is_exception": True,
                   "exception": {"message": "boom", "name": "RuntimeError"}}
        result = format_error_sample(parse_error_sample(payload))
        assert result["exception"] == {"message": "boom", "name": "RuntimeError", "backtrace": []}

    def test_null_mappings_become_empty(self):
        payload = {"id": "e1", "environment": None, "params": None, "tags": None}
        result = format_error_sample(parse_error_sample(payload))
        assert result["environment"] == {}
        assert result["params"] == {}
        assert result["tags"] == {}


class TestFormatSample:
    def test_error_sample_is_tagged_error(self, error_sample_payload):
        result = format_sample(parse_sample(error_sample_payload))

        assert result["type"] == "error"
        assert result["exception"]["backtrace"] == ["a.rb:1"]
        assert result["tags"] == {"region": "eu"}
        assert "db_runtime" not in result
        assert "events" not in result

    def test_performance_sample_is_tagged_performance(self, performance_sample_payload):
        result = format_sample(parse_sample(performance_sample_payload))

        assert result["type"] == "performance"
        assert result["db_runtime"] == 610.2
        assert result["view_runtime"] == 150.1
        assert result["allocation_count"] == 52000
        assert result["events"] == [
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
        ]
        assert "exception" not in result
        assert "tags" not in result

    def test_performance_sample_ignores_stray_exception_fields(self):
        payload = {"id": "p1", "is_exception": False,
                   "exception": {"name": "Ignored"}, "tags": {"a": 1}}
        result = format_sample(parse_sample(payload))
        assert result["type"] == "performance"
        assert "exception" not in result
        assert "tags" not in result

    def test_bare_performance_sample_gets_defaults(self):
        result = format_sample(parse_sample({"id": "p1"}))
        assert result["events"] == []
        assert result["db_runtime"] is None
        assert result["allocation_count"] is None

    def test_event_without_optional_fields(self):
        payload = {"id": "p1", "events": [{"name": "render.action_view", "duration": 3.0}]}
        event = format_sample(parse_sample(payload))["events"][0]
        assert event["payload"] == {}
        assert event["digest"] is None
        assert event["allocation_count"] is None

    def test_formatting_is_repeatable(self, error_sample_payload, performance_sample_payload):
        for payload in (error_sample_payload, performance_sample_payload):
            original = copy.deepcopy(payload)
            sample = parse_sample(payload)
            assert format_sample(sample) == format_sample(sample)
            assert payload == original


class TestFormatSearchResult:
    def test_rows_are_reduced_to_listing_fields(self, samples_index_payload):
        result = format_search_result(parse_samples_response(samples_index_payload))

        assert result == {
            "count": 2,
            "samples": [
                {
                    "id": "abc123",
                    "action": "PostsController#show",
                    "path": "/posts/1",
                    "duration": 125.5,
                    "status": 500,
                    "time": 1700000000,
                    "is_exception": True,
                    "exception": "RuntimeError",
                },
                {
                    "id": "perf42",
                    "action": "PostsController#index",
                    "path": "/posts",
                    "duration": None,
                    "status": None,
                    "time": 1700000100,
                    "is_exception": False,
                    "exception": None,
                },
            ],
        }

    def test_sample_type_is_echoed(self, samples_index_payload):
        response = parse_samples_response(samples_index_payload)
        result = format_search_result(response, SampleType.PERFORMANCE)
        assert result["sample_type"] == "performance"
        assert list(result) == ["count", "sample_type", "samples"]

    def test_count_only_response_has_no_rows(self):
        result = format_search_result(parse_samples_response({"count": 17}))
        assert result == {"count": 17, "samples": []}

    def test_row_without_exception_record(self):
        response = parse_samples_response(
            {"count": 1, "log_entries": [{"id": "p1", "is_exception": False}]})
        row = format_search_result(response)["samples"][0]
        assert row["exception"] is None
        assert row["duration"] is None
