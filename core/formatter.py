# =============================================================================
# core/formatter.py - From AppSignal JSON to lean tool responses
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Two steps, both pure (no I/O, no logging):
#
#     parse_*   raw JSON dict     →  dataclasses from core/models.py
#     format_*  dataclasses       →  small dicts the tools return
#
#   The AppSignal payloads are large (full environment, every event of a
#   request, ...).  The format_* functions keep only what is useful to read,
#   which is Context Budget Discipline: a search result row is eight
#   fields, not the whole sample.
#
# TOTALITY:
#   Every optional field has a default.  A missing mapping becomes {}, a
#   missing list becomes [], anything else becomes None.  Parsing never
#   raises on a missing key, and formatting the same sample twice gives the
#   same output.  The one thing parse_* does reject is a top-level payload
#   that is not a JSON object: that raises TypeError.
# =============================================================================

from typing import Any, Optional

from core.models import (
    ErrorSample,
    ExceptionDetails,
    PerformanceSample,
    Sample,
    SampleEntry,
    SampleEvent,
    SamplesResponse,
    SampleType,
)


# =============================================================================
# PARSING
# =============================================================================
def _mapping(value: Any) -> dict:
    return dict(value) if isinstance(value, dict) else {}


def _sequence(value: Any) -> list:
    return list(value) if isinstance(value, list) else []


def _require_object(data: Any) -> dict:
    # A top-level payload that is not an object (null, a list, ...) is not a
    # sample at all, so it must not parse into an all-None one.
    if not isinstance(data, dict):
        raise TypeError(f"Expected a JSON object, got {type(data).__name__}")
    return data


def _parse_exception(data: Any) -> Optional[ExceptionDetails]:
    if not isinstance(data, dict):
        return None
    return ExceptionDetails(
        message=data.get("message"),
        name=data.get("name"),
        backtrace=_sequence(data.get("backtrace")),
    )


def _parse_event(data: dict) -> SampleEvent:
    return SampleEvent(
        action=data.get("action"),
        duration=data.get("duration"),
        group=data.get("group"),
        name=data.get("name"),
        payload=_mapping(data.get("payload")),
        time=data.get("time"),
        end=data.get("end"),
        digest=data.get("digest"),
        allocation_count=data.get("allocation_count"),
    )


def _context_fields(data: dict) -> dict:
    """Fields shared by both sample variants."""
    return {
        "id": data.get("id"),
        "action": data.get("action"),
        "path": data.get("path"),
        "status": data.get("status"),
        "duration": data.get("duration"),
        "hostname": data.get("hostname"),
        "time": data.get("time"),
        "environment": _mapping(data.get("environment")),
        "params": _mapping(data.get("params")),
        "session_data": _mapping(data.get("session_data")),
    }


def parse_error_sample(data: dict) -> ErrorSample:
    """Read a sample payload as an error sample, whatever its flag says."""
    data = _require_object(data)
    return ErrorSample(
        **_context_fields(data),
        tags=_mapping(data.get("tags")),
        exception=_parse_exception(data.get("exception")),
    )


def parse_performance_sample(data: dict) -> PerformanceSample:
    data = _require_object(data)
    return PerformanceSample(
        **_context_fields(data),
        db_runtime=data.get("db_runtime"),
        view_runtime=data.get("view_runtime"),
        allocation_count=data.get("allocation_count"),
        events=[_parse_event(e) for e in _sequence(data.get("events")) if isinstance(e, dict)],
    )


def parse_sample(data: dict) -> Sample:
    """Pick the sample variant from the `is_exception` flag.

    AppSignal sends `is_exception: null` for performance samples, so any
    falsy value means "performance".
    """
    data = _require_object(data)
    if data.get("is_exception"):
        return parse_error_sample(data)
    return parse_performance_sample(data)


def parse_sample_entry(data: dict) -> SampleEntry:
    exception = data.get("exception")
    return SampleEntry(
        id=data.get("id"),
        action=data.get("action"),
        path=data.get("path"),
        duration=data.get("duration"),
        status=data.get("status"),
        time=data.get("time"),
        is_exception=bool(data.get("is_exception")),
        exception_name=exception.get("name") if isinstance(exception, dict) else None,
    )


def parse_samples_response(data: dict) -> SamplesResponse:
    data = _require_object(data)
    entries = [parse_sample_entry(e) for e in _sequence(data.get("log_entries")) if isinstance(e, dict)]
    return SamplesResponse(count=data.get("count", len(entries)), log_entries=entries)


# =============================================================================
# FORMATTING
# =============================================================================
def _format_context(sample: Sample) -> dict:
    return {
        "id": sample.id,
        "action": sample.action,
        "path": sample.path,
        "status": sample.status,
        "duration": sample.duration,
        "hostname": sample.hostname,
        "time": sample.time,
        "environment": dict(sample.environment),
        "params": dict(sample.params),
        "session_data": dict(sample.session_data),
    }


def format_error_sample(sample: ErrorSample) -> dict:
    """Project an error sample to the fields worth reading.

    Returns:
        A dict with id, action, path, status, duration, hostname, time,
        environment, params, session_data, tags and exception (None, or
        {message, name, backtrace}).
    """
    result = _format_context(sample)
    result["tags"] = dict(sample.tags)
    result["exception"] = None
    if sample.exception is not None:
        result["exception"] = {
            "message": sample.exception.message,
            "name": sample.exception.name,
            "backtrace": list(sample.exception.backtrace),
        }
    return result


def _format_event(event: SampleEvent) -> dict:
    return {
        "action": event.action,
        "duration": event.duration,
        "group": event.group,
        "name": event.name,
        "payload": dict(event.payload),
        "time": event.time,
        "end": event.end,
        "digest": event.digest,
        "allocation_count": event.allocation_count,
    }


def format_performance_sample(sample: PerformanceSample) -> dict:
    result = _format_context(sample)
    result["db_runtime"] = sample.db_runtime
    result["view_runtime"] = sample.view_runtime
    result["allocation_count"] = sample.allocation_count
    result["events"] = [_format_event(e) for e in sample.events]
    return result


def format_sample(sample: Sample) -> dict:
    """Format either sample variant, tagged with `type`.

    The `is_exception` flag is checked before any variant-only field is
    touched: error samples get `type: "error"`, everything else is
    formatted as a performance sample with `type: "performance"`.
    """
    if sample.is_exception:
        result = format_error_sample(sample)
        result["type"] = "error"
        return result

    result = format_performance_sample(sample)
    result["type"] = "performance"
    return result


def format_sample_entry(entry: SampleEntry) -> dict:
    return {
        "id": entry.id,
        "action": entry.action,
        "path": entry.path,
        "duration": entry.duration,
        "status": entry.status,
        "time": entry.time,
        "is_exception": entry.is_exception,
        "exception": entry.exception_name,
    }


def format_search_result(
    response: SamplesResponse,
    sample_type: Optional[SampleType] = None,
) -> dict:
    """Format a search page: the count plus one listing row per sample.

    When `sample_type` is given it is echoed back in the result, so the
    reader knows which collection the rows came from.
    """
    result: dict[str, Any] = {"count": response.count}
    if sample_type is not None:
        result["sample_type"] = SampleType(sample_type).value
    result["samples"] = [format_sample_entry(e) for e in response.log_entries]
    return result
