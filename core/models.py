# =============================================================================
# core/models.py - Data Models (the "nouns" of the system)
# =============================================================================
#
# These dataclasses mirror the AppSignal API payloads we care about.  They
# carry no behavior: parsing lives in core/formatter.py and HTTP lives in
# core/client.py.
#
# THE TWO KINDS OF SAMPLE:
#   AppSignal returns one JSON shape for both errors and slow requests, and
#   tells them apart with a single flag: `is_exception`.
#
#       is_exception truthy  →  ErrorSample        (has exception + tags)
#       anything else        →  PerformanceSample  (has runtimes + events)
#
#   `Sample` is the union of the two.  Code that needs variant-only fields
#   checks `is_exception` first, it never tests attributes with hasattr().
#
# NO PHANTOM FIELDS:
#   Only fields that end up in a tool response are modelled.  AppSignal
#   sends more (request_method, kind, ...) and we drop it on the floor.
# =============================================================================

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Union


# -----------------------------------------------------------------------------
# SampleType: which collection a search goes to
# -----------------------------------------------------------------------------
class SampleType(str, Enum):
    """Sample collections exposed by the AppSignal samples API."""

    ALL = "all"                        # GET /{app}/samples.json
    ERRORS = "errors"                  # GET /{app}/samples/errors.json
    PERFORMANCE = "performance"        # GET /{app}/samples/performance.json


# -----------------------------------------------------------------------------
# ExceptionDetails: the "what went wrong" part of an error sample
# -----------------------------------------------------------------------------
@dataclass
class ExceptionDetails:
    message: Optional[str] = None      # "undefined method `title' for nil"
    name: Optional[str] = None         # "NoMethodError"
    backtrace: list[str] = field(default_factory=list)


# -----------------------------------------------------------------------------
# SampleEvent: one timed step inside a performance sample
# -----------------------------------------------------------------------------
@dataclass
class SampleEvent:
    """An instrumented span (SQL query, view render, ...) in a request."""

    action: Optional[str] = None
    duration: Optional[float] = None
    group: Optional[str] = None        # "active_record", "action_view", ...
    name: Optional[str] = None         # "sql.active_record"
    payload: dict[str, Any] = field(default_factory=dict)
    time: Optional[float] = None       # Start time
    end: Optional[float] = None
    digest: Optional[int] = None
    allocation_count: Optional[int] = None


# -----------------------------------------------------------------------------
# ErrorSample: a request that raised an exception
# -----------------------------------------------------------------------------
@dataclass
class ErrorSample:
    id: str
    action: Optional[str] = None       # "PostsController#show"
    path: Optional[str] = None
    status: Any = None                 # HTTP status of the failed request
    duration: Optional[float] = None
    hostname: Optional[str] = None
    time: Optional[float] = None
    environment: dict[str, Any] = field(default_factory=dict)
    params: dict[str, Any] = field(default_factory=dict)
    session_data: dict[str, Any] = field(default_factory=dict)
    tags: dict[str, Any] = field(default_factory=dict)
    exception: Optional[ExceptionDetails] = None
    is_exception: bool = True


# -----------------------------------------------------------------------------
# PerformanceSample: a request captured for being slow
# -----------------------------------------------------------------------------
@dataclass
class PerformanceSample:
    id: str
    action: Optional[str] = None
    path: Optional[str] = None
    status: Any = None
    duration: Optional[float] = None
    hostname: Optional[str] = None
    time: Optional[float] = None
    environment: dict[str, Any] = field(default_factory=dict)
    params: dict[str, Any] = field(default_factory=dict)
    session_data: dict[str, Any] = field(default_factory=dict)
    db_runtime: Optional[float] = None
    view_runtime: Optional[float] = None
    allocation_count: Optional[int] = None
    events: list[SampleEvent] = field(default_factory=list)
    is_exception: bool = False


Sample = Union[ErrorSample, PerformanceSample]


# -----------------------------------------------------------------------------
# SampleEntry: one row of a samples listing
# -----------------------------------------------------------------------------
# The index endpoint returns lighter rows than the show endpoint.  Only the
# exception NAME is kept; the full exception lives on the sample itself.
# -----------------------------------------------------------------------------
@dataclass
class SampleEntry:
    id: str
    action: Optional[str] = None
    path: Optional[str] = None
    duration: Optional[float] = None
    status: Optional[int] = None
    time: Optional[float] = None
    is_exception: bool = False
    exception_name: Optional[str] = None


@dataclass
class SamplesResponse:
    """A page of search results from the samples index endpoint."""

    count: int = 0
    log_entries: list[SampleEntry] = field(default_factory=list)


# -----------------------------------------------------------------------------
# SampleFilters: optional search criteria
# -----------------------------------------------------------------------------
# Every field is optional.  A field left as None is NOT sent upstream at all
# (not even as an empty parameter).  Field order here is the order the query
# string is built in.
# -----------------------------------------------------------------------------
@dataclass
class SampleFilters:
    action_id: Optional[str] = None                   # "BlogPostsController-hash-show"
    exception: Optional[str] = None                   # "NoMethodError"
    since: Optional[Union[str, int, float]] = None    # Unix timestamp or ISO 8601
    before: Optional[Union[str, int, float]] = None
    limit: Optional[int] = None
    count_only: Optional[bool] = None
