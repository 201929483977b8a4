# =============================================================================
# core/client.py - AppSignal REST API Client
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Turns "fetch sample X" / "search samples with filters Y" into a single
#   GET against the AppSignal API and hands back the decoded JSON.  Every
#   way that can go wrong is folded into one of the errors in core/errors.py
#   before it leaves this module.
#
# HOW A CALL FLOWS:
#   1. Validate the app id          → ValidationError (no request sent)
#   2. Resolve the API token        → ConfigurationError (no request sent)
#   3. Build the URL + query string
#   4. GET with Accept: application/json
#   5. Classify the outcome:
#        2xx + JSON body            → return the decoded payload
#        non-2xx                    → UpstreamError(real status, body if JSON)
#        network / bad JSON         → UpstreamError(500, "Internal Server Error")
#
# TESTING:
#   The HTTP call goes through `opener`, which defaults to
#   urllib.request.urlopen.  Tests pass a fake opener instead, so nothing in
#   the test suite touches the network.
# =============================================================================

import http.client
import json
import logging
import urllib.error
import urllib.parse
import urllib.request
from dataclasses import fields
from typing import Any, Callable, Optional, Union

from core.auth import get_auth_token
from core.config import Config
from core.errors import UpstreamError, ValidationError
from core.models import SampleFilters, SampleType

logger = logging.getLogger(__name__)

BASE_URL = "https://appsignal.com/api"

_SEARCH_LABELS = {
    SampleType.ALL: "samples",
    SampleType.ERRORS: "error samples",
    SampleType.PERFORMANCE: "performance samples",
}


def _query_value(value: Union[str, int, float, bool]) -> str:
    # Booleans go out lowercase, the way the API documents them.
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def build_search_query(token: str, filters: SampleFilters) -> str:
    """Build the query string for a samples search.

    `token` always comes first, followed by every filter that has a value,
    in SampleFilters field order.  Filters left as None are omitted.
    """
    params = [("token", token)]
    for f in fields(filters):
        value = getattr(filters, f.name)
        if value is not None:
            params.append((f.name, _query_value(value)))
    return urllib.parse.urlencode(params)


def samples_path(app_id: str, sample_type: SampleType) -> str:
    """Return the index path for a sample collection, relative to BASE_URL."""
    app = urllib.parse.quote(str(app_id), safe="")
    if sample_type == SampleType.ALL:
        return f"/{app}/samples.json"
    return f"/{app}/samples/{sample_type.value}.json"


def _read_error_body(error: urllib.error.HTTPError) -> Optional[Any]:
    """Decode the JSON body of an error response, or None if there isn't one."""
    try:
        raw = error.read()
    except OSError:
        return None
    if not raw:
        return None
    try:
        return json.loads(raw.decode("utf-8"))
    except ValueError:
        return None


class AppSignalClient:
    """Thin client over the AppSignal samples API.

    Args:
        config: Server configuration (the API token is read from it per call).
        base_url: API root, without a trailing slash.
        opener: Callable with the urllib.request.urlopen signature.
    """

    def __init__(
        self,
        config: Config,
        base_url: str = BASE_URL,
        opener: Optional[Callable[..., Any]] = None,
    ):
        self.config = config
        self.base_url = base_url.rstrip("/")
        self._open = opener or urllib.request.urlopen

    def fetch_sample_by_id(self, sample_id: str, app_id: str) -> dict:
        """Fetch one sample (error or performance) by its id.

        Returns:
            The decoded JSON payload of the sample.

        Raises:
            ValidationError: app_id is empty.
            ConfigurationError: No API token is configured.
            UpstreamError: The request failed for any other reason.
        """
        if not app_id:
            raise ValidationError("AppSignal application ID is required.")

        logger.debug(f"Fetching sample {sample_id} from AppSignal API")
        token = get_auth_token(self.config)

        app = urllib.parse.quote(str(app_id), safe="")
        sample = urllib.parse.quote(str(sample_id), safe="")
        path = f"/{app}/samples/{sample}.json"
        query = urllib.parse.urlencode([("token", token)])

        return self._get(path, query, failure=f"Failed to fetch sample {sample_id}")

    def search_samples(
        self,
        filters: SampleFilters,
        app_id: str,
        sample_type: SampleType = SampleType.ERRORS,
    ) -> dict:
        """Search the samples index of an application.

        Args:
            filters: Optional search criteria; unset fields are not sent.
            app_id: The AppSignal application id.
            sample_type: Which collection to search.

        Returns:
            The decoded JSON payload: {"count": ..., "log_entries": [...]}.
        """
        if not app_id:
            raise ValidationError("AppSignal application ID is required.")

        sample_type = SampleType(sample_type)
        label = _SEARCH_LABELS[sample_type]
        logger.debug(f"Searching {label} in AppSignal API with filters: {filters}")
        token = get_auth_token(self.config)

        return self._get(
            samples_path(app_id, sample_type),
            build_search_query(token, filters),
            failure=f"Failed to search {label}",
        )

    def _get(self, path: str, query: str, failure: str) -> Any:
        """Issue the GET and fold every failure into an UpstreamError."""
        url = f"{self.base_url}{path}?{query}"
        request = urllib.request.Request(
            url, headers={"Accept": "application/json"}, method="GET",
        )
        # The token is in the query string; log the path only.
        logger.debug(f"GET {self.base_url}{path}")

        try:
            with self._open(request) as response:
                return json.loads(response.read().decode("utf-8"))
        except urllib.error.HTTPError as e:
            status_text = str(e.reason)
            raise UpstreamError(
                status=e.code,
                status_text=status_text,
                body=_read_error_body(e),
                message=f"{failure}: {e.code} {status_text}",
            ) from e
        except urllib.error.URLError as e:
            logger.error(f"{failure}: {e.reason}")
            raise UpstreamError(
                status=500,
                status_text="Internal Server Error",
                message=f"{failure}: {e.reason}",
            ) from e
        except (OSError, ValueError, http.client.HTTPException) as e:
            logger.error(f"{failure}: {e}")
            raise UpstreamError(
                status=500,
                status_text="Internal Server Error",
                message=f"{failure}: {e}",
            ) from e
