"""Redirect-resolved HTTP probes.

This module provides:
- A resolver that follows every redirect hop under one deadline
- Recording of the redirect chain and the last observed ``pathid``
- Acceptance of terminal statuses 200 through 403
- Query and redaction helpers for the ``push_id``/``pathid`` wire format
"""

from content_gate.fetch.config import ResolverConfig
from content_gate.fetch.constants import (
    ACCEPTED_STATUS_MAX,
    ACCEPTED_STATUS_MIN,
    DEFAULT_MAX_REDIRECTS,
    DEFAULT_PROBE_TIMEOUT_SECONDS,
    PATH_ID_PARAM,
    PUSH_ID_PARAM,
)
from content_gate.fetch.metrics import ResolverMetrics
from content_gate.fetch.models import (
    ProbeError,
    ProbeErrorClass,
    ProbeResult,
    is_accepted_status,
)
from content_gate.fetch.query import (
    find_last_query_param,
    get_query_param,
    set_query_param,
)
from content_gate.fetch.redact import redact_url, redact_url_credentials
from content_gate.fetch.resolver import RedirectResolver


__all__ = [
    # Resolver
    "RedirectResolver",
    "ResolverConfig",
    # Models
    "ProbeError",
    "ProbeErrorClass",
    "ProbeResult",
    "is_accepted_status",
    # Constants
    "ACCEPTED_STATUS_MAX",
    "ACCEPTED_STATUS_MIN",
    "DEFAULT_MAX_REDIRECTS",
    "DEFAULT_PROBE_TIMEOUT_SECONDS",
    "PATH_ID_PARAM",
    "PUSH_ID_PARAM",
    # Metrics
    "ResolverMetrics",
    # Query helpers
    "find_last_query_param",
    "get_query_param",
    "set_query_param",
    # Redaction
    "redact_url",
    "redact_url_credentials",
]
