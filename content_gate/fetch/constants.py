"""HTTP and wire constants for redirect resolution."""

# Terminal status codes accepted as authorized (inclusive on both ends).
# 401 and 403 count as authorized; this is upstream product policy.
ACCEPTED_STATUS_MIN = 200
ACCEPTED_STATUS_MAX = 403

# Query parameter names understood by the upstream server
PUSH_ID_PARAM = "push_id"
PATH_ID_PARAM = "pathid"

# Default probe bounds
DEFAULT_PROBE_TIMEOUT_SECONDS = 12.0
DEFAULT_MAX_REDIRECTS = 20

# Supported URL schemes
VALID_URL_SCHEMES = ("http", "https")
