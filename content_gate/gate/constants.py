"""Diagnostic reasons returned with gate results."""

REASON_CACHED_APP = "Cached app content"
REASON_VALID_CACHED_EXTERNAL = "Valid cached external content"
REASON_NEW_URL_WITH_PATH_ID = "New URL with path_id"
REASON_FAILED_NEW_URL = "Failed to get new URL"
REASON_NO_INTERNET = "No internet connection"
REASON_DATE_NOT_REACHED = "Target date not reached"
REASON_DEVICE_NOT_SUPPORTED = "Device not supported"
REASON_SERVER_CHECK_FAILED = "Server check failed"
REASON_ALL_CHECKS_PASSED = "All checks passed"

# Log component name
COMPONENT_GATE = "gate"
