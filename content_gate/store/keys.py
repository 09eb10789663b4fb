"""Persisted key derivation for gate records."""

from dataclasses import dataclass

from content_gate.store.hash import compute_url_hash


EXTERNAL_SHOWN_PREFIX = "hasShownExternal_"
APP_SHOWN_PREFIX = "hasShownApp_"
SAVED_URL_PREFIX = "savedUrl_"
PATH_ID_PREFIX = "savedPathId_"


@dataclass(frozen=True)
class DecisionKeys:
    """Store keys used by one gate evaluation.

    Attributes:
        cache_key: Key under which the decision is stored.
        external_shown: Key of the external-content flag.
        app_shown: Key of the app-content flag.
        saved_url: Key of the resolved URL.
        path_id: Key of the path id, derived from the original target URL.
    """

    cache_key: str
    external_shown: str
    app_shown: str
    saved_url: str
    path_id: str

    @classmethod
    def derive(cls, url: str, cache_key: str | None = None) -> "DecisionKeys":
        """Derive all record keys for a target URL.

        Args:
            url: Original target URL.
            cache_key: Explicit cache key; the URL is used when omitted.

        Returns:
            DecisionKeys for the evaluation.
        """
        key = cache_key if cache_key is not None else url
        return cls(
            cache_key=key,
            external_shown=f"{EXTERNAL_SHOWN_PREFIX}{key}",
            app_shown=f"{APP_SHOWN_PREFIX}{key}",
            saved_url=f"{SAVED_URL_PREFIX}{key}",
            path_id=path_id_key(url),
        )


def path_id_key(url: str) -> str:
    """Get the path id key for an original target URL.

    Args:
        url: Original target URL.

    Returns:
        Store key for the PathIdRecord.
    """
    return f"{PATH_ID_PREFIX}{compute_url_hash(url)}"
