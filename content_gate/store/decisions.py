"""Typed access to gate records over a PersistentStore."""

import structlog

from content_gate.store.keys import DecisionKeys
from content_gate.store.models import DecisionRecord, PathIdRecord
from content_gate.store.protocols import PersistentStore


logger = structlog.get_logger()


class DecisionCache:
    """Reads and writes DecisionRecord and PathIdRecord fields.

    The cache never deletes anything. Flags are only ever set to True;
    ``resolved_url`` may be overwritten by re-acquisition.
    """

    def __init__(self, store: PersistentStore) -> None:
        """Initialize the decision cache.

        Args:
            store: Durable key-value store.
        """
        self._store = store
        self._log = logger.bind(component="decision_cache")

    def load(self, keys: DecisionKeys) -> DecisionRecord:
        """Load the decision record for a cache key.

        Args:
            keys: Derived record keys.

        Returns:
            DecisionRecord, with all flags False when nothing was stored.
        """
        return DecisionRecord(
            cache_key=keys.cache_key,
            external_content_shown=self._store.get_bool(keys.external_shown),
            app_content_shown=self._store.get_bool(keys.app_shown),
            resolved_url=self._store.get_string(keys.saved_url),
        )

    def mark_external(self, keys: DecisionKeys, resolved_url: str) -> None:
        """Persist the external-content decision and its resolved URL.

        Args:
            keys: Derived record keys.
            resolved_url: Final authorized URL.
        """
        self._store.set_bool(keys.external_shown, True)
        self._store.set_string(keys.saved_url, resolved_url)
        self._log.info("decision_persisted", outcome="external")

    def mark_app(self, keys: DecisionKeys) -> None:
        """Persist the in-app fallback decision.

        Args:
            keys: Derived record keys.
        """
        self._store.set_bool(keys.app_shown, True)
        self._log.info("decision_persisted", outcome="app")

    def replace_resolved_url(self, keys: DecisionKeys, resolved_url: str) -> None:
        """Overwrite the resolved URL of an external decision.

        Args:
            keys: Derived record keys.
            resolved_url: Freshly re-acquired URL.
        """
        self._store.set_string(keys.saved_url, resolved_url)
        self._log.info("resolved_url_replaced")

    def load_path_id(self, keys: DecisionKeys, url: str) -> PathIdRecord | None:
        """Load the last-seen path id for the original target URL.

        Args:
            keys: Derived record keys.
            url: Original target URL.

        Returns:
            PathIdRecord, or None when no non-empty path id was stored.
        """
        value = self._store.get_string(keys.path_id)
        if not value:
            return None
        return PathIdRecord(url=url, path_id=value)

    def save_path_id(self, keys: DecisionKeys, path_id: str) -> None:
        """Overwrite the path id for the original target URL.

        Args:
            keys: Derived record keys.
            path_id: Value of the ``pathid`` query parameter.
        """
        self._store.set_string(keys.path_id, path_id)
        self._log.debug("path_id_saved", path_id_key=keys.path_id)
