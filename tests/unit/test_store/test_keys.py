"""Unit tests for record key derivation."""

from content_gate.store.hash import compute_url_hash
from content_gate.store.keys import DecisionKeys, path_id_key


URL = "https://gate.example/landing?src=app"


class TestDecisionKeys:
    """Tests for DecisionKeys.derive."""

    def test_defaults_to_url(self) -> None:
        """Test the URL is the cache key when none is given."""
        keys = DecisionKeys.derive(URL)

        assert keys.cache_key == URL
        assert keys.external_shown == f"hasShownExternal_{URL}"
        assert keys.app_shown == f"hasShownApp_{URL}"
        assert keys.saved_url == f"savedUrl_{URL}"

    def test_explicit_cache_key(self) -> None:
        """Test an explicit cache key replaces the URL in decision keys."""
        keys = DecisionKeys.derive(URL, cache_key="promo-2026")

        assert keys.cache_key == "promo-2026"
        assert keys.external_shown == "hasShownExternal_promo-2026"
        assert keys.saved_url == "savedUrl_promo-2026"

    def test_path_id_key_follows_url_not_cache_key(self) -> None:
        """Test the path id key is derived from the original URL."""
        by_url = DecisionKeys.derive(URL)
        by_key = DecisionKeys.derive(URL, cache_key="promo-2026")

        assert by_url.path_id == by_key.path_id == path_id_key(URL)

    def test_empty_cache_key_is_used(self) -> None:
        """Test an empty explicit cache key is kept as given."""
        assert DecisionKeys.derive(URL, cache_key="").cache_key == ""


class TestComputeUrlHash:
    """Tests for compute_url_hash."""

    def test_deterministic(self) -> None:
        """Test the hash is stable across calls."""
        assert compute_url_hash(URL) == compute_url_hash(URL)

    def test_known_value(self) -> None:
        """Test the hash is a SHA-256 prefix."""
        # sha256("abc")
        assert compute_url_hash("abc") == "ba7816bf8f01cfea"

    def test_distinct_urls(self) -> None:
        """Test different URLs hash differently."""
        assert compute_url_hash(URL) != compute_url_hash(URL + "&x=1")
