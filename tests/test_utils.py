"""Tests for utils module"""

from podcast_settings.utils import canonicalify, ensure_path, sanitize, trailingslashit


class TestSanitize:
    """Tests for sanitize function"""

    def test_sanitize_long_string(self):
        assert sanitize("ghp_abc123def456xyz789") == "gh***89"

    def test_sanitize_custom_keep_chars(self):
        assert sanitize("my_secret_password", keep_chars=3) == "my_***ord"

    def test_sanitize_none(self):
        assert sanitize(None) == "***"

    def test_sanitize_empty_string(self):
        assert sanitize("") == "***"

    def test_sanitize_short_string(self):
        """Strings no longer than twice keep_chars are fully masked"""
        assert sanitize("abcd") == "***"


class TestPaths:
    def test_trailingslashit(self):
        assert trailingslashit("https://example.com") == "https://example.com/"
        assert trailingslashit("https://example.com///") == "https://example.com/"

    def test_ensure_path_creates_directory(self, tmp_path):
        path = ensure_path(tmp_path / "a" / "b")

        assert path.is_dir()
        assert path == canonicalify(tmp_path / "a" / "b")
