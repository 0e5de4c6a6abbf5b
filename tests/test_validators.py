"""Named validator tests"""

import hashlib

import pytest

from podcast_settings.validators import (
    VALIDATORS,
    encode_password,
    esc_url_raw,
    strip_all_tags,
    validate_colour,
    validate_message,
    validate_slug,
)


def test_strip_all_tags_removes_markup_and_scripts():
    assert strip_all_tags("<b>Hello</b> <script>alert(1)</script>world") == "Hello world"


def test_strip_all_tags_handles_empty_values():
    assert strip_all_tags(None) == ""
    assert strip_all_tags("   ") == ""


def test_strip_all_tags_keeps_plain_text():
    assert strip_all_tags("  My Podcast  ") == "My Podcast"


@pytest.mark.parametrize("markup", ["<html></html>", "<head></head>"])
def test_strip_all_tags_document_markup_is_empty(markup):
    assert strip_all_tags(markup) == ""


def test_validate_message_rejects_document_markup():
    with pytest.raises(ValueError):
        validate_message("<html></html>")


def test_esc_url_raw_accepts_http_urls():
    assert esc_url_raw("https://example.com/feed") == "https://example.com/feed"
    assert esc_url_raw("http://example.com/a b") == "http://example.com/a%20b"
    assert esc_url_raw("") == ""


@pytest.mark.parametrize("url", ["javascript:alert(1)", "ftp://example.com", "not a url"])
def test_esc_url_raw_rejects_other_schemes(url):
    with pytest.raises(ValueError):
        esc_url_raw(url)


def test_encode_password_is_md5_hex():
    assert encode_password("secret") == hashlib.md5(b"secret").hexdigest()
    assert encode_password("") == ""


def test_validate_message_keeps_allowed_tags():
    result = validate_message(
        '<p>No <a href="https://example.com" onclick="steal()">access</a></p>'
        "<script>bad()</script>"
    )

    assert '<a href="https://example.com">access</a>' in result
    assert "<p>" in result
    assert "script" not in result
    assert "onclick" not in result


def test_validate_message_unwraps_disallowed_tags():
    result = validate_message("<div>Go <em>away</em></div>")

    assert "<div>" not in result
    assert "<em>away</em>" in result
    assert result.startswith("Go ")


def test_validate_message_removes_unsafe_links():
    result = validate_message('<a href="javascript:alert(1)">click</a>')

    assert "javascript" not in result
    assert "click" in result


def test_validate_message_plain_text():
    assert validate_message("You are not permitted to view this podcast feed.") == (
        "You are not permitted to view this podcast feed."
    )
    assert validate_message("") == ""


def test_validate_slug():
    assert validate_slug("My Series") == "my-series"
    assert validate_slug("") == ""


def test_validate_colour():
    assert validate_colour("#FFF") == "#fff"
    assert validate_colour("#00d4f7") == "#00d4f7"
    assert validate_colour("") == ""
    with pytest.raises(ValueError):
        validate_colour("red")


def test_registry_contains_aliases():
    assert VALIDATORS["wp_strip_all_tags"] is strip_all_tags
    assert VALIDATORS["esc_url_raw"] is esc_url_raw
