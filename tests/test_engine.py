"""Settings engine unit tests"""

import hashlib

import pytest

from podcast_settings.engine import SettingsEngine
from podcast_settings.errors import SchemaError, ValidationError
from podcast_settings.schema import SchemaRegistry
from podcast_settings.storages import MemoryStore

SCHEMA = {
    "general": {
        "title": "General",
        "fields": [
            {
                "id": "use_post_types",
                "type": "checkbox_multi",
                "options": {"post": "Posts", "episode": "Episodes"},
                "default": [],
            },
            {"id": "include_in_main_query", "type": "checkbox", "default": ""},
            {"id": "episodes_per_page", "type": "number", "default": "10"},
        ],
    },
    "feed-details": {
        "title": "Feed details",
        "fields": [
            {"id": "data_title", "type": "text", "default": "My Site", "validator": "strip_all_tags"},
            {
                "id": "data_category",
                "type": "select",
                "options": {"": "-- None --", "Arts": "Arts", "Comedy": "Comedy"},
                "default": "",
            },
            {"id": "explicit", "type": "checkbox", "default": ""},
            {"id": "data_image", "type": "image", "default": "", "validator": "esc_url_raw"},
        ],
    },
    "security": {
        "title": "Security",
        "fields": [
            {"id": "protect", "type": "checkbox", "default": ""},
            {"id": "protection_username", "type": "text", "validator": "strip_all_tags"},
            {"id": "protection_password", "type": "text_secret", "validator": "encode_password"},
        ],
    },
    "extras": {
        "title": "Extras",
        "fields": [
            {"id": "api_password", "type": "password"},
            {"id": "no_access_message", "type": "textarea", "validator": "validate_message"},
        ],
    },
    "publishing": {
        "title": "Publishing",
        "fields": [{"id": "feed_link", "type": "feed_link"}],
    },
}


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def engine(store):
    engine = SettingsEngine(SchemaRegistry(), store)
    engine.load(SCHEMA)
    return engine


def md5(value: str) -> str:
    return hashlib.md5(value.encode("utf-8")).hexdigest()


# ========== Resolution ==========


def test_resolve_returns_default_when_nothing_stored(engine):
    assert engine.resolve("data_title") == "My Site"
    assert engine.resolve("use_post_types") == []


def test_resolve_falls_back_from_scope_to_unscoped_to_default(engine, store):
    assert engine.resolve("data_title", "12") == "My Site"

    store.set("ss_podcasting_data_title", "Main feed")
    assert engine.resolve("data_title", "12") == "Main feed"

    store.set("ss_podcasting_data_title_12", "Series feed")
    assert engine.resolve("data_title", "12") == "Series feed"
    assert engine.resolve("data_title") == "Main feed"
    assert engine.resolve("data_title", "default") == "Main feed"


def test_resolve_prefers_stored_empty_value_over_default(engine, store):
    store.set("ss_podcasting_data_title", "")
    assert engine.resolve("data_title") == ""


def test_default_values_are_not_shared(engine):
    engine.resolve("use_post_types").append("post")
    assert engine.resolve("use_post_types") == []


def test_resolve_unknown_field_raises(engine):
    with pytest.raises(SchemaError):
        engine.resolve("nope")


# ========== Single field submission ==========


def test_submit_validates_and_stores(engine, store):
    assert engine.submit("data_title", None, "<b>Show</b>") == "Show"
    assert store.get("ss_podcasting_data_title") == "Show"


def test_submit_under_scope_writes_suffixed_key(engine, store):
    engine.submit("data_title", "12", "Series")

    assert store.get("ss_podcasting_data_title_12") == "Series"
    assert not store.exists("ss_podcasting_data_title")


def test_rejected_value_is_not_written(engine, store):
    with pytest.raises(ValidationError) as exc_info:
        engine.submit("data_image", None, "javascript:alert(1)")

    assert exc_info.value.field == "data_image"
    assert not store.exists("ss_podcasting_data_image")


def test_select_rejects_unknown_option(engine):
    with pytest.raises(ValidationError):
        engine.submit("data_category", None, "Gardening")
    assert engine.submit("data_category", None, "Arts") == "Arts"


def test_checkbox_values_are_normalised(engine):
    assert engine.submit("explicit", None, "on") == "on"
    assert engine.submit("explicit", None, "") == ""
    assert engine.submit("explicit", None, True) == "on"
    assert engine.submit("explicit", None, "off") == ""


def test_multi_checkbox_keeps_known_options_once(engine):
    assert engine.submit("use_post_types", None, ["post", "episode", "post"]) == ["post", "episode"]
    assert engine.submit("use_post_types", None, "") == []
    with pytest.raises(ValidationError):
        engine.submit("use_post_types", None, ["post", "page"])


def test_number_field_must_be_numeric(engine):
    assert engine.submit("episodes_per_page", None, "25") == "25"
    with pytest.raises(ValidationError):
        engine.submit("episodes_per_page", None, "many")


def test_scalar_field_rejects_lists(engine):
    with pytest.raises(ValidationError):
        engine.submit("data_title", None, ["a", "b"])


def test_computed_field_cannot_be_written(engine):
    with pytest.raises(ValidationError):
        engine.submit("feed_link", None, "https://example.com/feed")


def test_checkbox_falsy_scalars_are_unticked(engine):
    assert engine.submit("explicit", None, 0) == ""
    assert engine.submit("explicit", None, False) == ""
    assert engine.submit("explicit", None, 1) == "on"


@pytest.mark.parametrize("raw", [5, 1.5, True, {"post": "Posts"}])
def test_multi_checkbox_rejects_non_list_values(engine, store, raw):
    with pytest.raises(ValidationError) as exc_info:
        engine.submit("use_post_types", None, raw)

    assert exc_info.value.field == "use_post_types"
    assert not store.exists("ss_podcasting_use_post_types")


def test_document_markup_strips_to_empty_text(engine):
    assert engine.submit("data_title", None, "<html></html>") == ""
    assert engine.submit("data_title", None, "<head></head>") == ""


def test_unparseable_message_is_a_validation_error(engine):
    with pytest.raises(ValidationError) as exc_info:
        engine.submit("no_access_message", None, "<html></html>")
    assert exc_info.value.field == "no_access_message"


# ========== Secrets ==========


def test_secret_is_encoded(engine, store):
    engine.submit("protection_password", None, "hunter2")
    assert store.get("ss_podcasting_protection_password") == md5("hunter2")


def test_blank_secret_keeps_stored_value(engine, store):
    engine.submit("protection_password", None, "hunter2")

    assert engine.submit("protection_password", None, "") == md5("hunter2")
    assert engine.submit("protection_password", None, "   ") == md5("hunter2")
    assert engine.submit("protection_password", None, None) == md5("hunter2")
    assert store.get("ss_podcasting_protection_password") == md5("hunter2")


def test_blank_secret_without_stored_value_writes_nothing(engine, store):
    assert engine.submit("protection_password", None, "") is None
    assert not store.exists("ss_podcasting_protection_password")


def test_password_field_is_secret(engine, store):
    assert engine.registry.field("api_password").is_secret

    engine.submit("api_password", None, "hunter2")
    assert engine.submit("api_password", None, "") == "hunter2"
    assert store.get("ss_podcasting_api_password") == "hunter2"


# ========== Section submission ==========


def test_protect_feed_end_to_end(engine, store):
    result = engine.submit_section(
        "security",
        None,
        {"protect": "on", "protection_username": "listener", "protection_password": "pw"},
    )

    assert result.ok
    assert result.saved == ["protect", "protection_username", "protection_password"]
    assert store.get("ss_podcasting_protect") == "on"
    assert store.get("ss_podcasting_protection_username") == "listener"
    assert store.get("ss_podcasting_protection_password") == md5("pw")

    # Unticked checkbox is absent from the form; the blank password keeps the secret.
    engine.submit_section(
        "security", None, {"protection_username": "listener", "protection_password": ""}
    )

    assert store.get("ss_podcasting_protect") == ""
    assert store.get("ss_podcasting_protection_password") == md5("pw")


def test_section_errors_do_not_abort_other_fields(engine, store):
    result = engine.submit_section(
        "feed-details",
        None,
        {"data_title": "Show", "data_image": "ftp://example.com/cover.png", "explicit": "on"},
    )

    assert not result.ok
    assert set(result.errors) == {"data_image"}
    assert "data_title" in result.saved
    assert store.get("ss_podcasting_data_title") == "Show"
    assert store.get("ss_podcasting_explicit") == "on"
    assert not store.exists("ss_podcasting_data_image")


def test_section_skips_missing_non_checkbox_fields(engine, store):
    result = engine.submit_section("general", None, {})

    assert result.saved == ["use_post_types", "include_in_main_query"]
    assert store.get("ss_podcasting_use_post_types") == []
    assert not store.exists("ss_podcasting_episodes_per_page")


def test_section_skips_computed_fields(engine):
    result = engine.submit_section("publishing", None, {"feed_link": "x"})
    assert result.saved == []
    assert result.ok


def test_section_submission_under_scope(engine, store):
    engine.submit_section("feed-details", "12", {"data_title": "Series"})

    assert store.get("ss_podcasting_data_title_12") == "Series"
    assert store.get("ss_podcasting_explicit_12") == ""
    assert engine.resolve("data_title") == "My Site"


def test_unknown_section_raises(engine):
    with pytest.raises(SchemaError):
        engine.submit_section("nope", None, {})


def test_section_parse_failure_does_not_abort_batch(engine, store):
    result = engine.submit_section(
        "extras", None, {"api_password": "pw", "no_access_message": "<html></html>"}
    )

    assert set(result.errors) == {"no_access_message"}
    assert result.saved == ["api_password"]
    assert store.get("ss_podcasting_api_password") == "pw"


# ========== Observers ==========


def test_observer_receives_old_and_new_values(engine):
    calls = []
    engine.observe("data_title", lambda *args: calls.append(args))

    engine.submit("data_title", None, "One")
    engine.submit("data_title", "3", "Two")
    engine.submit("data_title", None, "Three")

    assert calls == [
        ("data_title", None, None, "One"),
        ("data_title", "3", None, "Two"),
        ("data_title", None, "One", "Three"),
    ]


def test_observer_not_called_for_rejected_value(engine):
    calls = []
    engine.observe("data_image", lambda *args: calls.append(args))

    with pytest.raises(ValidationError):
        engine.submit("data_image", None, "nope")
    assert calls == []


def test_section_observer_receives_result(engine):
    results = []
    engine.observe_section("security", lambda key, scope, result: results.append((key, scope, result)))

    engine.submit_section("security", None, {"protect": "on"})

    assert len(results) == 1
    key, scope, result = results[0]
    assert (key, scope) == ("security", None)
    assert "protect" in result.saved


# ========== Validators ==========


def test_unknown_validator_is_a_schema_error():
    engine = SettingsEngine(SchemaRegistry(), MemoryStore())
    schema = {"general": {"title": "General", "fields": [{"id": "x", "type": "text", "validator": "nope"}]}}

    with pytest.raises(SchemaError, match="Unknown validator 'nope'"):
        engine.load(schema)


def test_custom_validator(store):
    engine = SettingsEngine(SchemaRegistry(), store, validators={"upper": str.upper})
    engine.load({"general": {"title": "General", "fields": [{"id": "x", "type": "text", "validator": "upper"}]}})

    assert engine.submit("x", None, "loud") == "LOUD"


def test_register_validator_applies_to_later_submissions(engine):
    engine.register_validator("strip_all_tags", lambda value: str(value).strip().upper())
    assert engine.submit("data_title", None, " show ") == "SHOW"


def test_delete_removes_exact_key(engine, store):
    engine.submit("data_title", "12", "Series")
    engine.delete("data_title", "12")

    assert engine.stored("data_title", "12") is None
    assert engine.resolve("data_title", "12") == "My Site"
