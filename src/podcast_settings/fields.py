"""The podcast settings surface: sections and fields."""

from datetime import date
from typing import Optional

from .config import SiteConfig
from .consts import SECTION_FEED_DETAILS, SECTION_GENERAL, SECTION_HOSTING
from .i18n import gettext as _
from .schema import Schema, parse_schema

# Post types that never carry podcast episodes
EXCLUDED_POST_TYPES = (
    "page",
    "attachment",
    "revision",
    "nav_menu_item",
    "wooframework",
    "podcast",
)

ITUNES_CATEGORIES = (
    "Arts",
    "Business",
    "Comedy",
    "Education",
    "Games & Hobbies",
    "Government & Organizations",
    "Health",
    "Kids & Family",
    "Music",
    "News & Politics",
    "Religion & Spirituality",
    "Science & Medicine",
    "Society & Culture",
    "Sports & Recreation",
    "Technology",
    "TV & Film",
)

# Sub-categories in feed order, each listed under its parent category
ITUNES_SUBCATEGORIES = (
    ("Arts", ("Design", "Fashion & Beauty", "Food", "Literature", "Performing Arts", "Visual Arts")),
    ("Business", ("Business News", "Careers", "Investing", "Management & Marketing", "Shopping")),
    (
        "Education",
        ("Education", "Education Technology", "Higher Education", "K-12", "Language Courses", "Training"),
    ),
    ("Games & Hobbies", ("Automotive", "Aviation", "Hobbies", "Other Games", "Video Games")),
    ("Government & Organizations", ("Local", "National", "Non-Profit", "Regional")),
    ("Health", ("Alternative Health", "Fitness & Nutrition", "Self-Help", "Sexuality")),
    (
        "Religion & Spirituality",
        ("Buddhism", "Christianity", "Hinduism", "Islam", "Judaism", "Other", "Spirituality"),
    ),
    ("Science & Medicine", ("Medicine", "Natural Sciences", "Social Sciences")),
    ("Society & Culture", ("History", "Personal Journals", "Philosophy", "Places & Travel")),
    ("Sports & Recreation", ("Amateur", "College & High School", "Outdoor", "Professional")),
    ("Technology", ("Gadgets", "Tech News", "Podcasting", "Software How-To")),
)


def category_options() -> list[dict]:
    options = [{"value": "", "label": _("-- None --")}]
    options.extend({"value": c, "label": _(c)} for c in ITUNES_CATEGORIES)
    return options


def subcategory_options() -> list[dict]:
    options = [{"value": "", "label": _("-- None --")}]
    for group, subcategories in ITUNES_SUBCATEGORIES:
        options.extend(
            {"value": sub, "label": _(sub), "group": _(group)} for sub in subcategories
        )
    return options


def post_type_options(post_types: dict[str, str]) -> list[dict]:
    return [
        {"value": name, "label": label}
        for name, label in post_types.items()
        if name not in EXCLUDED_POST_TYPES
    ]


def _category_fields(ordinal: str, suffix: str) -> list[dict]:
    return [
        {
            "id": f"data_category{suffix}",
            "label": _(f"{ordinal} Category"),
            "description": _(f"Your podcast's {ordinal.lower()} category."),
            "type": "select",
            "options": category_options(),
            "default": "",
            "validator": "strip_all_tags",
        },
        {
            "id": f"data_subcategory{suffix}",
            "label": _(f"{ordinal} Sub-Category"),
            "description": _(
                f"Your podcast's {ordinal.lower()} sub-category (if available) - must be a "
                f"sub-category of the {ordinal.lower()} category selected above."
            ),
            "type": "select",
            "options": subcategory_options(),
            "default": "",
            "validator": "strip_all_tags",
        },
    ]


def _url_field(field_id: str, label: str, description: str) -> dict:
    return {
        "id": field_id,
        "label": label,
        "description": description,
        "type": "text",
        "default": "",
        "placeholder": label,
        "validator": "esc_url_raw",
        "class": "regular-text",
    }


def _redirect_fields(description: str) -> list[dict]:
    return [
        {
            "id": "redirect_feed",
            "label": _("Redirect podcast feed to new URL"),
            "description": description,
            "type": "checkbox",
            "default": "",
            "validator": "strip_all_tags",
        },
        _url_field(
            "new_feed_url", _("New podcast feed URL"), _("Your podcast feed's new URL.")
        ),
    ]


def general_section(post_types: dict[str, str]) -> dict:
    return {
        "title": _("General"),
        "description": _("General Settings"),
        "fields": [
            {
                "id": "use_post_types",
                "label": _("Podcast post types"),
                "description": _(
                    "Use this setting to enable podcast functions on any post type - this "
                    "will add all podcast posts from the specified types to your podcast feed."
                ),
                "type": "checkbox_multi",
                "options": post_type_options(post_types),
                "default": [],
            },
            {
                "id": "include_in_main_query",
                "label": _("Include podcast in main blog"),
                "description": _(
                    "This setting may behave differently in each theme, so test it carefully "
                    "after activation - it will add the 'podcast' post type to your site's "
                    "main query so that your podcast episodes appear on your home page along "
                    "with your blog posts."
                ),
                "type": "checkbox",
                "default": "",
            },
            {
                "id": "player_locations",
                "label": _("Media player locations"),
                "description": _(
                    "Select where to show the podcast media player along with the episode "
                    "data (download link, duration and file size)"
                ),
                "type": "checkbox_multi",
                "options": {
                    "content": _("Full content"),
                    "excerpt": _("Excerpt"),
                    "excerpt_embed": _("oEmbed Excerpt"),
                },
                "default": [],
            },
            {
                "id": "player_content_location",
                "label": _("Media player position"),
                "description": _(
                    "Select whether to display the media player above or below the full post content."
                ),
                "type": "radio",
                "options": {"above": _("Above content"), "below": _("Below content")},
                "default": "above",
            },
            {
                "id": "player_content_visibility",
                "label": _("Media player visibility"),
                "description": _(
                    "Select whether to display the media player to everybody or only logged in users."
                ),
                "type": "radio",
                "options": {"all": _("Everybody"), "membersonly": _("Only logged in users")},
                "default": "all",
            },
            {
                "id": "itunes_fields_enabled",
                "label": _("Enable iTunes fields"),
                "description": _(
                    "Turn this on to enable the iTunes iOS11 specific fields on each episode."
                ),
                "type": "checkbox",
                "default": "",
            },
            {
                "id": "player_meta_data_enabled",
                "label": _("Enable Player meta data"),
                "description": _(
                    "Turn this on to enable player meta data underneath the player. "
                    "(download link, episode duration and date recorded)."
                ),
                "type": "checkbox",
                "default": "on",
            },
            {
                "id": "player_style",
                "label": _("Media player style"),
                "description": _("Select the style of media player you wish to display on your site."),
                "type": "radio",
                "options": {
                    "standard": _("Standard Compact Player"),
                    "larger": _("HTML5 Player With Album Art"),
                },
                "default": "standard",
            },
            {
                "id": "player_background_skin_colour",
                "label": _("Background skin colour"),
                "description": _("Only applicable if using the new HTML5 player"),
                "type": "colour-picker",
                "default": "#222222",
                "class": "ssp-color-picker",
                "validator": "validate_colour",
            },
            {
                "id": "player_wave_form_colour",
                "label": _("Player progress bar colour"),
                "description": _("Only applicable if using the new HTML5 player"),
                "type": "colour-picker",
                "default": "#fff",
                "class": "ssp-color-picker",
                "validator": "validate_colour",
            },
            {
                "id": "player_wave_form_progress_colour",
                "label": _("Player progress bar progress colour"),
                "description": _("Only applicable if using the new HTML5 player"),
                "type": "colour-picker",
                "default": "#00d4f7",
                "class": "ssp-color-picker",
                "validator": "validate_colour",
            },
        ],
    }


def feed_details_section(site: SiteConfig, today: Optional[date] = None) -> dict:
    today = today or date.today()
    copyright_line = f"© {today.year} {site.name}".rstrip()

    def text(field_id, label, description, default, css_class="large-text"):
        return {
            "id": field_id,
            "label": label,
            "description": description,
            "type": "text",
            "default": default,
            "placeholder": default,
            "class": css_class,
            "validator": "strip_all_tags",
        }

    return {
        "title": _("Feed details"),
        "description": _(
            "This data will be used in the feed for your podcast so your listeners will "
            "know more about it before they subscribe. All of these fields are optional, "
            "but it is recommended that you fill in as many of them as possible. Blank "
            "fields will use the assigned defaults in the feed."
        ),
        "fields": [
            text("data_title", _("Title"), _("Your podcast title."), site.name),
            text("data_subtitle", _("Subtitle"), _("Your podcast subtitle."), site.description),
            text("data_author", _("Author"), _("Your podcast author."), site.name),
            *_category_fields("Primary", ""),
            *_category_fields("Secondary", "2"),
            *_category_fields("Tertiary", "3"),
            {
                "id": "data_description",
                "label": _("Description/Summary"),
                "description": _("A description/summary of your podcast - no HTML allowed."),
                "type": "textarea",
                "default": site.description,
                "placeholder": site.description,
                "validator": "strip_all_tags",
                "class": "large-text",
            },
            {
                "id": "data_image",
                "label": _("Cover Image"),
                "description": _(
                    "Your podcast cover image - must have a minimum size of 1400x1400 px."
                ),
                "type": "image",
                "default": "",
                "validator": "esc_url_raw",
            },
            text("data_owner_name", _("Owner name"), _("Podcast owner's name."), site.name),
            text(
                "data_owner_email",
                _("Owner email address"),
                _("Podcast owner's email address."),
                site.admin_email,
            ),
            text(
                "data_language",
                _("Language"),
                _("Your podcast's language in ISO-639-1 format."),
                site.language,
                css_class="all-options",
            ),
            text("data_copyright", _("Copyright"), _("Copyright line for your podcast."), copyright_line),
            {
                "id": "explicit",
                "label": _("Explicit"),
                "description": _("To mark this podcast as an explicit podcast, check this box."),
                "type": "checkbox",
                "default": "",
                "validator": "strip_all_tags",
            },
            {
                "id": "complete",
                "label": _("Complete"),
                "description": _(
                    "Mark if this podcast is complete or not. Only do this if no more "
                    "episodes are going to be added to this feed."
                ),
                "type": "checkbox",
                "default": "",
                "validator": "strip_all_tags",
            },
            {
                "id": "publish_date",
                "label": _("Source for publish date"),
                "description": _(
                    'Use the "Published date" of the post or use "Date recorded" from the '
                    "Podcast episode details."
                ),
                "type": "radio",
                "options": {"published": _("Published date"), "recorded": _("Recorded date")},
                "default": "published",
            },
            {
                "id": "consume_order",
                "label": _("Show Type"),
                "description": _("The order your podcast episodes will be listed."),
                "type": "select",
                "options": {
                    "": _("Please Select"),
                    "episodic": _("Episodic"),
                    "serial": _("Serial"),
                },
                "default": "",
            },
            *_redirect_fields(_("Redirect your feed to a new URL (specified below).")),
            _url_field("itunes_url", _("iTunes URL"), _("Your podcast's iTunes URL.")),
            _url_field("stitcher_url", _("Stitcher URL"), _("Your podcast's Stitcher URL.")),
            _url_field("google_play_url", _("Google Play URL"), _("Your podcast's Google Play URL.")),
            _url_field("spotify_url", _("Spotify URL"), _("Your podcast's Spotify URL.")),
        ],
    }


def security_section() -> dict:
    return {
        "title": _("Security"),
        "description": _(
            "Change these settings to ensure that your podcast feed remains private. This "
            "will block feed readers (including iTunes) from accessing your feed."
        ),
        "fields": [
            {
                "id": "protect",
                "label": _("Password protect your podcast feed"),
                "description": _(
                    "Mark if you would like to password protect your podcast feed - you can "
                    "set the username and password below. This will block all feed readers "
                    "(including iTunes) from accessing your feed."
                ),
                "type": "checkbox",
                "default": "",
                "validator": "strip_all_tags",
            },
            {
                "id": "protection_username",
                "label": _("Username"),
                "description": _("Username for your podcast feed."),
                "type": "text",
                "default": "",
                "placeholder": _("Feed username"),
                "class": "regular-text",
                "validator": "strip_all_tags",
            },
            {
                "id": "protection_password",
                "label": _("Password"),
                "description": _(
                    "Password for your podcast feed. Once saved, the password is encoded and "
                    "secured so it will not be visible on this page again."
                ),
                "type": "text_secret",
                "default": "",
                "placeholder": _("Feed password"),
                "validator": "encode_password",
                "class": "regular-text",
            },
            {
                "id": "protection_no_access_message",
                "label": _("No access message"),
                "description": _(
                    "This message will be displayed to people who are not allowed access to "
                    "your podcast feed. Limited HTML allowed."
                ),
                "type": "textarea",
                "default": _("You are not permitted to view this podcast feed."),
                "placeholder": _(
                    "Message displayed to users who do not have access to the podcast feed"
                ),
                "validator": "validate_message",
                "class": "large-text",
            },
        ],
    }


def redirection_section() -> dict:
    return {
        "title": _("Redirection"),
        "description": _(
            "Use these settings to safely move your podcast to a different location. Only "
            "do this once your new podcast is setup and active."
        ),
        "fields": _redirect_fields(
            _(
                "Redirect your feed to a new URL (specified below). This will inform all "
                "podcasting services that your podcast has moved and 48 hours after you have "
                "saved this option it will permanently redirect your feed to the new URL."
            )
        ),
    }


def publishing_section() -> dict:
    return {
        "title": _("Publishing"),
        "description": _(
            "Use these URLs to share and publish your podcast feed. These URLs will work "
            "with any podcasting service (including iTunes)."
        ),
        "fields": [
            {
                **_url_field(
                    "feed_url",
                    _("External feed URL"),
                    _(
                        "If you are syndicating your podcast using a third-party service "
                        "(like Feedburner) you can insert the URL here, otherwise this must "
                        "be left blank."
                    ),
                ),
            },
            {"id": "feed_link", "label": _("Complete feed"), "type": "feed_link"},
            {
                "id": "feed_link_series",
                "label": _("Feed for a specific series"),
                "type": "feed_link_series",
            },
            {"id": "podcast_url", "label": _("Podcast page"), "type": "podcast_url"},
        ],
    }


def hosting_section() -> dict:
    return {
        "title": _("Hosting"),
        "description": _(
            "Connect your podcast to the hosting service by entering your account email "
            "and API token, then validate the credentials before saving."
        ),
        "fields": [
            {
                "id": "podmotor_account_email",
                "label": _("Your email"),
                "description": _("The email address you used to register your account."),
                "type": "text",
                "default": "",
                "placeholder": _("email@domain.com"),
                "validator": "strip_all_tags",
                "class": "regular-text",
            },
            {
                "id": "podmotor_account_api_token",
                "label": _("Your API token"),
                "description": _("Your API token is available on your account settings page."),
                "type": "text",
                "default": "",
                "placeholder": _("API token"),
                "validator": "strip_all_tags",
                "class": "regular-text",
            },
            {"id": "podmotor_account_id", "type": "hidden", "default": ""},
            {
                "id": "podmotor_disconnect",
                "label": _("Disconnect"),
                "description": _(
                    "Disconnect from the hosting service. Your stored credentials are removed."
                ),
                "type": "checkbox",
                "default": "",
            },
        ],
    }


def build_podcast_schema(
    site: SiteConfig, post_types: Optional[dict[str, str]] = None, today: Optional[date] = None
) -> Schema:
    """Build the base settings schema for a site.

    Filters registered on the schema registry run after this, so extensions
    can add, remove or change sections before the schema is used.
    """
    settings = {
        SECTION_GENERAL: general_section(post_types if post_types is not None else site.post_types),
        SECTION_FEED_DETAILS: feed_details_section(site, today),
        "security": security_section(),
        "redirection": redirection_section(),
        "publishing": publishing_section(),
        SECTION_HOSTING: hosting_section(),
    }
    return parse_schema(settings)
