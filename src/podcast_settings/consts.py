"""Constants for the podcast settings engine"""

# ==================== File Paths ====================
DATABASE_PATH = "data/settings.db"
LOG_FILE_DEFAULT = "data/podcast_settings.log"

# ==================== Option Keys ====================
OPTION_PREFIX = "ss_podcasting_"
DEFAULT_SCOPE = "default"

REDIRECT_FEED_FIELD = "redirect_feed"
REDIRECT_FEED_DATE_FIELD = "redirect_feed_date"

HOSTING_EMAIL_FIELD = "podmotor_account_email"
HOSTING_TOKEN_FIELD = "podmotor_account_api_token"
HOSTING_ACCOUNT_ID_FIELD = "podmotor_account_id"
HOSTING_DISCONNECT_FIELD = "podmotor_disconnect"

CHECKBOX_ON = "on"

# ==================== Feed ====================
FEED_TOKEN = "podcast"
SERIES_SLUG_PLACEHOLDER = "series-slug"

# ==================== Sections ====================
SECTION_GENERAL = "general"
SECTION_FEED_DETAILS = "feed-details"
SECTION_HOSTING = "castos-hosting"

# Tabs that have no save button. The podcast schema defines neither; they come
# from schema filters.
NO_SAVE_SECTIONS = ("extensions", "import")

# Sections whose values can be overridden per series
SCOPED_SECTIONS = (SECTION_FEED_DETAILS,)

# ==================== Hosting Service ====================
HOSTING_API_URL_DEFAULT = "https://app.castos.com/"
HOSTING_VALIDATE_PATH = "api/v2/api-token/validate"
HOSTING_SERIES_PATH = "api/v2/series/update"

# ==================== Timeouts (seconds) ====================
TIMEOUT_HTTP_REQUEST = 30
TIMEOUT_SMTP = 10

# ==================== Import Requests ====================
IMPORT_REQUEST_RECIPIENT = "hello@seriouslysimplepodcasting.com"

# ==================== Templates ====================
TEMPLATE_FIELDS = "fields.html.j2"
TEMPLATE_SETTINGS_PAGE = "settings_page.html.j2"

# ==================== Database Configuration ====================
DB_MAX_CONNECTIONS = 20
DB_STALE_TIMEOUT = 300  # 5 minutes
DB_JOURNAL_MODE = "wal"
DB_SYNCHRONOUS = "NORMAL"
DB_BUSY_TIMEOUT = 5000  # 5 seconds

# ==================== Database Pragmas ====================
DB_PRAGMAS = {
    "journal_mode": DB_JOURNAL_MODE,
    "synchronous": DB_SYNCHRONOUS,
    "busy_timeout": DB_BUSY_TIMEOUT,
}
