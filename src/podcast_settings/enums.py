"""Enumeration type definitions"""

from enum import Enum


class FieldType(str, Enum):
    """Field kinds understood by the renderer"""

    TEXT = "text"
    PASSWORD = "password"
    NUMBER = "number"
    TEXT_SECRET = "text_secret"
    COLOUR_PICKER = "colour-picker"
    TEXTAREA = "textarea"
    CHECKBOX = "checkbox"
    CHECKBOX_MULTI = "checkbox_multi"
    RADIO = "radio"
    SELECT = "select"
    IMAGE = "image"
    FEED_LINK = "feed_link"
    FEED_LINK_SERIES = "feed_link_series"
    PODCAST_URL = "podcast_url"
    HIDDEN = "hidden"


class StoreType(str, Enum):
    MEMORY = "memory"
    DB = "db"
