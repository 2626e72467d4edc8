"""Pure request-processing helpers: classification, cleaning, rendering."""
from .bot_classifier import BOT_PATTERNS, ClientClass, classify, is_bot
from .cleaner import (
    EXCLUDED_TITLE_PREFIXES,
    strip_html,
    is_valid_title,
    is_valid_candidate,
)
from .preview_renderer import render

__all__ = [
    "BOT_PATTERNS",
    "ClientClass",
    "classify",
    "is_bot",
    "EXCLUDED_TITLE_PREFIXES",
    "strip_html",
    "is_valid_title",
    "is_valid_candidate",
    "render",
]
