"""
Text cleaning and candidate validation for random article batches.

Upstream extracts may carry inline markup, and random sampling regularly
lands on administrative pages, so every candidate goes through
``is_valid_candidate`` before it becomes an ArticleRecord.
"""

import re
from typing import Optional

from bs4 import BeautifulSoup

from ..models.article import MIN_BODY_LENGTH

# Administrative / meta namespaces that never make a good card.
EXCLUDED_TITLE_PREFIXES = (
    "List of",
    "Index of",
    "Wikipedia:",
    "Wikivoyage:",
    "Template:",
    "Category:",
    "Portal:",
    "Draft:",
    "Module:",
    "File:",
    "Help:",
    "Special:",
)

_EXCLUDED_TITLE_RE = re.compile(
    r"^(?:" + "|".join(re.escape(p) for p in EXCLUDED_TITLE_PREFIXES) + r")",
    re.IGNORECASE,
)
_WHITESPACE_RE = re.compile(r"\s+")


def strip_html(text: Optional[str]) -> str:
    """Return ``text`` as single-spaced plain text with any markup removed."""
    if not text:
        return ""
    if "<" in text:
        text = BeautifulSoup(text, "html.parser").get_text()
    return _WHITESPACE_RE.sub(" ", text).strip()


def is_valid_title(title: Optional[str]) -> bool:
    return bool(title and title.strip()) and not _EXCLUDED_TITLE_RE.match(title.strip())


def is_valid_candidate(
    title: Optional[str], body: str, image: Optional[str]
) -> bool:
    """
    Check a random-article candidate.

    Args:
        title: upstream page title
        body: excerpt already passed through ``strip_html``
        image: thumbnail URL, if any

    Returns:
        True when the candidate has an image, a long enough plain-text body,
        and a title outside the excluded namespaces.
    """
    if not image:
        return False
    if len(body) < MIN_BODY_LENGTH:
        return False
    return is_valid_title(title)
