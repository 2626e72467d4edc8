"""
Crawler detection for link-preview requests.

Classification is a case-insensitive substring match against known
link-unfurler, search and messaging crawler identities, so versioned user
agents such as ``facebookexternalhit/1.1`` still match. Anything else,
including an empty user agent, is treated as a human.
"""

from enum import Enum
from typing import Iterable, Optional

BOT_PATTERNS = (
    "facebookexternalhit",
    "Facebot",
    "Twitterbot",
    "LinkedInBot",
    "Slackbot",
    "Discordbot",
    "WhatsApp",
    "TelegramBot",
    "Applebot",  # iMessage link previews
    "iMessageBot",
    "Googlebot",
    "bingbot",
    "Pinterestbot",
    "redditbot",
)


class ClientClass(str, Enum):
    BOT = "bot"
    HUMAN = "human"


def classify(
    identity: Optional[str], patterns: Iterable[str] = BOT_PATTERNS
) -> ClientClass:
    """Classify a User-Agent string as a crawler or a human."""
    if not identity:
        return ClientClass.HUMAN

    ua = identity.lower()
    if any(pattern.lower() in ua for pattern in patterns):
        return ClientClass.BOT
    return ClientClass.HUMAN


def is_bot(identity: Optional[str]) -> bool:
    return classify(identity) is ClientClass.BOT
