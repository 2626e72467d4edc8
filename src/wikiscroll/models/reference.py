import re
from dataclasses import dataclass

from ..core.exceptions import InvalidReferenceError
from .article import ArticleSource

PAGE_ID_RE = re.compile(r"[0-9]+")

_PREFIXES = {
    "w": ArticleSource.ENCYCLOPEDIA,
    "v": ArticleSource.TRAVEL_GUIDE,
}


@dataclass(frozen=True)
class ArticleReference:
    """Shareable article id: a one-letter source prefix plus the upstream page id."""

    source: ArticleSource
    page_id: str

    @classmethod
    def parse(cls, raw: str) -> "ArticleReference":
        """
        Parse ``w12345`` / ``v678`` into a reference.

        Raises:
            InvalidReferenceError: unknown prefix, page id that is not ASCII digits
        """
        raw = (raw or "").strip()
        prefix, page_id = raw[:1], raw[1:]

        source = _PREFIXES.get(prefix)
        if source is None:
            raise InvalidReferenceError(f"Unknown reference prefix: {raw!r}", context=raw)
        if not PAGE_ID_RE.fullmatch(page_id):
            raise InvalidReferenceError(f"Invalid page id in reference: {raw!r}", context=raw)
        return cls(source=source, page_id=page_id)

    def __str__(self) -> str:
        return f"{self.source.prefix}{self.page_id}"
