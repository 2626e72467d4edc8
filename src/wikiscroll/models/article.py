from enum import Enum

from pydantic import BaseModel, Field

# Shortest plain-text excerpt worth showing as a card.
MIN_BODY_LENGTH = 80


class ArticleSource(str, Enum):
    """Upstream content source; the value doubles as the batch ``mode``."""

    ENCYCLOPEDIA = "wiki"
    TRAVEL_GUIDE = "how"

    @property
    def prefix(self) -> str:
        return "w" if self is ArticleSource.ENCYCLOPEDIA else "v"


class ArticleRecord(BaseModel):
    """Normalized article card returned to clients."""

    id: str
    source: ArticleSource
    title: str
    body: str = Field(min_length=MIN_BODY_LENGTH)
    image: str = Field(min_length=1)
    url: str

    class Config:
        frozen = True
