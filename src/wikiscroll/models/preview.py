from pydantic import BaseModel, Field

# Longest description carried into a link preview.
MAX_DESCRIPTION_LENGTH = 200


class NormalizedPreview(BaseModel):
    """Link-preview metadata for one resolved article."""

    title: str
    description: str = Field(default="", max_length=MAX_DESCRIPTION_LENGTH)
    image: str
    canonical_url: str
    source_label: str
