"""
Preview document rendering for link-unfurling crawlers.

The document only exists to populate Open Graph / Twitter card fields. A
human who opens the same URL is sent straight back to it by a meta refresh
and a ``location.replace`` script. Rendering is a pure function of its
inputs: the same preview and URL always give byte-identical output.

The document lives in ``templates/preview.html`` and is rendered with
autoescaping on, so every interpolated value is HTML-escaped.
"""

import json

from jinja2 import Environment, PackageLoader
from markupsafe import Markup

from ..models.preview import NormalizedPreview

OG_IMAGE_WIDTH = 1200
OG_IMAGE_HEIGHT = 630


def script_string(value: str) -> Markup:
    """JSON string literal that cannot terminate the surrounding <script>."""
    return Markup(
        json.dumps(value)
        .replace("<", "\\u003c")
        .replace(">", "\\u003e")
        .replace("&", "\\u0026")
    )


templates = Environment(
    loader=PackageLoader("wikiscroll", "templates"),
    autoescape=True,
)
templates.filters["script_string"] = script_string


def fallback_description(preview: NormalizedPreview, product_name: str) -> str:
    return (
        f'Discover "{preview.title}" on {product_name} — swipe through '
        f"{preview.source_label} articles in a beautiful feed."
    )


def render(
    preview: NormalizedPreview, request_url: str, product_name: str = "WikiScroll"
) -> str:
    """
    Build the crawler-facing HTML document.

    Args:
        preview: resolved article metadata
        request_url: the URL the crawler requested; humans are redirected here
        product_name: appended to the title and used as og:site_name

    Returns:
        Complete HTML document as a string.
    """
    return templates.get_template("preview.html").render(
        title=f"{preview.title} — {product_name}",
        description=preview.description or fallback_description(preview, product_name),
        image=preview.image,
        image_alt=preview.title,
        image_width=OG_IMAGE_WIDTH,
        image_height=OG_IMAGE_HEIGHT,
        request_url=request_url,
        product_name=product_name,
    )
