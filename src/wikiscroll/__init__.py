"""WikiScroll edge service: cached article batches and crawler link previews."""

__version__ = "1.0.0"
