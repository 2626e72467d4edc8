"""HTTP surface of the WikiScroll edge service."""
