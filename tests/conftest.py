"""
Pytest configuration and fixtures for the WikiScroll edge service tests.
"""

import pytest

from wikiscroll.config.settings import Settings


@pytest.fixture
def test_settings(tmp_path):
    """Test settings configuration with a throwaway app page."""
    (tmp_path / "index.html").write_text(
        "<!DOCTYPE html><html><head><title>WikiScroll</title></head>"
        "<body><div id=\"feed\"></div></body></html>",
        encoding="utf-8",
    )
    return Settings(
        product_name="WikiScroll",
        default_preview_image="https://wikiscroll.com/og-image.png",
        request_timeout=5,
        upstream_max_concurrency=8,
        max_fanout=60,
        encyclopedia_oversample=2.5,
        travel_guide_oversample=3.0,
        travel_guide_page_size=10,
        refill_rounds=0,
        cache_ttl_seconds=300,
        cache_max_entries=64,
        static_dir=str(tmp_path),
        index_file="index.html",
        log_level="DEBUG",
        log_format="text",
    )
