#!/usr/bin/env python3
"""
Run script for the WikiScroll edge service.

Starts the FastAPI server under uvicorn with the configured host, port and
logging.
"""

import sys

import uvicorn

from wikiscroll import __version__
from wikiscroll.config import get_service_logger, get_settings, setup_logging

settings = get_settings()


def print_startup_info():
    """Print startup configuration for visibility."""
    print("WikiScroll Edge")
    print("=" * 50)
    print(f"Version: {__version__}")
    print(f"Host: {settings.host}")
    print(f"Port: {settings.port}")
    print(f"Debug: {settings.debug}")
    print(f"Log Level: {settings.log_level}")
    print(f"Cache TTL: {settings.cache_ttl_seconds}s")
    print(f"Oversampling: wiki x{settings.encyclopedia_oversample}, how x{settings.travel_guide_oversample}")
    print(f"Static Dir: {settings.static_dir}")
    print("=" * 50)
    print(f"Articles: http://{settings.host}:{settings.port}/api/articles")
    print(f"Health Check: http://{settings.host}:{settings.port}/health")
    print("=" * 50)


def main():
    """Main entry point for the WikiScroll edge service."""
    setup_logging()
    logger = get_service_logger(__name__)
    print_startup_info()

    uvicorn_config = {
        "app": "wikiscroll.api.server:app",
        "host": settings.host,
        "port": settings.port,
        "log_level": settings.log_level.lower(),
        "access_log": True,
        "reload": settings.debug,
        "workers": 1,
    }

    try:
        logger.info("Starting WikiScroll edge FastAPI server...")
        uvicorn.run(**uvicorn_config)
    except KeyboardInterrupt:
        print("\nServer stopped by user")
        sys.exit(0)
    except Exception as e:
        logger.error(f"Failed to start server: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
