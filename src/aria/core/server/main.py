"""ARIA server entry point (``python -m aria.core.server.main``)."""

from __future__ import annotations

import logging
from ipaddress import ip_address

from aria.core.config.settings import Settings, get_settings
from aria.core.server.app import create_app

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _is_loopback_host(host: str) -> bool:
    if host == "localhost":
        return True
    try:
        return ip_address(host).is_loopback
    except ValueError:
        return False


def _check_bind(settings: Settings) -> None:
    """Refuse network exposure of the wellness data bank unless explicitly allowed."""
    if settings.aria_allow_insecure_bind or _is_loopback_host(settings.aria_host):
        return
    raise RuntimeError(
        "Refusing to bind ARIA server to a non-loopback host without an auth layer. "
        "Set ARIA_ALLOW_INSECURE_BIND=true to override (unsafe)."
    )


def run() -> None:
    """Start the ARIA MCP server over Streamable HTTP (default) or stdio."""
    settings = get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.aria_log_level.upper(), logging.INFO),
        format=LOG_FORMAT,
    )

    if settings.aria_transport == "stdio":
        logger.info("Starting ARIA Wellness server on stdio")
        create_app().run(transport="stdio")
        return

    _check_bind(settings)
    logger.info(
        "Starting ARIA Wellness server on %s:%d (data: %s)",
        settings.aria_host,
        settings.aria_port,
        settings.aria_data_dir,
    )
    create_app().run(
        transport="streamable-http",
        host=settings.aria_host,
        port=settings.aria_port,
    )


if __name__ == "__main__":
    run()
