"""Scoped headless browser sessions."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

from playwright.sync_api import Browser, sync_playwright

from ..config.settings import BrowserSettings, get_settings

logger = logging.getLogger(__name__)

# Sandboxing is unavailable in most containers and CI runners.
LAUNCH_ARGS = ("--no-sandbox", "--disable-setuid-sandbox")


@contextmanager
def browser_session(settings: BrowserSettings | None = None) -> Iterator[Browser]:
    """Launch headless Chromium for the duration of a ``with`` block.

    The browser is closed when the block exits, whether it completes or
    raises.
    """
    settings = settings or get_settings()
    executable = settings.chromium_executable

    with sync_playwright() as playwright:
        browser = playwright.chromium.launch(
            headless=True,
            args=list(LAUNCH_ARGS),
            executable_path=str(executable) if executable else None,
        )
        logger.debug(f"Launched Chromium {browser.version}")
        try:
            yield browser
        finally:
            browser.close()
            logger.debug("Closed Chromium")
