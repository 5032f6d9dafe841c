"""
Page fetcher rendering pages in a headless Chromium that emulates a mobile device.

The HTTP status of the navigation is not checked: a server error page that
the browser renders without error is returned like any other page.
"""

import time
import logging
from typing import Dict, Any, Optional
from urllib.parse import urlparse

from playwright.sync_api import sync_playwright, Error as PlaywrightError

from .constants import DEVICE_NAME, DEFAULT_TIMEOUT, LOGGER_NAME
from .errors import FetchError

logger = logging.getLogger(LOGGER_NAME)


class PageFetcher:
    """Render pages with Playwright and return their HTML after JavaScript ran."""

    def __init__(self, timeout: float = DEFAULT_TIMEOUT, device: str = DEVICE_NAME, headless: bool = True):
        """
        Initialize the page fetcher.

        Args:
            timeout (float): Budget in seconds for a whole browser session;
                exhausting it aborts the session
            device (str): Name of the Playwright device descriptor to emulate
            headless (bool): Whether to launch the browser headless
        """
        if timeout <= 0:
            raise ValueError("timeout must be greater than zero")
        self.timeout = timeout
        self.device = device
        self.headless = headless

    def fetch(self, url: str) -> str:
        """
        Load a URL in a fresh browser session and serialize the rendered document.

        Args:
            url (str): Absolute http(s) URL to load

        Returns:
            str: HTML of the document after JavaScript execution

        Raises:
            FetchError: If the URL is invalid, or the session, navigation or
                serialization fails
        """
        self._validate_url(url)
        deadline = time.monotonic() + self.timeout

        try:
            with sync_playwright() as playwright:
                profile = self._device_profile(playwright)
                browser = playwright.chromium.launch(
                    headless=self.headless,
                    timeout=self._remaining_ms(deadline, url),
                )
                try:
                    context = browser.new_context(**profile)
                    page = context.new_page()

                    response = page.goto(url, timeout=self._remaining_ms(deadline, url))
                    if response is not None:
                        logger.debug(f"Navigated to {url}: HTTP {response.status}")

                    self._remaining_ms(deadline, url)
                    return page.content()
                finally:
                    browser.close()
        except PlaywrightError as e:
            raise FetchError(f"could not download page {url}: {e}") from e

    def _device_profile(self, playwright) -> Dict[str, Any]:
        """
        Look up the device descriptor as keyword arguments for a browser context.

        Raises:
            FetchError: If the device is unknown
        """
        try:
            descriptor = playwright.devices[self.device]
        except KeyError as e:
            raise FetchError(f"unknown device profile: {self.device}") from e
        # Only meaningful when picking the engine, not a context option
        return {k: v for k, v in descriptor.items() if k != 'default_browser_type'}

    @staticmethod
    def _remaining_ms(deadline: float, url: str) -> float:
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            raise FetchError(f"could not download page {url}: deadline exceeded")
        return remaining * 1000

    @staticmethod
    def _validate_url(url: str) -> None:
        parsed = urlparse(url)
        if parsed.scheme not in ('http', 'https') or not parsed.netloc:
            raise FetchError(f"invalid page URL: {url!r}")


def fetch(url: str, timeout: float = DEFAULT_TIMEOUT, device: str = DEVICE_NAME,
          headless: bool = True, fetcher: Optional[PageFetcher] = None) -> str:
    """Render a page with a one-off PageFetcher and return its HTML."""
    fetcher = fetcher or PageFetcher(timeout=timeout, device=device, headless=headless)
    return fetcher.fetch(url)
