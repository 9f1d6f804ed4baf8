"""Browser session helpers — disposable, isolated Chromium sessions."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from playwright.async_api import Browser, BrowserContext, Page, Playwright, async_playwright

logger = logging.getLogger(__name__)

# Sandboxed, GPU-free flags for stable rendering in constrained containers
CHROMIUM_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-gpu",
    "--disable-software-rasterizer",
    "--disable-extensions",
    "--disable-background-networking",
    "--disable-default-apps",
    "--disable-sync",
    "--no-first-run",
]


async def launch_browser(
    playwright: Playwright, headless: bool = True, timeout_ms: int = 60000,
) -> Browser:
    """Launch a headless Chromium configured for deterministic rendering."""
    return await playwright.chromium.launch(
        headless=headless,
        args=CHROMIUM_ARGS,
        timeout=timeout_ms,
    )


async def create_context(
    browser: Browser,
    viewport: dict,
    http_credentials: Optional[dict] = None,
    user_agent: Optional[str] = None,
) -> BrowserContext:
    """Create a browser context with a fixed viewport and optional basic auth.

    Args:
        http_credentials: ``{"username": ..., "password": ...}`` sent for
            HTTP basic-auth challenges on every request of the context.
    """
    context_kwargs: dict = {
        "viewport": viewport,
        "device_scale_factor": 1,
    }
    if http_credentials:
        context_kwargs["http_credentials"] = http_credentials
    if user_agent:
        context_kwargs["user_agent"] = user_agent
    return await browser.new_context(**context_kwargs)


@asynccontextmanager
async def browser_session(
    viewport: dict,
    http_credentials: Optional[dict] = None,
    user_agent: Optional[str] = None,
    headless: bool = True,
    launch_timeout_ms: int = 60000,
) -> AsyncIterator[Page]:
    """Yield a page in a freshly launched browser; the browser is closed on exit.

    Sessions are never shared: every caller gets its own browser process.
    """
    async with async_playwright() as p:
        browser = await launch_browser(p, headless=headless, timeout_ms=launch_timeout_ms)
        try:
            context = await create_context(
                browser, viewport, http_credentials=http_credentials, user_agent=user_agent,
            )
            page = await context.new_page()
            yield page
        finally:
            await browser.close()
            logger.debug("Browser session closed")
