"""Renderer — captures a PNG screenshot of a URL in a disposable browser."""

from __future__ import annotations

import io
import logging
import time

from PIL import Image, UnidentifiedImageError

from pixelcheck.errors import DecodeFailedError
from pixelcheck.models.comparison import RenderedImage, RenderRequest
from pixelcheck.models.config import RenderConfig
from pixelcheck.utils.browser import browser_session

from .navigation import navigate_with_fallback

logger = logging.getLogger(__name__)


def clamp_viewport(width: int | None, height: int | None, config: RenderConfig) -> tuple[int, int]:
    """Apply defaults for missing sizes and cap to the configured maxima."""
    width = width or config.default_viewport.width
    height = height or config.default_viewport.height
    return min(width, config.max_width), min(height, config.max_height)


class Renderer:
    """Renders URLs to screenshots, one isolated browser per call."""

    def __init__(self, config: RenderConfig | None = None, session_factory=browser_session):
        self.config = config or RenderConfig()
        self._session_factory = session_factory

    def is_full_page(self, viewport_height: int) -> bool:
        return viewport_height > self.config.full_page_threshold

    async def render(self, request: RenderRequest) -> RenderedImage:
        """Navigate to the request URL and return the captured screenshot.

        The browser is released before this method returns or raises.
        """
        width, height = clamp_viewport(request.viewport_width, request.viewport_height, self.config)
        full_page = self.is_full_page(height)
        start = time.time()
        logger.info("Rendering %s at %dx%d", request.url, width, height)

        async with self._session_factory(
            viewport={"width": width, "height": height},
            http_credentials=request.http_credentials,
            user_agent=self.config.user_agent,
            headless=self.config.headless,
            launch_timeout_ms=self.config.launch_timeout_ms,
        ) as page:
            outcome = await navigate_with_fallback(
                page,
                request.url,
                timeout_ms=self.config.navigation_timeout_ms,
                fallback_settle_ms=self.config.fallback_settle_ms,
            )
            logger.debug("Navigation settled via %s", outcome.value)

            # Animations and lazy-loaded content
            await page.wait_for_timeout(self.config.settle_ms)

            logger.info("Taking %s screenshot...", "full page" if full_page else "viewport")
            png = await page.screenshot(type="png", full_page=full_page)

        try:
            with Image.open(io.BytesIO(png)) as img:
                actual_width, actual_height = img.size
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as e:
            raise DecodeFailedError(f"Could not read screenshot: {e}") from e

        logger.info("Screenshot captured: %dx%d in %.1fs",
                    actual_width, actual_height, time.time() - start)
        return RenderedImage(
            png=png,
            width=actual_width,
            height=actual_height,
            viewport_width=width,
            viewport_height=height,
            full_page=full_page,
        )
