"""Page navigation with a single load-event fallback."""

from __future__ import annotations

import logging
from enum import Enum

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page, Response
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from pixelcheck.errors import (
    NavigationFailedError,
    RenderTimeoutError,
    friendly_navigation_message,
)

logger = logging.getLogger(__name__)

TIMEOUT_MESSAGE = "Page took too long to load. Try a simpler page or check your connection."


class NavigationOutcome(str, Enum):
    NETWORK_IDLE = "networkidle"
    LOAD_FALLBACK = "load"


async def navigate_with_fallback(
    page: Page,
    url: str,
    timeout_ms: int = 90000,
    fallback_settle_ms: int = 3000,
) -> NavigationOutcome:
    """Navigate to ``url`` waiting for network idle, falling back to the load event.

    Two states:
      1. ``goto(wait_until="networkidle")``. Success ends navigation.
      2. Entered only when state 1 times out: ``goto(wait_until="load")``
         followed by a fixed settle delay for late content.

    Any other failure (DNS, refused connection, certificate, HTTP 401) is not
    retried and surfaces as ``NavigationFailedError``. A timeout in state 2
    surfaces as ``RenderTimeoutError``.
    """
    try:
        response = await page.goto(url, wait_until="networkidle", timeout=timeout_ms)
        outcome = NavigationOutcome.NETWORK_IDLE
    except PlaywrightTimeoutError:
        logger.info("networkidle timeout for %s, retrying with load event...", url)
        try:
            response = await page.goto(url, wait_until="load", timeout=timeout_ms)
        except PlaywrightTimeoutError as e:
            raise RenderTimeoutError(TIMEOUT_MESSAGE) from e
        except PlaywrightError as e:
            raise NavigationFailedError(friendly_navigation_message(e.message)) from e
        await page.wait_for_timeout(fallback_settle_ms)
        outcome = NavigationOutcome.LOAD_FALLBACK
    except PlaywrightError as e:
        raise NavigationFailedError(friendly_navigation_message(e.message)) from e

    _check_response(response, url)
    return outcome


def _check_response(response: Response | None, url: str) -> None:
    if response is None:
        return
    if response.status == 401:
        logger.warning("HTTP 401 for %s", url)
        raise NavigationFailedError(friendly_navigation_message("401 Unauthorized"))
    if response.status >= 400:
        # Error pages are still compared; the caller sees the rendered result
        logger.warning("HTTP %d for %s", response.status, url)
