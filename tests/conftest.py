"""Pytest configuration and shared fixtures."""

import io
from contextlib import asynccontextmanager
from typing import Callable
from unittest.mock import AsyncMock

import pytest
from PIL import Image

from pixelcheck.models.comparison import (
    ComparisonResult,
    ComparisonStats,
    RenderedImage,
    Region,
    Severity,
    Viewport,
)
from pixelcheck.models.config import ComparisonConfig, RenderConfig


# ============================================================================
# Image Fixtures
# ============================================================================


def make_png(width: int, height: int, color=(255, 255, 255, 255), fmt: str = "PNG") -> bytes:
    """Encode a solid-color image in the given format."""
    mode = "RGB" if fmt in ("JPEG", "BMP") else "RGBA"
    img = Image.new(mode, (width, height), color[: len(mode)])
    buf = io.BytesIO()
    img.save(buf, format=fmt)
    return buf.getvalue()


def rgba_buffer(width: int, height: int, color=(255, 255, 255, 255)) -> bytearray:
    return bytearray(bytes(color) * (width * height))


@pytest.fixture
def png_factory() -> Callable[..., bytes]:
    return make_png


@pytest.fixture
def white_png() -> bytes:
    return make_png(800, 600, (255, 255, 255, 255))


@pytest.fixture
def black_png() -> bytes:
    return make_png(800, 600, (0, 0, 0, 255))


def rendered_image(png: bytes, full_page: bool = False,
                   viewport: tuple[int, int] | None = None) -> RenderedImage:
    with Image.open(io.BytesIO(png)) as img:
        width, height = img.size
    vw, vh = viewport or (width, height)
    return RenderedImage(png=png, width=width, height=height,
                         viewport_width=vw, viewport_height=vh, full_page=full_page)


# ============================================================================
# Configuration Fixtures
# ============================================================================


@pytest.fixture
def render_config() -> RenderConfig:
    """Render config with no settle delays."""
    return RenderConfig(settle_ms=0, fallback_settle_ms=0, navigation_timeout_ms=1000)


@pytest.fixture
def comparison_config(render_config: RenderConfig) -> ComparisonConfig:
    return ComparisonConfig(render=render_config)


# ============================================================================
# Result Fixtures
# ============================================================================


@pytest.fixture
def sample_result(white_png: bytes) -> ComparisonResult:
    return ComparisonResult(
        id="lx2abc123def",
        timestamp=1_700_000_000_000,
        url="https://example.com/pricing",
        design_image=white_png,
        screenshot_image=white_png,
        diff_image=white_png,
        stats=ComparisonStats(
            total_pixels=480000,
            mismatched_pixels=4800,
            match_percentage=99.0,
            diff_percentage=1.0,
            viewport=Viewport(width=800, height=600),
            is_full_page=False,
        ),
        regions=[
            Region(position="Top Left", x=0, y=0, width=200, height=150,
                   diff_pixels=4800, diff_percent=16.0, severity=Severity.HIGH),
            Region(position="Top Center-left", x=200, y=0, width=200, height=150),
        ],
    )


# ============================================================================
# Browser Fixtures
# ============================================================================


@pytest.fixture
def mock_page(white_png: bytes) -> AsyncMock:
    """Playwright page whose navigation succeeds and screenshot is white 800x600."""
    page = AsyncMock()
    response = AsyncMock()
    response.status = 200
    page.goto = AsyncMock(return_value=response)
    page.wait_for_timeout = AsyncMock()
    page.screenshot = AsyncMock(return_value=white_png)
    return page


@pytest.fixture
def session_factory(mock_page: AsyncMock):
    """Stand-in for ``browser_session`` that records its kwargs and releases."""
    calls: dict = {"kwargs": None, "released": False}

    @asynccontextmanager
    async def factory(**kwargs):
        calls["kwargs"] = kwargs
        try:
            yield mock_page
        finally:
            calls["released"] = True

    factory.calls = calls
    return factory


@pytest.fixture
def rgba_factory() -> Callable[..., bytearray]:
    return rgba_buffer


@pytest.fixture
def rendered_factory() -> Callable[..., RenderedImage]:
    return rendered_image
