"""Comparison pipeline — coordinates render, normalize, diff, and region stages."""

from __future__ import annotations

import asyncio
import logging
import time

from pixelcheck.errors import ComparisonError, InvalidInputError
from pixelcheck.imaging.diff_engine import diff, diff_percentage, match_percentage
from pixelcheck.imaging.normalizer import normalize
from pixelcheck.imaging.region_analyzer import analyze_regions
from pixelcheck.models.comparison import (
    ComparisonResult,
    ComparisonStats,
    RenderedImage,
    RenderRequest,
    Viewport,
)
from pixelcheck.models.config import ComparisonConfig
from pixelcheck.renderer.renderer import Renderer
from pixelcheck.store.result_store import ResultStore, new_result_id
from pixelcheck.url_utils import validate_url

logger = logging.getLogger(__name__)


class ComparisonPipeline:
    """Runs one design-vs-live comparison per ``compare`` call.

    Calls are independent and may run concurrently; the store is the only
    shared state.
    """

    def __init__(
        self,
        config: ComparisonConfig | None = None,
        store: ResultStore | None = None,
        renderer: Renderer | None = None,
    ):
        self.config = config if config is not None else ComparisonConfig()
        self.store = store if store is not None else ResultStore(
            retention_seconds=self.config.store.retention_seconds,
            sweep_interval_seconds=self.config.store.sweep_interval_seconds,
        )
        self.renderer = renderer if renderer is not None else Renderer(self.config.render)

    async def compare(
        self,
        reference_bytes: bytes | None,
        url: str | None,
        username: str | None = None,
        password: str | None = None,
        width: int | None = None,
        height: int | None = None,
    ) -> ComparisonResult:
        """Render ``url``, compare it with the design image and store the result."""
        if not reference_bytes:
            raise InvalidInputError("Design image is required")
        url = validate_url(url)
        if (width is not None and width < 0) or (height is not None and height < 0):
            raise InvalidInputError("Viewport width and height must not be negative")

        if not (username and password) and self.config.auth:
            username, password = self.config.auth.username, self.config.auth.password

        start = time.time()
        logger.info("Starting comparison for %s", url)
        request = RenderRequest(
            url=url,
            username=username,
            password=password,
            viewport_width=width or self.config.render.default_viewport.width,
            viewport_height=height or self.config.render.default_viewport.height,
        )

        try:
            rendered = await self.renderer.render(request)
            logger.info("Screenshot captured, processing images...")
            result = await asyncio.to_thread(self._analyze, reference_bytes, rendered, url)
        except ComparisonError as e:
            logger.error("Comparison failed for %s (%s): %s", url, e.kind, e.message)
            raise

        self.store.put(result)
        logger.info("Comparison %s complete in %.1fs. Match: %.2f%%, Diff: %.2f%%",
                    result.id, time.time() - start,
                    result.stats.match_percentage, result.stats.diff_percentage)
        return result

    def get_result(self, result_id: str) -> ComparisonResult:
        return self.store.get(result_id)

    def _analyze(self, reference_bytes: bytes, rendered: RenderedImage, url: str) -> ComparisonResult:
        """CPU-bound stages; runs off the event loop."""
        pair = normalize(reference_bytes, rendered,
                         max_reference_bytes=self.config.max_reference_bytes)
        logger.info("Comparing at %dx%d", pair.width, pair.height)

        diff_result = diff(pair, threshold=self.config.diff.threshold,
                           include_aa=self.config.diff.include_aa)
        total = diff_result.total_pixels
        regions = analyze_regions(diff_result.buffer, pair.width, pair.height)

        return ComparisonResult(
            id=new_result_id(),
            timestamp=int(time.time() * 1000),
            url=url,
            design_image=pair.reference_png,
            screenshot_image=pair.rendered_png,
            diff_image=diff_result.to_png(),
            stats=ComparisonStats(
                total_pixels=total,
                mismatched_pixels=diff_result.mismatched_pixels,
                match_percentage=match_percentage(diff_result.mismatched_pixels, total),
                diff_percentage=diff_percentage(diff_result.mismatched_pixels, total),
                viewport=Viewport(width=pair.width, height=pair.height),
                is_full_page=rendered.full_page,
            ),
            regions=regions,
        )
