"""Diff engine — per-pixel comparison of two canonical buffers."""

from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal

from pixelmatch import pixelmatch

from pixelcheck.models.comparison import CanonicalPair, DiffResult

logger = logging.getLogger(__name__)

# Marker for mismatched pixels in the diff buffer; unmarked pixels stay transparent
SENTINEL_COLOR = (255, 0, 0)


def diff(pair: CanonicalPair, threshold: float = 0.1, include_aa: bool = True) -> DiffResult:
    """Compare the two buffers of ``pair`` and mark mismatched pixels.

    ``threshold`` is the perceptual color distance (0..1) under which pixels
    are equal. With ``include_aa`` set, anti-aliased edges are not detected
    and count as real differences.
    """
    output = bytearray(pair.width * pair.height * 4)
    mismatched = pixelmatch(
        pair.reference,
        pair.rendered,
        pair.width,
        pair.height,
        output,
        threshold=threshold,
        includeAA=include_aa,
        diff_color=SENTINEL_COLOR,
        diff_mask=True,
    )
    logger.debug("Diff: %d of %d pixels mismatched", mismatched, pair.width * pair.height)
    return DiffResult(
        width=pair.width,
        height=pair.height,
        buffer=bytes(output),
        mismatched_pixels=mismatched,
    )


def round_half_up(value: float, places: int) -> float:
    """Round with halves away from zero, as JavaScript's ``toFixed`` does."""
    return float(Decimal(value).quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP))


def match_percentage(mismatched: int, total: int) -> float:
    if total == 0:
        return 100.0
    return round_half_up((total - mismatched) / total * 100, 2)


def diff_percentage(mismatched: int, total: int) -> float:
    if total == 0:
        return 0.0
    return round_half_up(mismatched / total * 100, 2)
