"""Region analyzer — splits a diff buffer into a 4x4 grid of scored regions."""

from __future__ import annotations

import logging

import numpy as np

from pixelcheck.imaging.diff_engine import round_half_up
from pixelcheck.models.comparison import Region, Severity

logger = logging.getLogger(__name__)

GRID_SIZE = 4
VERTICAL_BANDS = ["Top", "Upper-middle", "Lower-middle", "Bottom"]
HORIZONTAL_BANDS = ["Left", "Center-left", "Center-right", "Right"]

# (exclusive upper bound in percent, severity)
SEVERITY_THRESHOLDS = [
    (1.0, Severity.NONE),
    (5.0, Severity.LOW),
    (15.0, Severity.MEDIUM),
]


def severity_for(diff_percent: float) -> Severity:
    for upper, severity in SEVERITY_THRESHOLDS:
        if diff_percent < upper:
            return severity
    return Severity.HIGH


def region_name(gx: int, gy: int) -> str:
    return f"{VERTICAL_BANDS[gy]} {HORIZONTAL_BANDS[gx]}"


def _cell_bounds(index: int, cell: int, total: int) -> tuple[int, int]:
    start = index * cell
    # The last row/column absorbs the remainder
    end = total if index == GRID_SIZE - 1 else start + cell
    return start, end


def marked_mask(diff_buffer: bytes, width: int, height: int) -> np.ndarray:
    """Boolean mask of pixels carrying the red diff marker.

    Matched by color signature rather than exact value so slightly shifted
    channels still count.
    """
    pixels = np.frombuffer(diff_buffer, dtype=np.uint8).reshape(height, width, 4)
    r, g, b = pixels[..., 0], pixels[..., 1], pixels[..., 2]
    return (r > 200) & (g < 100) & (b < 100)


def analyze_regions(diff_buffer: bytes, width: int, height: int) -> list[Region]:
    """Score each grid cell and return regions, worst first.

    Ties keep row-major grid order.
    """
    if len(diff_buffer) != width * height * 4:
        raise ValueError(f"Diff buffer does not match {width}x{height}")

    mask = marked_mask(diff_buffer, width, height)
    cell_width = width // GRID_SIZE
    cell_height = height // GRID_SIZE
    regions = []

    for gy in range(GRID_SIZE):
        start_y, end_y = _cell_bounds(gy, cell_height, height)
        for gx in range(GRID_SIZE):
            start_x, end_x = _cell_bounds(gx, cell_width, width)
            cell_pixels = (end_x - start_x) * (end_y - start_y)
            diff_count = int(mask[start_y:end_y, start_x:end_x].sum())
            diff_percent = round_half_up(diff_count / cell_pixels * 100, 1) if cell_pixels else 0.0

            regions.append(Region(
                position=region_name(gx, gy),
                x=start_x,
                y=start_y,
                width=end_x - start_x,
                height=end_y - start_y,
                diff_pixels=diff_count,
                diff_percent=diff_percent,
                severity=severity_for(diff_percent),
            ))

    regions.sort(key=lambda r: r.diff_percent, reverse=True)
    logger.debug("Worst region: %s (%.1f%%)", regions[0].position, regions[0].diff_percent)
    return regions
