"""JSON report output with the three comparison images alongside."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pixelcheck.models.comparison import ComparisonResult
from pixelcheck.url_utils import report_name_from_url

logger = logging.getLogger(__name__)

IMAGE_FILES = {
    "designImage": "design.png",
    "screenshotImage": "screenshot.png",
    "diffImage": "diff.png",
}


def generate_json_report(result: ComparisonResult, output_dir: Path) -> Path:
    """Write ``report.json`` and PNG images into a per-result directory.

    Images are referenced by file name in the JSON instead of being inlined
    as data URIs.
    """
    report_dir = Path(output_dir) / f"{report_name_from_url(result.url)}_{result.id}"
    report_dir.mkdir(parents=True, exist_ok=True)

    images = {
        "designImage": result.design_image,
        "screenshotImage": result.screenshot_image,
        "diffImage": result.diff_image,
    }
    for key, data in images.items():
        (report_dir / IMAGE_FILES[key]).write_bytes(data)

    report = result.to_payload(inline_images=False)
    report.update(IMAGE_FILES)

    report_path = report_dir / "report.json"
    with open(report_path, "w") as f:
        json.dump(report, f, indent=2, default=str)
    logger.debug("Wrote report to %s", report_path)
    return report_path
