"""Image normalizer — brings reference and screenshot to one canonical size."""

from __future__ import annotations

import io
import logging

from PIL import Image, ImageOps, UnidentifiedImageError

from pixelcheck.errors import DecodeFailedError, InvalidDimensionsError
from pixelcheck.models.comparison import CanonicalPair, RenderedImage

logger = logging.getLogger(__name__)

SUPPORTED_FORMATS = {"PNG", "JPEG", "WEBP"}
WHITE = (255, 255, 255, 255)
# Horizontally centered, anchored to the top edge
TOP_CENTERING = (0.5, 0.0)


def canonical_size(rendered: RenderedImage) -> tuple[int, int]:
    """Dimensions both images are normalized to.

    Full-page captures use the produced size; viewport captures use the
    requested viewport. The reference image never decides.
    """
    if rendered.full_page:
        return rendered.width, rendered.height
    return rendered.viewport_width, rendered.viewport_height


def decode_image(data: bytes, label: str = "image") -> Image.Image:
    """Decode raster bytes into an RGBA image, rejecting unsupported formats."""
    if not data:
        raise DecodeFailedError(f"The {label} is empty")
    try:
        img = Image.open(io.BytesIO(data))
        img.load()
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, SyntaxError,
            ValueError) as e:
        raise DecodeFailedError(f"Could not decode {label}: {e}") from e
    if img.format not in SUPPORTED_FORMATS:
        raise DecodeFailedError(
            f"Unsupported {label} format '{img.format}'. Only PNG, JPEG, WebP allowed."
        )
    return img.convert("RGBA")


def fit_to_canvas(img: Image.Image, width: int, height: int) -> Image.Image:
    """Scale to cover the target box, crop from the top, flatten onto white."""
    fitted = ImageOps.fit(img, (width, height), method=Image.Resampling.LANCZOS,
                          centering=TOP_CENTERING)
    canvas = Image.new("RGBA", (width, height), WHITE)
    canvas.alpha_composite(fitted)
    return canvas


def encode_png(img: Image.Image) -> bytes:
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


def normalize(
    reference_bytes: bytes,
    rendered: RenderedImage,
    max_reference_bytes: int | None = None,
) -> CanonicalPair:
    """Decode and resize both images to the canonical dimensions."""
    width, height = canonical_size(rendered)
    if width <= 0 or height <= 0:
        raise InvalidDimensionsError(f"Invalid comparison dimensions {width}x{height}")

    if max_reference_bytes is not None and len(reference_bytes) > max_reference_bytes:
        raise DecodeFailedError(
            f"Design image is too large ({len(reference_bytes)} bytes, "
            f"limit {max_reference_bytes})"
        )

    logger.debug("Normalizing images to %dx%d", width, height)
    reference = fit_to_canvas(decode_image(reference_bytes, "design image"), width, height)
    screenshot = fit_to_canvas(decode_image(rendered.png, "screenshot"), width, height)

    return CanonicalPair(
        width=width,
        height=height,
        reference=reference.tobytes(),
        rendered=screenshot.tobytes(),
        reference_png=encode_png(reference),
        rendered_png=encode_png(screenshot),
    )
