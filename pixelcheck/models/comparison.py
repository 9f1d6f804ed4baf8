"""Data structures flowing through the comparison pipeline."""

from __future__ import annotations

import base64
import io
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from PIL import Image
from pydantic import BaseModel, ConfigDict, Field


class RenderRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    url: str
    username: Optional[str] = None
    password: Optional[str] = None
    viewport_width: int = 1920
    viewport_height: int = 1080

    @property
    def http_credentials(self) -> dict | None:
        """Basic-auth credentials, only when both parts are present."""
        if self.username and self.password:
            return {"username": self.username, "password": self.password}
        return None


@dataclass(frozen=True)
class RenderedImage:
    png: bytes
    width: int  # produced size, larger than the viewport for full-page captures
    height: int
    viewport_width: int  # effective (clamped) viewport
    viewport_height: int
    full_page: bool = False


@dataclass(frozen=True)
class CanonicalPair:
    """Two RGBA buffers of identical dimensions, ready for byte comparison."""

    width: int
    height: int
    reference: bytes
    rendered: bytes
    reference_png: bytes = field(default=b"", repr=False)
    rendered_png: bytes = field(default=b"", repr=False)

    def __post_init__(self):
        expected = self.width * self.height * 4
        if len(self.reference) != expected or len(self.rendered) != expected:
            raise ValueError(
                f"RGBA buffers must be {expected} bytes for {self.width}x{self.height}, "
                f"got {len(self.reference)} and {len(self.rendered)}"
            )


@dataclass(frozen=True)
class DiffResult:
    width: int
    height: int
    buffer: bytes = field(repr=False)
    mismatched_pixels: int = 0

    def __post_init__(self):
        if self.mismatched_pixels > self.width * self.height:
            raise ValueError("mismatched_pixels exceeds total pixel count")

    @property
    def total_pixels(self) -> int:
        return self.width * self.height

    def to_png(self) -> bytes:
        buf = io.BytesIO()
        Image.frombytes("RGBA", (self.width, self.height), self.buffer).save(buf, format="PNG")
        return buf.getvalue()


class Severity(str, Enum):
    """Diff density classification, ordered none < low < medium < high."""

    NONE = "none"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def rank(self) -> int:
        return list(Severity).index(self)

    def __lt__(self, other):
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other):
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other):
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other):
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank >= other.rank


class Region(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    position: str
    x: int
    y: int
    width: int
    height: int
    diff_pixels: int = Field(default=0, alias="diffPixels")
    diff_percent: float = Field(default=0.0, alias="diffPercent")
    severity: Severity = Severity.NONE


class Viewport(BaseModel):
    model_config = ConfigDict(frozen=True)

    width: int
    height: int


class ComparisonStats(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    total_pixels: int = Field(alias="totalPixels")
    mismatched_pixels: int = Field(alias="mismatchedPixels")
    match_percentage: float = Field(alias="matchPercentage")
    diff_percentage: float = Field(alias="diffPercentage")
    viewport: Viewport
    is_full_page: bool = Field(default=False, alias="isFullPage")


class ComparisonResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    timestamp: int  # epoch milliseconds
    url: str = ""
    design_image: bytes = Field(repr=False)
    screenshot_image: bytes = Field(repr=False)
    diff_image: bytes = Field(repr=False)
    stats: ComparisonStats
    regions: list[Region] = Field(default_factory=list)

    def to_payload(self, inline_images: bool = True) -> dict:
        """Transport form: camelCase keys, images as PNG data URIs.

        With ``inline_images`` off the three image keys are left out.
        """
        payload = {
            "id": self.id,
            "timestamp": self.timestamp,
            "url": self.url,
            "stats": self.stats.model_dump(by_alias=True),
            "regions": [r.model_dump(by_alias=True, mode="json") for r in self.regions],
        }
        if inline_images:
            payload["designImage"] = png_data_uri(self.design_image)
            payload["screenshotImage"] = png_data_uri(self.screenshot_image)
            payload["diffImage"] = png_data_uri(self.diff_image)
        return payload


def png_data_uri(data: bytes) -> str:
    return "data:image/png;base64," + base64.b64encode(data).decode("ascii")
