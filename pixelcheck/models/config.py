"""Configuration models for pixelcheck."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class ViewportConfig(BaseModel):
    width: int = 1920
    height: int = 1080


class BasicAuthConfig(BaseModel):
    username: str
    password: str

    @field_validator("password", mode="before")
    @classmethod
    def resolve_env_password(cls, v: str) -> str:
        if isinstance(v, str) and v.startswith("env:"):
            env_var = v[4:]
            resolved = os.environ.get(env_var)
            if resolved is None:
                raise ValueError(f"Environment variable '{env_var}' not set")
            return resolved
        return v


class RenderConfig(BaseModel):
    # Hard caps to bound screenshot memory
    max_width: int = 3840
    max_height: int = 15000

    # Viewports taller than this are captured as full page
    full_page_threshold: int = 2000

    navigation_timeout_ms: int = 90000
    fallback_settle_ms: int = 3000
    settle_ms: int = 2000
    launch_timeout_ms: int = 60000

    headless: bool = True
    user_agent: Optional[str] = None
    default_viewport: ViewportConfig = Field(default_factory=ViewportConfig)


class DiffConfig(BaseModel):
    threshold: float = 0.1
    # True disables anti-aliasing detection, so AA pixels count as differences
    include_aa: bool = True

    @field_validator("threshold")
    @classmethod
    def check_threshold(cls, v: float) -> float:
        if not 0.0 <= v <= 1.0:
            raise ValueError("threshold must be between 0 and 1")
        return v


class StoreConfig(BaseModel):
    retention_seconds: int = 30 * 60
    sweep_interval_seconds: int = 30 * 60


class ComparisonConfig(BaseModel):
    render: RenderConfig = Field(default_factory=RenderConfig)
    diff: DiffConfig = Field(default_factory=DiffConfig)
    store: StoreConfig = Field(default_factory=StoreConfig)

    # Reference images above this size are rejected
    max_reference_bytes: int = 20 * 1024 * 1024

    auth: Optional[BasicAuthConfig] = None
    output_dir: str = "./pixelcheck-reports"

    @classmethod
    def load(cls, path: str | Path) -> "ComparisonConfig":
        """Load config from a JSON file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")
        with open(path) as f:
            data = json.load(f)
        return cls(**data)

    def save(self, path: str | Path) -> None:
        """Save config to a JSON file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            json.dump(self.model_dump(), f, indent=2)
