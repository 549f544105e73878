"""Validation schema for the Klondike engine configuration."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, Field, field_validator

from .collaborators import DEFAULT_BACK_IMAGE


def _ensure_not_blank(value: str) -> str:
    if not value.strip():
        raise ValueError("Value must not be blank.")
    return value


class AssetConfig(BaseModel):
    theme: str = Field("default", description="Theme used to resolve card face images.")
    back_image: str = Field(DEFAULT_BACK_IMAGE, description="Image shown for face-down cards and failed lookups.")
    listing: Dict[str, List[str]] = Field(default_factory=dict, description="Image file names available per theme.")
    base_url: str = Field("", description="Prefix turning image paths into public URLs.")

    @field_validator("theme", "back_image")
    @classmethod
    def ensure_not_blank(cls, value: str) -> str:
        return _ensure_not_blank(value)


class EngineConfig(BaseModel):
    seed: Optional[int] = Field(None, description="Seed for the shuffler; None draws from system entropy.")
    auto_finish: bool = Field(True, description="Promote playable cards to the foundations after every move.")
    recycle_waste: bool = Field(True, description="Turn the waste back over when the stock runs out.")
    check_invariants: bool = Field(True, description="Assert table invariants after every mutation.")
    assets: AssetConfig = Field(default_factory=AssetConfig)


def load_config(path: Union[str, Path]) -> EngineConfig:
    payload = json.loads(Path(path).read_text(encoding="utf-8"))
    return EngineConfig.model_validate(payload)
