from enum import IntEnum
from typing import Literal

from pydantic import BaseModel, Field


class Corner(IntEnum):
    """Screen corner an overlay is drawn in."""

    top_left = 0
    top_right = 1
    bottom_left = 2
    bottom_right = 3


class WatchConfig(BaseModel):
    ignore_patterns: list[str] = Field(default_factory=lambda: [
        ".git", "node_modules", "__pycache__", ".venv", ".tox"
    ])


class HotPotatoConfig(BaseModel):
    time_multiplier_seconds: int = Field(default=60, gt=0)
    corner_placement: Corner = Corner.top_right
    watch: WatchConfig = Field(default_factory=WatchConfig)
    log_level: Literal["debug", "info", "warn", "error"] = "info"
    log_format: Literal["text", "json"] = "text"
