"""Configuration model and helpers for codec limits."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, Field, field_validator

from blazor_pack.framing.varint import MAX_FRAME_LENGTH
from blazor_pack.messagepack.decoder import MAX_NESTING_DEPTH


class CodecConfig(BaseModel):
    """Limits and formatting options shared by the decode and encode paths."""

    max_depth: int = Field(
        default=MAX_NESTING_DEPTH,
        ge=1,
        le=200,
        description="Deepest container nesting accepted from the wire or from JSON.",
    )
    max_frame_length: int = Field(
        default=MAX_FRAME_LENGTH,
        ge=1,
        le=MAX_FRAME_LENGTH,
        description="Largest frame payload accepted when splitting a buffer.",
    )
    json_indent: Optional[int] = Field(
        default=None, ge=0, le=8, description="Indentation for rendered JSON; compact when unset."
    )
    preserve_int_format: bool = Field(
        default=False,
        description="Re-emit recorded integer widths instead of the smallest tag.",
    )

    @field_validator("json_indent", mode="before")
    @classmethod
    def _empty_indent(cls, value: Any) -> Optional[int]:
        if value in ("", "none", "None"):
            return None
        return value


DEFAULT_CONFIG = CodecConfig()


def load_config(path: Optional[Path]) -> CodecConfig:
    """Load a YAML config file, falling back to defaults when no path is given."""

    if path is None:
        return CodecConfig()
    with Path(path).open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a mapping")
    return CodecConfig(**data)


def dump_config(config: CodecConfig, path: Path) -> None:
    """Write a config back to YAML."""

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as handle:
        yaml.safe_dump(config.model_dump(mode="json"), handle, sort_keys=False)
