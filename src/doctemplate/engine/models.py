"""Data models for template processing."""

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field


class ProcessResult(BaseModel):
    """Outcome of filling one template."""

    template_path: Path
    output_path: Path
    cache_path: Optional[Path] = None  # Set when entered values were saved
    placeholder_count: int = 0
    entered_values: dict[str, str] = Field(default_factory=dict)
