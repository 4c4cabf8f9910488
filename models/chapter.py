"""Chapter and outline data models."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Chapter:
    """Represents a single manuscript chapter."""
    id: str
    title: str = ""
    content: str = ""
    summary: Optional[str] = None  # Filled in by the writing assistant on request


@dataclass(frozen=True)
class PlotPoint:
    """Represents one entry of the story outline."""
    id: str
    title: str = ""
    description: str = ""
