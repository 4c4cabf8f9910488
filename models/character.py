"""Character data model."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Character:
    """Represents a character card."""
    id: str
    name: str = ""
    age: str = ""  # Free text, e.g. "34" or "ancient"
    appearance: str = ""
    backstory: str = ""
    personality: str = ""
    role_in_story: str = ""
