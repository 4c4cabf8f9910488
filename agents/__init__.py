"""Agents package — generative writing assistant."""

from agents.base_agent import BaseAgent
from agents.writing_assistant import (
    WritingAssistant,
    chapter_context,
    append_content_into,
    replace_content_into,
    summary_into,
)

__all__ = [
    "BaseAgent",
    "WritingAssistant",
    "chapter_context",
    "append_content_into",
    "replace_content_into",
    "summary_into",
]
