"""Writing Assistant: outline, character, and chapter generation.

Each method is one request to the generative service. Results are returned
as plain values or fresh entities; merging them into the live document is
the session's job (see ``NovelSession.generate`` and the ``*_into``
appliers below).
"""

import logging
from typing import Callable, Optional

from agents.base_agent import BaseAgent
from config.exceptions import GenerationError, GenerationParseError
from models.chapter import Chapter, PlotPoint
from models.character import Character
from models.document import find_chapter, new_character, new_plot_point, update_chapter
from models.novel import Novel
from tools.llm_client import parse_json_list, parse_json_object
from tools.text_utils import count_words, plot_point_line, truncate_for_prompt

logger = logging.getLogger(__name__)

TITLE_CONTENT_LIMIT = 4000
SUMMARY_CONTENT_LIMIT = 8000
EMPTY_CHAPTER_SUMMARY = "Chapter is empty."


def _outline_lines(outline: tuple[PlotPoint, ...]) -> str:
    if not outline:
        return "No outline defined yet."
    return "\n".join(f"- {plot_point_line(p.title, p.description)}" for p in outline)


def _character_lines(characters: tuple[Character, ...], empty: str = "No characters defined yet.") -> str:
    if not characters:
        return empty
    return "\n".join(f"- {c.name}: {c.personality}. Role: {c.role_in_story}" for c in characters)


def chapter_context(novel: Novel, chapter_id: str) -> tuple[Chapter, Optional[PlotPoint], Optional[PlotPoint]]:
    """Return the chapter with its matching and preceding plot points.

    The outline is read positionally: chapter N pursues plot point N.
    """
    for index, chapter in enumerate(novel.chapters):
        if chapter.id == chapter_id:
            current = novel.outline[index] if index < len(novel.outline) else None
            previous = novel.outline[index - 1] if 0 < index <= len(novel.outline) else None
            return chapter, current, previous
    raise GenerationError(f"Unknown chapter '{chapter_id}'", {"chapter_id": chapter_id})


class WritingAssistant(BaseAgent):
    """Generates story material from the current project context."""

    template_name = "writing_assistant"

    async def _ask(self, section: str, model: Optional[str] = None, **values) -> str:
        return await self.llm.chat(
            system_prompt=self.system_prompt,
            user_prompt=self._render(section, **values),
            model=model,
        )

    async def generate_outline(self, prompt: str) -> list[PlotPoint]:
        """Generate plot points for a story idea."""
        raw = await self._ask("Outline", prompt=prompt)
        try:
            items = parse_json_list(raw, key="outline")
        except ValueError as e:
            raise GenerationParseError(str(e), raw_response=raw) from e

        points = [
            new_plot_point(str(item.get("title") or ""), str(item.get("description") or ""))
            for item in items
            if isinstance(item, dict)
        ]
        if not points:
            raise GenerationParseError("Model returned no plot points", raw_response=raw)
        logger.info("Generated %d plot points", len(points))
        return points

    async def generate_character(self, description: str, role: str, novel: Novel) -> Character:
        """Generate a character that fits the novel's outline and cast."""
        raw = await self._ask(
            "Character",
            title=novel.title,
            outline=_outline_lines(novel.outline),
            characters=_character_lines(novel.characters, "No other characters defined yet."),
            description=description,
            role=role,
        )
        try:
            data = parse_json_object(raw)
        except ValueError as e:
            raise GenerationParseError(str(e), raw_response=raw) from e

        def text(*keys: str) -> str:
            for key in keys:
                if data.get(key) is not None:
                    return str(data[key])
            return ""

        name = text("name")
        if not name:
            raise GenerationParseError("Generated character has no name", raw_response=raw)
        return new_character(
            name=name,
            age=text("age"),
            appearance=text("appearance"),
            backstory=text("backstory"),
            personality=text("personality"),
            role_in_story=text("roleInStory", "role_in_story"),
        )

    async def generate_chapter_draft(self, novel: Novel, chapter_id: str) -> str:
        """Draft a chapter from its outline goal and what is written so far."""
        chapter, current, previous = chapter_context(novel, chapter_id)
        return await self._ask(
            "Chapter Draft",
            title=novel.title,
            chapter_title=chapter.title,
            current_plot_point=(
                plot_point_line(current.title, current.description) if current
                else "This chapter has no plot point assigned. Use the overall story context."
            ),
            previous_plot_point=(
                plot_point_line(previous.title, previous.description) if previous
                else "This is an early chapter, so establish the initial scene."
            ),
            current_content=chapter.content or "(The chapter is currently empty. You will be writing the beginning.)",
            characters=_character_lines(novel.characters),
            outline_titles="\n".join(f"- {p.title}" for p in novel.outline) or "No outline defined yet.",
        )

    async def generate_chapter_content(
        self,
        prompt: str,
        novel: Novel,
        chapter_id: str,
        tone: str = "",
    ) -> str:
        """Generate a passage for a chapter following the author's request."""
        chapter, _, previous = chapter_context(novel, chapter_id)
        previous_context = ""
        if previous:
            previous_context = (
                "Context from Previous Plot Point:\n"
                f"{plot_point_line(previous.title, previous.description)}\n"
            )
        return await self._ask(
            "Chapter Content",
            title=novel.title,
            characters=_character_lines(novel.characters),
            outline=_outline_lines(novel.outline),
            previous_context=previous_context,
            word_count=count_words(chapter.content),
            current_content=chapter.content or "(This is the beginning of the chapter.)",
            tone_line=f"Desired Tone/Style: {tone}\n" if tone else "",
            prompt=prompt,
        )

    async def suggest_chapter_titles(self, novel_title: str, content: str) -> list[str]:
        """Suggest five alternative chapter titles."""
        if not content.strip():
            raise GenerationError("Write some content before suggesting titles")
        raw = await self._ask(
            "Chapter Titles",
            title=novel_title,
            content=truncate_for_prompt(content, TITLE_CONTENT_LIMIT),
        )
        try:
            titles = parse_json_list(raw, key="titles")
        except ValueError as e:
            raise GenerationParseError(str(e), raw_response=raw) from e
        return [str(t) for t in titles if str(t).strip()]

    async def summarize_chapter(self, chapter_title: str, content: str) -> str:
        """Summarize a chapter in one paragraph."""
        if not content:
            return EMPTY_CHAPTER_SUMMARY
        return await self._ask(
            "Chapter Summary",
            model=self.settings.llm_model_summary,
            chapter_title=chapter_title,
            content=truncate_for_prompt(content, SUMMARY_CONTENT_LIMIT),
        )


# ---------------------------------------------------------------------------
# Appliers for NovelSession.generate: merge a result into the latest document
# ---------------------------------------------------------------------------

def append_content_into(chapter_id: str) -> Callable[[Novel, str], Novel]:
    """Append generated text to a chapter, separated by a blank line."""
    def apply(novel: Novel, text: str) -> Novel:
        chapter = find_chapter(novel, chapter_id)
        if chapter is None:
            return novel
        content = f"{chapter.content}\n\n{text}" if chapter.content else text
        return update_chapter(novel, chapter_id, content=content)
    return apply


def replace_content_into(chapter_id: str) -> Callable[[Novel, str], Novel]:
    def apply(novel: Novel, text: str) -> Novel:
        return update_chapter(novel, chapter_id, content=text)
    return apply


def summary_into(chapter_id: str) -> Callable[[Novel, str], Novel]:
    def apply(novel: Novel, summary: str) -> Novel:
        return update_chapter(novel, chapter_id, summary=summary)
    return apply
