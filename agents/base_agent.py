"""Base agent class with common LLM and prompt utilities."""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Optional

from config.settings import Settings
from tools.agent_sdk_client import AgentSDKClient

logger = logging.getLogger(__name__)

_PROMPTS_DIR = Path(__file__).parent.parent / "config" / "prompts"


@lru_cache(maxsize=32)
def _read_prompt_file(path: str) -> str:
    """Read and cache a prompt file by absolute path string."""
    return Path(path).read_text(encoding="utf-8")


def extract_section(template: str, section_header: str) -> str:
    """Return the body under a '## <section_header>' heading.

    The section ends at the next '## ' heading.
    """
    capturing = False
    result = []
    for line in template.split("\n"):
        if line.startswith("## "):
            if capturing:
                break
            capturing = line[3:].strip() == section_header
            continue
        if capturing:
            result.append(line)
    return "\n".join(result).strip()


class BaseAgent:
    """Base class for agents that talk to the generative service.

    Subclasses name a markdown template in ``template_name``; each task is
    one '## ' section of it, rendered with ``str.format``.
    """

    template_name: str = ""

    def __init__(
        self,
        llm_client: Optional[AgentSDKClient] = None,
        settings: Optional[Settings] = None,
    ):
        self.settings = settings or Settings()
        self.llm = llm_client or AgentSDKClient(self.settings)
        self._template = self._load_prompt(self.template_name) if self.template_name else ""

    def _load_prompt(self, template_name: str) -> str:
        path = _PROMPTS_DIR / f"{template_name}.md"
        if not path.exists():
            raise FileNotFoundError(f"Prompt template not found: {path}")
        return _read_prompt_file(str(path))

    def _render(self, section: str, **values) -> str:
        body = extract_section(self._template, section)
        if not body:
            raise KeyError(f"Prompt section '{section}' missing from {self.template_name}.md")
        return body.format(**values)

    @property
    def system_prompt(self) -> str:
        return extract_section(self._template, "System Prompt")
