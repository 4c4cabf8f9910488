"""Tools package — Agent SDK client, text utilities, and JSON parsing."""

from tools.agent_sdk_client import AgentSDKClient
from tools.llm_client import parse_json_response, parse_json_object, parse_json_list
from tools.text_utils import (
    count_words,
    truncate_for_prompt,
    slugify,
    sanitize_filename,
    plot_point_line,
)

__all__ = [
    "AgentSDKClient",
    "parse_json_response",
    "parse_json_object",
    "parse_json_list",
    "count_words",
    "truncate_for_prompt",
    "slugify",
    "sanitize_filename",
    "plot_point_line",
]
