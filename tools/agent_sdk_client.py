"""Claude Agent SDK wrapper used by the writing assistant."""

import logging
from typing import Optional

from claude_agent_sdk import (
    query,
    ClaudeAgentOptions,
    ResultMessage,
    AssistantMessage,
)

from config.exceptions import GenerationError
from config.settings import Settings

logger = logging.getLogger(__name__)


class AgentSDKClient:
    """Thin async client around claude_agent_sdk.query().

    Every failure surfaces as GenerationError so callers only handle one
    exception family for the generative service.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or Settings()
        self.total_calls = 0

    async def chat(
        self,
        system_prompt: str,
        user_prompt: str,
        model: Optional[str] = None,
    ) -> str:
        """Send a single-turn request and return the text result.

        The final ResultMessage wins; the first assistant text block is
        used when the result is empty.

        Raises:
            GenerationError: If the query fails.
        """
        model = model or self.settings.llm_model_writing
        self.total_calls += 1

        logger.debug(
            "AgentSDK call #%d: model=%s, prompt=%d chars",
            self.total_calls, model, len(user_prompt),
        )

        try:
            result_text = ""
            # The query() generator must be exhausted; leaving the loop early
            # breaks its internal cancel scopes.
            async for message in query(
                prompt=user_prompt,
                options=ClaudeAgentOptions(
                    system_prompt=system_prompt,
                    model=model,
                    max_turns=1,
                ),
            ):
                if isinstance(message, ResultMessage):
                    result_text = message.result or result_text
                    logger.debug(
                        "AgentSDK result: %d chars, cost=$%s",
                        len(result_text),
                        message.total_cost_usd,
                    )
                elif isinstance(message, AssistantMessage) and not result_text:
                    result_text = next(
                        (b.text for b in message.content if getattr(b, "text", None)), ""
                    )
        except Exception as e:
            raise GenerationError(f"Agent SDK query failed: {e}") from e

        if not result_text:
            logger.warning("AgentSDK returned no content")

        return result_text.strip()
