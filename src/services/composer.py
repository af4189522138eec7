"""
Response Composer - Turns match summaries into one natural-language reply.
"""

from typing import Sequence

from loguru import logger

from src.config import COMPOSE_APOLOGY
from src.models.result import Err
from src.services.completion import CompletionService


class ResponseComposer:
    """
    Hands match summaries back to the completion service for phrasing.

    The prompt template receives ``{query}`` and ``{details}``. When the
    service fails, the fixed apology string is returned instead.
    """

    def __init__(
        self,
        completion: CompletionService,
        prompt_template: str,
        apology: str = COMPOSE_APOLOGY,
    ):
        self._completion = completion
        self._prompt_template = prompt_template
        self._apology = apology

    def build_prompt(self, user_text: str, summaries: Sequence[str]) -> str:
        return self._prompt_template.format(query=user_text, details="\n".join(summaries))

    async def compose(self, user_text: str, summaries: Sequence[str]) -> str:
        result = await self._completion.complete(self.build_prompt(user_text, summaries))
        if isinstance(result, Err):
            logger.warning(f"Response composition failed ({result.kind}): {result.message}")
        else:
            logger.info(f"Composed reply ({len(result.value)} chars)")

        return result.unwrap_or(self._apology).strip()
