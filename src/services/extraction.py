"""
Filter Extractor - Turns a free-text message into a structured filter.
"""

from typing import Generic, Type, TypeVar

from loguru import logger
from pydantic import TypeAdapter

from src.models.filters import LenientFilter
from src.models.result import Err
from src.services.completion import CompletionService, decode_payload

F = TypeVar("F", bound=LenientFilter)


class FilterExtractor(Generic[F]):
    """
    Asks the completion service for a JSON filter and decodes it.

    Extraction fails open: when the service errors, times out or returns
    something that is not a JSON object, an empty filter is returned and
    matching proceeds unfiltered.
    """

    def __init__(
        self,
        completion: CompletionService,
        prompt_template: str,
        filter_model: Type[F],
    ):
        self._completion = completion
        self._prompt_template = prompt_template
        self._filter_model = filter_model
        self._adapter = TypeAdapter(filter_model)

    def build_prompt(self, user_text: str) -> str:
        return self._prompt_template.format(query=user_text)

    async def extract(self, user_text: str) -> F:
        """
        Extract a filter from the user's message.

        Args:
            user_text: Raw message typed by the user

        Returns:
            The decoded filter, or an empty filter on any failure
        """
        logger.info(f"Extracting {self._filter_model.__name__} from: '{user_text[:100]}'")
        empty = self._filter_model()

        result = await self._completion.complete(self.build_prompt(user_text))
        if isinstance(result, Err):
            logger.warning(f"Filter extraction failed ({result.kind}): {result.message}")
            return empty

        decoded = decode_payload(result.value, self._adapter)
        if isinstance(decoded, Err):
            logger.warning(f"Filter extraction returned unusable output ({decoded.kind})")

        query = decoded.unwrap_or(empty)
        logger.info(f"Extracted filter: {query.model_dump(exclude_none=True)}")
        return query
