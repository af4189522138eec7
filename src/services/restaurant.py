"""
Menu Assistant - Dish search over the restaurant menu.

Flow: extract a MenuFilter from the message, match dishes, optionally
let the completion service double-check the matches, then phrase one
reply.
"""

from typing import List, Sequence

from loguru import logger
from pydantic import TypeAdapter

from src.config import MENU_COMPOSE_APOLOGY, NO_DISHES_REPLY
from src.models.filters import MenuFilter
from src.models.restaurant import DishRecord, DishVerdict
from src.models.result import Err
from src.services.completion import CompletionService, decode_payload
from src.services.composer import ResponseComposer
from src.services.extraction import FilterExtractor

MENU_EXTRACTION_PROMPT = """Extract structured information from the following user query:
Query: "{query}"
Return a JSON object with:
- dietary (Vegetarian, Non-Vegetarian, Vegan, Gluten-Free, or null if not mentioned)
- price_range (Numeric value if mentioned, or null)
- restaurant (Restaurant name if mentioned, or null)
- ingredients (List of ingredients if mentioned, or empty list)
- spiciness (Mild, Medium, Spicy, or null)
- gluten_free (Yes if the user asks for gluten-free food, or null)

Example Output (return only valid JSON, no Markdown formatting):
{{
  "dietary": "Vegetarian",
  "price_range": 200,
  "restaurant": "Dominos",
  "ingredients": ["cheese", "tomato"],
  "spiciness": "Medium",
  "gluten_free": "Yes"
}}"""

MENU_VALIDATION_PROMPT = """Validate the following dishes based on user preferences:
- Dietary Preference: "{dietary}"
- Restaurant: "{restaurant}"
- Price Range: "{price_range}"
- Gluten-Free: "{gluten_free}"

Return a JSON array where each object contains:
{{
  "dish_name": "Dish Name",
  "is_valid": true or false,
  "reason": "Why the dish is valid/invalid"
}}

Dishes to validate:
{dishes}"""

MENU_REPLY_PROMPT = """Based on the following user query and matching dishes, generate a helpful and concise response:

User Query: "{query}"

Matching Dishes:
{details}

Return a friendly response that:
- Mentions 2-3 matching dishes by name
- Highlights dietary or spiciness preferences if matched
- Is short and helpful (within 3-4 lines)"""

_VERDICTS = TypeAdapter(List[DishVerdict])


def match_dishes(dishes: Sequence[DishRecord], query: MenuFilter) -> List[DishRecord]:
    """
    Keep the dishes satisfying every field set on the query.

    Dietary category and spice level are case-insensitive exact matches,
    restaurant a case-insensitive substring, price an upper bound.
    """
    dietary = query.dietary.lower() if query.dietary else None
    restaurant = query.restaurant.lower() if query.restaurant else None
    spiciness = query.spiciness.lower() if query.spiciness else None
    gluten_free = query.wants_gluten_free

    matches = []
    for dish in dishes:
        if dietary and dish.dietary_info.lower() != dietary:
            continue
        if query.price_range is not None and dish.price > query.price_range:
            continue
        if restaurant and restaurant not in dish.restaurant_name.lower():
            continue
        if spiciness and (dish.spice_level or "").lower() != spiciness:
            continue
        if gluten_free and not dish.gluten_free:
            continue
        matches.append(dish)
    return matches


class DishValidator:
    """
    Second opinion from the completion service on the matched dishes.

    Only dishes with a valid verdict are kept. Any failure keeps the
    matched list unchanged.
    """

    def __init__(self, completion: CompletionService):
        self._completion = completion

    def build_prompt(self, dishes: Sequence[DishRecord], query: MenuFilter) -> str:
        lines = "\n".join(
            f"- {d.dish_name}: {d.description}, "
            f"Gluten-Free: {'Yes' if d.gluten_free else 'No'}, Price: {d.price:g}"
            for d in dishes
        )
        return MENU_VALIDATION_PROMPT.format(
            dietary=query.dietary or "None",
            restaurant=query.restaurant or "None",
            price_range=f"{query.price_range:g}" if query.price_range else "None",
            gluten_free="Yes" if query.wants_gluten_free else "No",
            dishes=lines,
        )

    async def validate(
        self, dishes: Sequence[DishRecord], query: MenuFilter
    ) -> List[DishRecord]:
        if not dishes:
            return []

        result = await self._completion.complete(self.build_prompt(dishes, query))
        if isinstance(result, Err):
            logger.warning(f"Dish validation failed ({result.kind}), keeping all matches")
            return list(dishes)

        decoded = decode_payload(result.value, _VERDICTS)
        if isinstance(decoded, Err):
            logger.warning(f"Dish validation returned unusable output ({decoded.kind}), keeping all matches")
            return list(dishes)

        valid_names = {v.dish_name for v in decoded.value if v.is_valid}
        validated = [d for d in dishes if d.dish_name in valid_names]
        logger.info(f"Validated {len(validated)} of {len(dishes)} dish(es)")
        return validated


class MenuAssistant:
    """Answers free-text food questions against the menu dataset."""

    def __init__(
        self,
        completion: CompletionService,
        dishes: Sequence[DishRecord],
        validate_dishes: bool = True,
    ):
        self._dishes = tuple(dishes)
        self.extractor = FilterExtractor(completion, MENU_EXTRACTION_PROMPT, MenuFilter)
        self.validator = DishValidator(completion) if validate_dishes else None
        self.composer = ResponseComposer(
            completion, MENU_REPLY_PROMPT, apology=MENU_COMPOSE_APOLOGY
        )

    @property
    def dishes(self) -> tuple:
        return self._dishes

    async def reply(self, message: str) -> str:
        query = await self.extractor.extract(message)

        matched = match_dishes(self._dishes, query)
        logger.info(f"Found {len(matched)} dish(es) matching filters")

        if self.validator is not None:
            matched = await self.validator.validate(matched, query)

        if not matched:
            return NO_DISHES_REPLY

        return await self.composer.compose(message, [d.summary for d in matched])
