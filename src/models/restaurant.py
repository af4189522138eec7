"""
Restaurant menu data models.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.config import CURRENCY_SYMBOL


class DishRecord(BaseModel):
    """
    A dish from the static menu dataset.

    The dataset uses mixed key styles (``Price``, ``Spice-Level``,
    ``Gluten-Free``), mapped here through aliases.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    dish_name: str = Field(description="Dish name")
    description: str = Field(default="", description="Short description")
    price: float = Field(alias="Price", ge=0, description="Price")
    dietary_info: str = Field(description="Dietary category, e.g. Vegetarian")
    spice_level: Optional[str] = Field(default=None, alias="Spice-Level")
    gluten_free: bool = Field(default=False, alias="Gluten-Free")
    restaurant_name: str = Field(description="Restaurant serving the dish")

    @field_validator("gluten_free", mode="before")
    @classmethod
    def missing_flag_is_false(cls, v):
        """``"Yes"``/``"No"`` parse as booleans; a missing flag means not gluten-free."""
        if v is None:
            return False
        return v

    @property
    def summary(self) -> str:
        """One-line description used in prompts."""
        return f"- {self.dish_name}: {self.description} (Price: {CURRENCY_SYMBOL}{self.price:g})"


class DishVerdict(BaseModel):
    """Validation verdict for a single dish returned by the completion service."""

    model_config = ConfigDict(extra="ignore")

    dish_name: str
    is_valid: bool = False
    reason: Optional[str] = None
