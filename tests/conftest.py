"""
Shared fixtures: fake completion backends and small datasets.
"""

import asyncio
from types import SimpleNamespace
from typing import List, Optional

import pytest

from src.models.clinic import DoctorRecord
from src.models.restaurant import DishRecord
from src.models.result import Err, Ok


class ScriptedCompletion:
    """Stands in for CompletionService, replaying canned replies in order."""

    def __init__(self, *replies):
        self._replies = list(replies)
        self.prompts: List[str] = []

    async def complete(self, prompt: str, timeout: Optional[float] = None):
        self.prompts.append(prompt)
        if not self._replies:
            return Err(message="no scripted reply left", kind="unexpected")
        reply = self._replies.pop(0)
        if isinstance(reply, Err):
            return reply
        return Ok(value=reply)


class FakeCompletions:
    """Mimics ``client.chat.completions`` of the OpenAI SDK."""

    def __init__(self, content: Optional[str] = None, exc: Exception = None, delay: float = 0):
        self.content = content
        self.exc = exc
        self.delay = delay
        self.calls: List[dict] = []
        self.cancelled = False

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.delay:
            try:
                await asyncio.sleep(self.delay)
            except asyncio.CancelledError:
                self.cancelled = True
                raise
        if self.exc is not None:
            raise self.exc
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


class FakeOpenAIClient:
    def __init__(self, **kwargs):
        self.chat = SimpleNamespace(completions=FakeCompletions(**kwargs))
        self.closed = False

    async def close(self):
        self.closed = True


@pytest.fixture
def scripted_completion():
    """Factory for ScriptedCompletion instances."""
    return ScriptedCompletion


@pytest.fixture
def fake_openai_client():
    """Factory for fake OpenAI clients."""
    return FakeOpenAIClient


@pytest.fixture
def doctors() -> List[DoctorRecord]:
    return [
        DoctorRecord(
            name="Ananya Sharma",
            specialization="Cardiologist",
            availability={"Monday": ["9:00-12:00", "14:00-17:00"], "Wednesday": ["10:00-13:00"]},
            consultation_fee=1200,
            rating=4.8,
        ),
        DoctorRecord(
            name="Rahul Verma",
            specialization="Dentist",
            availability={"Saturday": ["9:00-13:00"], "Tuesday": ["9:00-12:00"]},
            consultation_fee=600,
            rating=4.5,
        ),
        DoctorRecord(
            name="Vikram Singh",
            specialization="Orthopedic",
            availability={"Tuesday": ["14:00-16:00", "9:00-11:00"]},
            consultation_fee=1000,
            rating=4.3,
        ),
    ]


@pytest.fixture
def dishes() -> List[DishRecord]:
    return [
        DishRecord.model_validate(
            {
                "dish_name": "Paneer Tikka",
                "description": "Grilled cottage cheese",
                "Price": 250,
                "dietary_info": "Vegetarian",
                "Spice-Level": "Medium",
                "Gluten-Free": "Yes",
                "restaurant_name": "Spice Route",
            }
        ),
        DishRecord.model_validate(
            {
                "dish_name": "Margherita Pizza",
                "description": "Tomato, mozzarella and basil",
                "Price": 199,
                "dietary_info": "Vegetarian",
                "Spice-Level": "Mild",
                "Gluten-Free": "No",
                "restaurant_name": "Dominos",
            }
        ),
        DishRecord.model_validate(
            {
                "dish_name": "Chicken Chettinad",
                "description": "Peppery chicken curry",
                "Price": 340,
                "dietary_info": "Non-Vegetarian",
                "Spice-Level": "Spicy",
                "Gluten-Free": "Yes",
                "restaurant_name": "Spice Route",
            }
        ),
    ]
