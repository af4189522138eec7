"""
Services layer for the Lookup Assistant.
"""

from .clinic import ClinicAssistant
from .completion import CompletionService
from .composer import ResponseComposer
from .extraction import FilterExtractor
from .restaurant import DishValidator, MenuAssistant

__all__ = [
    "ClinicAssistant",
    "CompletionService",
    "DishValidator",
    "FilterExtractor",
    "MenuAssistant",
    "ResponseComposer",
]
