"""
Configuration management for the Lookup Assistant.

This module provides centralized configuration using Pydantic settings
for type-safe environment variable management.
"""

import sys
from functools import lru_cache
from pathlib import Path

from loguru import logger
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DATA_DIR = Path(__file__).parent / "data"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Azure OpenAI Configuration
    azure_openai_api_key: str = Field(..., alias="AZURE_OPENAI_API_KEY")
    azure_openai_endpoint: str = Field(..., alias="AZURE_OPENAI_ENDPOINT")
    azure_openai_deployment: str = Field(
        default="gpt-4o", alias="AZURE_OPENAI_DEPLOYMENT"
    )
    azure_openai_api_version: str = Field(
        default="2024-06-01", alias="AZURE_OPENAI_API_VERSION"
    )

    # Completion Call Configuration
    completion_timeout: float = Field(default=10.0, gt=0, alias="COMPLETION_TIMEOUT")
    completion_temperature: float = Field(default=0.0, alias="COMPLETION_TEMPERATURE")

    # Dataset Configuration
    clinic_data_path: Path = Field(
        default=DATA_DIR / "clinic_appointments.json", alias="CLINIC_DATA_PATH"
    )
    menu_data_path: Path = Field(
        default=DATA_DIR / "restaurant_menu.json", alias="MENU_DATA_PATH"
    )
    validate_dishes: bool = Field(default=True, alias="VALIDATE_DISHES")

    # Application Configuration
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=8080, alias="PORT")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once,
    improving performance for repeated access.
    """
    return Settings()


WEEKDAY_NAMES = {
    0: "Monday",
    1: "Tuesday",
    2: "Wednesday",
    3: "Thursday",
    4: "Friday",
    5: "Saturday",
    6: "Sunday",
}

# Reverse lookup: weekday name -> weekday index
WEEKDAY_NAME_TO_INDEX = {name.lower(): idx for idx, name in WEEKDAY_NAMES.items()}

CURRENCY_SYMBOL = "₹"

# Canned replies
NO_DOCTORS_REPLY = "No doctors available for the requested criteria."
NO_DISHES_REPLY = "Sorry, no suitable dishes found for your preferences."
COMPOSE_APOLOGY = "An error occurred while generating the response."
MENU_COMPOSE_APOLOGY = "An error occurred while generating a response."
GENERIC_ERROR = "An error occurred while processing your request."


def weekday_sort_key(day: str) -> tuple:
    """Order weekday names Monday first; unknown names go last, alphabetically."""
    return (WEEKDAY_NAME_TO_INDEX.get(day.lower(), len(WEEKDAY_NAMES)), day)


def configure_logging(level: str) -> None:
    """Route loguru output to stderr at the configured level."""
    logger.remove()
    logger.add(sys.stderr, level=level.upper())
