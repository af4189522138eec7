"""
Static dataset loading.

Both datasets are JSON arrays read once at startup. A malformed file
raises, since the service cannot answer anything without its data.
"""

from pathlib import Path
from typing import List

from loguru import logger
from pydantic import TypeAdapter

from src.models.clinic import DoctorRecord
from src.models.restaurant import DishRecord

_DOCTORS = TypeAdapter(List[DoctorRecord])
_DISHES = TypeAdapter(List[DishRecord])


def load_doctors(path: Path) -> List[DoctorRecord]:
    """Load the clinic dataset."""
    doctors = _DOCTORS.validate_json(Path(path).read_bytes())
    logger.info(f"Loaded {len(doctors)} doctors from {path}")
    return doctors


def load_dishes(path: Path) -> List[DishRecord]:
    """Load the restaurant menu dataset."""
    dishes = _DISHES.validate_json(Path(path).read_bytes())
    logger.info(f"Loaded {len(dishes)} dishes from {path}")
    return dishes
