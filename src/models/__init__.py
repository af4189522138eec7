"""
Data models for the Lookup Assistant.
"""

from .clinic import DoctorMatch, DoctorRecord, SlotResolution, SlotStatus, SlotWindow
from .filters import Absent, ClinicFilter, Hour, MenuFilter, RequestedTime
from .restaurant import DishRecord, DishVerdict
from .result import Err, Ok, Result

__all__ = [
    "DoctorRecord",
    "DoctorMatch",
    "SlotWindow",
    "SlotStatus",
    "SlotResolution",
    "ClinicFilter",
    "MenuFilter",
    "Hour",
    "Absent",
    "RequestedTime",
    "DishRecord",
    "DishVerdict",
    "Ok",
    "Err",
    "Result",
]
