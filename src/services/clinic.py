"""
Clinic Assistant - Doctor search and appointment-slot lookup.

Flow: extract a ClinicFilter from the message, match doctors, resolve
the requested slot for every match, then phrase one reply.
"""

from typing import List, Sequence

from loguru import logger

from src.config import CURRENCY_SYMBOL, NO_DOCTORS_REPLY, weekday_sort_key
from src.models.clinic import DoctorMatch, DoctorRecord, SlotResolution, SlotStatus
from src.models.filters import ClinicFilter, Hour
from src.services.completion import CompletionService
from src.services.composer import ResponseComposer
from src.services.extraction import FilterExtractor
from src.services.slots import parse_hour_range, resolve_slot

CLINIC_EXTRACTION_PROMPT = """Extract structured information from the user query:
Query: "{query}"
Return only a JSON object, without Markdown formatting:
{{
  "doctor_name": "Doctor's Name" or null,
  "specialization": "Specialization" or null,
  "date": "YYYY-MM-DD" or null,
  "time": "HH:MM" or null
}}"""

CLINIC_REPLY_PROMPT = (
    'User Query: "{query}". Response: {details}. '
    "Generate only a single professional response, ensuring clarity."
)


def covers_hour(ranges: Sequence[str], hour: int) -> bool:
    """True when some range contains ``hour`` as ``start <= hour < end``."""
    for text in ranges:
        bounds = parse_hour_range(text)
        if bounds is not None and bounds[0] <= hour < bounds[1]:
            return True
    return False


def match_doctors(doctors: Sequence[DoctorRecord], query: ClinicFilter) -> List[DoctorRecord]:
    """
    Keep the doctors satisfying every field set on the query.

    Name is a case-insensitive substring match, specialization a
    case-insensitive exact match. A doctor who does not work on the
    requested weekday is dropped, and so is one whose ranges for that
    day do not contain the requested hour.
    """
    weekday = query.weekday
    requested = query.requested_time
    name = query.doctor_name.lower() if query.doctor_name else None
    specialization = query.specialization.lower() if query.specialization else None

    matches = []
    for doctor in doctors:
        if name and name not in doctor.name.lower():
            continue
        if specialization and doctor.specialization.lower() != specialization:
            continue
        if weekday and weekday not in doctor.availability:
            continue
        if weekday and isinstance(requested, Hour):
            if not covers_hour(doctor.ranges_for(weekday), requested.value):
                continue
        matches.append(doctor)
    return matches


def describe_resolution(
    doctor: DoctorRecord, query: ClinicFilter, resolution: SlotResolution
) -> str:
    """Human-readable availability message for one doctor."""
    day = resolution.weekday
    date_text = query.date.isoformat() if query.date else ""
    time_text = (query.time or "").strip()

    if resolution.status == SlotStatus.DAY_AGNOSTIC:
        return (
            f"✅ Dr. {doctor.name} is available. "
            f"Consultation fee: **{CURRENCY_SYMBOL}{doctor.consultation_fee:.2f}**."
        )
    if resolution.status == SlotStatus.NOT_ON_DAY:
        return f"❌ No available slots on {day}."
    if resolution.status == SlotStatus.DAY_SCHEDULE:
        times = ", ".join(w.label for w in resolution.windows)
        return (
            f"✅ Dr. {doctor.name} is available on {day}, {date_text} "
            f"at the following times: **{times}**."
        )
    if resolution.status == SlotStatus.EXACT_MATCH:
        return (
            f"✅ Dr. {doctor.name} is available at {resolution.window.label} "
            f"on {day}, {date_text}. Would you like to book this slot?"
        )
    if resolution.status == SlotStatus.NEAREST_LATER:
        return (
            f"❌ Dr. {doctor.name} is **not available** at {time_text} on {day}. "
            f"Nearest available slot: **{resolution.window.label}**."
        )
    return f"❌ No available slots at {time_text} on {day}."


def find_available_doctors(
    doctors: Sequence[DoctorRecord], query: ClinicFilter
) -> List[DoctorMatch]:
    """
    Match doctors and resolve the requested slot for each of them.

    Returns:
        Matches ordered by descending rating; empty when nothing matches
    """
    weekday = query.weekday
    requested = query.requested_time

    matched = match_doctors(doctors, query)
    logger.info(f"Found {len(matched)} doctor(s) matching filters (weekday={weekday})")

    results = []
    for doctor in matched:
        ranges = doctor.ranges_for(weekday) if weekday else []
        resolution = resolve_slot(weekday, requested, ranges)
        logger.debug(f"Dr. {doctor.name}: {resolution.status.value}")
        results.append(
            DoctorMatch(
                doctor=doctor.name,
                specialization=doctor.specialization,
                available_days=sorted(doctor.available_days, key=weekday_sort_key),
                message=describe_resolution(doctor, query, resolution),
                consultation_fee=doctor.consultation_fee,
                rating=doctor.rating,
                resolution=resolution,
            )
        )

    results.sort(key=lambda m: m.rating, reverse=True)
    return results


class ClinicAssistant:
    """Answers free-text appointment questions against the clinic dataset."""

    def __init__(self, completion: CompletionService, doctors: Sequence[DoctorRecord]):
        self._doctors = tuple(doctors)
        self.extractor = FilterExtractor(completion, CLINIC_EXTRACTION_PROMPT, ClinicFilter)
        self.composer = ResponseComposer(completion, CLINIC_REPLY_PROMPT)

    @property
    def doctors(self) -> tuple:
        return self._doctors

    async def reply(self, message: str) -> str:
        query = await self.extractor.extract(message)
        matches = find_available_doctors(self._doctors, query)

        if not matches:
            logger.info("No doctors matched the given filters")
            return NO_DOCTORS_REPLY

        return await self.composer.compose(message, [m.message for m in matches])
