"""
Unit tests for the filter extractor and response composer.
"""

import pytest

from src.config import COMPOSE_APOLOGY
from src.models.filters import ClinicFilter, MenuFilter
from src.models.result import Err
from src.services.clinic import CLINIC_EXTRACTION_PROMPT, match_doctors
from src.services.composer import ResponseComposer
from src.services.extraction import FilterExtractor
from src.services.restaurant import MENU_EXTRACTION_PROMPT


class TestFilterExtractor:

    @pytest.mark.asyncio
    async def test_decodes_fenced_json(self, scripted_completion):
        completion = scripted_completion('```json\n{"spiciness": "Mild", "price_range": 300}\n```')
        extractor = FilterExtractor(completion, MENU_EXTRACTION_PROMPT, MenuFilter)

        query = await extractor.extract("Something mild under 300")

        assert query.spiciness == "Mild"
        assert query.price_range == 300
        assert 'Query: "Something mild under 300"' in completion.prompts[0]

    @pytest.mark.asyncio
    async def test_prompt_lists_the_clinic_fields(self, scripted_completion):
        completion = scripted_completion("{}")
        extractor = FilterExtractor(completion, CLINIC_EXTRACTION_PROMPT, ClinicFilter)

        await extractor.extract("hi")

        for field in ("doctor_name", "specialization", "date", "time"):
            assert f'"{field}"' in completion.prompts[0]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("reply", [
        Err(message="timed out", kind="timeout"),
        Err(message="rate limited", kind="api"),
        "I could not understand that.",
        '{"specialization": "Dentist"',
        '["Dentist"]',
    ])
    async def test_failures_yield_empty_filter(self, scripted_completion, reply):
        extractor = FilterExtractor(scripted_completion(reply), CLINIC_EXTRACTION_PROMPT, ClinicFilter)

        query = await extractor.extract("dentist please")

        assert query == ClinicFilter()
        assert query.is_empty

    @pytest.mark.asyncio
    async def test_failed_extraction_matches_whole_dataset(self, scripted_completion, doctors):
        completion = scripted_completion(Err(message="timed out", kind="timeout"))
        extractor = FilterExtractor(completion, CLINIC_EXTRACTION_PROMPT, ClinicFilter)

        query = await extractor.extract("anything")

        assert match_doctors(doctors, query) == doctors


class TestResponseComposer:

    @pytest.mark.asyncio
    async def test_joins_summaries_and_trims(self, scripted_completion):
        completion = scripted_completion("\n  Here you go.  \n")
        composer = ResponseComposer(completion, "Q: {query}\nA:\n{details}")

        reply = await composer.compose("find food", ["- one", "- two"])

        assert reply == "Here you go."
        assert completion.prompts[0] == "Q: find food\nA:\n- one\n- two"

    @pytest.mark.asyncio
    async def test_failure_returns_apology(self, scripted_completion):
        composer = ResponseComposer(scripted_completion(Err(message="down")), "{query} {details}")
        assert await composer.compose("x", ["y"]) == COMPOSE_APOLOGY

    @pytest.mark.asyncio
    async def test_custom_apology(self, scripted_completion):
        composer = ResponseComposer(
            scripted_completion(Err(message="down")), "{query} {details}", apology="Sorry!"
        )
        assert await composer.compose("x", ["y"]) == "Sorry!"
