"""
Unit tests for the completion service and payload decoding.
"""

from typing import List

import httpx
import pytest
from openai import APITimeoutError
from pydantic import TypeAdapter

from src.models.filters import ClinicFilter
from src.models.result import Err, Ok
from src.services.completion import CompletionService, decode_payload, strip_code_fences


class TestStripCodeFences:

    @pytest.mark.parametrize("raw", [
        '```json\n{"a": 1}\n```',
        '```JSON{"a": 1}```',
        '```\n{"a": 1}\n```',
        '  {"a": 1}  ',
    ])
    def test_fences_removed(self, raw):
        assert strip_code_fences(raw) == '{"a": 1}'


class TestDecodePayload:

    def test_fenced_object(self):
        result = decode_payload('```json\n{"specialization": "Dentist"}\n```', TypeAdapter(ClinicFilter))
        assert isinstance(result, Ok)
        assert result.value.specialization == "Dentist"

    def test_non_json_text(self):
        result = decode_payload("Sure! The doctor is a dentist.", TypeAdapter(ClinicFilter))
        assert isinstance(result, Err)
        assert result.kind == "decode"

    def test_array_where_object_expected(self):
        result = decode_payload("[1, 2]", TypeAdapter(ClinicFilter))
        assert isinstance(result, Err)

    def test_empty_text(self):
        result = decode_payload("``````", TypeAdapter(List[int]))
        assert isinstance(result, Err)
        assert result.kind == "empty"

    def test_unwrap_or(self):
        assert decode_payload("[1, 2]", TypeAdapter(List[int])).unwrap_or([]) == [1, 2]
        assert decode_payload("nope", TypeAdapter(List[int])).unwrap_or([]) == []


class TestCompletionService:

    @pytest.mark.asyncio
    async def test_returns_content(self, fake_openai_client):
        client = fake_openai_client(content="Hello there")
        service = CompletionService(client, model="gpt-4o", timeout=1.0)

        result = await service.complete("Say hello")

        assert isinstance(result, Ok)
        assert result.value == "Hello there"
        call = client.chat.completions.calls[0]
        assert call["model"] == "gpt-4o"
        assert call["messages"] == [{"role": "user", "content": "Say hello"}]
        assert call["temperature"] == 0.0

    @pytest.mark.asyncio
    async def test_timeout_cancels_request(self, fake_openai_client):
        client = fake_openai_client(content="late", delay=5)
        service = CompletionService(client, model="gpt-4o", timeout=0.01)

        result = await service.complete("Slow prompt")

        assert isinstance(result, Err)
        assert result.kind == "timeout"
        assert client.chat.completions.cancelled

    @pytest.mark.asyncio
    async def test_per_call_timeout_override(self, fake_openai_client):
        client = fake_openai_client(content="late", delay=5)
        service = CompletionService(client, model="gpt-4o", timeout=30)

        result = await service.complete("Slow prompt", timeout=0.01)

        assert result.kind == "timeout"

    @pytest.mark.asyncio
    async def test_api_error(self, fake_openai_client):
        request = httpx.Request("POST", "https://example.openai.azure.com/chat")
        client = fake_openai_client(exc=APITimeoutError(request=request))
        service = CompletionService(client, model="gpt-4o")

        result = await service.complete("prompt")

        assert isinstance(result, Err)
        assert result.kind == "api"

    @pytest.mark.asyncio
    async def test_unexpected_error(self, fake_openai_client):
        client = fake_openai_client(exc=RuntimeError("connection reset"))
        service = CompletionService(client, model="gpt-4o")

        result = await service.complete("prompt")

        assert isinstance(result, Err)
        assert result.kind == "unexpected"
        assert "connection reset" in result.message

    @pytest.mark.asyncio
    async def test_blank_content(self, fake_openai_client):
        service = CompletionService(fake_openai_client(content="   "), model="gpt-4o")
        result = await service.complete("prompt")
        assert isinstance(result, Err)
        assert result.kind == "empty"

    @pytest.mark.asyncio
    async def test_close(self, fake_openai_client):
        client = fake_openai_client(content="x")
        service = CompletionService(client, model="gpt-4o")
        await service.close()
        assert client.closed
