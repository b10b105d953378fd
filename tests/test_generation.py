"""
Tests du collaborateur de génération — parsing JSON, délai, adaptateurs, sélection.
Les SDK anthropic/openai sont patchés : aucun appel réseau.
"""
import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import asyncio
import json
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from page_editor.errors import GenerationError
from page_editor.generation import (
    AnthropicGenerator, LLMGenerator, OpenAIGenerator, UnavailableGenerator,
    active_generator, active_providers, parse_json_object,
)
from page_editor.prompts import build_edit_prompt, describe, suggestions_for


@pytest.fixture
def no_keys(monkeypatch):
    for var in ("ANTHROPIC_API_KEY", "OPENAI_API_KEY",
                "GENERATION_MODEL_ANTHROPIC", "GENERATION_MODEL_OPENAI"):
        monkeypatch.delenv(var, raising=False)
    return monkeypatch


class CannedLLM(LLMGenerator):
    name = "canned"

    def __init__(self, text="", error=None, delay=0.0):
        super().__init__(api_key="k")
        self.text, self.error, self.delay = text, error, delay
        self.prompts = []

    async def _complete(self, system, user):
        self.prompts.append((system, user))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error:
            raise self.error
        return self.text


# ── parse_json_object ─────────────────────────────────────────────────────

class TestParseJson:
    def test_plain_object(self):
        assert parse_json_object('{"headline": "Hi"}') == {"headline": "Hi"}

    def test_fenced_object(self):
        assert parse_json_object('```json\n{"title": "A"}\n```') == {"title": "A"}

    @pytest.mark.parametrize("text", ["", "Voici le texte", "[1, 2]", '"chaîne"', None])
    def test_rejects_non_objects(self, text):
        with pytest.raises(GenerationError):
            parse_json_object(text)


# ── LLMGenerator.generate ─────────────────────────────────────────────────

class TestGenerate:
    @pytest.mark.asyncio
    async def test_returns_parsed_object(self):
        llm = CannedLLM('{"headline": "Hi"}')
        out = await llm.generate("hero", {"headline": "Welcome"}, "shorten", 5)
        assert out == {"headline": "Hi"}
        system, user = llm.prompts[0]
        assert "JSON" in system
        assert "shorten" in user
        assert "Welcome" in user

    @pytest.mark.asyncio
    async def test_timeout(self):
        llm = CannedLLM("{}", delay=5)
        with pytest.raises(GenerationError) as exc:
            await llm.generate("hero", {}, "x", 0.01)
        assert isinstance(exc.value.cause, asyncio.TimeoutError)

    @pytest.mark.asyncio
    async def test_sdk_error_wrapped(self):
        boom = ConnectionError("réseau coupé")
        with pytest.raises(GenerationError) as exc:
            await CannedLLM(error=boom).generate("about", {}, "x", 5)
        assert exc.value.cause is boom
        assert exc.value.__cause__ is boom

    @pytest.mark.asyncio
    async def test_invalid_json_is_generation_error(self):
        with pytest.raises(GenerationError):
            await CannedLLM("pas du json").generate("about", {}, "x", 5)

    @pytest.mark.asyncio
    async def test_unavailable_generator(self):
        with pytest.raises(GenerationError):
            await UnavailableGenerator().generate("hero", {}, "x", 1)


# ── Adaptateurs SDK ───────────────────────────────────────────────────────

class TestAdapters:
    @pytest.mark.asyncio
    async def test_anthropic_adapter(self, no_keys):
        client = MagicMock()
        client.messages.create = AsyncMock(return_value=SimpleNamespace(
            content=[SimpleNamespace(text='{"headline": "Hi"}')]))
        with patch("anthropic.AsyncAnthropic", return_value=client) as cls:
            out = await AnthropicGenerator(api_key="sk-test").generate("hero", {}, "x", 5)
        assert out == {"headline": "Hi"}
        cls.assert_called_once_with(api_key="sk-test")
        kwargs = client.messages.create.call_args.kwargs
        assert kwargs["model"] == AnthropicGenerator.default_model
        assert kwargs["messages"][0]["role"] == "user"

    @pytest.mark.asyncio
    async def test_openai_adapter(self, no_keys):
        client = MagicMock()
        message = SimpleNamespace(content=json.dumps({"title": "A"}))
        client.chat.completions.create = AsyncMock(return_value=SimpleNamespace(
            choices=[SimpleNamespace(message=message)]))
        with patch("openai.AsyncOpenAI", return_value=client):
            out = await OpenAIGenerator(api_key="sk-test", model="gpt-test").generate("about", {}, "x", 5)
        assert out == {"title": "A"}
        kwargs = client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "gpt-test"
        assert kwargs["response_format"] == {"type": "json_object"}

    @pytest.mark.asyncio
    async def test_client_reused_then_closed(self, no_keys):
        client = MagicMock()
        client.messages.create = AsyncMock(return_value=SimpleNamespace(
            content=[SimpleNamespace(text="{}")]))
        client.close = AsyncMock()
        gen = AnthropicGenerator(api_key="sk-test")
        with patch("anthropic.AsyncAnthropic", return_value=client) as cls:
            await gen.generate("hero", {}, "a", 5)
            await gen.generate("hero", {}, "b", 5)
            await gen.aclose()
        assert cls.call_count == 1
        client.close.assert_awaited_once()
        assert gen._client is None

    def test_model_from_env(self, no_keys):
        no_keys.setenv("GENERATION_MODEL_OPENAI", "gpt-env")
        assert OpenAIGenerator(api_key="k").model == "gpt-env"


# ── Sélection du fournisseur ──────────────────────────────────────────────

class TestActiveGenerator:
    def test_no_key(self, no_keys):
        assert active_providers() == []
        assert isinstance(active_generator(), UnavailableGenerator)

    def test_first_available(self, no_keys):
        no_keys.setenv("OPENAI_API_KEY", "sk-o")
        assert isinstance(active_generator(), OpenAIGenerator)
        no_keys.setenv("ANTHROPIC_API_KEY", "sk-a")
        assert active_providers() == ["anthropic", "openai"]
        assert isinstance(active_generator(), AnthropicGenerator)

    def test_preferred(self, no_keys):
        no_keys.setenv("OPENAI_API_KEY", "sk-o")
        no_keys.setenv("ANTHROPIC_API_KEY", "sk-a")
        gen = active_generator("openai")
        assert isinstance(gen, OpenAIGenerator)
        assert gen.api_key == "sk-o"


# ── Prompts ───────────────────────────────────────────────────────────────

class TestPrompts:
    def test_prompt_schema_hides_discriminator(self):
        prompt = build_edit_prompt("hero", {"headline": "A"}, "x")
        schema_line = prompt.split("Allowed JSON schema for this section:\n")[1].split("\n")[0]
        schema = json.loads(schema_line)
        assert "kind" not in schema["properties"]
        assert "headline" in schema["properties"]

    def test_suggestions_and_descriptions(self):
        assert suggestions_for("services")[0] == "Add pricing information"
        assert describe("inconnu") == "Content section for your website."
