"""
Collaborateur de génération — instruction + contenu actuel → nouveau contenu.

Contrat : generate(block_type, current_content, instruction, timeout) -> dict
ou GenerationError (échec, délai dépassé, réponse non JSON).
Adaptateurs async Anthropic / OpenAI, sélection selon les clés API présentes.
"""
import asyncio
import json
import logging
import os
import re
from typing import Any, Dict, List, Optional, Protocol

from .errors import GenerationError
from .prompts import EDIT_SYSTEM_PROMPT, build_edit_prompt

log = logging.getLogger(__name__)

TEMP = 0.2
MAX_TOKENS = 1200
DEFAULT_TIMEOUT = float(os.getenv("GENERATION_TIMEOUT", "30"))

_FENCE = re.compile(r"^```(?:json)?\s*|\s*```$", re.I)


class GenerationCollaborator(Protocol):
    supports_cancellation: bool

    async def generate(self, block_type: str, current_content: Dict[str, Any],
                       instruction: str, timeout: float) -> Dict[str, Any]: ...


def parse_json_object(text: str) -> Dict[str, Any]:
    """Extrait l'objet JSON d'une réponse modèle (balises ``` tolérées)."""
    raw = _FENCE.sub("", (text or "").strip())
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise GenerationError("Réponse IA non JSON", cause=e) from e
    if not isinstance(data, dict):
        raise GenerationError(f"Réponse IA : objet JSON attendu, reçu {type(data).__name__}")
    return data


# ── Adaptateurs IA ────────────────────────────────────────────────────────────

class LLMGenerator:
    """Base commune : prompt → appel modèle (borné par timeout) → objet JSON."""
    name = "llm"
    api_key_env = ""
    default_model = ""
    supports_cancellation = True

    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None,
                 temperature: float = TEMP):
        self.api_key = api_key or os.getenv(self.api_key_env)
        self.model = model or os.getenv(f"GENERATION_MODEL_{self.name.upper()}", self.default_model)
        self.temperature = temperature
        self._client: Any = None

    def _make_client(self) -> Any:
        raise NotImplementedError

    @property
    def client(self) -> Any:
        """Client SDK créé au premier appel puis réutilisé (un pool HTTP par générateur)."""
        if self._client is None:
            self._client = self._make_client()
        return self._client

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.close()
            self._client = None

    async def _complete(self, system: str, user: str) -> str:
        raise NotImplementedError

    async def generate(self, block_type: str, current_content: Dict[str, Any],
                       instruction: str, timeout: float = DEFAULT_TIMEOUT) -> Dict[str, Any]:
        user = build_edit_prompt(block_type, current_content, instruction)
        try:
            text = await asyncio.wait_for(self._complete(EDIT_SYSTEM_PROMPT, user), timeout)
        except asyncio.TimeoutError as e:
            log.warning("[%s] délai dépassé (%ss) pour un bloc %s", self.name, timeout, block_type)
            raise GenerationError(f"[{self.name}] délai dépassé ({timeout}s)", cause=e) from e
        except GenerationError:
            raise
        except Exception as e:
            log.error(f"[{self.name}] {block_type}: {e}")
            raise GenerationError(f"[{self.name}] {e}", cause=e) from e
        return parse_json_object(text)


class AnthropicGenerator(LLMGenerator):
    name = "anthropic"
    api_key_env = "ANTHROPIC_API_KEY"
    default_model = "claude-haiku-4-5-20251001"

    def _make_client(self) -> Any:
        import anthropic
        return anthropic.AsyncAnthropic(api_key=self.api_key)

    async def _complete(self, system: str, user: str) -> str:
        r = await self.client.messages.create(
            model=self.model, max_tokens=MAX_TOKENS, temperature=self.temperature,
            system=system, messages=[{"role": "user", "content": user}])
        return r.content[0].text if r.content else ""


class OpenAIGenerator(LLMGenerator):
    name = "openai"
    api_key_env = "OPENAI_API_KEY"
    default_model = "gpt-4o-mini"

    def _make_client(self) -> Any:
        import openai
        return openai.AsyncOpenAI(api_key=self.api_key)

    async def _complete(self, system: str, user: str) -> str:
        r = await self.client.chat.completions.create(
            model=self.model, temperature=self.temperature, max_tokens=MAX_TOKENS,
            response_format={"type": "json_object"},
            messages=[{"role": "system", "content": system}, {"role": "user", "content": user}])
        return r.choices[0].message.content or ""


class UnavailableGenerator:
    """Aucune clé API configurée : chaque édition IA échoue proprement."""
    supports_cancellation = True

    async def generate(self, block_type: str, current_content: Dict[str, Any],
                       instruction: str, timeout: float = DEFAULT_TIMEOUT) -> Dict[str, Any]:
        raise GenerationError("Aucune clé API IA configurée")


_PROVIDERS = {
    "anthropic": AnthropicGenerator,
    "openai":    OpenAIGenerator,
}


def active_providers() -> List[str]:
    return [name for name, cls in _PROVIDERS.items() if os.getenv(cls.api_key_env)]


def active_generator(preferred: Optional[str] = None) -> GenerationCollaborator:
    """Premier fournisseur dont la clé API est présente (ou `preferred` s'il l'est)."""
    providers = active_providers()
    if preferred in providers:
        return _PROVIDERS[preferred]()
    if providers:
        return _PROVIDERS[providers[0]]()
    log.warning("Aucune clé API IA configurée")
    return UnavailableGenerator()
