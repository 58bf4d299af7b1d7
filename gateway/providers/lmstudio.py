# LM Studio: local models behind an OpenAI-compatible server
# every operation is POST {base_url}/v1/chat/completions
# local models are text-only, so binary parts become placeholders

import logging
from typing import Any, Dict, List, Optional, Sequence

import httpx

from gateway.core.config import Settings
from gateway.core.errors import ConfigurationError, ProviderError
from gateway.providers.base import (
    BaseAdapter,
    ClientProbe,
    GenerateOptions,
    ProviderResult,
    dig,
    first_text,
)
from gateway.services.content import ContentPart, render_parts_as_text
from gateway.services.history import ReconciledConversation

logger = logging.getLogger(__name__)

CHAT_COMPLETIONS_PATH = "/v1/chat/completions"


def _message_content(raw: Any) -> Optional[str]:
    content = dig(raw, "choices", 0, "message", "content")
    return content if isinstance(content, str) else None


def _message_parts(raw: Any) -> Optional[str]:
    # some servers return content as a list of {type, text} parts
    content = dig(raw, "choices", 0, "message", "content")
    parts = content if isinstance(content, list) else dig(content, "parts")
    if not isinstance(parts, list):
        return None
    texts = [dig(p, "text") or dig(p, "content") or "" for p in parts]
    return "\n".join(t for t in texts if isinstance(t, str) and t.strip())


EXTRACTORS = (
    _message_content,
    _message_parts,
    lambda raw: dig(raw, "output_text"),
    lambda raw: dig(raw, "text"),
    lambda raw: dig(raw, "choices", 0, "text"),  # completion-style
)


def extract_text(raw: Any) -> Optional[str]:
    return first_text(raw, EXTRACTORS)


def error_message(data: Any, status_code: int) -> str:
    for candidate in (dig(data, "error", "message"), dig(data, "error"), dig(data, "message")):
        if isinstance(candidate, str) and candidate:
            return candidate
    return f"LM Studio error (HTTP {status_code})"


class LmStudioAdapter(BaseAdapter):
    name = "lmstudio"

    def __init__(self, settings: Settings) -> None:
        super().__init__()
        self.base_url = settings.lmstudio_base_url.rstrip("/")
        self._api_key = settings.lmstudio_api_key
        self.default_model = settings.lmstudio_model
        self._timeout = httpx.Timeout(settings.lmstudio_timeout, connect=settings.lmstudio_connect_timeout)

    def client_probes(self) -> Sequence[ClientProbe]:
        return [ClientProbe("httpx", self._build_client)]

    def _build_client(self) -> httpx.AsyncClient:
        headers = {"Content-Type": "application/json"}
        if self._api_key:
            headers["Authorization"] = f"Bearer {self._api_key}"
        return httpx.AsyncClient(timeout=self._timeout, headers=headers)

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()

    def resolve_model(self, model: Optional[str]) -> str:
        chosen = (model or "").strip() or self.default_model
        if not chosen:
            raise ConfigurationError(
                "No LM Studio model configured. Provide `model` in the request or set `LMSTUDIO_MODEL` in environment."
            )
        return chosen

    def url_for(self, path: str) -> str:
        clean = path if path.startswith("/") else f"/{path}"
        return f"{self.base_url}{clean}"

    async def post_json(self, path: str, payload: Dict[str, Any]) -> Any:
        client: httpx.AsyncClient = await self.ensure_client()
        url = self.url_for(path)
        logger.debug("POST %s (model=%s)", url, payload.get("model"))
        try:
            r = await client.post(url, json=payload)
        except httpx.HTTPError as e:
            raise ProviderError(
                f"Failed to reach LM Studio at {url}. Is the server running and accessible? {e}"
            ) from e

        try:
            data = r.json()
        except ValueError:
            data = {"error": r.text or "Unknown LM Studio response format"}

        if r.is_error:
            raise ProviderError(error_message(data, r.status_code), status_code=r.status_code)
        return data

    async def _complete(self, model: Optional[str], messages: List[Dict[str, str]]) -> ProviderResult:
        model_name = self.resolve_model(model)
        raw = await self.post_json(CHAT_COMPLETIONS_PATH, {"model": model_name, "messages": messages})
        return ProviderResult(provider=self.name, model=model_name, text=extract_text(raw), raw=raw)

    @staticmethod
    def _with_system(system_instruction: Optional[str], user_content: str) -> List[Dict[str, str]]:
        messages: List[Dict[str, str]] = []
        if system_instruction and system_instruction.strip():
            messages.append({"role": "system", "content": system_instruction.strip()})
        messages.append({"role": "user", "content": user_content})
        return messages

    async def _generate(self, prompt: str, options: GenerateOptions) -> ProviderResult:
        return await self._complete(options.model, self._with_system(options.system_instruction, prompt))

    async def _generate_multimodal(self, parts: Sequence[ContentPart], options: GenerateOptions) -> ProviderResult:
        text_prompt = render_parts_as_text(parts)
        return await self._complete(options.model, self._with_system(options.system_instruction, text_prompt))

    async def _chat(self, conversation: ReconciledConversation, options: GenerateOptions) -> ProviderResult:
        messages: List[Dict[str, str]] = []
        if conversation.system_instruction:
            messages.append({"role": "system", "content": conversation.system_instruction})
        for turn in conversation.history:
            role = "assistant" if turn.role == "model" else "user"
            messages.append({"role": role, "content": turn.content})
        messages.append({"role": "user", "content": conversation.next_prompt})
        return await self._complete(options.model, messages)
