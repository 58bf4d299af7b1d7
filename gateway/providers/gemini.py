# Gemini (cloud) adapter
# two client surfaces are probed in order, the first one that constructs wins:
#   "genai"          -> google-genai            (genai.Client, client.aio.models / client.aio.chats)
#   "generative-ai"  -> google-generativeai     (legacy GenerativeModel / start_chat)
# the chosen mode decides request and response shapes for the rest of the process

import logging
from typing import Any, Dict, Optional, Sequence

from gateway.core.config import Settings
from gateway.core.errors import ConfigurationError
from gateway.providers.base import (
    BaseAdapter,
    ClientProbe,
    GenerateOptions,
    ProviderResult,
    dig,
    first_text,
    text_accessor,
)
from gateway.services.content import BinaryPart, ContentPart, inline_data_part
from gateway.services.history import ReconciledConversation, build_transcript

logger = logging.getLogger(__name__)

MODE_GENAI = "genai"
MODE_LEGACY = "generative-ai"


def _import_genai():
    from google import genai
    return genai


def _import_legacy():
    import google.generativeai as legacy
    return legacy


EXTRACTORS = (
    lambda raw: dig(raw, "output_text"),
    text_accessor,
    lambda raw: dig(raw, "candidates", 0, "content", "parts", 0, "text"),
    lambda raw: text_accessor(dig(raw, "response")),
    lambda raw: dig(raw, "response", "candidates", 0, "content", "parts", 0, "text"),
)


def extract_text(raw: Any) -> Optional[str]:
    return first_text(raw, EXTRACTORS)


class GeminiAdapter(BaseAdapter):
    name = "gemini"

    def __init__(self, settings: Settings, probes: Optional[Sequence[ClientProbe]] = None) -> None:
        super().__init__()
        self._api_key = settings.gemini_api_key
        self.default_model = settings.gemini_model
        self._probes = probes

    # ---- client probing ----

    def preflight(self) -> None:
        if not self._api_key:
            raise ConfigurationError("Missing GEMINI_API_KEY (or GOOGLE_API_KEY) in environment")

    def client_probes(self) -> Sequence[ClientProbe]:
        if self._probes is not None:
            return self._probes
        return [
            ClientProbe(MODE_GENAI, self._probe_genai),
            ClientProbe(MODE_LEGACY, self._probe_legacy),
        ]

    def _probe_genai(self) -> Any:
        genai = _import_genai()
        client = genai.Client(api_key=self._api_key)
        if not callable(dig(client, "aio", "models", "generate_content")):
            return None
        return client

    def _probe_legacy(self) -> Any:
        legacy = _import_legacy()
        if not callable(getattr(legacy, "GenerativeModel", None)):
            return None
        legacy.configure(api_key=self._api_key)
        return legacy

    # ---- helpers ----

    def _model_name(self, options: GenerateOptions) -> str:
        return (options.model or "").strip() or self.default_model

    @staticmethod
    def _genai_config(system_instruction: Optional[str]) -> Optional[Dict[str, Any]]:
        return {"system_instruction": system_instruction} if system_instruction else None

    @staticmethod
    def _genai_part(part: ContentPart) -> Dict[str, Any]:
        if isinstance(part, BinaryPart):
            # google-genai base64-encodes Blob bytes itself
            return {"inline_data": {"mime_type": part.mime_type, "data": part.data}}
        return {"text": part.value}

    @staticmethod
    def _legacy_part(part: ContentPart) -> Any:
        if isinstance(part, BinaryPart):
            return inline_data_part(part)
        return part.value

    def _legacy_model(self, client: Any, model_name: str, system_instruction: Optional[str]) -> Any:
        if system_instruction:
            return client.GenerativeModel(model_name, system_instruction=system_instruction)
        return client.GenerativeModel(model_name)

    def _result(self, model_name: str, raw: Any) -> ProviderResult:
        text = extract_text(raw)
        if text is None:
            logger.info("gemini: response from %s had no recognizable text", model_name)
        return ProviderResult(provider=self.name, model=model_name, text=text, raw=raw)

    # ---- operations ----

    async def _send(self, model_name: str, contents: Any, system_instruction: Optional[str], legacy_contents: Any) -> Any:
        client = await self.ensure_client()
        if self.mode == MODE_GENAI:
            return await client.aio.models.generate_content(
                model=model_name,
                contents=contents,
                config=self._genai_config(system_instruction),
            )
        model = self._legacy_model(client, model_name, system_instruction)
        return await model.generate_content_async(legacy_contents)

    async def _generate(self, prompt: str, options: GenerateOptions) -> ProviderResult:
        model_name = self._model_name(options)
        raw = await self._send(model_name, prompt, options.system_instruction, prompt)
        return self._result(model_name, raw)

    async def _generate_multimodal(self, parts: Sequence[ContentPart], options: GenerateOptions) -> ProviderResult:
        model_name = self._model_name(options)
        contents = [{"role": "user", "parts": [self._genai_part(p) for p in parts]}]
        legacy_contents = [self._legacy_part(p) for p in parts]
        raw = await self._send(model_name, contents, options.system_instruction, legacy_contents)
        return self._result(model_name, raw)

    async def _chat(self, conversation: ReconciledConversation, options: GenerateOptions) -> ProviderResult:
        client = await self.ensure_client()
        model_name = self._model_name(options)
        system_instruction = conversation.system_instruction

        if self.mode == MODE_GENAI:
            chats = dig(client, "aio", "chats")
            if callable(dig(chats, "create")):
                history = [{"role": t.role, "parts": [{"text": t.content}]} for t in conversation.history]
                session = chats.create(
                    model=model_name,
                    config=self._genai_config(system_instruction),
                    history=history,
                )
                raw = await session.send_message(conversation.next_prompt)
                return self._result(model_name, raw)
        else:
            model = self._legacy_model(client, model_name, system_instruction)
            if callable(getattr(model, "start_chat", None)):
                history = [{"role": t.role, "parts": [t.content]} for t in conversation.history]
                session = model.start_chat(history=history)
                if callable(getattr(session, "send_message_async", None)):
                    raw = await session.send_message_async(conversation.next_prompt)
                    return self._result(model_name, raw)

        logger.debug("gemini: no chat session support in mode %s, sending transcript", self.mode)
        return await self._generate(build_transcript(conversation), GenerateOptions(model=model_name))
