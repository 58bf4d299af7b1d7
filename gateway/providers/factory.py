# builds one adapter per known provider and picks exactly one per request
# explicit selector (request/route) wins, otherwise the process-wide default

import logging
from typing import Dict, List, Mapping, Optional, Sequence

from gateway.core.config import Settings
from gateway.core.errors import ConfigurationError, ValidationError
from gateway.providers.base import BaseAdapter, GenerateOptions, ProviderResult
from gateway.services.content import ContentPart
from gateway.services.history import ConversationRequest

logger = logging.getLogger(__name__)

GEMINI = "gemini"
LMSTUDIO = "lmstudio"


def build_adapters(settings: Settings) -> Dict[str, BaseAdapter]:
    from gateway.providers.gemini import GeminiAdapter
    from gateway.providers.lmstudio import LmStudioAdapter

    return {
        GEMINI: GeminiAdapter(settings),
        LMSTUDIO: LmStudioAdapter(settings),
    }


class ProviderRouter:
    def __init__(self, adapters: Mapping[str, BaseAdapter], default_provider: Optional[str] = None) -> None:
        self._adapters = {name.lower(): adapter for name, adapter in adapters.items()}
        default = (default_provider or "").strip().lower() or GEMINI
        if default not in self._adapters:
            raise ConfigurationError(f"DEFAULT_PROVIDER {default!r} is not one of: {', '.join(self.providers)}")
        self._default = default

    @property
    def providers(self) -> List[str]:
        return sorted(self._adapters)

    @property
    def default_provider(self) -> str:
        return self._default

    def client_states(self) -> Dict[str, str]:
        return {name: self._adapters[name].state.value for name in self.providers}

    def resolve(self, selector: Optional[str] = None) -> BaseAdapter:
        key = (selector or "").strip().lower() or self._default
        adapter = self._adapters.get(key)
        if adapter is None:
            raise ValidationError(f"unsupported provider: {selector}")
        return adapter

    async def route(self, request: ConversationRequest, selector: Optional[str] = None) -> ProviderResult:
        adapter = self.resolve(selector if selector is not None else request.provider)
        logger.info("chat -> %s", adapter.name)
        return await adapter.chat(request)

    async def route_generate(
        self, prompt: str, options: Optional[GenerateOptions] = None, selector: Optional[str] = None
    ) -> ProviderResult:
        adapter = self.resolve(selector)
        logger.info("generate -> %s", adapter.name)
        return await adapter.generate(prompt, options)

    async def route_multimodal(
        self, parts: Sequence[ContentPart], options: Optional[GenerateOptions] = None, selector: Optional[str] = None
    ) -> ProviderResult:
        adapter = self.resolve(selector)
        logger.info("generate_multimodal -> %s", adapter.name)
        return await adapter.generate_multimodal(parts, options)

    async def aclose(self) -> None:
        for adapter in self._adapters.values():
            await adapter.aclose()
