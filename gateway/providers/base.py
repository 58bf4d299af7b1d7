# lets us swap/add providers without touching endpoint logic (gemini/lmstudio/...)
# declares the adapter contract every provider implements:
#   generate(prompt) / generate_multimodal(parts) / chat(conversation)
# plus the lazy, memoized client construction shared by all adapters

from __future__ import annotations
import asyncio
import enum
import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence as SequenceABC
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Iterator, List, Mapping, Optional, Sequence

from gateway.core.errors import ConfigurationError, GatewayError, ProviderError, normalize_error
from gateway.services.content import ContentPart
from gateway.services.history import (
    ConversationRequest,
    ReconciledConversation,
    build_transcript,
    reconcile,
)

logger = logging.getLogger(__name__)

Extractor = Callable[[Any], Optional[str]]


@dataclass
class GenerateOptions:
    model: Optional[str] = None
    system_instruction: Optional[str] = None


@dataclass
class ProviderResult:
    provider: str
    model: str
    text: Optional[str] = None
    raw: Any = field(default=None, repr=False, compare=False)  # diagnostics only


@dataclass(frozen=True)
class ClientProbe:
    """One SDK surface to try; construct() returns a handle, or None when the surface is missing."""

    mode: str
    construct: Callable[[], Any]


class ClientState(enum.Enum):
    UNINITIALIZED = "uninitialized"
    READY = "ready"
    FAILED = "failed"


def dig(obj: Any, *path: Any) -> Any:
    # walks dict keys, attributes and sequence indexes; None as soon as a step is missing
    for key in path:
        if obj is None:
            return None
        if isinstance(key, int):
            if isinstance(obj, (str, bytes)) or not isinstance(obj, SequenceABC) or len(obj) <= key:
                return None
            obj = obj[key]
        elif isinstance(obj, Mapping):
            obj = obj.get(key)
        else:
            obj = getattr(obj, key, None)
    return obj


def text_accessor(obj: Any) -> Any:
    # "text" may be a plain field, a property or a method depending on the SDK version
    value = dig(obj, "text")
    if callable(value):
        value = value()
    return value


def first_text(raw: Any, extractors: Iterable[Extractor]) -> Optional[str]:
    for extract in extractors:
        try:
            value = extract(raw)
        except Exception:
            value = None
        if isinstance(value, str) and value.strip():
            return value
    return None


class BaseAdapter(ABC):
    name: str = "base"

    def __init__(self) -> None:
        self._state = ClientState.UNINITIALIZED
        self._mode: Optional[str] = None
        self._client: Any = None
        self._error: Optional[ConfigurationError] = None
        self._lock = asyncio.Lock()

    @property
    def mode(self) -> Optional[str]:
        return self._mode

    @property
    def state(self) -> ClientState:
        return self._state

    # ---- client lifecycle ----

    @abstractmethod
    def client_probes(self) -> Sequence[ClientProbe]:
        ...

    def preflight(self) -> None:
        """Raise ConfigurationError when the adapter can never build a client (e.g. no credential)."""

    async def ensure_client(self) -> Any:
        if self._state is ClientState.READY:
            return self._client
        async with self._lock:
            if self._state is ClientState.UNINITIALIZED:
                self._initialize()
        if self._error is not None:
            raise ConfigurationError(self._error.message)
        return self._client

    def _initialize(self) -> None:
        try:
            self.preflight()
        except ConfigurationError as exc:
            self._fail(exc)
            return

        failures: List[str] = []
        for probe in self.client_probes():
            try:
                handle = probe.construct()
            except Exception as exc:
                logger.warning("%s: client probe %r failed: %s", self.name, probe.mode, exc)
                failures.append(f"{probe.mode}: {normalize_error(exc)}")
                continue
            if handle is None:
                logger.warning("%s: client probe %r found no usable client surface", self.name, probe.mode)
                failures.append(f"{probe.mode}: no usable client surface")
                continue
            # handle and mode are committed together
            self._client, self._mode = handle, probe.mode
            self._state = ClientState.READY
            logger.info("%s: client ready (mode=%s)", self.name, probe.mode)
            return

        self._fail(ConfigurationError(f"Failed to initialize {self.name} client: " + "; ".join(failures)))

    def _fail(self, error: ConfigurationError) -> None:
        logger.error("%s: client unavailable: %s", self.name, error.message)
        self._error = error
        self._state = ClientState.FAILED

    async def aclose(self) -> None:
        return None

    # ---- operations ----

    @contextmanager
    def _translate_errors(self, operation: str) -> Iterator[None]:
        try:
            yield
        except GatewayError:
            raise
        except Exception as exc:
            logger.warning("%s %s failed: %s", self.name, operation, exc)
            raise ProviderError(normalize_error(exc)) from exc

    async def generate(self, prompt: str, options: Optional[GenerateOptions] = None) -> ProviderResult:
        logger.debug("%s generate", self.name)
        with self._translate_errors("generate"):
            return await self._generate(prompt, options or GenerateOptions())

    async def generate_multimodal(
        self, parts: Sequence[ContentPart], options: Optional[GenerateOptions] = None
    ) -> ProviderResult:
        logger.debug("%s generate_multimodal (%d parts)", self.name, len(parts))
        with self._translate_errors("generate_multimodal"):
            return await self._generate_multimodal(parts, options or GenerateOptions())

    async def chat(self, request: ConversationRequest) -> ProviderResult:
        conversation = reconcile(request.prompt, request.messages, request.system_instruction)
        options = GenerateOptions(model=request.model, system_instruction=conversation.system_instruction)
        logger.debug("%s chat (%d prior turns)", self.name, len(conversation.history))
        with self._translate_errors("chat"):
            return await self._chat(conversation, options)

    @abstractmethod
    async def _generate(self, prompt: str, options: GenerateOptions) -> ProviderResult:
        ...

    @abstractmethod
    async def _generate_multimodal(self, parts: Sequence[ContentPart], options: GenerateOptions) -> ProviderResult:
        ...

    async def _chat(self, conversation: ReconciledConversation, options: GenerateOptions) -> ProviderResult:
        # no session support: send the whole conversation as one prompt
        return await self._generate(build_transcript(conversation), GenerateOptions(model=options.model))
