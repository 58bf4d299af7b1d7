# glue between the HTTP shapes and the provider router
# the api layer never talks to adapters directly

from typing import Optional

from gateway.core.errors import ValidationError
from gateway.providers.base import GenerateOptions, ProviderResult
from gateway.providers.factory import ProviderRouter
from gateway.schemas.generate import ChatRequest, TextRequest
from gateway.services.content import build_upload_parts
from gateway.services.history import ChatMessage, ConversationRequest


def to_conversation(req: ChatRequest) -> ConversationRequest:
    return ConversationRequest(
        prompt=req.prompt,
        messages=[ChatMessage(role=m.role, content=m.content) for m in req.messages],
        model=req.model,
        system_instruction=req.system_instruction,
        provider=req.provider,
    )


async def run_chat(router: ProviderRouter, req: ChatRequest, selector: Optional[str] = None) -> ProviderResult:
    # prompt resolution happens once, inside the adapter's reconcile step
    return await router.route(to_conversation(req), selector if selector is not None else req.provider)


async def run_generate_text(router: ProviderRouter, req: TextRequest, selector: Optional[str] = None) -> ProviderResult:
    if not req.prompt or not req.prompt.strip():
        raise ValidationError("prompt is required (string)")
    options = GenerateOptions(model=req.model, system_instruction=req.system_instruction)
    return await router.route_generate(req.prompt, options, selector if selector is not None else req.provider)


async def run_upload(
    router: ProviderRouter,
    *,
    data: bytes,
    mime_type: str,
    prompt: Optional[str],
    options: GenerateOptions,
    selector: Optional[str],
) -> ProviderResult:
    parts = build_upload_parts(data, mime_type, prompt)
    return await router.route_multimodal(parts, options, selector)
