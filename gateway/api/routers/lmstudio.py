# same endpoints as the main router, pinned to LM Studio under /lm
# a provider field is optional here, but if present it must be "lmstudio"
from typing import Optional

from fastapi import APIRouter, Depends

from gateway.api.deps import get_router
from gateway.api.uploads import add_upload_routes
from gateway.core.errors import ValidationError
from gateway.providers.factory import LMSTUDIO, ProviderRouter
from gateway.schemas.generate import ChatRequest, GenerateResponse, TextRequest
from gateway.services.chat_service import run_chat, run_generate_text

router = APIRouter(prefix="/lm", tags=["lmstudio"])


def ensure_lmstudio(provider: Optional[str]) -> str:
    if provider and provider.strip().lower() != LMSTUDIO:
        raise ValidationError('Invalid provider for this route: expected "lmstudio".')
    return LMSTUDIO


@router.post("/api/chat", response_model=GenerateResponse)
async def chat(req: ChatRequest, gateway: ProviderRouter = Depends(get_router)):
    result = await run_chat(gateway, req, ensure_lmstudio(req.provider))
    return GenerateResponse(provider=result.provider, model=result.model, text=result.text)


@router.post("/generate-text", response_model=GenerateResponse)
async def generate_text(req: TextRequest, gateway: ProviderRouter = Depends(get_router)):
    result = await run_generate_text(gateway, req, ensure_lmstudio(req.provider))
    return GenerateResponse(provider=result.provider, model=result.model, text=result.text)


add_upload_routes(router, ensure_lmstudio)
