# main endpoints: provider comes from the request body/form or DEFAULT_PROVIDER
from typing import Optional

from fastapi import APIRouter, Depends

from gateway.api.deps import get_router
from gateway.api.uploads import add_upload_routes
from gateway.providers.factory import ProviderRouter
from gateway.schemas.generate import ChatRequest, GenerateResponse, TextRequest
from gateway.services.chat_service import run_chat, run_generate_text

router = APIRouter(tags=["generate"])


def _any_provider(provider: Optional[str]) -> Optional[str]:
    # unknown names are rejected by the router lookup
    return provider


@router.post("/api/chat", response_model=GenerateResponse)
async def chat(req: ChatRequest, gateway: ProviderRouter = Depends(get_router)):
    result = await run_chat(gateway, req)
    return GenerateResponse(provider=result.provider, model=result.model, text=result.text)


@router.post("/generate-text", response_model=GenerateResponse)
async def generate_text(req: TextRequest, gateway: ProviderRouter = Depends(get_router)):
    result = await run_generate_text(gateway, req)
    return GenerateResponse(provider=result.provider, model=result.model, text=result.text)


add_upload_routes(router, _any_provider)
