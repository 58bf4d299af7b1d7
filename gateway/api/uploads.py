# multipart upload routes (image / document / audio) shared by the main and /lm routers
# each route reads one file field plus optional prompt/model/systemInstruction/provider form fields

from dataclasses import dataclass
from typing import Callable, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile

from gateway.api.deps import get_router, get_settings
from gateway.core.config import Settings
from gateway.core.errors import ValidationError
from gateway.providers.base import GenerateOptions
from gateway.providers.factory import ProviderRouter
from gateway.schemas.generate import GenerateResponse
from gateway.services.chat_service import run_upload


@dataclass(frozen=True)
class UploadKind:
    path: str
    field: str
    label: str
    limit_mb: Callable[[Settings], int]


UPLOAD_KINDS = (
    UploadKind("/generate-from-image", "image", "image", lambda s: s.max_image_mb),
    UploadKind("/generate-from-document", "document", "document", lambda s: s.max_document_mb),
    UploadKind("/generate-from-audio", "audio", "audio", lambda s: s.max_audio_mb),
)


@dataclass
class UploadForm:
    prompt: Optional[str]
    model: Optional[str]
    system_instruction: Optional[str]
    provider: Optional[str]


def upload_form(
    prompt: Optional[str] = Form(default=None),
    model: Optional[str] = Form(default=None),
    system_instruction: Optional[str] = Form(default=None, alias="systemInstruction"),
    provider: Optional[str] = Form(default=None),
) -> UploadForm:
    return UploadForm(prompt=prompt, model=model, system_instruction=system_instruction, provider=provider)


async def read_upload(kind: UploadKind, file: Optional[UploadFile], settings: Settings) -> bytes:
    if file is None:
        raise ValidationError(f"{kind.label} file is required (field: {kind.field})")
    data = await file.read()
    limit = kind.limit_mb(settings) * 1024 * 1024
    if len(data) > limit:
        raise HTTPException(status_code=413, detail=f"{kind.label} exceeds {kind.limit_mb(settings)}MB limit")
    return data


def add_upload_routes(router: APIRouter, check_provider: Callable[[Optional[str]], Optional[str]]) -> None:
    """check_provider validates the form's provider and returns the selector to route with."""
    for kind in UPLOAD_KINDS:
        router.add_api_route(
            kind.path,
            _make_endpoint(kind, check_provider),
            methods=["POST"],
            response_model=GenerateResponse,
            name=f"{router.prefix}{kind.path}",
        )


def _make_endpoint(kind: UploadKind, check_provider: Callable[[Optional[str]], Optional[str]]):
    async def endpoint(
        file: Optional[UploadFile] = File(default=None, alias=kind.field),
        form: UploadForm = Depends(upload_form),
        router: ProviderRouter = Depends(get_router),
        settings: Settings = Depends(get_settings),
    ) -> GenerateResponse:
        selector = check_provider(form.provider)
        data = await read_upload(kind, file, settings)
        result = await run_upload(
            router,
            data=data,
            mime_type=file.content_type or "application/octet-stream",
            prompt=form.prompt,
            options=GenerateOptions(model=form.model, system_instruction=form.system_instruction),
            selector=selector,
        )
        return GenerateResponse(provider=result.provider, model=result.model, text=result.text)

    return endpoint
