# gateway/main.py
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from gateway.core import config
from gateway.core.config import Settings, load_settings
from gateway.core.errors import GatewayError, ProviderError, ValidationError
from gateway.api.routers.health import router as health_router
from gateway.api.routers.providers import router as providers_router
from gateway.api.routers.generate import router as generate_router
from gateway.api.routers.lmstudio import router as lmstudio_router
from gateway.providers.factory import ProviderRouter, build_adapters

logger = logging.getLogger(__name__)


def configure_logging(level: Optional[str] = None) -> None:
    logging.basicConfig(
        level=(level or config.LOG_LEVEL),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _status_for(exc: GatewayError) -> int:
    if isinstance(exc, ValidationError):
        return 400
    if isinstance(exc, ProviderError):
        return 502
    return 500


async def gateway_error_handler(request: Request, exc: GatewayError) -> JSONResponse:
    status = _status_for(exc)
    if status >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=status, content={"error": exc.message})


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    await app.state.router.aclose()


def create_app(settings: Optional[Settings] = None, router: Optional[ProviderRouter] = None) -> FastAPI:
    settings = settings or load_settings()
    app = FastAPI(title="Generation Gateway", version="1.0.0", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # one router (and one adapter per provider) for the whole process,
    # reached from endpoints through Depends(get_router)
    app.state.settings = settings
    app.state.router = router or ProviderRouter(build_adapters(settings), settings.default_provider)

    app.add_exception_handler(GatewayError, gateway_error_handler)

    # Routers
    app.include_router(health_router)
    app.include_router(providers_router)
    app.include_router(generate_router)
    app.include_router(lmstudio_router)

    return app


configure_logging()
app = create_app()
