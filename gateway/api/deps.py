from fastapi import Request

from gateway.core.config import Settings
from gateway.providers.factory import ProviderRouter


def get_router(request: Request) -> ProviderRouter:
    return request.app.state.router


def get_settings(request: Request) -> Settings:
    return request.app.state.settings
