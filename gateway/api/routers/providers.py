from fastapi import APIRouter, Depends

from gateway.api.deps import get_router
from gateway.providers.factory import ProviderRouter

router = APIRouter(tags=["providers"])


@router.get("/providers")
def list_providers(gateway: ProviderRouter = Depends(get_router)) -> dict:
    return {"providers": gateway.providers, "default": gateway.default_provider}
