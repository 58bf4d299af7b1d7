from fastapi import APIRouter, Depends

from gateway.api.deps import get_router
from gateway.providers.factory import ProviderRouter

router = APIRouter(tags=["meta"])

@router.get("/health")
def health(gateway: ProviderRouter = Depends(get_router)):
    # clients are built lazily, so "uninitialized" is normal before the first call
    return {"status": "ok", "clients": gateway.client_states()}
