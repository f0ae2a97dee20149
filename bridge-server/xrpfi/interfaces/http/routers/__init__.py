"""HTTP routers."""

from fastapi import APIRouter

from . import holdings, operator, prepare, status, strategies


def create_api_router(prefix: str = "") -> APIRouter:
    router = APIRouter(prefix=prefix)
    router.include_router(status.router, prefix="/status", tags=["status"])
    router.include_router(prepare.router, prefix="/prepare", tags=["prepare"])
    router.include_router(holdings.router, prefix="/holdings", tags=["holdings"])
    router.include_router(strategies.router, prefix="/strategies", tags=["strategies"])
    router.include_router(operator.router, prefix="/operator", tags=["operator"])
    return router


__all__ = [
    "create_api_router",
]
