"""Shared FastAPI dependencies."""

from fastapi import HTTPException, Request, status

from bagofholding.worker.client import HelvaultClient


def get_helvault_client(request: Request) -> HelvaultClient:
    """
    The worker client created at application startup.

    Usage in FastAPI:
        @router.get("/items")
        async def get_items(client: HelvaultClient = Depends(get_helvault_client)):
            ...
    """
    client: HelvaultClient | None = getattr(request.app.state, "helvault_client", None)
    if client is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Helvault worker not started",
        )
    return client
