"""Redirect and health routes."""

import time

from fastapi import APIRouter, Request, HTTPException, status
from fastapi.responses import JSONResponse, RedirectResponse

from ..api.schemas import HealthResponse
from linkgate.errors import NotFound, StoreError

router = APIRouter()


@router.get("/healthz", response_model=HealthResponse, include_in_schema=False)
async def health_check(request: Request):
    """Health check endpoint for load balancers."""
    service = request.app.state.service
    
    health = await service.health_check()
    body = HealthResponse(
        ok=health["overall"],
        version=request.app.version,
        uptime=time.monotonic() - request.app.state.started_at,
        database="healthy" if health["database"] else "unhealthy",
        cache=health["cache"],
        missed_visits=health["missed_visits"],
    )
    
    if not health["overall"]:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content=body.model_dump(),
        )
    return body


@router.get("/{code}", include_in_schema=False)
async def redirect_to_target(request: Request, code: str):
    """Redirect to the target URL, recording the visit."""
    service = request.app.state.service
    
    try:
        target_url = await service.redirect(code)
    except NotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except StoreError as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"Link store unavailable: {e}",
        )
    
    # 302 so browsers come back through the gateway and every visit is counted
    return RedirectResponse(url=target_url, status_code=status.HTTP_302_FOUND)
