"""API routes implementation."""

from typing import List, Optional

from fastapi import APIRouter, Request, HTTPException, Query, status

from .schemas import (
    CreateLinkRequest,
    LinkResponse,
    DeleteResponse,
    ErrorResponse,
)
from linkgate.database.models import Link
from linkgate.errors import (
    AllocationExhausted,
    CodeConflict,
    InvalidCodeFormat,
    InvalidURL,
    NotFound,
    StoreError,
)
from linkgate.common.url_builder import build_short_url
from linkgate.common.headers import build_base_url, resolve_path_prefix

router = APIRouter()


def _to_response(request: Request, link: Link) -> LinkResponse:
    """Build the response body, including the public short URL."""
    config = request.app.state.config
    headers = dict(request.headers)
    
    base_url = build_base_url(
        headers=headers,
        fallback_base_url=config.base_url,
        request_scheme=request.url.scheme,
        request_host=request.headers.get("host"),
    )
    short_url = build_short_url(
        code=link.code,
        base_url=base_url,
        path_prefix=resolve_path_prefix(headers, config.path_prefix),
    )
    
    return LinkResponse(
        code=link.code,
        short_url=short_url,
        target_url=link.target_url,
        clicks=link.clicks,
        last_accessed=link.last_accessed,
        created_at=link.created_at,
    )


def _store_unavailable(e: StoreError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail=f"Link store unavailable: {e}",
    )


@router.post(
    "/links",
    response_model=LinkResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid URL or code"},
        409: {"model": ErrorResponse, "description": "Code already exists"},
        503: {"model": ErrorResponse, "description": "No free code or store unavailable"},
    },
    summary="Create link",
    description="Create a link. Optionally provide a custom code.",
)
async def create_link(request: Request, body: CreateLinkRequest):
    """Create a link."""
    service = request.app.state.service
    
    code = body.code.strip() if body.code else None
    
    try:
        link = await service.create_link(body.target_url, code or None)
    except (InvalidURL, InvalidCodeFormat) as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except CodeConflict as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except AllocationExhausted as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))
    except StoreError as e:
        raise _store_unavailable(e)
    
    return _to_response(request, link)


@router.get(
    "/links",
    response_model=List[LinkResponse],
    summary="List links",
    description="List links, newest created first.",
)
async def list_links(request: Request, limit: Optional[int] = Query(None, ge=1)):
    """List links."""
    service = request.app.state.service
    
    try:
        links = await service.list_links(limit)
    except StoreError as e:
        raise _store_unavailable(e)
    
    return [_to_response(request, link) for link in links]


@router.get(
    "/links/{code}",
    response_model=LinkResponse,
    responses={
        404: {"model": ErrorResponse, "description": "Code not found"},
    },
    summary="Get link",
    description="Get a link including its click count and last access time.",
)
async def get_link(request: Request, code: str):
    """Get a single link."""
    service = request.app.state.service
    
    try:
        link = await service.get_link(code)
    except NotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except StoreError as e:
        raise _store_unavailable(e)
    
    return _to_response(request, link)


@router.delete(
    "/links/{code}",
    response_model=DeleteResponse,
    responses={
        404: {"model": ErrorResponse, "description": "Code not found"},
    },
    summary="Delete link",
)
async def delete_link(request: Request, code: str):
    """Delete a link."""
    service = request.app.state.service
    
    try:
        await service.delete_link(code)
    except NotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except StoreError as e:
        raise _store_unavailable(e)
    
    return DeleteResponse(message="Link deleted successfully")
