from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, status

from shortlink_app.config import Settings
from shortlink_app.dependencies import get_link_service, get_settings
from shortlink_app.schemas.link import (
    AddLinkFailure,
    AddLinkRequest,
    AddLinkResponse,
    LinkResponse,
    LinkSearchResponse,
)
from shortlink_app.services.link_service import LinkService
from shortlink_app.services.validation import validate_add_link

router = APIRouter(tags=["links"])


@router.get("/links", response_model=List[LinkResponse])
async def get_links(
    link_service: LinkService = Depends(get_link_service),
    settings: Settings = Depends(get_settings)
):
    """List every stored alias"""
    return [
        LinkResponse.from_entry(key, entry, settings.base_url)
        for key, entry in await link_service.list_links()
    ]


@router.post("/links", response_model=AddLinkResponse, status_code=status.HTTP_201_CREATED)
async def add_link(
    request: AddLinkRequest,
    link_service: LinkService = Depends(get_link_service),
    settings: Settings = Depends(get_settings)
):
    """
    Create a short link.

    Without a key the alias is derived from the link, and submitting the
    same link again returns the alias it already has.
    """
    failure = await validate_add_link(request, link_service, settings)
    if failure:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=failure.model_dump()
        )

    key, entry, created = await link_service.add_link(request.link, request.key)
    return AddLinkResponse.from_entry(key, entry, settings.base_url, created=created)


@router.get("/links/search", response_model=LinkSearchResponse)
async def find_links(
    link: str = Query(..., description="Target URL to look up"),
    link_service: LinkService = Depends(get_link_service)
):
    """All aliases pointing at a link"""
    return LinkSearchResponse(link=link, keys=await link_service.find_by_link(link))


@router.get("/links/{key}", response_model=LinkResponse)
async def get_link(
    key: str,
    link_service: LinkService = Depends(get_link_service),
    settings: Settings = Depends(get_settings)
):
    """Get a single alias (NotFound is mapped to 404)"""
    entry = await link_service.get_link(key)
    return LinkResponse.from_entry(key, entry, settings.base_url)


@router.delete("/links/{key}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_link(key: str, link_service: LinkService = Depends(get_link_service)):
    """Delete an alias (NotFound is mapped to 404)"""
    await link_service.delete_link(key)


@router.post("/validate/add_link", response_model=AddLinkFailure)
async def validate_link_request(
    request: AddLinkRequest,
    link_service: LinkService = Depends(get_link_service),
    settings: Settings = Depends(get_settings)
):
    """
    Check an add-link request without creating anything.

    Returns per-field messages; all fields None means the request is valid.
    """
    failure = await validate_add_link(request, link_service, settings)
    return failure or AddLinkFailure()
