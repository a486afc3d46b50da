from fastapi import APIRouter, Depends, HTTPException, status
from api.dependencies import get_site_service, get_change_feed
from api.models import SiteCreate, SiteResponse, ChangeFeedResponse
from api.services.change_feed import SiteChangeFeed
from api.services.site_service import SiteService
from db.repositories.site_repository import DuplicateSiteError, SiteNotFoundError

router = APIRouter()


@router.get("/sites", response_model=list[SiteResponse])
def list_sites(site_service: SiteService = Depends(get_site_service)):
    return site_service.list_sites()


@router.post("/sites", response_model=SiteResponse, status_code=status.HTTP_201_CREATED)
def add_site(
    site: SiteCreate,
    site_service: SiteService = Depends(get_site_service),
):
    try:
        return site_service.add_site(site.url)
    except DuplicateSiteError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


# Registered before /sites/{site_id} so "changes" is not parsed as an id
@router.get("/sites/changes", response_model=ChangeFeedResponse)
def site_changes(change_feed: SiteChangeFeed = Depends(get_change_feed)):
    return ChangeFeedResponse(revision=change_feed.revision)


@router.get("/sites/{site_id}", response_model=SiteResponse)
def get_site(site_id: int, site_service: SiteService = Depends(get_site_service)):
    site = site_service.get_site(site_id)
    if not site:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Site not found")
    return site


@router.delete("/sites/{site_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_site(
    site_id: int,
    site_service: SiteService = Depends(get_site_service),
):
    try:
        site_service.delete_site(site_id)
    except SiteNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
