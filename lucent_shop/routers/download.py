# lucent_shop/routers/download.py
from fastapi import APIRouter, Depends, status
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session

from lucent_shop.dependencies import get_db
from lucent_shop.services import download as download_service

router = APIRouter()


@router.get("/downloads/{token}", response_class=RedirectResponse, status_code=status.HTTP_307_TEMPORARY_REDIRECT)
async def follow_download_link(token: str, db: Session = Depends(get_db)):
    """
    Target of a signed download link. The token is the only credential;
    the client is redirected to the stored asset.
    """
    asset_url = download_service.resolve_download_token(db, token)
    return RedirectResponse(asset_url, status_code=status.HTTP_307_TEMPORARY_REDIRECT)
