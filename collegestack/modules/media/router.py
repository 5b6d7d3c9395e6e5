from fastapi import APIRouter, Depends

from collegestack.core.config import settings
from collegestack.core.storage import r2_storage
from collegestack.modules.media.service import MediaService

router = APIRouter(prefix=f"{settings.API_V1_STR}/media", tags=["media"])


def get_media_service():
    return MediaService(r2_storage)


@router.get("/{key:path}")
def serve_media(key: str, media_service: MediaService = Depends(get_media_service)):
    """Serve a stored attachment by key"""
    return media_service.get_media(key)
