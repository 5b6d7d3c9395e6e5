from typing import Any

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from collegestack.db.session import get_db
from collegestack.modules.feed.schemas.feed import FeedResponse
from collegestack.modules.feed.services.feed import get_feed

router = APIRouter()


@router.get("", response_model=FeedResponse)
def read_feed(
    *,
    db: Session = Depends(get_db),
) -> Any:
    """Trending posts followed by the latest ones"""
    return get_feed(db)
