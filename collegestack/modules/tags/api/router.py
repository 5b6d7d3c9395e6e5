from typing import Any, List

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from collegestack.db.session import get_db
from collegestack.deps import get_current_profile
from collegestack.modules.profiles.models.profile import Profile
from collegestack.modules.tags.schemas.tag import Tag as TagSchema, TagCreate
from collegestack.modules.tags.services.tag import create_tag, search_tags

router = APIRouter()


@router.get("", response_model=List[TagSchema])
def read_tags(
    db: Session = Depends(get_db),
    q: str = Query("", description="Substring of the tag name"),
    limit: int = Query(50, ge=1, le=500),
) -> Any:
    """Search tags by name"""
    return search_tags(db, q=q, limit=limit)


@router.post("", response_model=TagSchema, status_code=status.HTTP_201_CREATED)
def create_new_tag(
    *,
    db: Session = Depends(get_db),
    tag_in: TagCreate,
    current_profile: Profile = Depends(get_current_profile),
) -> Any:
    """Create a tag, or return the existing tag with that name"""
    return create_tag(db, tag_in.name)
