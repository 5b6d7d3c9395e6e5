from typing import Any, List, Optional
import logging

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile, status
from sqlalchemy.orm import Session

from collegestack.db.session import get_db
from collegestack.deps import get_current_profile, get_optional_profile
from collegestack.modules.profiles.models.profile import Profile
from collegestack.modules.posts.models.post import Post
from collegestack.modules.posts.schemas.post import Post as PostSchema, PostCreate, PostDeleteResult, PostUpdate
from collegestack.modules.posts.services.post import (
    build_post_views,
    create_post,
    delete_post,
    get_post,
    get_post_view,
    get_posts,
    get_user_posts,
    search_posts,
    update_post,
)
from collegestack.modules.posts.services.attachment import add_attachments, remove_attachment
from collegestack.modules.posts.votes.services.vote import has_voted

logger = logging.getLogger(__name__)

router = APIRouter(prefix="")


def _get_post_or_404(db: Session, post_id: str) -> Post:
    post = get_post(db, post_id=post_id)
    if not post:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Post not found",
        )
    return post


def _get_own_post(db: Session, post_id: str, profile: Profile) -> Post:
    post = _get_post_or_404(db, post_id)
    if post.author_id != profile.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not enough permissions",
        )
    return post


@router.get("", response_model=List[PostSchema])
def read_posts(
    db: Session = Depends(get_db),
    skip: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=200),
) -> Any:
    """
    Retrieve posts, newest first, with tags and comment counts.
    """
    return build_post_views(db, get_posts(db, skip=skip, limit=limit))


@router.post("", response_model=PostSchema, status_code=status.HTTP_201_CREATED)
def create_new_post(
    *,
    db: Session = Depends(get_db),
    post_in: PostCreate,
    current_profile: Profile = Depends(get_current_profile),
) -> Any:
    """
    Create new post. Unknown tag names are created.
    """
    post = create_post(db, post_in, current_profile.id)
    return get_post_view(db, post)


@router.get("/search", response_model=List[PostSchema])
def search(
    db: Session = Depends(get_db),
    q: str = Query("", description="Substring of the title or of a tag name"),
    tags: List[str] = Query([], description="Posts must carry every one of these tags"),
) -> Any:
    """
    Questions search.
    """
    return search_posts(db, q=q, tags=tags)


@router.get("/user/{user_id}", response_model=List[PostSchema])
def read_user_posts_by_id(
    *,
    db: Session = Depends(get_db),
    user_id: str,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=200),
) -> Any:
    """
    Get posts by author ID.
    """
    return build_post_views(db, get_user_posts(db, user_id=user_id, skip=skip, limit=limit))


@router.get("/{post_id}", response_model=PostSchema)
def read_post_by_id(
    *,
    db: Session = Depends(get_db),
    post_id: str,
    current_profile: Optional[Profile] = Depends(get_optional_profile),
) -> Any:
    """
    Get post by ID. Signed-in readers also get their vote state.
    """
    view = get_post_view(db, _get_post_or_404(db, post_id))
    if current_profile:
        view.voted = has_voted(db, post_id, current_profile.id)
    return view


@router.put("/{post_id}", response_model=PostSchema)
def update_post_by_id(
    *,
    db: Session = Depends(get_db),
    post_id: str,
    post_in: PostUpdate,
    current_profile: Profile = Depends(get_current_profile),
) -> Any:
    """
    Update a post. Only the author may edit it.
    """
    post = _get_own_post(db, post_id, current_profile)
    return get_post_view(db, update_post(db, post, post_in))


@router.delete("/{post_id}", response_model=PostDeleteResult)
def delete_post_by_id(
    *,
    db: Session = Depends(get_db),
    post_id: str,
    current_profile: Profile = Depends(get_current_profile),
) -> Any:
    """
    Delete a post and all associated data:
    1. Comments, votes and tag links, together with the post row
    2. Every stored attachment object
    Attachment removal failures are listed in failed_steps.
    """
    post = _get_own_post(db, post_id, current_profile)
    return delete_post(db, post)


@router.post("/{post_id}/attachments", response_model=PostSchema)
async def upload_attachments(
    *,
    db: Session = Depends(get_db),
    post_id: str,
    files: List[UploadFile] = File(...),
    current_profile: Profile = Depends(get_current_profile),
) -> Any:
    """
    Attach one or more files to a post.
    """
    post = _get_own_post(db, post_id, current_profile)
    incoming = []
    for upload in files:
        content = await upload.read()
        incoming.append((upload.filename, content, upload.content_type))
    return get_post_view(db, add_attachments(db, post, incoming))


@router.delete("/{post_id}/attachments/{key:path}", response_model=PostSchema)
def delete_attachment(
    *,
    db: Session = Depends(get_db),
    post_id: str,
    key: str,
    current_profile: Profile = Depends(get_current_profile),
) -> Any:
    """
    Remove one attachment from a post and from storage.
    """
    post = _get_own_post(db, post_id, current_profile)
    return get_post_view(db, remove_attachment(db, post, key))
