from typing import Any, List

from fastapi import APIRouter, Depends, HTTPException, Path, Query, status
from sqlalchemy.orm import Session

from collegestack.db.session import get_db
from collegestack.deps import get_current_profile
from collegestack.modules.profiles.models.profile import Profile
from collegestack.modules.posts.services.post import get_post
from collegestack.modules.posts.comments.models.comment import Comment
from collegestack.modules.posts.comments.schemas.comment import Comment as CommentSchema, CommentCreate
from collegestack.modules.posts.comments.services.comment import (
    create_comment,
    delete_comment,
    get_comment,
    get_comments_by_post,
)

router = APIRouter()


def _validate_post(db: Session, post_id: str) -> None:
    """Validate post exists or raise HTTPException"""
    if not get_post(db, post_id=post_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Post not found"
        )


def _validate_comment(db: Session, comment_id: str, post_id: str) -> Comment:
    """Validate comment exists and belongs to the post"""
    comment = get_comment(db, comment_id=comment_id)
    if not comment:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Comment not found"
        )

    if comment.post_id != post_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Comment does not belong to the specified post"
        )

    return comment


@router.get("", response_model=List[CommentSchema])
def read_comments_by_post_id(
    *,
    db: Session = Depends(get_db),
    post_id: str = Path(..., description="The ID of the post to get comments for"),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=200),
) -> Any:
    """Get comments of a post, newest first"""
    _validate_post(db, post_id)
    return get_comments_by_post(db, post_id=post_id, skip=skip, limit=limit)


@router.post("", response_model=CommentSchema, status_code=status.HTTP_201_CREATED)
def create_new_comment(
    *,
    db: Session = Depends(get_db),
    post_id: str = Path(..., description="The ID of the post to comment on"),
    comment_in: CommentCreate,
    current_profile: Profile = Depends(get_current_profile),
) -> Any:
    """Create new comment on a post"""
    _validate_post(db, post_id)
    return create_comment(db, post_id, comment_in, current_profile)


@router.delete("/{comment_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_comment_by_id(
    *,
    db: Session = Depends(get_db),
    post_id: str = Path(..., description="The ID of the post"),
    comment_id: str,
    current_profile: Profile = Depends(get_current_profile),
) -> None:
    """Delete a comment. Only its author may delete it."""
    _validate_post(db, post_id)
    comment = _validate_comment(db, comment_id, post_id)
    if comment.user_id != current_profile.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not enough permissions"
        )
    delete_comment(db, comment)
