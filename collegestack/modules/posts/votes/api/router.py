from typing import Any

from fastapi import APIRouter, Depends, Path
from sqlalchemy.orm import Session

from collegestack.db.session import get_db
from collegestack.deps import get_current_profile
from collegestack.modules.profiles.models.profile import Profile
from collegestack.modules.posts.votes.schemas.vote import VoteState
from collegestack.modules.posts.votes.services.vote import get_vote_state, handle_vote

router = APIRouter()


@router.post("", response_model=VoteState)
def toggle_vote(
    *,
    db: Session = Depends(get_db),
    post_id: str = Path(..., description="The ID of the post to vote on"),
    current_profile: Profile = Depends(get_current_profile),
) -> Any:
    """Vote for a post, or take the vote back"""
    return handle_vote(db, post_id, current_profile.id)


@router.get("", response_model=VoteState)
def read_vote(
    *,
    db: Session = Depends(get_db),
    post_id: str = Path(..., description="The ID of the post"),
    current_profile: Profile = Depends(get_current_profile),
) -> Any:
    """Whether the current profile has voted, and the vote count"""
    return get_vote_state(db, post_id, current_profile.id)
