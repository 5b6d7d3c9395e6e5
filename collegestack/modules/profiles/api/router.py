from typing import Any, List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from collegestack.db.session import get_db
from collegestack.deps import get_current_profile
from collegestack.modules.profiles.models.profile import Profile
from collegestack.modules.profiles.schemas.profile import (
    NicknameUpdate,
    Profile as ProfileSchema,
    ProfileStats,
    ProfileSummary,
    ProfileUpdate,
)
from collegestack.modules.profiles.services.profile import (
    get_profile_stats,
    get_profiles_by_role,
    set_nickname,
    update_profile,
)

router = APIRouter()


@router.get("/me", response_model=ProfileSchema)
def read_profile_me(
    current_profile: Profile = Depends(get_current_profile),
) -> Any:
    """Get current profile"""
    return current_profile


@router.patch("/me", response_model=ProfileSchema)
def update_profile_me(
    *,
    db: Session = Depends(get_db),
    profile_in: ProfileUpdate,
    current_profile: Profile = Depends(get_current_profile),
) -> Any:
    """Update course/semester of the current profile"""
    return update_profile(db, current_profile, profile_in)


@router.put("/me/nickname", response_model=ProfileSchema)
def update_nickname(
    *,
    db: Session = Depends(get_db),
    nickname_in: NicknameUpdate,
    current_profile: Profile = Depends(get_current_profile),
) -> Any:
    """Choose a nickname. Allowed exactly once."""
    return set_nickname(db, current_profile, nickname_in.nickname)


@router.get("/me/stats", response_model=ProfileStats)
def read_profile_stats(
    db: Session = Depends(get_db),
    current_profile: Profile = Depends(get_current_profile),
) -> Any:
    return get_profile_stats(db, current_profile.id)


@router.get("", response_model=List[ProfileSummary])
def list_profiles(
    db: Session = Depends(get_db),
    role: str = Query("student"),
    current_profile: Profile = Depends(get_current_profile),
) -> Any:
    """List profiles by role"""
    return get_profiles_by_role(db, role)
