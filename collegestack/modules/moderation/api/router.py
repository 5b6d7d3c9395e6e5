from typing import Any, List

from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.orm import Session

from collegestack.core.errors import CollegeStackError, ErrorKind
from collegestack.db.session import get_db
from collegestack.deps import get_current_profile, require_roles
from collegestack.modules.moderation.models.assignment import TIME_SLOTS
from collegestack.modules.moderation.schemas.moderation import (
    Assignment,
    AssignmentCreate,
    StudentWithAssignment,
    TimeSlot,
    TimeSlotInfo,
    UnansweredPostsAlert,
)
from collegestack.modules.moderation.services.alerts import get_unanswered_alert
from collegestack.modules.moderation.services.assignment import (
    assign_moderator,
    get_assignment_for_student,
    get_assignments,
    get_students_with_assignments,
    remove_assignment,
)
from collegestack.modules.profiles.models.profile import Profile, ROLE_ADMIN, ROLE_STUDENT, ROLE_TEACHER

router = APIRouter()

require_teacher = require_roles(ROLE_TEACHER)


def require_moderation_access(
    db: Session = Depends(get_db),
    current_profile: Profile = Depends(get_current_profile),
) -> Profile:
    """Teachers, admins and students holding a moderator slot"""
    if current_profile.role in (ROLE_TEACHER, ROLE_ADMIN):
        return current_profile
    if current_profile.role == ROLE_STUDENT and get_assignment_for_student(db, current_profile.id):
        return current_profile
    raise CollegeStackError(ErrorKind.ROLE_MISMATCH, "Moderator access required")


@router.get("/unanswered", response_model=UnansweredPostsAlert)
def read_unanswered_posts(
    db: Session = Depends(get_db),
    current_profile: Profile = Depends(require_moderation_access),
) -> Any:
    """Posts older than the threshold that nobody has answered, oldest first"""
    return get_unanswered_alert(db)


@router.get("/time-slots", response_model=List[TimeSlotInfo])
def read_time_slots() -> Any:
    return [TimeSlotInfo(id=slot, label=label) for slot, label in TIME_SLOTS.items()]


@router.get("/assignments", response_model=List[Assignment])
def read_assignments(
    db: Session = Depends(get_db),
    current_profile: Profile = Depends(require_moderation_access),
) -> Any:
    return get_assignments(db)


@router.post("/assignments", response_model=Assignment, status_code=status.HTTP_201_CREATED)
def create_assignment(
    *,
    db: Session = Depends(get_db),
    assignment_in: AssignmentCreate,
    current_profile: Profile = Depends(require_teacher),
) -> Any:
    """Assign a student to a time slot, replacing the previous holder"""
    return assign_moderator(db, assignment_in.student_id, assignment_in.time_slot, current_profile.id)


@router.delete("/assignments/{time_slot}", status_code=status.HTTP_204_NO_CONTENT)
def delete_assignment(
    time_slot: TimeSlot = Path(...),
    db: Session = Depends(get_db),
    current_profile: Profile = Depends(require_teacher),
) -> None:
    remove_assignment(db, time_slot)


@router.get("/students", response_model=List[StudentWithAssignment])
def read_students(
    db: Session = Depends(get_db),
    current_profile: Profile = Depends(require_teacher),
) -> Any:
    """Students with their moderator slots, for the teacher dashboard"""
    return get_students_with_assignments(db)
