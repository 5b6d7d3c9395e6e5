"""Moderator rota: one student per time slot, one slot per student"""
from typing import List, Optional
import logging
import uuid

from sqlalchemy import or_
from sqlalchemy.orm import Session

from collegestack.core.errors import CollegeStackError, ErrorKind
from collegestack.modules.moderation.models.assignment import ModeratorAssignment, TIME_SLOTS
from collegestack.modules.moderation.schemas.moderation import Assignment, StudentWithAssignment
from collegestack.modules.profiles.models.profile import Profile, ROLE_STUDENT

logger = logging.getLogger("app")


def _to_schema(assignment: ModeratorAssignment, student: Optional[Profile] = None) -> Assignment:
    return Assignment(
        id=assignment.id,
        student_id=assignment.student_id,
        time_slot=assignment.time_slot,
        time_slot_label=TIME_SLOTS.get(assignment.time_slot, assignment.time_slot),
        assigned_by=assignment.assigned_by,
        student_username=student.username if student else None,
        created_at=assignment.created_at,
    )


def get_assignment_for_student(db: Session, student_id: str) -> Optional[ModeratorAssignment]:
    return (
        db.query(ModeratorAssignment)
        .filter(ModeratorAssignment.student_id == student_id)
        .order_by(ModeratorAssignment.created_at.desc())
        .first()
    )


def get_assignments(db: Session) -> List[Assignment]:
    """Assignments in slot order"""
    rows = (
        db.query(ModeratorAssignment, Profile)
        .outerjoin(Profile, Profile.id == ModeratorAssignment.student_id)
        .all()
    )
    slot_order = list(TIME_SLOTS)
    rows.sort(key=lambda row: slot_order.index(row[0].time_slot) if row[0].time_slot in slot_order else len(slot_order))
    return [_to_schema(assignment, student) for assignment, student in rows]


def assign_moderator(db: Session, student_id: str, time_slot: str, assigned_by: str) -> Assignment:
    """Give a time slot to a student in one transaction.

    Whoever held the slot loses it, and so does any other slot the student held.
    """
    if time_slot not in TIME_SLOTS:
        raise CollegeStackError(ErrorKind.VALIDATION, f"Time slot must be one of: {', '.join(TIME_SLOTS)}")

    student = db.query(Profile).filter(Profile.id == student_id).first()
    if not student:
        raise CollegeStackError(ErrorKind.NOT_FOUND, "Student not found")
    if student.role != ROLE_STUDENT:
        raise CollegeStackError(ErrorKind.VALIDATION, "Only students can be assigned as moderators")

    assignment = ModeratorAssignment(
        id=str(uuid.uuid4()),
        student_id=student_id,
        time_slot=time_slot,
        assigned_by=assigned_by,
    )
    try:
        db.query(ModeratorAssignment).filter(
            or_(ModeratorAssignment.time_slot == time_slot, ModeratorAssignment.student_id == student_id)
        ).delete(synchronize_session=False)
        # Delete must reach the database before the insert hits the unique slot constraint
        db.flush()
        db.add(assignment)
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(assignment)
    logger.info(f"Assigned {student.username} to the {time_slot} slot")
    return _to_schema(assignment, student)


def remove_assignment(db: Session, time_slot: str) -> None:
    deleted = (
        db.query(ModeratorAssignment)
        .filter(ModeratorAssignment.time_slot == time_slot)
        .delete(synchronize_session=False)
    )
    if not deleted:
        db.rollback()
        raise CollegeStackError(ErrorKind.NOT_FOUND, "No assignment for this time slot")
    db.commit()
    logger.info(f"Removed the {time_slot} moderator assignment")


def get_students_with_assignments(db: Session) -> List[StudentWithAssignment]:
    """Every student with their current slot, if any"""
    students = db.query(Profile).filter(Profile.role == ROLE_STUDENT).order_by(Profile.username).all()
    slots = {a.student_id: a.time_slot for a in db.query(ModeratorAssignment).all()}
    return [
        StudentWithAssignment(
            id=student.id,
            username=student.username,
            nickname=student.nickname,
            email=student.email,
            course=student.course,
            semester=student.semester,
            time_slot=slots.get(student.id),
            time_slot_label=TIME_SLOTS.get(slots.get(student.id)) if slots.get(student.id) else None,
        )
        for student in students
    ]
