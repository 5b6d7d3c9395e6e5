from typing import List, Literal, Optional
from datetime import datetime
from pydantic import BaseModel

TimeSlot = Literal["morning", "afternoon", "evening"]


class UnansweredPost(BaseModel):
    post_id: str
    title: str
    author: str
    created_at: datetime
    course: Optional[str] = None
    semester: Optional[str] = None
    subject: Optional[str] = None


class UnansweredPostsAlert(BaseModel):
    """Posts past the threshold without a single comment, oldest first"""
    count: int
    threshold_minutes: int
    posts: List[UnansweredPost] = []


class AssignmentCreate(BaseModel):
    student_id: str
    time_slot: TimeSlot


class Assignment(BaseModel):
    id: str
    student_id: str
    time_slot: str
    time_slot_label: str
    assigned_by: Optional[str] = None
    student_username: Optional[str] = None
    created_at: datetime


class StudentWithAssignment(BaseModel):
    id: str
    username: str
    nickname: Optional[str] = None
    email: str
    course: Optional[str] = None
    semester: Optional[str] = None
    time_slot: Optional[str] = None
    time_slot_label: Optional[str] = None


class TimeSlotInfo(BaseModel):
    id: str
    label: str
