from typing import List, Optional
import logging
import uuid

from sqlalchemy.orm import Session

from collegestack.modules.posts.comments.models.comment import Comment
from collegestack.modules.posts.comments.schemas.comment import Comment as CommentSchema, CommentCreate
from collegestack.modules.profiles.models.profile import Profile

logger = logging.getLogger("app")


def get_comment(db: Session, comment_id: str) -> Optional[Comment]:
    """Get comment by ID"""
    return db.query(Comment).filter(Comment.id == comment_id).first()


def _to_schema(comment: Comment, author: Optional[Profile]) -> CommentSchema:
    return CommentSchema(
        id=comment.id,
        content=comment.content,
        user_id=comment.user_id,
        post_id=comment.post_id,
        username=author.username if author else None,
        nickname=author.nickname if author else None,
        created_at=comment.created_at,
        updated_at=comment.updated_at,
    )


def get_comments_by_post(db: Session, post_id: str, skip: int = 0, limit: int = 100) -> List[CommentSchema]:
    """Comments of a post, newest first, with author username/nickname"""
    rows = (
        db.query(Comment, Profile)
        .outerjoin(Profile, Profile.id == Comment.user_id)
        .filter(Comment.post_id == post_id)
        .order_by(Comment.created_at.desc())
        .offset(skip)
        .limit(limit)
        .all()
    )
    return [_to_schema(comment, author) for comment, author in rows]


def create_comment(db: Session, post_id: str, comment_in: CommentCreate, author: Profile) -> CommentSchema:
    """Create a new comment"""
    comment = Comment(
        id=str(uuid.uuid4()),
        content=comment_in.content,
        user_id=author.id,
        post_id=post_id,
    )
    db.add(comment)
    db.commit()
    db.refresh(comment)
    logger.info(f"Comment {comment.id} added to post {post_id}")
    return _to_schema(comment, author)


def delete_comment(db: Session, comment: Comment) -> None:
    """Delete comment"""
    db.delete(comment)
    db.commit()
