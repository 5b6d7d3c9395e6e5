from typing import Dict, List, Optional
import uuid
import logging

from sqlalchemy.orm import Session
from sqlalchemy import func

from collegestack.core.config import settings
from collegestack.core.storage import r2_storage
from collegestack.core.transaction_script import TransactionScript
from collegestack.modules.posts.models.post import Post
from collegestack.modules.posts.schemas.post import (
    FailedStep,
    Post as PostSchema,
    PostCreate,
    PostDeleteResult,
    PostUpdate,
)
from collegestack.modules.posts.comments.models.comment import Comment
from collegestack.modules.posts.votes.models.vote import UserVote
from collegestack.modules.profiles.models.profile import Profile
from collegestack.modules.profiles.schemas.profile import ProfileSummary
from collegestack.modules.tags.models.tag import PostTag
from collegestack.modules.tags.services.tag import get_tag_names_for_posts, set_post_tags

logger = logging.getLogger("app")


def make_preview(content: str, word_limit: Optional[int] = None) -> str:
    """First N words of the content, with "..." when truncated"""
    word_limit = word_limit or settings.PREVIEW_WORD_LIMIT
    words = content.split()
    if len(words) <= word_limit:
        return " ".join(words)
    return " ".join(words[:word_limit]) + "..."


def get_post(db: Session, post_id: str) -> Optional[Post]:
    """Get post by ID"""
    return db.query(Post).filter(Post.id == post_id).first()


def get_comment_counts(db: Session, post_ids: List[str]) -> Dict[str, int]:
    if not post_ids:
        return {}
    rows = (
        db.query(Comment.post_id, func.count(Comment.id))
        .filter(Comment.post_id.in_(post_ids))
        .group_by(Comment.post_id)
        .all()
    )
    return {post_id: count for post_id, count in rows}


def build_post_views(db: Session, posts: List[Post]) -> List[PostSchema]:
    """Attach author, sorted tags and comment count to each post, keeping order"""
    post_ids = [post.id for post in posts]
    tag_map = get_tag_names_for_posts(db, post_ids)
    comment_counts = get_comment_counts(db, post_ids)

    author_ids = {post.author_id for post in posts}
    authors = {}
    if author_ids:
        authors = {p.id: p for p in db.query(Profile).filter(Profile.id.in_(author_ids)).all()}

    result = []
    for post in posts:
        author = authors.get(post.author_id)
        result.append(PostSchema(
            id=post.id,
            title=post.title,
            content=post.content,
            preview=post.preview,
            votes=post.votes or 0,
            author_id=post.author_id,
            author=ProfileSummary.model_validate(author) if author else None,
            tags=tag_map.get(post.id, []),
            comment_count=comment_counts.get(post.id, 0),
            attachments=post.attachments or [],
            created_at=post.created_at,
            updated_at=post.updated_at,
        ))
    return result


def get_post_view(db: Session, post: Post) -> PostSchema:
    return build_post_views(db, [post])[0]


def get_posts(db: Session, skip: int = 0, limit: Optional[int] = None) -> List[Post]:
    """Posts newest first"""
    query = db.query(Post).order_by(Post.created_at.desc()).offset(skip)
    if limit is not None:
        query = query.limit(limit)
    return query.all()


def get_user_posts(db: Session, user_id: str, skip: int = 0, limit: int = 20) -> List[Post]:
    """Get posts by author ID"""
    return (
        db.query(Post)
        .filter(Post.author_id == user_id)
        .order_by(Post.created_at.desc())
        .offset(skip)
        .limit(limit)
        .all()
    )


def create_post(db: Session, post_in: PostCreate, author_id: str) -> Post:
    """Create new post; unknown tag names are created on the way"""
    logger.info(f"Creating post for author ID: {author_id}")
    post = Post(
        id=str(uuid.uuid4()),
        title=post_in.title.strip(),
        content=post_in.content,
        preview=make_preview(post_in.content),
        votes=0,
        author_id=author_id,
        attachments=[],
    )
    db.add(post)
    db.flush()
    set_post_tags(db, post.id, post_in.tags)
    db.commit()
    db.refresh(post)
    return post


def update_post(db: Session, post: Post, post_in: PostUpdate) -> Post:
    """Update title/content and replace the tags when given"""
    logger.info(f"Updating post with ID: {post.id}")
    update_data = post_in.model_dump(exclude_unset=True)

    if update_data.get("title") is not None:
        post.title = update_data["title"].strip()
    if update_data.get("content") is not None:
        post.content = update_data["content"]
        post.preview = make_preview(post.content)
    if update_data.get("tags") is not None:
        set_post_tags(db, post.id, update_data["tags"])

    db.commit()
    db.refresh(post)
    return post


def _delete_post_rows(db: Session, post_id: str) -> None:
    """Comments, votes, tag links and the post row, all or nothing"""
    try:
        db.query(Comment).filter(Comment.post_id == post_id).delete(synchronize_session=False)
        db.query(UserVote).filter(UserVote.post_id == post_id).delete(synchronize_session=False)
        db.query(PostTag).filter(PostTag.post_id == post_id).delete(synchronize_session=False)
        db.query(Post).filter(Post.id == post_id).delete(synchronize_session=False)
        db.commit()
    except Exception:
        db.rollback()
        raise


def delete_post(db: Session, post: Post) -> PostDeleteResult:
    """
    Delete a post with everything hanging off it.

    The database rows go in a single transaction; stored attachment objects
    are removed afterwards one by one, and removal failures are reported in
    the result instead of undoing the deletion.
    """
    post_id = post.id
    attachment_keys = [a.get("key") for a in (post.attachments or []) if a.get("key")]

    script = TransactionScript(f"delete_post:{post_id}")
    script.add_step("delete_rows", lambda: _delete_post_rows(db, post_id), critical=True)
    for key in attachment_keys:
        script.add_step(f"remove_attachment:{key}", lambda key=key: r2_storage.delete_object(key))

    result = script.run()
    logger.info(f"Deleted post {post_id} ({len(result.completed)} step(s) completed)")
    return PostDeleteResult(
        post_id=post_id,
        deleted=True,
        failed_steps=[FailedStep(step=f.step, error=f.error) for f in result.failed],
    )


def search_posts(db: Session, q: str = "", tags: Optional[List[str]] = None) -> List[PostSchema]:
    """
    Posts whose title or any tag name contains q (case-insensitive) and which
    carry every one of the selected tags. Newest first.
    """
    needle = (q or "").strip().lower()
    required = {t.strip() for t in (tags or []) if t and t.strip()}

    matches = []
    for view in build_post_views(db, get_posts(db)):
        if required and not required.issubset(view.tags):
            continue
        if needle and needle not in view.title.lower() and not any(needle in t.lower() for t in view.tags):
            continue
        matches.append(view)
    return matches
