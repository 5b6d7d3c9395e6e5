import logging

from sqlalchemy.orm import Session

from collegestack.core.errors import CollegeStackError, ErrorKind
from collegestack.modules.posts.models.post import Post
from collegestack.modules.posts.votes.models.vote import UserVote
from collegestack.modules.posts.votes.schemas.vote import VoteState

logger = logging.getLogger("app")


def has_voted(db: Session, post_id: str, user_id: str) -> bool:
    return (
        db.query(UserVote)
        .filter(UserVote.post_id == post_id, UserVote.user_id == user_id)
        .first()
        is not None
    )


def get_vote_state(db: Session, post_id: str, user_id: str) -> VoteState:
    post = db.query(Post).filter(Post.id == post_id).first()
    if not post:
        raise CollegeStackError(ErrorKind.NOT_FOUND, "Post not found")
    return VoteState(post_id=post_id, voted=has_voted(db, post_id, user_id), votes=post.votes or 0)


def handle_vote(db: Session, post_id: str, user_id: str) -> VoteState:
    """
    Toggle the user's vote on a post.

    Membership in user_votes and the posts.votes counter change together in
    one transaction, with the post row locked so concurrent toggles serialize.
    """
    try:
        post = db.query(Post).filter(Post.id == post_id).with_for_update().first()
        if not post:
            raise CollegeStackError(ErrorKind.NOT_FOUND, "Post not found")

        existing = (
            db.query(UserVote)
            .filter(UserVote.post_id == post_id, UserVote.user_id == user_id)
            .first()
        )
        if existing:
            db.delete(existing)
            post.votes = max((post.votes or 0) - 1, 0)
            voted = False
        else:
            db.add(UserVote(post_id=post_id, user_id=user_id))
            post.votes = (post.votes or 0) + 1
            voted = True

        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(post)
    logger.info(f"Vote {'added' if voted else 'removed'} on post {post_id} by {user_id}")
    return VoteState(post_id=post_id, voted=voted, votes=post.votes)
