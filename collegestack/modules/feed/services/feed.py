from typing import List, Optional, Sequence, Tuple, TypeVar

from sqlalchemy.orm import Session

from collegestack.core.config import settings
from collegestack.modules.feed.schemas.feed import FeedResponse
from collegestack.modules.posts.services.post import build_post_views, get_posts

P = TypeVar("P")


def split_trending(posts: Sequence[P], limit: int) -> Tuple[List[P], List[P]]:
    """
    Top `limit` posts by votes (ties: newer first) and the rest by recency.
    No post lands in both lists.
    """
    by_votes = sorted(posts, key=lambda p: (p.votes, p.created_at), reverse=True)
    trending = by_votes[:max(limit, 0)]
    trending_ids = {p.id for p in trending}
    latest = sorted(
        (p for p in posts if p.id not in trending_ids),
        key=lambda p: p.created_at,
        reverse=True,
    )
    return trending, latest


def get_feed(db: Session, trending_limit: Optional[int] = None) -> FeedResponse:
    if trending_limit is None:
        trending_limit = settings.TRENDING_LIMIT
    posts = build_post_views(db, get_posts(db))
    trending, latest = split_trending(posts, trending_limit)
    return FeedResponse(trending=trending, latest=latest, total=len(posts))
