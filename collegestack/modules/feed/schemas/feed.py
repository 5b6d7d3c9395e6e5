from typing import List
from pydantic import BaseModel

from collegestack.modules.posts.schemas.post import Post


class FeedResponse(BaseModel):
    """Feed response model returned to client"""
    trending: List[Post]
    latest: List[Post]
    total: int
