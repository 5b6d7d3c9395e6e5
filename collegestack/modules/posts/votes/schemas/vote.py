from pydantic import BaseModel


class VoteState(BaseModel):
    """Authoritative vote state after a toggle or a read"""
    post_id: str
    voted: bool
    votes: int
