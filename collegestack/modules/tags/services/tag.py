"""
Tag storage. Tags are created lazily by name; a post's tags are always read
back sorted by name, so "the first matching tag" of a post is deterministic.
"""
from collections import defaultdict
from typing import Dict, Iterable, List
import logging
import uuid

from sqlalchemy.orm import Session

from collegestack.modules.catalog.vocabulary import default_tag_names
from collegestack.modules.tags.models.tag import PostTag, Tag

logger = logging.getLogger("app")


def _clean_names(names: Iterable[str]) -> List[str]:
    cleaned: List[str] = []
    for name in names:
        name = (name or "").strip()
        if name and name not in cleaned:
            cleaned.append(name)
    return cleaned


def search_tags(db: Session, q: str = "", limit: int = 50) -> List[Tag]:
    """Tags whose name contains q (case-insensitive), by name"""
    query = db.query(Tag)
    if q:
        query = query.filter(Tag.name.ilike(f"%{q.strip()}%"))
    return query.order_by(Tag.name).limit(limit).all()


def get_or_create_tags(db: Session, names: Iterable[str]) -> List[Tag]:
    """Tags for the given names, creating unknown ones. Flushes, does not commit."""
    cleaned = _clean_names(names)
    if not cleaned:
        return []

    existing = {tag.name: tag for tag in db.query(Tag).filter(Tag.name.in_(cleaned)).all()}
    tags = []
    for name in cleaned:
        tag = existing.get(name)
        if tag is None:
            tag = Tag(id=str(uuid.uuid4()), name=name)
            db.add(tag)
            logger.info(f"Created tag '{name}'")
        tags.append(tag)
    db.flush()
    return tags


def create_tag(db: Session, name: str) -> Tag:
    """Create a tag; an existing name returns the existing tag"""
    tag = get_or_create_tags(db, [name])[0]
    db.commit()
    db.refresh(tag)
    return tag


def set_post_tags(db: Session, post_id: str, names: Iterable[str]) -> List[str]:
    """Replace the tag links of a post. Flushes, does not commit."""
    db.query(PostTag).filter(PostTag.post_id == post_id).delete(synchronize_session=False)
    tags = get_or_create_tags(db, names)
    for tag in tags:
        db.add(PostTag(post_id=post_id, tag_id=tag.id))
    db.flush()
    return sorted(tag.name for tag in tags)


def get_tag_names_for_posts(db: Session, post_ids: List[str]) -> Dict[str, List[str]]:
    """post id -> sorted tag names"""
    result: Dict[str, List[str]] = defaultdict(list)
    if not post_ids:
        return result

    rows = (
        db.query(PostTag.post_id, Tag.name)
        .join(Tag, Tag.id == PostTag.tag_id)
        .filter(PostTag.post_id.in_(post_ids))
        .order_by(Tag.name)
        .all()
    )
    for post_id, name in rows:
        result[post_id].append(name)
    return result


def seed_default_tags(db: Session) -> int:
    """Fill an empty tags table with the default vocabulary"""
    if db.query(Tag).first() is not None:
        return 0

    names = default_tag_names()
    for name in names:
        db.add(Tag(id=str(uuid.uuid4()), name=name))
    db.commit()
    return len(names)
