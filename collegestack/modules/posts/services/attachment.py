"""Files attached to posts, stored through the object storage client"""
from typing import List, Optional, Tuple
import logging
import os

from sqlalchemy.orm import Session

from collegestack.core.config import settings
from collegestack.core.errors import CollegeStackError, ErrorKind
from collegestack.core.storage import r2_storage
from collegestack.modules.posts.models.post import Post

logger = logging.getLogger("app")

ATTACHMENT_PREFIX = "post_attachments"

# (filename, content, content type)
IncomingFile = Tuple[str, bytes, Optional[str]]


def validate_attachment(filename: str, size: int) -> None:
    file_extension = os.path.splitext(filename or "")[1].lower()
    if file_extension not in settings.ALLOWED_ATTACHMENT_EXTENSIONS:
        raise CollegeStackError(
            ErrorKind.UNSUPPORTED_FILE_TYPE,
            f"Unsupported file format. Please use one of: {', '.join(settings.ALLOWED_ATTACHMENT_EXTENSIONS)}",
        )
    if size > settings.MAX_UPLOAD_SIZE:
        raise CollegeStackError(
            ErrorKind.FILE_TOO_LARGE,
            f"File '{filename}' exceeds the {settings.MAX_UPLOAD_SIZE // (1024 * 1024)} MB limit",
        )


def add_attachments(db: Session, post: Post, files: List[IncomingFile]) -> Post:
    """Store the files and append {name, url, size, key} entries to the post"""
    for filename, content, _ in files:
        validate_attachment(filename, len(content))

    stored = []
    try:
        for filename, content, content_type in files:
            uploaded = r2_storage.upload_bytes(content, filename, content_type, prefix=ATTACHMENT_PREFIX)
            stored.append({"name": filename, "url": uploaded["url"], "size": len(content), "key": uploaded["key"]})
    except CollegeStackError:
        # Objects stored before the failure are not referenced by any post
        for entry in stored:
            try:
                r2_storage.delete_object(entry["key"])
            except CollegeStackError as e:
                logger.error(f"Failed to remove orphaned attachment {entry['key']}: {e.message}")
        raise

    # Reassign so the JSON column is flagged as modified
    post.attachments = list(post.attachments or []) + stored
    db.commit()
    db.refresh(post)
    logger.info(f"Added {len(stored)} attachment(s) to post {post.id}")
    return post


def remove_attachment(db: Session, post: Post, key: str) -> Post:
    """Delete the stored object, then drop its entry from the post"""
    attachments = list(post.attachments or [])
    if not any(a.get("key") == key for a in attachments):
        raise CollegeStackError(ErrorKind.NOT_FOUND, "Attachment not found")

    r2_storage.delete_object(key)
    post.attachments = [a for a in attachments if a.get("key") != key]
    db.commit()
    db.refresh(post)
    logger.info(f"Removed attachment {key} from post {post.id}")
    return post
