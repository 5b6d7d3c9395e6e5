import logging

from sqlalchemy import inspect

from collegestack.core.config import settings
from collegestack.db.session import engine, SessionLocal
from collegestack.db.base import Base
from collegestack.modules.tags.services.tag import seed_default_tags

logger = logging.getLogger(__name__)


def create_all_tables() -> bool:
    try:
        inspector = inspect(engine)
        existing_tables = inspector.get_table_names()

        Base.metadata.create_all(bind=engine)

        new_tables = set(inspect(engine).get_table_names()) - set(existing_tables)
        if new_tables:
            logger.info(f"Created new tables: {new_tables}")

        return True
    except Exception as e:
        logger.error(f"Error creating database tables: {e}")
        return False


def seed_database() -> int:
    """Seed the default tag vocabulary into an empty tags table"""
    if not settings.SEED_DEFAULT_TAGS:
        return 0
    db = SessionLocal()
    try:
        created = seed_default_tags(db)
        if created:
            logger.info(f"Seeded {created} default tags")
        return created
    finally:
        db.close()
