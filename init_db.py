"""
Database initialization script.
Creates all tables and seeds the default tag vocabulary.
Run this as: python init_db.py
"""

import logging
import sys

# Configure logging
logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
logger = logging.getLogger("db-init")

from collegestack.core.config import settings
from collegestack.db.init_db import create_all_tables, seed_database


def init_db() -> bool:
    """Initialize the database by creating all tables and seeding tags."""
    logger.info(f"Initializing database at: {settings.DATABASE_URL}")
    if not create_all_tables():
        return False
    seeded = seed_database()
    logger.info(f"Seeded {seeded} tag(s)")
    return True


if __name__ == "__main__":
    logger.info("Starting database initialization")
    if init_db():
        logger.info("Database initialization completed successfully")
    else:
        logger.error("Database initialization failed")
        sys.exit(1)
