"""
Database initialization script.

    python -m groupsplit.db.init_db
"""
import logging
from groupsplit.db.session import init_db

logger = logging.getLogger(__name__)

if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    logger.info("Initializing database...")
    init_db()
    logger.info("Database initialized successfully!")
