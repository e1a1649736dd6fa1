"""Drop, recreate and seed the LaunchPad database.

Usage:
    python -m launchpad.db.reset
"""
import logging

from sqlalchemy.engine import Engine

from launchpad.config import settings
from launchpad.db.database import SessionLocal, engine, init_db
from launchpad.db.models import Base
from launchpad.db.seed import seed_database
from launchpad.log import setup_logging

logger = logging.getLogger(__name__)


def reset_database(bind: Engine = engine) -> dict:
    """Drop every table, create them again and load the seed data."""
    logger.info(f"Dropping all tables on {bind.url.render_as_string(hide_password=True)}...")
    Base.metadata.drop_all(bind=bind)
    init_db(bind=bind)

    db = SessionLocal(bind=bind)
    try:
        return seed_database(db)
    finally:
        db.close()


if __name__ == "__main__":
    setup_logging(settings.LOG_LEVEL)
    confirm = input("This will DELETE ALL DATA in the database. Are you sure? (y/n): ")
    if confirm.lower() == 'y':
        counts = reset_database()
        print(f"Database has been reset successfully: {counts}")
    else:
        print("Operation cancelled.")
