from launchpad.db.models import Base
from launchpad.db.database import engine, SessionLocal, get_db, init_db
from launchpad.db.seed import seed_database

__all__ = ['Base', 'engine', 'SessionLocal', 'get_db', 'init_db', 'seed_database']
