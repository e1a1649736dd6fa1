"""
Tests for seeding and database setup.
"""
from sqlalchemy import create_engine, func, inspect, select

from launchpad.db.database import init_db, make_engine
from launchpad.db.models import Category, Startup
from launchpad.db.reset import reset_database
from launchpad.db.seed import CATEGORIES, STARTUPS, seed_database


class TestSeed:

    def test_seed_counts(self, db_session):
        counts = seed_database(db_session)

        assert counts == {"categories": len(CATEGORIES), "startups": len(STARTUPS)}

    def test_seed_replaces_existing_rows(self, seeded_session):
        seed_database(seeded_session)
        seed_database(seeded_session)

        total = seeded_session.execute(select(func.count()).select_from(Startup)).scalar_one()
        assert total == len(STARTUPS)

    def test_startups_point_at_seeded_categories(self, db_session):
        seed_database(db_session)

        startup = db_session.execute(select(Startup).where(Startup.name == "ShipFast")).scalar_one()
        assert startup.category.name == "DevTools"
        assert startup.upvotes == 15


class TestDatabase:

    def test_init_db_creates_tables(self):
        engine = create_engine("sqlite://")
        init_db(bind=engine)

        assert {"categories", "startups", "comments"} <= set(inspect(engine).get_table_names())

    def test_make_engine_sqlite(self):
        engine = make_engine("sqlite://")
        assert engine.dialect.name == "sqlite"

    def test_category_names_are_unique(self, db_session):
        seed_database(db_session)
        names = db_session.execute(select(Category.name)).scalars().all()
        assert len(names) == len(set(names))


class TestReset:

    def test_reset_recreates_and_seeds(self, engine, seeded_session):
        counts = reset_database(bind=engine)

        assert counts == {"categories": len(CATEGORIES), "startups": len(STARTUPS)}
        assert set(inspect(engine).get_table_names()) >= {"categories", "startups", "comments"}
