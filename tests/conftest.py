"""
Test configuration and fixtures for LaunchPad tests.
"""
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from launchpad.application.startup_service import StartupService
from launchpad.db.models import Base, Category, Startup
from launchpad.infrastructure.pubsub import PubSub

FIXTURE_CATEGORIES = ["DevTools", "FinTech", "HealthTech"]

# (name, tagline, description, category id, upvotes)
# Category 1 holds exactly three rows containing "ai": Brainwave, Mailroom, Quokka
FIXTURE_STARTUPS = [
    ("Brainwave", "Focus music for deep work sessions",
     "Brainwave generates adaptive soundscapes that help you focus for hours.", 1, 12),
    ("Mailroom", "Shared inbox for support teams",
     "Mailroom gives every support teammate one shared queue of customer messages.", 1, 5),
    ("Quokka", "AI notes for meetings",
     "Quokka records meetings and writes summaries your team can search later.", 1, 30),
    ("Nimbus", "Serverless job scheduler for busy teams",
     "Nimbus runs scheduled jobs without servers, retries on errors, and reports results.", 1, 8),
    ("Lumen", "Light-speed static site hosting",
     "Lumen deploys static sites to a global edge network in seconds.", 1, 3),
    ("Orbit", "Track every customer touchpoint",
     "Orbit collects product usage events so you know who to help next.", 1, 20),
    ("PayTrail", "Expense tracking for small companies",
     "PayTrail reconciles card spend against receipts automatically.", 2, 15),
    ("Ledgerly", "Bookkeeping on autopilot",
     "Ledgerly keeps your books balanced with daily bank sync.", 2, 7),
    ("Coinstack", "Crypto portfolio tracker",
     "Coinstack shows balances across wallets and exchanges.", 2, 1),
    ("HealthAI", "Symptom triage for clinics",
     "HealthAI helps clinics prioritise incoming patients.", 3, 25),
    ("CarePath", "Care plans patients follow",
     "CarePath turns discharge instructions into daily checklists.", 3, 10),
    ("Vitals", "Remote monitoring for chronic conditions",
     "Vitals streams readings from home devices to care teams.", 3, 2),
]


@pytest.fixture
def engine():
    """In-memory SQLite database shared by every connection of one test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(engine):
    """Empty database session."""
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    yield session
    session.close()


@pytest.fixture
def seeded_session(db_session):
    """Session over 3 categories and 12 startups."""
    for name in FIXTURE_CATEGORIES:
        db_session.add(Category(name=name, description=f"{name} companies"))
    db_session.flush()

    for name, tagline, description, category_id, upvotes in FIXTURE_STARTUPS:
        db_session.add(Startup(
            name=name,
            tagline=tagline,
            description=description,
            url=f"https://{name.lower()}.example.com",
            category_id=category_id,
            upvotes=upvotes,
        ))
    db_session.commit()
    return db_session


@pytest.fixture
def pubsub():
    """Fresh broker, closed after the test."""
    broker = PubSub()
    yield broker
    broker.close()


@pytest.fixture
def service(seeded_session, pubsub):
    return StartupService(seeded_session, pubsub)


@pytest.fixture
def startup_ids(seeded_session):
    """Map of fixture startup name to id."""
    return {startup.name: startup.id for startup in seeded_session.query(Startup).all()}
