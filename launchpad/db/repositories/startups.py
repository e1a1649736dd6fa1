from sqlalchemy import func, select
from sqlalchemy.orm import Session
from typing import Any, Dict, Optional

from launchpad.application.pagination import ListQuery, Page
from launchpad.db.listings import STARTUP_LISTING
from launchpad.db.models import Startup
from launchpad.db.query_builder import build_list_query, run_list_query


class StartupRepository:
    """Repository for startup operations."""

    def __init__(self, db: Session):
        self.db = db

    def create_startup(self, **fields: Any) -> Startup:
        """
        Create a new startup.

        Args:
            **fields: Validated column values (name, tagline, description, url, category_id)

        Returns:
            Created startup
        """
        startup = Startup(**fields)
        self.db.add(startup)
        self.db.commit()
        self.db.refresh(startup)
        return startup

    def get_startup(self, startup_id: int) -> Optional[Startup]:
        """
        Get a startup by ID.

        Args:
            startup_id: Startup ID

        Returns:
            Startup if found, None otherwise
        """
        return self.db.get(Startup, startup_id)

    def find_by_name(self, name: str) -> Optional[Startup]:
        """Case-insensitive lookup by name."""
        statement = select(Startup).where(func.lower(Startup.name) == name.lower())
        return self.db.execute(statement).scalars().first()

    def list_startups(self, list_query: ListQuery) -> Page:
        """
        Get one page of startups.

        Args:
            list_query: Validated page, sort, filter and search parameters

        Returns:
            Page of Startup rows with pagination metadata
        """
        return run_list_query(self.db, STARTUP_LISTING, list_query)

    def count_startups(self, list_query: ListQuery) -> int:
        """Count the startups matching the filters and search; paging is ignored."""
        plan = build_list_query(STARTUP_LISTING, list_query)
        return self.db.execute(plan.count).scalar_one()

    def update_startup(self, startup: Startup, fields: Dict[str, Any]) -> Startup:
        """Apply a partial update; only the given fields change."""
        for key, value in fields.items():
            setattr(startup, key, value)
        self.db.commit()
        self.db.refresh(startup)
        return startup

    def add_upvote(self, startup: Startup) -> Startup:
        startup.upvotes = Startup.upvotes + 1
        self.db.commit()
        self.db.refresh(startup)
        return startup

    def delete_startup(self, startup: Startup) -> None:
        self.db.delete(startup)
        self.db.commit()
