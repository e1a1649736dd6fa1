"""Application service for the startup directory."""
from __future__ import annotations

import logging
from typing import Any, List, Mapping

from sqlalchemy.orm import Session

from launchpad.application.pagination import MAX_INT, Page
from launchpad.application.validation import validate_or_raise
from launchpad.db.listings import COMMENT_LISTING, STARTUP_LISTING
from launchpad.db.models import Category, Startup
from launchpad.db.repositories import CategoryRepository, CommentRepository, StartupRepository
from launchpad.domain.errors import ConflictError, NotFoundError
from launchpad.domain.events import (
    Events,
    channel_name,
    comment_added_payload,
    startup_upvoted_payload,
)
from launchpad.infrastructure.pubsub import PubSub
from launchpad.schemas.api_schemas import CategoryOut, CommentOut, StartupOut
from launchpad.schemas.input_schemas import (
    CategoryCreate,
    CommentCreate,
    StartupCreate,
    StartupUpdate,
    parse_list_query,
)

logger = logging.getLogger(__name__)


class StartupService:
    """Validates input, talks to the repositories and publishes events.

    Every failure leaves as a taxonomy error; callers format it at the
    boundary.
    """

    def __init__(
        self,
        db: Session,
        pubsub: PubSub,
        default_limit: int = 10,
        max_limit: int = 100,
    ) -> None:
        self._startups = StartupRepository(db)
        self._categories = CategoryRepository(db)
        self._comments = CommentRepository(db)
        self._pubsub = pubsub
        self._default_limit = default_limit
        self._max_limit = max_limit

    # Startups

    def list_startups(self, params: Mapping[str, Any]) -> Page[StartupOut]:
        list_query = parse_list_query(
            STARTUP_LISTING, params, default_limit=self._default_limit, max_limit=self._max_limit
        )
        page = self._startups.list_startups(list_query)
        return Page[StartupOut](
            data=[StartupOut.from_model(row) for row in page.data],
            pagination=page.pagination,
        )

    def get_startup(self, startup_id: int) -> StartupOut:
        return StartupOut.from_model(self._require_startup(startup_id))

    def count_startups(self, params: Mapping[str, Any]) -> int:
        """Number of startups matching the filters and search in ``params``; paging is ignored."""
        list_query = parse_list_query(
            STARTUP_LISTING, params, default_limit=self._default_limit, max_limit=self._max_limit
        )
        return self._startups.count_startups(list_query)

    def create_startup(self, body: Any) -> StartupOut:
        """
        Create a startup.

        Raises:
            ValidationFailedError: if the body is invalid
            NotFoundError: if the category does not exist
            ConflictError: if a startup with the same name exists
        """
        fields = validate_or_raise(StartupCreate, body)
        self._require_category(fields["category_id"])
        self._require_unique_name(fields["name"])

        startup = self._startups.create_startup(**fields)
        logger.info(f"Created startup {startup.id} ({startup.name})")
        return StartupOut.from_model(startup)

    def update_startup(self, startup_id: int, body: Any) -> StartupOut:
        fields = validate_or_raise(StartupUpdate, body)
        startup = self._require_startup(startup_id)
        if "category_id" in fields:
            self._require_category(fields["category_id"])
        if "name" in fields and fields["name"].lower() != startup.name.lower():
            self._require_unique_name(fields["name"])

        startup = self._startups.update_startup(startup, fields)
        return StartupOut.from_model(startup)

    def delete_startup(self, startup_id: int) -> None:
        startup = self._require_startup(startup_id)
        self._startups.delete_startup(startup)
        logger.info(f"Deleted startup {startup_id}")

    def upvote_startup(self, startup_id: int) -> StartupOut:
        """Increment the upvote count and notify both upvote channels."""
        startup = self._startups.add_upvote(self._require_startup(startup_id))
        record = StartupOut.from_model(startup)

        payload = startup_upvoted_payload(record.model_dump(mode="json"))
        self._pubsub.publish(channel_name(Events.STARTUP_UPVOTED), payload)
        self._pubsub.publish(channel_name(Events.STARTUP_UPVOTED, startup.id), payload)
        return record

    # Comments

    def add_comment(self, startup_id: int, body: Any) -> CommentOut:
        fields = validate_or_raise(CommentCreate, body)
        self._require_startup(startup_id)

        comment = self._comments.create_comment(startup_id, fields["author"], fields["content"])
        record = CommentOut.model_validate(comment)
        self._pubsub.publish(
            channel_name(Events.COMMENT_ADDED, startup_id),
            comment_added_payload(record.model_dump(mode="json")),
        )
        return record

    def list_comments(self, startup_id: int, params: Mapping[str, Any]) -> Page[CommentOut]:
        self._require_startup(startup_id)
        scoped = {**params, "startup": startup_id}
        list_query = parse_list_query(
            COMMENT_LISTING, scoped, default_limit=self._default_limit, max_limit=self._max_limit
        )
        page = self._comments.list_comments(list_query)
        return Page[CommentOut](
            data=[CommentOut.model_validate(row) for row in page.data],
            pagination=page.pagination,
        )

    # Categories

    def list_categories(self) -> List[CategoryOut]:
        return [CategoryOut.model_validate(c) for c in self._categories.get_all_categories()]

    def get_category(self, category_id: int) -> CategoryOut:
        return CategoryOut.model_validate(self._require_category(category_id))

    def create_category(self, body: Any) -> CategoryOut:
        fields = validate_or_raise(CategoryCreate, body)
        if self._categories.find_by_name(fields["name"]) is not None:
            raise ConflictError(f"Category '{fields['name']}' already exists")
        category = self._categories.create_category(fields["name"], fields.get("description"))
        return CategoryOut.model_validate(category)

    # Helpers

    def _require_startup(self, startup_id: int) -> Startup:
        startup = self._startups.get_startup(startup_id) if _storable(startup_id) else None
        if startup is None:
            raise NotFoundError("Startup", startup_id)
        return startup

    def _require_category(self, category_id: int) -> Category:
        category = self._categories.get_category(category_id) if _storable(category_id) else None
        if category is None:
            raise NotFoundError("Category", category_id)
        return category

    def _require_unique_name(self, name: str) -> None:
        if self._startups.find_by_name(name) is not None:
            raise ConflictError(f"A startup named '{name}' already exists")


def _storable(record_id: int) -> bool:
    # Ids outside the column range cannot exist and would overflow the driver
    return 1 <= record_id <= MAX_INT

