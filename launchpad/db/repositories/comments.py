from sqlalchemy.orm import Session

from launchpad.application.pagination import ListQuery, Page
from launchpad.db.listings import COMMENT_LISTING
from launchpad.db.models import Comment
from launchpad.db.query_builder import run_list_query


class CommentRepository:
    """Repository for comment operations."""

    def __init__(self, db: Session):
        self.db = db

    def create_comment(self, startup_id: int, author: str, content: str) -> Comment:
        """
        Create a comment on a startup.

        Args:
            startup_id: ID of the startup being commented on
            author: Display name of the author
            content: Comment text

        Returns:
            Created comment
        """
        comment = Comment(startup_id=startup_id, author=author, content=content)
        self.db.add(comment)
        self.db.commit()
        self.db.refresh(comment)
        return comment

    def list_comments(self, list_query: ListQuery) -> Page:
        """Get one page of comments; callers scope it with the ``startup`` filter."""
        return run_list_query(self.db, COMMENT_LISTING, list_query)
