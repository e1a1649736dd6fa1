from sqlalchemy import func, select
from sqlalchemy.orm import Session
from typing import List, Optional

from launchpad.db.models import Category


class CategoryRepository:
    """Repository for category operations."""

    def __init__(self, db: Session):
        self.db = db

    def create_category(self, name: str, description: str = None) -> Category:
        """
        Create a new category.

        Args:
            name: Category name
            description: Category description (optional)

        Returns:
            Created category
        """
        category = Category(name=name, description=description)
        self.db.add(category)
        self.db.commit()
        self.db.refresh(category)
        return category

    def get_category(self, category_id: int) -> Optional[Category]:
        return self.db.get(Category, category_id)

    def find_by_name(self, name: str) -> Optional[Category]:
        statement = select(Category).where(func.lower(Category.name) == name.lower())
        return self.db.execute(statement).scalars().first()

    def get_all_categories(self) -> List[Category]:
        """
        Get all categories.

        Returns:
            List of all categories, ordered by name
        """
        return list(self.db.execute(select(Category).order_by(Category.name)).scalars())
