from launchpad.db.repositories.startups import StartupRepository
from launchpad.db.repositories.categories import CategoryRepository
from launchpad.db.repositories.comments import CommentRepository

__all__ = ['StartupRepository', 'CategoryRepository', 'CommentRepository']
