"""
services/category_service.py
-----------------------------
Shared category catalog offered when entering expenses.
"""

from models.expense import clean_category
from repositories.category_repo import CategoryRepository
from utils.errors import NotFoundError


class CategoryService:
    """Lists, adds and removes catalog categories."""

    def __init__(self, category_repo=None):
        self.repo = category_repo or CategoryRepository()

    def list_categories(self) -> list[str]:
        return self.repo.get_all()

    def add_category(self, name: str) -> bool:
        """Returns False if the category already existed."""
        return self.repo.add(clean_category(name))

    def delete_category(self, name: str) -> None:
        name = clean_category(name)
        if not self.repo.delete(name):
            raise NotFoundError(f"Category '{name}' not found")
