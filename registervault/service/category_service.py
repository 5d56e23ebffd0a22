from __future__ import annotations

from typing import Iterable, List, Optional

import structlog

from registervault.config import settings
from registervault.data.category_repo import CategoryRepo
from registervault.errors import AuthenticationError, NotFoundError, ValidationError
from registervault.models.category import Category
from registervault.service.read_model import VocabularyReadModel

logger = structlog.get_logger(__name__)


def _require_user(user_id: Optional[int]) -> int:
    if user_id is None:
        raise AuthenticationError()
    return user_id


def search_categories(categories: Iterable[Category], term: str) -> List[Category]:
    """Case-insensitive substring match on name or description."""
    term = term.lower()
    return [
        c for c in categories
        if term in c.name.lower() or (c.description is not None and term in c.description.lower())
    ]


class CategoryService:
    """Category CRUD.

    Every mutation invalidates the user's cached vocabulary list, since entries
    display their category's name and color.
    """

    def __init__(self, repo: CategoryRepo, read_model: VocabularyReadModel):
        self.repo = repo
        self.read_model = read_model

    def list_categories(self, user_id: int) -> List[Category]:
        return self.repo.list_by_user(user_id)

    def get_category(self, user_id: int, category_id: int) -> Category:
        category = self.repo.get(category_id, user_id)
        if category is None:
            raise NotFoundError(f"Category {category_id} not found")
        return category

    def create_category(self, user_id: Optional[int], name: str, description: str = "", color: str = "") -> Category:
        name = name.strip()
        if not name:
            raise ValidationError("name required")
        user_id = _require_user(user_id)
        category = self.repo.create(user_id, name, description.strip() or None, color.strip() or settings.DEFAULT_CATEGORY_COLOR)
        self.read_model.invalidate(user_id)
        logger.info("category_created", user_id=user_id, category_id=category.id)
        return category

    def update_category(self, user_id: Optional[int], category_id: int, name: str, description: str = "", color: str = "") -> Category:
        name = name.strip()
        if not name:
            raise ValidationError("name required")
        user_id = _require_user(user_id)
        category = self.repo.update(category_id, user_id, name, description.strip() or None, color.strip() or settings.DEFAULT_CATEGORY_COLOR)
        if category is None:
            raise NotFoundError(f"Category {category_id} not found")
        self.read_model.invalidate(user_id)
        logger.info("category_updated", user_id=user_id, category_id=category_id)
        return category

    def delete_category(self, user_id: Optional[int], category_id: int) -> None:
        user_id = _require_user(user_id)
        if not self.repo.delete(category_id, user_id):
            raise NotFoundError(f"Category {category_id} not found")
        self.read_model.invalidate(user_id)
        logger.info("category_deleted", user_id=user_id, category_id=category_id)

    def ensure_owned(self, user_id: int, category_ids: Iterable[int]) -> None:
        ids = list(dict.fromkeys(category_ids))
        if self.repo.count_owned(ids, user_id) != len(ids):
            raise ValidationError("unknown category")
