"""Scanner auto-registration."""

from typing import Optional
from ..models.common import Category
from .base import BaseCategoryScanner

_registry: dict[Category, BaseCategoryScanner] = {}


def register_scanner(scanner: BaseCategoryScanner) -> None:
    _registry[scanner.category] = scanner


def get_scanner(category: Category) -> Optional[BaseCategoryScanner]:
    return _registry.get(category)


def get_all_scanners() -> dict[Category, BaseCategoryScanner]:
    """Registered scanners in scan order."""
    return {c: _registry[c] for c in Category if c in _registry}


def missing_categories(scanners: dict[Category, BaseCategoryScanner]) -> list[Category]:
    return [c for c in Category if c not in scanners]
