"""
Модели базы данных.

Импортирует все модели для корректной работы SQLAlchemy.
"""

from .base import Base
from .category import Category
from .category_attribute import CategoryAttribute
from .store import Store
from .url_rewrite import UrlRewrite

__all__ = [
    "Base",
    "Category",
    "CategoryAttribute",
    "Store",
    "UrlRewrite",
]
