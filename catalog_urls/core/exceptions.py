"""
Исключения предметной области каталога.

Ошибки перемещения категорий поднимаются к вызывающему коду,
ошибки регенерации URL изолируются на уровне одной категории.
"""

from typing import Optional


class CatalogError(Exception):
    """Базовое исключение каталога."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class CategoryNotFoundError(CatalogError):
    """Категория с указанным ID не существует."""

    def __init__(self, category_id: int):
        self.category_id = category_id
        super().__init__(f"Category with id {category_id} does not exist")


class CategoryMoveError(CatalogError):
    """
    Недопустимое перемещение категории.

    Поднимается до любых изменений дерева, повторять операцию бессмысленно.
    """


class CategoryPersistenceError(CatalogError):
    """
    Ошибка сохранения перемещения категории.

    Исходное исключение доступно через __cause__.
    """

    def __init__(self, category_id: int, message: str):
        self.category_id = category_id
        super().__init__(f"Could not move category {category_id}: {message}")


class UrlRewriteError(CatalogError):
    """Ошибка генерации или сохранения URL rewrite для одной категории."""

    def __init__(self, message: str, category_id: Optional[int] = None):
        self.category_id = category_id
        super().__init__(message)


class UrlRewriteConflictError(UrlRewriteError):
    """Request path уже занят другой сущностью в этом магазине."""

    def __init__(self, request_path: str, store_id: int, category_id: Optional[int] = None):
        self.request_path = request_path
        self.store_id = store_id
        super().__init__(
            f"URL key for specified store already exists: "
            f"'{request_path}' (store {store_id})",
            category_id=category_id,
        )
