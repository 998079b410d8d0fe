"""
Реестр магазинов.
"""

from dataclasses import dataclass
from typing import List

from sqlalchemy import select
from sqlalchemy.orm import Session

from catalog_urls.core.config import settings
from catalog_urls.db.models import Store
from catalog_urls.db.models.category_attribute import DEFAULT_STORE_ID


@dataclass(frozen=True)
class StoreScope:
    """Снимок магазина, не привязанный к сессии (передается между потоками)."""

    id: int
    code: str
    root_category_id: int

    @classmethod
    def from_model(cls, store: Store) -> "StoreScope":
        return cls(id=store.id, code=store.code, root_category_id=store.root_category_id)


def all_stores(db: Session) -> List[StoreScope]:
    """Активные магазины-витрины (без административной области 0)."""
    rows = db.execute(
        select(Store)
        .where(Store.id != DEFAULT_STORE_ID, Store.is_active.is_(True))
        .order_by(Store.id)
    ).scalars()
    return [StoreScope.from_model(store) for store in rows]


def store_scope_prefix(store: StoreScope) -> str:
    """Префикс путей категорий, видимых магазину: "1/{root}/"."""
    return f"{settings.TREE_ROOT_ID}/{store.root_category_id}/"
