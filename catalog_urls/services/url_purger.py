"""
Удаление устаревших URL данных категорий.

Кэш url_path хранится без привязки к витрине (строки всех магазинов
удаляются вместе), URL rewrites удаляются по магазину.
"""

import logging
from typing import Iterable

from sqlalchemy import delete
from sqlalchemy.orm import Session

from catalog_urls.db.models import CategoryAttribute, UrlRewrite
from catalog_urls.db.models.category_attribute import ATTR_URL_PATH
from catalog_urls.db.models.url_rewrite import ENTITY_TYPE_CATEGORY, REDIRECT_TYPE_NONE

logger = logging.getLogger(__name__)


class StaleUrlPurger:
    """Удаляет кэш url_path и текущие URL rewrites для набора категорий."""

    def __init__(self, db: Session):
        self.db = db

    def purge_url_path_attribute(self, category_ids: Iterable[int]) -> int:
        """
        Удалить атрибут url_path категорий во всех магазинах.

        Returns:
            int: Количество удаленных строк
        """
        ids = sorted(set(category_ids))
        if not ids:
            return 0
        result = self.db.execute(
            delete(CategoryAttribute).where(
                CategoryAttribute.attr_key == ATTR_URL_PATH,
                CategoryAttribute.category_id.in_(ids),
            )
        )
        logger.info(f"Deleted {result.rowcount} url_path value(s) for {len(ids)} categories")
        return result.rowcount

    def purge_url_rewrites(self, category_ids: Iterable[int], store_id: int) -> int:
        """
        Удалить текущие (не редирект) URL rewrites категорий в магазине.

        Исторические редиректы сохраняются.

        Returns:
            int: Количество удаленных строк
        """
        ids = sorted(set(category_ids))
        if not ids:
            return 0
        result = self.db.execute(
            delete(UrlRewrite).where(
                UrlRewrite.entity_type == ENTITY_TYPE_CATEGORY,
                UrlRewrite.entity_id.in_(ids),
                UrlRewrite.redirect_type == REDIRECT_TYPE_NONE,
                UrlRewrite.store_id == store_id,
            )
        )
        logger.info(
            f"Deleted {result.rowcount} url rewrite(s) for {len(ids)} categories in store {store_id}"
        )
        return result.rowcount
