"""
Генерация URL rewrites категорий.

Для категории и всех ее потомков внутри магазина строится канонический
request path из url_key предков. Сохранение выполняется как replace
(insert-or-update), ошибка одной категории не прерывает пакет.
"""

import logging
import re
import unicodedata
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Set, Tuple

from sqlalchemy import select
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session

from catalog_urls.core.config import settings
from catalog_urls.core.exceptions import UrlRewriteConflictError, UrlRewriteError
from catalog_urls.db.models import CategoryAttribute, UrlRewrite
from catalog_urls.db.models.category_attribute import (
    ATTR_NAME,
    ATTR_URL_KEY,
    ATTR_URL_PATH,
    DEFAULT_STORE_ID,
)
from catalog_urls.db.models.url_rewrite import ENTITY_TYPE_CATEGORY, REDIRECT_TYPE_NONE
from catalog_urls.services.store_registry import StoreScope, store_scope_prefix
from catalog_urls.services.subtree_collector import MIN_REGENERATED_LEVEL
from catalog_urls.services.tree_index import TreeIndex

logger = logging.getLogger(__name__)

STATUS_SUCCESS = "success"
STATUS_FAILED = "failed"

_URL_KEY_INVALID = re.compile(r"[^a-z0-9]+")


def format_url_key(value: str) -> str:
    """Привести название к url_key: латиница, цифры и дефисы."""
    normalized = unicodedata.normalize("NFKD", value).encode("ascii", "ignore").decode("ascii")
    return _URL_KEY_INVALID.sub("-", normalized.lower()).strip("-")


@dataclass
class RegenerationResult:
    """
    Результат регенерации одной категории в одном магазине.

    Attributes:
        category_id: ID категории-кандидата
        store_id: ID магазина
        status: success/failed
        rewrites: Количество сохраненных записей
        error: Текст ошибки для failed
    """

    category_id: int
    store_id: int
    status: str
    rewrites: int = 0
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == STATUS_SUCCESS


class UrlRegenerator:
    """Сервис генерации и сохранения URL rewrites категорий."""

    def __init__(self, db: Session, index: TreeIndex):
        self.db = db
        self.index = index

    def regenerate(self, category_id: int, store: StoreScope) -> RegenerationResult:
        """
        Пересоздать URL rewrites категории и ее потомков в магазине.

        Ошибки генерации и сохранения откатываются, логируются и
        возвращаются в результате. Ошибки соединения с БД пробрасываются.
        """
        try:
            rewrites = self.generate(category_id, store)
            self.replace(rewrites, store.id)
        except OperationalError:
            self.db.rollback()
            raise
        except (UrlRewriteError, SQLAlchemyError) as e:
            self.db.rollback()
            logger.error(
                f"Could not regenerate url rewrites for category {category_id} "
                f"in store {store.id}: {e}"
            )
            return RegenerationResult(
                category_id=category_id,
                store_id=store.id,
                status=STATUS_FAILED,
                error=str(e),
            )

        return RegenerationResult(
            category_id=category_id,
            store_id=store.id,
            status=STATUS_SUCCESS,
            rewrites=len(rewrites),
        )

    def generate(self, category_id: int, store: StoreScope) -> List[UrlRewrite]:
        """
        Построить канонические URL rewrites без сохранения.

        Returns:
            List[UrlRewrite]: Записи для категории и потомков внутри магазина
        """
        prefix = store_scope_prefix(store)
        node = self.index.get(category_id)
        if not node.is_within(prefix):
            return []

        subtree = [
            self.index.get(cid)
            for cid in self.index.descendant_ids(node.id, include_self=True)
        ]
        subtree = sorted((n for n in subtree if n.is_within(prefix)), key=lambda n: n.path)
        ancestors = [
            aid
            for aid in node.path_ids[:-1]
            if aid in self.index and self.index.get(aid).level >= MIN_REGENERATED_LEVEL
        ]
        values = self._load_values([n.id for n in subtree] + ancestors, store.id)

        url_paths: Dict[int, str] = {}
        rewrites = []
        for current in subtree:
            url_path = self._url_path(current.id, values, url_paths, store)
            rewrites.append(
                UrlRewrite(
                    entity_type=ENTITY_TYPE_CATEGORY,
                    entity_id=current.id,
                    request_path=f"{url_path}{settings.CATEGORY_URL_SUFFIX}",
                    target_path=settings.CATEGORY_TARGET_PATH.format(id=current.id),
                    redirect_type=REDIRECT_TYPE_NONE,
                    store_id=store.id,
                    is_autogenerated=True,
                )
            )
        return rewrites

    def replace(self, rewrites: Iterable[UrlRewrite], store_id: int) -> None:
        """
        Сохранить записи как insert-or-update по (request_path, store_id).

        Raises:
            UrlRewriteConflictError: request path занят текущей записью
                другой сущности или повторяется в наборе
        """
        by_path: Dict[str, UrlRewrite] = {}
        for rewrite in rewrites:
            if rewrite.request_path in by_path:
                raise UrlRewriteConflictError(
                    rewrite.request_path, store_id, category_id=rewrite.entity_id
                )
            by_path[rewrite.request_path] = rewrite

        if not by_path:
            return

        existing = self.db.execute(
            select(UrlRewrite).where(
                UrlRewrite.store_id == store_id,
                UrlRewrite.request_path.in_(list(by_path)),
            )
        ).scalars()
        current_by_path = {row.request_path: row for row in existing}

        for request_path, rewrite in by_path.items():
            current = current_by_path.get(request_path)
            if current is None:
                self.db.add(rewrite)
                continue
            same_entity = (
                current.entity_type == rewrite.entity_type
                and current.entity_id == rewrite.entity_id
            )
            if not same_entity and current.redirect_type == REDIRECT_TYPE_NONE:
                raise UrlRewriteConflictError(
                    request_path, store_id, category_id=rewrite.entity_id
                )
            current.entity_type = rewrite.entity_type
            current.entity_id = rewrite.entity_id
            current.target_path = rewrite.target_path
            current.redirect_type = rewrite.redirect_type
            current.is_autogenerated = rewrite.is_autogenerated

        self.db.commit()

    def _load_values(self, category_ids: List[int], store_id: int) -> Dict[Tuple[int, str], str]:
        """Значения name/url_key/url_path: строка магазина важнее значения по умолчанию."""
        rows = self.db.execute(
            select(CategoryAttribute).where(
                CategoryAttribute.category_id.in_(category_ids),
                CategoryAttribute.store_id.in_([DEFAULT_STORE_ID, store_id]),
                CategoryAttribute.attr_key.in_([ATTR_NAME, ATTR_URL_KEY, ATTR_URL_PATH]),
            )
        ).scalars()

        values: Dict[Tuple[int, str], str] = {}
        overridden: Set[Tuple[int, str]] = set()
        for row in rows:
            key = (row.category_id, row.attr_key)
            if not row.value or key in overridden:
                continue
            values[key] = row.value
            if row.store_id == store_id:
                overridden.add(key)
        return values

    def _url_path(
        self,
        category_id: int,
        values: Dict[Tuple[int, str], str],
        url_paths: Dict[int, str],
        store: StoreScope,
    ) -> str:
        if category_id in url_paths:
            return url_paths[category_id]

        cached = values.get((category_id, ATTR_URL_PATH))
        if cached:
            url_paths[category_id] = cached
            return cached

        node = self.index.get(category_id)
        url_key = values.get((category_id, ATTR_URL_KEY))
        if not url_key:
            url_key = format_url_key(values.get((category_id, ATTR_NAME), ""))
        if not url_key:
            raise UrlRewriteError(
                f"Category {category_id} has neither url_key nor name in store {store.id}",
                category_id=category_id,
            )

        parent_path = ""
        parent = self.index.find(node.parent_id) if node.parent_id is not None else None
        if parent is not None and parent.level >= MIN_REGENERATED_LEVEL:
            parent_path = self._url_path(parent.id, values, url_paths, store)

        url_path = f"{parent_path}/{url_key}" if parent_path else url_key
        url_paths[category_id] = url_path
        return url_path
