"""
Сервис перемещения категорий в дереве.

Проверяет, что перемещение не создает цикл, вставляет категорию в
нужную позицию среди соседей и пересчитывает пути всего поддерева.
"""

import logging
from datetime import datetime
from typing import Dict, Iterable, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from catalog_urls.core.exceptions import (
    CategoryMoveError,
    CategoryPersistenceError,
)
from catalog_urls.db.models import Category
from catalog_urls.services.tree_index import TreeIndex, TreeNode

logger = logging.getLogger(__name__)

# after_id = 0 - вставить первым ребенком
INSERT_FIRST = 0


class CategoryMover:
    """Сервис перемещения категории к новому родителю."""

    def __init__(self, db: Session):
        self.db = db

    def move(self, category_id: int, parent_id: int, after_id: Optional[int] = None) -> bool:
        """
        Переместить категорию под нового родителя.

        Args:
            category_id: ID перемещаемой категории
            parent_id: ID нового родителя
            after_id: ID соседа, после которого вставить категорию.
                None - в конец списка детей, 0 - первым ребенком.

        Returns:
            bool: True при успешном перемещении

        Raises:
            CategoryNotFoundError: Категория или родитель не найдены
            CategoryMoveError: Перемещение родителя под собственного потомка
                или after_id не является ребенком нового родителя
            CategoryPersistenceError: Ошибка сохранения изменений
        """
        index = TreeIndex.load(self.db)
        node = index.get(category_id)
        parent = index.get(parent_id)

        if parent.ordered_child_ids:
            last_id = parent.ordered_child_ids[-1]
            unknown = after_id is not None and after_id not in parent.ordered_child_ids
            if after_id is None or (unknown and after_id > last_id):
                after_id = last_id

        if parent.id == node.id or index.is_descendant(parent.id, node.id):
            raise CategoryMoveError(
                "Operation do not allow to move a parent category to any of children category"
            )

        position = self._resolve_position(node, parent, after_id)
        old_parent_id = node.parent_id

        moved = index.relocate(node.id, parent.id, position)
        self._persist(index, category_id, moved, {old_parent_id, parent.id})
        logger.info(
            f"Category {category_id} moved under {parent_id} "
            f"(after {after_id}), {len(moved)} node(s) updated"
        )
        return True

    @staticmethod
    def _resolve_position(node: TreeNode, parent: TreeNode, after_id: Optional[int]) -> int:
        """Индекс вставки в список детей родителя без учета самой категории."""
        siblings = [cid for cid in parent.ordered_child_ids if cid != node.id]
        if after_id is None or after_id == INSERT_FIRST:
            return 0
        if after_id == node.id and node.id in parent.ordered_child_ids:
            # Категория уже последняя у этого родителя - остается на месте
            return parent.ordered_child_ids.index(node.id)
        if after_id not in siblings:
            raise CategoryMoveError(
                f"Category {after_id} is not a child of category {parent.id}"
            )
        return siblings.index(after_id) + 1

    def _persist(
        self,
        index: TreeIndex,
        category_id: int,
        moved: Iterable[TreeNode],
        parent_ids: Iterable[Optional[int]],
    ) -> None:
        """Записать новые пути, уровни и позиции соседей одним коммитом."""
        try:
            updates: Dict[int, Dict] = {
                node.id: {"parent_id": node.parent_id, "path": node.path, "level": node.level}
                for node in moved
            }
            for pid in parent_ids:
                if pid is None or pid not in index:
                    continue
                for position, child_id in enumerate(index.get(pid).ordered_child_ids):
                    updates.setdefault(child_id, {})["position"] = position

            rows = self.db.execute(
                select(Category).where(Category.id.in_(list(updates)))
            ).scalars()
            now = datetime.utcnow()
            for row in rows:
                for attr, value in updates[row.id].items():
                    setattr(row, attr, value)
                row.updated_at = now

            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            error = CategoryPersistenceError(category_id, str(e))
            logger.error(error.message)
            raise error from e
