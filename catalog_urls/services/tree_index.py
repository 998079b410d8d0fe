"""
Индекс дерева категорий.

Загружает все узлы одним запросом и хранит их как словарь узлов по ID
со ссылками на родителя и упорядоченным списком детей. Проверки
предок/потомок выполняются сравнением префиксов материализованного пути.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Set

from sqlalchemy import select
from sqlalchemy.orm import Session

from catalog_urls.core.exceptions import CategoryNotFoundError
from catalog_urls.db.models import Category

PATH_SEPARATOR = "/"


@dataclass
class TreeNode:
    """
    Узел дерева категорий.

    Attributes:
        id: ID категории
        parent_id: ID родителя (None у синтетического корня)
        path: Материализованный путь ("1/2/5")
        level: Глубина узла
        ordered_child_ids: ID детей в порядке сортировки (всегда список, возможно пустой)
    """

    id: int
    parent_id: Optional[int]
    path: str
    level: int
    ordered_child_ids: List[int] = field(default_factory=list)

    @property
    def path_ids(self) -> List[int]:
        return [int(part) for part in self.path.split(PATH_SEPARATOR) if part]

    def is_within(self, prefix: str) -> bool:
        """Лежит ли узел строго внутри поддерева с префиксом пути."""
        return self.path.startswith(prefix)


def child_path(parent_path: str, category_id: int) -> str:
    """Путь дочернего узла: путь родителя + ID."""
    if not parent_path:
        return str(category_id)
    return f"{parent_path}{PATH_SEPARATOR}{category_id}"


def subtree_prefix(path: str) -> str:
    """Префикс путей всех потомков узла."""
    return f"{path}{PATH_SEPARATOR}"


class TreeIndex:
    """Изменяемое представление дерева категорий в памяти."""

    def __init__(self, nodes: Iterable[TreeNode]):
        self._nodes: Dict[int, TreeNode] = {node.id: node for node in nodes}

    @classmethod
    def load(cls, db: Session) -> "TreeIndex":
        """
        Построить индекс из таблицы категорий.

        Дети упорядочиваются по position, затем по ID.
        """
        rows = db.execute(
            select(Category.id, Category.parent_id, Category.path, Category.level)
            .order_by(Category.parent_id, Category.position, Category.id)
        ).all()

        nodes = [
            TreeNode(id=row.id, parent_id=row.parent_id, path=row.path, level=row.level)
            for row in rows
        ]
        index = cls(nodes)
        for node in nodes:
            if node.parent_id is not None and node.parent_id in index._nodes:
                index._nodes[node.parent_id].ordered_child_ids.append(node.id)
        return index

    def __contains__(self, category_id: int) -> bool:
        return category_id in self._nodes

    def get(self, category_id: int) -> TreeNode:
        node = self._nodes.get(category_id)
        if node is None:
            raise CategoryNotFoundError(category_id)
        return node

    def find(self, category_id: int) -> Optional[TreeNode]:
        return self._nodes.get(category_id)

    def descendant_ids(self, category_id: int, include_self: bool = False) -> Set[int]:
        """
        ID всех потомков узла (дети детей рекурсивно).

        Args:
            category_id: ID категории
            include_self: Включить саму категорию в результат

        Returns:
            Set[int]: Множество ID
        """
        root = self.get(category_id)
        result: Set[int] = {root.id} if include_self else set()
        stack = list(root.ordered_child_ids)
        while stack:
            current = self._nodes[stack.pop()]
            result.add(current.id)
            stack.extend(current.ordered_child_ids)
        return result

    def is_descendant(self, category_id: int, ancestor_id: int) -> bool:
        """Является ли узел строгим потомком другого узла."""
        node = self.get(category_id)
        ancestor = self.get(ancestor_id)
        return node.is_within(subtree_prefix(ancestor.path))

    def relocate(self, category_id: int, parent_id: int, index: int) -> List[TreeNode]:
        """
        Переместить узел к новому родителю на позицию index.

        Пересчитывает путь и уровень узла и всех его потомков.
        Валидация выполняется вызывающим кодом.

        Returns:
            List[TreeNode]: Перемещенный узел и все его потомки
        """
        node = self.get(category_id)
        parent = self.get(parent_id)

        if node.parent_id is not None and node.parent_id in self._nodes:
            old_parent = self._nodes[node.parent_id]
            old_parent.ordered_child_ids = [
                cid for cid in old_parent.ordered_child_ids if cid != node.id
            ]

        parent.ordered_child_ids.insert(index, node.id)
        node.parent_id = parent.id

        moved: List[TreeNode] = []
        stack = [(node, parent)]
        while stack:
            current, current_parent = stack.pop()
            current.path = child_path(current_parent.path, current.id)
            current.level = current_parent.level + 1
            moved.append(current)
            stack.extend(
                (self._nodes[cid], current) for cid in current.ordered_child_ids
            )
        return moved
