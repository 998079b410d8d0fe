"""
Расширение набора измененных категорий до полных поддеревьев.
"""

from typing import Iterable, List, Optional, Set

from catalog_urls.services.store_registry import StoreScope, store_scope_prefix
from catalog_urls.services.tree_index import TreeIndex, TreeNode

# Корень дерева (level 0) и корни магазинов (level 1) не регенерируются
MIN_REGENERATED_LEVEL = 2


class SubtreeCollector:
    """Сборщик затронутых категорий по магазинам."""

    def __init__(self, index: TreeIndex):
        self.index = index

    def candidates(self, category_ids: Iterable[int], store: Optional[StoreScope] = None) -> List[TreeNode]:
        """
        Отфильтровать категории, подлежащие регенерации.

        Неизвестные ID пропускаются. Результат упорядочен по пути.
        """
        prefix = store_scope_prefix(store) if store is not None else None
        nodes = []
        for category_id in set(category_ids):
            node = self.index.find(category_id)
            if node is None or node.level < MIN_REGENERATED_LEVEL:
                continue
            if prefix is not None and not node.is_within(prefix):
                continue
            nodes.append(node)
        return sorted(nodes, key=lambda n: n.path)

    def expand(self, category_ids: Iterable[int], store: Optional[StoreScope] = None) -> Set[int]:
        """
        Каждая категория плюс все ее потомки.

        Args:
            category_ids: Измененные категории
            store: Магазин; без него поддеревья берутся по всему дереву

        Returns:
            Set[int]: Плоское множество ID без повторов (может быть пустым)
        """
        prefix = store_scope_prefix(store) if store is not None else None
        result: Set[int] = set()
        for node in self.candidates(category_ids, store):
            for category_id in self.index.descendant_ids(node.id, include_self=True):
                if prefix is None or self.index.get(category_id).is_within(prefix):
                    result.add(category_id)
        return result
