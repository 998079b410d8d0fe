# tests/test_subtree_collector.py
from catalog_urls.db.models import Store
from catalog_urls.services.store_registry import StoreScope, all_stores, store_scope_prefix
from catalog_urls.services.subtree_collector import SubtreeCollector
from catalog_urls.services.tree_index import TreeIndex

DEFAULT_STORE = StoreScope(id=1, code="default", root_category_id=2)
OUTDOOR_STORE = StoreScope(id=2, code="outdoor", root_category_id=3)


class TestSubtreeCollectorExpand:
    """Тесты расширения категорий до поддеревьев"""

    def test_expand_includes_self_and_descendants(self, catalog):
        collector = SubtreeCollector(TreeIndex.load(catalog))

        assert collector.expand({10}) == {10, 11, 13}

    def test_expand_deduplicates_overlapping_subtrees(self, catalog):
        collector = SubtreeCollector(TreeIndex.load(catalog))

        assert collector.expand({10, 11, 20}) == {10, 11, 13, 20, 21}

    def test_root_and_store_roots_are_never_expanded(self, catalog):
        collector = SubtreeCollector(TreeIndex.load(catalog))

        assert collector.expand({1, 2, 3}) == set()

    def test_unknown_ids_are_ignored(self, catalog):
        collector = SubtreeCollector(TreeIndex.load(catalog))

        assert collector.expand({999, 12}) == {12}

    def test_empty_input_is_noop(self, catalog):
        assert SubtreeCollector(TreeIndex.load(catalog)).expand(set()) == set()


class TestSubtreeCollectorStoreScope:
    """Тесты ограничения областью магазина"""

    def test_store_scope_keeps_only_own_root(self, catalog):
        collector = SubtreeCollector(TreeIndex.load(catalog))

        assert collector.expand({10, 20}, DEFAULT_STORE) == {10, 11, 13}
        assert collector.expand({10, 20}, OUTDOOR_STORE) == {20, 21}

    def test_category_outside_scope_gives_empty_set(self, catalog):
        collector = SubtreeCollector(TreeIndex.load(catalog))

        assert collector.expand({10}, OUTDOOR_STORE) == set()

    def test_candidates_are_sorted_by_path(self, catalog):
        collector = SubtreeCollector(TreeIndex.load(catalog))

        candidates = collector.candidates({12, 13, 10, 20}, DEFAULT_STORE)

        assert [node.id for node in candidates] == [10, 13, 12]


class TestStoreRegistry:
    """Тесты реестра магазинов"""

    def test_admin_store_is_excluded(self, catalog):
        assert [store.id for store in all_stores(catalog)] == [1, 2]

    def test_inactive_store_is_excluded(self, catalog):
        catalog.get(Store, 2).is_active = False
        catalog.commit()

        assert [store.id for store in all_stores(catalog)] == [1]

    def test_scope_prefix(self):
        assert store_scope_prefix(DEFAULT_STORE) == "1/2/"
