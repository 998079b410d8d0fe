# tests/test_category_mover.py
from unittest.mock import patch

import pytest
from sqlalchemy.exc import SQLAlchemyError

from catalog_urls.core.exceptions import (
    CategoryMoveError,
    CategoryNotFoundError,
    CategoryPersistenceError,
)
from catalog_urls.db.models import Category
from catalog_urls.services.category_mover import CategoryMover

from conftest import add_category, category_row, child_ids


class TestCategoryMoverPlacement:
    """Тесты позиции категории после перемещения"""

    def test_move_under_empty_parent_becomes_first_child(self, catalog):
        """1/2 -> 10 -> 11: перенос 11 под соседа 10 без after_id"""
        assert CategoryMover(catalog).move(11, 12) is True

        row = category_row(catalog, 11)
        assert row.parent_id == 12
        assert row.path == "1/2/12/11"
        assert row.level == 3
        assert child_ids(catalog, 12) == [11]
        assert child_ids(catalog, 10) == []

    def test_move_without_after_id_appends_to_existing_children(self, catalog):
        CategoryMover(catalog).move(12, 10)

        assert child_ids(catalog, 10) == [11, 12]
        assert category_row(catalog, 12).path == "1/2/10/12"

    def test_after_id_greater_than_last_child_is_clamped(self, catalog):
        CategoryMover(catalog).move(12, 10, after_id=500)

        assert child_ids(catalog, 10) == [11, 12]

    def test_after_id_with_larger_id_than_last_child(self, catalog):
        """Дети 10: [30, 11] - сосед 30 не последний, хотя его id больше"""
        catalog.get(Category, 11).position = 1
        add_category(catalog, 30, 10, position=0, name="Monitors", url_key="monitors")
        catalog.commit()

        CategoryMover(catalog).move(12, 10, after_id=30)

        assert child_ids(catalog, 10) == [30, 12, 11]

    def test_unknown_after_id_below_last_child_is_rejected(self, catalog):
        add_category(catalog, 30, 10, position=1, name="Monitors", url_key="monitors")
        catalog.commit()

        with pytest.raises(CategoryMoveError):
            CategoryMover(catalog).move(12, 10, after_id=20)

        assert child_ids(catalog, 10) == [11, 30]

    def test_after_id_zero_inserts_first(self, catalog):
        CategoryMover(catalog).move(12, 10, after_id=0)

        assert child_ids(catalog, 10) == [12, 11]
        positions = [category_row(catalog, cid).position for cid in (12, 11)]
        assert positions == [0, 1]

    def test_insert_immediately_after_sibling(self, catalog):
        add_category(catalog, 14, 10, position=1, name="Tablets", url_key="tablets")
        catalog.commit()

        CategoryMover(catalog).move(12, 10, after_id=11)

        assert child_ids(catalog, 10) == [11, 12, 14]

    def test_reorder_within_same_parent(self, catalog):
        CategoryMover(catalog).move(12, 2, after_id=0)

        assert child_ids(catalog, 2) == [12, 10]
        assert category_row(catalog, 12).path == "1/2/12"

    def test_old_parent_positions_are_renumbered(self, catalog):
        add_category(catalog, 14, 2, position=2, name="Tablets")
        catalog.commit()

        CategoryMover(catalog).move(10, 3)

        assert child_ids(catalog, 2) == [12, 14]
        assert [category_row(catalog, cid).position for cid in (12, 14)] == [0, 1]


class TestCategoryMoverSubtree:
    """Тесты пересчета путей поддерева"""

    def test_descendant_paths_follow_new_ancestor_chain(self, catalog):
        CategoryMover(catalog).move(10, 20)

        assert category_row(catalog, 10).path == "1/3/20/10"
        assert category_row(catalog, 11).path == "1/3/20/10/11"
        assert category_row(catalog, 13).path == "1/3/20/10/11/13"

    def test_levels_change_by_depth_delta(self, catalog):
        before = {cid: category_row(catalog, cid).level for cid in (10, 11, 13)}

        CategoryMover(catalog).move(10, 21)

        after = {cid: category_row(catalog, cid).level for cid in (10, 11, 13)}
        assert all(after[cid] - before[cid] == 2 for cid in before)

    def test_moving_up_decreases_levels(self, catalog):
        CategoryMover(catalog).move(13, 2)

        row = category_row(catalog, 13)
        assert row.path == "1/2/13"
        assert row.level == 2


class TestCategoryMoverValidation:
    """Тесты отказа в недопустимых перемещениях"""

    def test_cannot_move_parent_under_own_child(self, catalog):
        before = {cid: category_row(catalog, cid) for cid in (10, 11, 13)}

        with pytest.raises(CategoryMoveError) as exc:
            CategoryMover(catalog).move(10, 11)

        assert "children category" in exc.value.message
        assert {cid: category_row(catalog, cid) for cid in (10, 11, 13)} == before

    def test_cannot_move_under_deep_descendant(self, catalog):
        with pytest.raises(CategoryMoveError):
            CategoryMover(catalog).move(10, 13)

        assert category_row(catalog, 10).path == "1/2/10"

    def test_cannot_move_under_itself(self, catalog):
        with pytest.raises(CategoryMoveError):
            CategoryMover(catalog).move(10, 10)

    def test_cyclic_move_does_not_commit(self, catalog):
        with patch.object(catalog, "commit") as mock_commit:
            with pytest.raises(CategoryMoveError):
                CategoryMover(catalog).move(10, 11)
        mock_commit.assert_not_called()

    def test_after_id_must_be_child_of_parent(self, catalog):
        with pytest.raises(CategoryMoveError):
            CategoryMover(catalog).move(12, 10, after_id=3)

        assert category_row(catalog, 12).parent_id == 2

    def test_unknown_category(self, catalog):
        with pytest.raises(CategoryNotFoundError):
            CategoryMover(catalog).move(999, 10)

    def test_unknown_parent(self, catalog):
        with pytest.raises(CategoryNotFoundError) as exc:
            CategoryMover(catalog).move(10, 999)
        assert exc.value.category_id == 999


class TestCategoryMoverPersistence:
    """Тесты обработки ошибок сохранения"""

    def test_commit_failure_is_wrapped(self, catalog):
        cause = SQLAlchemyError("disk I/O error")

        with patch.object(catalog, "commit", side_effect=cause):
            with pytest.raises(CategoryPersistenceError) as exc:
                CategoryMover(catalog).move(11, 12)

        assert exc.value.category_id == 11
        assert exc.value.__cause__ is cause
        assert "Could not move category 11" in exc.value.message
        assert "disk I/O error" in exc.value.message

    def test_commit_failure_is_logged_and_rolled_back(self, catalog):
        with patch.object(catalog, "commit", side_effect=SQLAlchemyError("boom")):
            with patch("catalog_urls.services.category_mover.logger") as mock_logger:
                with pytest.raises(CategoryPersistenceError):
                    CategoryMover(catalog).move(11, 12)

        mock_logger.error.assert_called_once()
        assert "Could not move category 11" in mock_logger.error.call_args[0][0]
        assert category_row(catalog, 11).path == "1/2/10/11"
