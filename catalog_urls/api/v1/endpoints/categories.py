"""
API endpoints для работы с деревом категорий.

Содержит операции для получения категорий и перемещения
категории под другого родителя.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from catalog_urls.core.exceptions import (
    CategoryMoveError,
    CategoryNotFoundError,
    CategoryPersistenceError,
)
from catalog_urls.db.database import get_db
from catalog_urls.db.models import Category
from catalog_urls.schemas.categories import (
    CategoryMoveRequest,
    CategoryMoveResponse,
    CategoryOut,
    CategoryTreeNodeOut,
)
from catalog_urls.services.category_mover import CategoryMover
from catalog_urls.services.tree_index import TreeIndex

router = APIRouter()


@router.get("", response_model=List[CategoryOut])
def list_categories(db: Session = Depends(get_db)):
    """
    Получить плоский список категорий.

    Категории отсортированы по материализованному пути, поэтому
    предки всегда идут раньше потомков.

    Args:
        db: Сессия базы данных

    Returns:
        List[CategoryOut]: Категории с path, level и position
    """
    rows = db.execute(
        select(Category).order_by(Category.level, Category.path)
    ).scalars()
    return [CategoryOut.model_validate(row) for row in rows]


@router.get("/{category_id}", response_model=CategoryTreeNodeOut)
def get_category(category_id: int, db: Session = Depends(get_db)):
    """
    Получить категорию с упорядоченным списком детей.

    Raises:
        HTTPException: Если категория не найдена
    """
    try:
        node = TreeIndex.load(db).get(category_id)
    except CategoryNotFoundError as e:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail=e.message)
    return CategoryTreeNodeOut(
        id=node.id,
        parent_id=node.parent_id,
        path=node.path,
        level=node.level,
        ordered_child_ids=node.ordered_child_ids,
    )


@router.post("/{category_id}/move", response_model=CategoryMoveResponse)
def move_category(
    category_id: int,
    payload: CategoryMoveRequest,
    db: Session = Depends(get_db),
):
    """
    Переместить категорию под нового родителя.

    Args:
        category_id: ID перемещаемой категории
        payload: Новый родитель и сосед, после которого вставить категорию
        db: Сессия базы данных

    Returns:
        CategoryMoveResponse: {"success": true}

    Raises:
        HTTPException: 404 если категория или родитель не найдены,
            400 при недопустимом перемещении, 500 при ошибке сохранения
    """
    mover = CategoryMover(db)
    try:
        mover.move(category_id, payload.parent_id, payload.after_id)
    except CategoryNotFoundError as e:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail=e.message)
    except CategoryMoveError as e:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, detail=e.message)
    except CategoryPersistenceError as e:
        raise HTTPException(status.HTTP_500_INTERNAL_SERVER_ERROR, detail=e.message)
    return CategoryMoveResponse(success=True)
