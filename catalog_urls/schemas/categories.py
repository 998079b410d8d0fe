# catalog_urls/schemas/categories.py
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class CategoryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    parent_id: Optional[int]
    path: str
    level: int
    position: int


class CategoryTreeNodeOut(BaseModel):
    id: int
    parent_id: Optional[int]
    path: str
    level: int
    ordered_child_ids: List[int]


class CategoryMoveRequest(BaseModel):
    """
    Запрос на перемещение категории.

    Attributes:
        parent_id: ID нового родителя
        after_id: ID соседа, после которого вставить категорию
            (None - в конец, 0 - первой)
    """

    parent_id: int = Field(..., ge=1)
    after_id: Optional[int] = Field(None, ge=0)


class CategoryMoveResponse(BaseModel):
    success: bool
