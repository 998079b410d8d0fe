"""
Схемы для URL rewrites и регенерации.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class UrlRewriteOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    entity_type: str
    entity_id: int
    request_path: str
    target_path: str
    redirect_type: int
    store_id: int
    is_autogenerated: bool


class RegenerateRequest(BaseModel):
    """
    Пакет измененных категорий для регенерации URL.

    Attributes:
        category_ids: ID категорий (пустой список допустим)
    """

    category_ids: List[int] = Field(default_factory=list)


class RegenerationResultOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    category_id: int
    store_id: int
    status: str
    rewrites: int
    error: Optional[str] = None


class RegenerationReportOut(BaseModel):
    """
    Отчет о регенерации.

    Attributes:
        success: Пакет обработан (частичные ошибки в failed)
        url_paths_purged: Удалено значений url_path
        rewrites_purged: Удалено URL rewrites
        stores_processed: Обработанные магазины
        succeeded: Успешные пары (категория, магазин)
        failed: Неуспешные пары (категория, магазин)
        cancelled: Пакет был отменен
    """

    success: bool = True
    url_paths_purged: int
    rewrites_purged: int
    stores_processed: List[int]
    succeeded: List[RegenerationResultOut]
    failed: List[RegenerationResultOut]
    cancelled: bool = False
