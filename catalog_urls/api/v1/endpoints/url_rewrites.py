"""
API endpoints для URL rewrites категорий.

Содержит запуск регенерации после импорта категорий и
просмотр текущих записей.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy import select
from sqlalchemy.orm import Session, sessionmaker

from catalog_urls.db.database import get_db, get_session_factory
from catalog_urls.db.models import UrlRewrite
from catalog_urls.db.models.url_rewrite import ENTITY_TYPE_CATEGORY, REDIRECT_TYPE_NONE
from catalog_urls.schemas.url_rewrites import (
    RegenerateRequest,
    RegenerationReportOut,
    RegenerationResultOut,
    UrlRewriteOut,
)
from catalog_urls.services.regeneration import RegenerationOrchestrator

router = APIRouter()


@router.get("", response_model=List[UrlRewriteOut])
def list_url_rewrites(
    db: Session = Depends(get_db),
    store_id: Optional[int] = Query(None, description="Фильтр по магазину"),
    entity_id: Optional[int] = Query(None, description="Фильтр по ID категории"),
    include_redirects: bool = Query(False, description="Включить редиректы"),
):
    """
    Получить URL rewrites категорий.

    Args:
        db: Сессия базы данных
        store_id: Фильтр по магазину
        entity_id: Фильтр по категории
        include_redirects: Включить исторические редиректы

    Returns:
        List[UrlRewriteOut]: Записи, отсортированные по магазину и пути
    """
    stmt = select(UrlRewrite).where(UrlRewrite.entity_type == ENTITY_TYPE_CATEGORY)
    if store_id is not None:
        stmt = stmt.where(UrlRewrite.store_id == store_id)
    if entity_id is not None:
        stmt = stmt.where(UrlRewrite.entity_id == entity_id)
    if not include_redirects:
        stmt = stmt.where(UrlRewrite.redirect_type == REDIRECT_TYPE_NONE)
    rows = db.execute(stmt.order_by(UrlRewrite.store_id, UrlRewrite.request_path)).scalars()
    return [UrlRewriteOut.model_validate(row) for row in rows]


@router.post("/regenerate", response_model=RegenerationReportOut)
def regenerate_url_rewrites(
    payload: RegenerateRequest,
    session_factory: sessionmaker = Depends(get_session_factory),
):
    """
    Регенерировать URL rewrites для пакета измененных категорий.

    Всегда возвращает success = true, если этап удаления завершился;
    категории, которые не удалось регенерировать, перечислены в failed.
    """
    report = RegenerationOrchestrator(session_factory).run(payload.category_ids)
    return RegenerationReportOut(
        url_paths_purged=report.url_paths_purged,
        rewrites_purged=report.rewrites_purged,
        stores_processed=report.stores_processed,
        succeeded=[RegenerationResultOut.model_validate(r) for r in report.succeeded],
        failed=[RegenerationResultOut.model_validate(r) for r in report.failed],
        cancelled=report.cancelled,
    )
