"""
Модель URL rewrite.
"""

from typing import Optional

from sqlalchemy import Boolean, Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base

ENTITY_TYPE_CATEGORY = "category"

# redirect_type = 0 - текущий (не редирект) rewrite
REDIRECT_TYPE_NONE = 0


class UrlRewrite(Base):
    """
    Модель URL rewrite: человекочитаемый путь -> сущность каталога.

    Attributes:
        id: Уникальный идентификатор записи
        entity_type: Тип сущности ("category")
        entity_id: ID сущности
        request_path: Запрашиваемый путь (уникален в пределах магазина)
        target_path: Канонический путь или цель редиректа
        redirect_type: 0 для текущих записей, 301/302 для редиректов
        store_id: ID магазина
        is_autogenerated: Создана генератором
        description: Описание
    """

    __tablename__ = "url_rewrites"

    __table_args__ = (
        UniqueConstraint("request_path", "store_id", name="uq_url_rewrite_request_path"),
        Index("ix_url_rewrites_entity", "entity_type", "entity_id", "store_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    entity_type: Mapped[str] = mapped_column(String(32))
    entity_id: Mapped[int] = mapped_column(Integer)
    request_path: Mapped[str] = mapped_column(String(255))
    target_path: Mapped[str] = mapped_column(String(255))
    redirect_type: Mapped[int] = mapped_column(Integer, default=REDIRECT_TYPE_NONE)
    store_id: Mapped[int] = mapped_column(Integer)
    is_autogenerated: Mapped[bool] = mapped_column(Boolean, default=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return (
            f"<UrlRewrite(store_id={self.store_id}, request_path='{self.request_path}', "
            f"{self.entity_type}={self.entity_id})>"
        )
