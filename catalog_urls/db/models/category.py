"""
Модель категории каталога.
"""

from datetime import datetime
from typing import List, Optional

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base


class Category(Base):
    """
    Модель категории каталога (узел дерева с материализованным путем).

    Attributes:
        id: Уникальный идентификатор категории
        parent_id: ID родителя (NULL только у синтетического корня)
        path: Материализованный путь из ID предков и самой категории ("1/2/5")
        level: Глубина узла (корень 1 имеет level 0, корни магазинов - 1)
        position: Порядок среди соседей
        attributes: Значения атрибутов по магазинам (name, url_key, url_path)
    """

    __tablename__ = "categories"

    __table_args__ = (
        Index("ix_categories_path", "path"),
        Index("ix_categories_parent_position", "parent_id", "position"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    parent_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("categories.id", ondelete="CASCADE"), nullable=True
    )
    path: Mapped[str] = mapped_column(String(255))
    level: Mapped[int] = mapped_column(Integer, default=0)
    position: Mapped[int] = mapped_column(Integer, default=0)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    attributes: Mapped[List["CategoryAttribute"]] = relationship(
        back_populates="category", cascade="all,delete", lazy="selectin"
    )

    def __repr__(self) -> str:
        return f"<Category(id={self.id}, path='{self.path}')>"
