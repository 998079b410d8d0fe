"""
Модель атрибута категории.
"""

from typing import Optional

from sqlalchemy import ForeignKey, Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base

# Ключи атрибутов, которые участвуют в построении URL
ATTR_NAME = "name"
ATTR_URL_KEY = "url_key"
ATTR_URL_PATH = "url_path"

# Область значений по умолчанию (admin)
DEFAULT_STORE_ID = 0


class CategoryAttribute(Base):
    """
    Модель атрибута категории (key-value пары в разрезе магазина).

    Значение с store_id = 0 действует по умолчанию, строка конкретного
    магазина его переопределяет.

    Attributes:
        id: Уникальный идентификатор атрибута
        category_id: ID категории
        store_id: ID магазина (0 - значение по умолчанию)
        attr_key: Ключ атрибута
        value: Значение атрибута
        category: Связь с категорией
    """

    __tablename__ = "category_attributes"

    __table_args__ = (
        UniqueConstraint(
            "category_id", "store_id", "attr_key", name="uq_category_attribute_key"
        ),
        Index("ix_category_attributes_attr_key", "attr_key"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    category_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("categories.id", ondelete="CASCADE")
    )
    store_id: Mapped[int] = mapped_column(Integer, default=DEFAULT_STORE_ID)
    attr_key: Mapped[str] = mapped_column(String(64))
    value: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Связь с категорией
    category: Mapped["Category"] = relationship(back_populates="attributes")

    def __repr__(self) -> str:
        return (
            f"<CategoryAttribute(category_id={self.category_id}, "
            f"store_id={self.store_id}, key='{self.attr_key}')>"
        )
