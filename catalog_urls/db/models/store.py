"""
Модель магазина (store scope).
"""

from sqlalchemy import Boolean, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class Store(Base):
    """
    Модель магазина.

    Магазин видит только категории, чей путь начинается с
    "1/{root_category_id}/". Магазин с id 0 - административная область
    значений по умолчанию, витриной он не является.

    Attributes:
        id: Уникальный идентификатор магазина
        code: Код магазина
        name: Название магазина
        root_category_id: ID корневой категории магазина
        is_active: Флаг активности
    """

    __tablename__ = "stores"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    code: Mapped[str] = mapped_column(String(64), unique=True, index=True)
    name: Mapped[str] = mapped_column(String(255))
    root_category_id: Mapped[int] = mapped_column(Integer, index=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)

    def __repr__(self) -> str:
        return f"<Store(id={self.id}, code='{self.code}', root={self.root_category_id})>"
