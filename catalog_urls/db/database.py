"""
Подключение к базе данных каталога.

HTTP-запросы получают короткоживущую сессию через `get_db`.
Регенерация URL открывает сессии сама: одну на глобальное удаление
url_path и отдельную на каждый магазин, поэтому ей передается фабрика
сессий (`get_session_factory`), а не готовая сессия.
"""

from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from catalog_urls.core.config import settings

# SQLite (тесты, локальный запуск) требует разрешить доступ к соединению
# из потоков пула регенерации
connect_args = (
    {"check_same_thread": False} if settings.DATABASE_URL.startswith("sqlite") else {}
)

engine = create_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,
    echo=bool(settings.DEBUG),
    connect_args=connect_args,
)

SessionLocal = sessionmaker(bind=engine, autoflush=False)


def get_db() -> Generator:
    """Сессия на время одного HTTP-запроса."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_session_factory() -> sessionmaker:
    """
    Dependency для получения фабрики сессий.

    Нужна сервисам, которые открывают отдельную сессию на каждый
    магазин (параллельная регенерация URL).
    """
    return SessionLocal
