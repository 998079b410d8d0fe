# tests/conftest.py
import os

os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from sqlalchemy import create_engine, select
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from catalog_urls.db.models import Base, Category, CategoryAttribute, Store, UrlRewrite
from catalog_urls.db.models.category_attribute import DEFAULT_STORE_ID

# =============================================================================
# DATABASE FIXTURES
# =============================================================================


@pytest.fixture
def engine():
    """In-memory SQLite, одно соединение на все сессии теста"""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def file_engine(tmp_path):
    """Файловая SQLite для тестов с несколькими потоками"""
    engine = create_engine(
        f"sqlite:///{tmp_path / 'catalog.db'}",
        connect_args={"check_same_thread": False, "timeout": 30},
        future=True,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, future=True)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


# =============================================================================
# CATALOG FIXTURES
# =============================================================================


def add_category(db, category_id, parent_id, position=0, store_id=DEFAULT_STORE_ID, **attrs):
    """Создать категорию с путем, вычисленным от родителя"""
    if parent_id is None:
        path, level = str(category_id), 0
    else:
        parent = db.get(Category, parent_id)
        path, level = f"{parent.path}/{category_id}", parent.level + 1
    db.add(
        Category(
            id=category_id, parent_id=parent_id, path=path, level=level, position=position
        )
    )
    db.flush()
    for key, value in attrs.items():
        set_attribute(db, category_id, key, value, store_id)
    return category_id


def set_attribute(db, category_id, key, value, store_id=DEFAULT_STORE_ID):
    db.add(
        CategoryAttribute(
            category_id=category_id, store_id=store_id, attr_key=key, value=value
        )
    )
    db.flush()


def build_catalog(db):
    """
    Дерево:

        1 (root)
        ├── 2 (корень магазина 1 "default")
        │   ├── 10 Electronics
        │   │   └── 11 Laptops
        │   │       └── 13 Gaming Laptops (без url_key)
        │   └── 12 Phones
        └── 3 (корень магазина 2 "outdoor")
            └── 20 Garden
                └── 21 Tools
    """
    add_category(db, 1, None)
    add_category(db, 2, 1, position=0, name="Default Category")
    add_category(db, 3, 1, position=1, name="Outdoor Root")
    add_category(db, 10, 2, position=0, name="Electronics", url_key="electronics")
    add_category(db, 11, 10, position=0, name="Laptops", url_key="laptops")
    add_category(db, 13, 11, position=0, name="Gaming Laptops")
    add_category(db, 12, 2, position=1, name="Phones", url_key="phones")
    add_category(db, 20, 3, position=0, name="Garden", url_key="garden")
    add_category(db, 21, 20, position=0, name="Tools", url_key="tools")

    db.add_all(
        [
            Store(id=0, code="admin", name="Admin", root_category_id=0),
            Store(id=1, code="default", name="Default Store", root_category_id=2),
            Store(id=2, code="outdoor", name="Outdoor Store", root_category_id=3),
        ]
    )
    db.commit()


@pytest.fixture
def catalog(db):
    build_catalog(db)
    return db


@pytest.fixture
def file_catalog(file_engine):
    factory = sessionmaker(bind=file_engine, autoflush=False, future=True)
    with factory() as session:
        build_catalog(session)
    return factory


# =============================================================================
# QUERY HELPERS
# =============================================================================


def category_row(db, category_id):
    db.expire_all()
    return db.execute(
        select(Category.parent_id, Category.path, Category.level, Category.position)
        .where(Category.id == category_id)
    ).one()


def child_ids(db, parent_id):
    db.expire_all()
    return list(
        db.execute(
            select(Category.id)
            .where(Category.parent_id == parent_id)
            .order_by(Category.position, Category.id)
        ).scalars()
    )


def request_paths(db, store_id):
    """{entity_id: request_path} текущих rewrites магазина"""
    db.expire_all()
    rows = db.execute(
        select(UrlRewrite.entity_id, UrlRewrite.request_path).where(
            UrlRewrite.store_id == store_id, UrlRewrite.redirect_type == 0
        )
    ).all()
    return {row.entity_id: row.request_path for row in rows}


def add_rewrite(db, entity_id, request_path, store_id, redirect_type=0, entity_type="category"):
    db.add(
        UrlRewrite(
            entity_type=entity_type,
            entity_id=entity_id,
            request_path=request_path,
            target_path=f"catalog/category/view/id/{entity_id}",
            redirect_type=redirect_type,
            store_id=store_id,
            is_autogenerated=True,
        )
    )
    db.commit()
