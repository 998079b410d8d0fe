#!/usr/bin/env python3
"""
Скрипт для инициализации базы данных
"""

import sys
from pathlib import Path

# Добавляем путь к модулю catalog_urls
sys.path.insert(0, str(Path(__file__).parent))

from catalog_urls.core.config import settings
from catalog_urls.db.database import SessionLocal, engine
from catalog_urls.db.models import Base, Category, Store


def init_database():
    """Создает все таблицы и синтетический корень дерева категорий."""
    print("🗄️ Инициализация базы данных...")

    try:
        # Создаем все таблицы
        Base.metadata.create_all(bind=engine)
        print("✅ Все таблицы созданы успешно!")

        with SessionLocal() as db:
            root_id = settings.TREE_ROOT_ID
            if db.get(Category, root_id) is None:
                db.add(Category(id=root_id, parent_id=None, path=str(root_id), level=0, position=0))
                print(f"🌳 Создан корень дерева категорий (id={root_id})")
            if db.get(Store, 0) is None:
                db.add(Store(id=0, code="admin", name="Admin", root_category_id=0))
                print("🏪 Создана административная область (store_id=0)")
            db.commit()

        # Показываем созданные таблицы
        from sqlalchemy import inspect
        inspector = inspect(engine)
        tables = inspector.get_table_names()

        print(f"📋 Создано таблиц: {len(tables)}")
        for table in tables:
            print(f"  - {table}")

        return True

    except Exception as e:
        print(f"❌ Ошибка создания таблиц: {e}")
        return False

if __name__ == "__main__":
    success = init_database()
    if not success:
        sys.exit(1)
