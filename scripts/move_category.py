#!/usr/bin/env python3
"""
Скрипт перемещения категории под нового родителя.

Usage:
    python scripts/move_category.py 11 12              # в конец списка детей 12
    python scripts/move_category.py 11 12 --after 0    # первой
    python scripts/move_category.py 11 12 --after 15   # после категории 15
    python scripts/move_category.py 11 12 --regenerate # и пересоздать URL
"""

import argparse
import logging
import sys
from pathlib import Path

# Добавляем корневую папку проекта в путь для импорта
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from catalog_urls.core.config import settings
from catalog_urls.core.exceptions import CatalogError
from catalog_urls.db.database import SessionLocal
from catalog_urls.services.category_mover import CategoryMover
from catalog_urls.services.regeneration import RegenerationOrchestrator

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s - %(levelname)s - %(message)s",
)


def main():
    """Основная функция"""
    parser = argparse.ArgumentParser(description="Move category in the catalog tree")
    parser.add_argument("category_id", type=int, help="ID перемещаемой категории")
    parser.add_argument("parent_id", type=int, help="ID нового родителя")
    parser.add_argument("--after", type=int, default=None, help="ID соседа (0 - первой)")
    parser.add_argument(
        "--regenerate", action="store_true", help="Регенерировать URL после перемещения"
    )
    args = parser.parse_args()

    with SessionLocal() as db:
        try:
            CategoryMover(db).move(args.category_id, args.parent_id, args.after)
        except CatalogError as e:
            print(f"❌ {e.message}")
            sys.exit(1)

    print(f"✅ Категория {args.category_id} перемещена под {args.parent_id}")

    if args.regenerate:
        RegenerationOrchestrator(SessionLocal).completed({args.category_id})
        print("✅ URL rewrites пересозданы")


if __name__ == "__main__":
    main()
