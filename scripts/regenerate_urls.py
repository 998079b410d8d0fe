#!/usr/bin/env python3
"""
Скрипт регенерации URL rewrites для пакета измененных категорий.

Usage:
    python scripts/regenerate_urls.py 10 11 12
    python scripts/regenerate_urls.py --all
    python scripts/regenerate_urls.py 10 --workers 4
"""

import argparse
import logging
import sys
from pathlib import Path

# Добавляем корневую папку проекта в путь для импорта
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from sqlalchemy import select

from catalog_urls.core.config import settings
from catalog_urls.db.database import SessionLocal
from catalog_urls.db.models import Category
from catalog_urls.services.regeneration import RegenerationOrchestrator

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def main():
    """Основная функция"""
    parser = argparse.ArgumentParser(description="Category URL rewrites regeneration")
    parser.add_argument("category_ids", nargs="*", type=int, help="ID измененных категорий")
    parser.add_argument("--all", action="store_true", help="Регенерировать все категории")
    parser.add_argument(
        "--workers", type=int, default=None, help="Количество потоков (по магазинам)"
    )
    args = parser.parse_args()

    category_ids = list(args.category_ids)
    if args.all:
        with SessionLocal() as db:
            category_ids = list(db.execute(select(Category.id)).scalars())

    try:
        report = RegenerationOrchestrator(SessionLocal, workers=args.workers).run(category_ids)
    except Exception as e:
        logger.error(f"Regeneration aborted: {e}")
        sys.exit(1)

    print(f"✅ Успешно: {len(report.succeeded)}, ❌ с ошибками: {len(report.failed)}")
    for failure in report.failed:
        print(f"  - category {failure.category_id}, store {failure.store_id}: {failure.error}")


if __name__ == "__main__":
    main()
