"""
Главный модуль FastAPI приложения Catalog URL Rewrite API.

Содержит конфигурацию приложения, логирование и роутеры.
"""

import logging

from fastapi import FastAPI

from catalog_urls.api.v1.routers import api_router
from catalog_urls.core.config import settings

# Настройка логирования
logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

# Создание экземпляра FastAPI приложения
app = FastAPI(
    title="Catalog URL Rewrite API",
    description="API для перемещения категорий и регенерации URL rewrites по магазинам",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)


@app.get("/healthz")
def healthz():
    """
    Health check endpoint для мониторинга состояния приложения.

    Returns:
        dict: Статус приложения
    """
    return {"status": "ok", "service": "Catalog URL Rewrite API", "version": "1.0.0"}


# Подключение API роутеров
app.include_router(api_router, prefix="/api/v1")
