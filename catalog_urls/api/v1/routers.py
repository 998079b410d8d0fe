"""
Основной роутер API v1.

Подключает все endpoint'ы приложения.
"""

from fastapi import APIRouter

from catalog_urls.api.v1.endpoints import categories, url_rewrites

# Создание основного роутера API v1
api_router = APIRouter()

# Подключение роутеров для различных ресурсов
api_router.include_router(categories.router, prefix="/categories", tags=["categories"])
api_router.include_router(url_rewrites.router, prefix="/url-rewrites", tags=["url-rewrites"])
