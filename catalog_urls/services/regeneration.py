"""
Оркестратор регенерации URL категорий после импорта.

Порядок работы для пакета измененных категорий:
1. удаление кэша url_path для категорий и их потомков во всех магазинах;
2. для каждого магазина и каждой категории-кандидата: удаление текущих
   URL rewrites поддерева, затем генерация новых.

Ошибка генерации одной категории логируется и не прерывает пакет.
Ошибка удаления пробрасывается и прерывает оставшуюся работу.
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Optional

from sqlalchemy.orm import Session

from catalog_urls.core.config import settings
from catalog_urls.services.store_registry import StoreScope, all_stores
from catalog_urls.services.subtree_collector import SubtreeCollector
from catalog_urls.services.tree_index import TreeIndex
from catalog_urls.services.url_purger import StaleUrlPurger
from catalog_urls.services.url_regenerator import RegenerationResult, UrlRegenerator

logger = logging.getLogger(__name__)


@dataclass
class RegenerationReport:
    """Сводка по пакету регенерации."""

    category_ids: List[int] = field(default_factory=list)
    url_paths_purged: int = 0
    rewrites_purged: int = 0
    stores_processed: List[int] = field(default_factory=list)
    results: List[RegenerationResult] = field(default_factory=list)
    cancelled: bool = False

    @property
    def succeeded(self) -> List[RegenerationResult]:
        return [r for r in self.results if r.ok]

    @property
    def failed(self) -> List[RegenerationResult]:
        return [r for r in self.results if not r.ok]


@dataclass
class _StoreOutcome:
    store_id: int
    rewrites_purged: int = 0
    results: List[RegenerationResult] = field(default_factory=list)
    cancelled: bool = False


class RegenerationOrchestrator:
    """
    Оркестратор регенерации URL rewrites по всем магазинам.

    Работает с фабрикой сессий: глобальное удаление url_path выполняется
    в одной сессии, каждый магазин обрабатывается в своей.
    """

    def __init__(
        self,
        session_factory: Callable[[], Session],
        workers: Optional[int] = None,
    ):
        self.session_factory = session_factory
        self.workers = workers or settings.REGENERATION_WORKERS

    def completed(self, category_ids: Iterable[int]) -> bool:
        """
        Регенерировать URL для пакета измененных категорий.

        Returns:
            bool: Всегда True; частичные ошибки видны только в логах
        """
        self.run(category_ids)
        return True

    def run(
        self,
        category_ids: Iterable[int],
        cancel_event: Optional[threading.Event] = None,
    ) -> RegenerationReport:
        """
        Выполнить регенерацию и вернуть отчет по каждой категории.

        Args:
            category_ids: Измененные категории
            cancel_event: Флаг отмены; уже обработанные магазины остаются сохраненными

        Returns:
            RegenerationReport: Результаты по парам (категория, магазин)
        """
        report = RegenerationReport(category_ids=sorted(set(category_ids)))
        logger.info("Starting Categories Urls Regeneration Operation")

        with self.session_factory() as db:
            index = TreeIndex.load(db)
            stores = all_stores(db) if report.category_ids else []

            collector = SubtreeCollector(index)
            expanded = collector.expand(report.category_ids)
            if expanded:
                report.url_paths_purged = StaleUrlPurger(db).purge_url_path_attribute(expanded)
                db.commit()

        if self.workers > 1 and len(stores) > 1:
            outcomes = self._process_parallel(index, stores, report.category_ids, cancel_event)
        else:
            outcomes = [
                self._process_store(index, store, report.category_ids, cancel_event)
                for store in stores
            ]

        for outcome in outcomes:
            report.rewrites_purged += outcome.rewrites_purged
            report.results.extend(outcome.results)
            if outcome.cancelled:
                report.cancelled = True
            else:
                report.stores_processed.append(outcome.store_id)

        logger.info(
            f"Finished Categories Urls Regeneration Operation: "
            f"{len(report.succeeded)} succeeded, {len(report.failed)} failed, "
            f"{len(report.stores_processed)} store(s) processed"
        )
        return report

    def _process_parallel(
        self,
        index: TreeIndex,
        stores: List[StoreScope],
        category_ids: List[int],
        cancel_event: Optional[threading.Event],
    ) -> List[_StoreOutcome]:
        """
        Обработать магазины в пуле потоков.

        Ошибка одного магазина не отменяет остальные: все результаты
        собираются, каждая ошибка логируется, затем пробрасывается первая.
        """
        outcomes: Dict[int, _StoreOutcome] = {}
        errors: List[Exception] = []

        with ThreadPoolExecutor(max_workers=self.workers) as executor:
            futures = {
                executor.submit(self._process_store, index, store, category_ids, cancel_event): store
                for store in stores
            }
            for future in as_completed(futures):
                store = futures[future]
                try:
                    outcomes[store.id] = future.result()
                except Exception as e:
                    logger.error(f"Url regeneration aborted in store {store.id}: {e}")
                    errors.append(e)

        if errors:
            logger.info(
                f"Url regeneration committed in store(s) {sorted(outcomes)} "
                f"before the batch was aborted"
            )
            raise errors[0]
        return [outcomes[store.id] for store in stores]

    def _process_store(
        self,
        index: TreeIndex,
        store: StoreScope,
        category_ids: List[int],
        cancel_event: Optional[threading.Event],
    ) -> _StoreOutcome:
        """Удаление и регенерация для одного магазина в отдельной сессии."""
        outcome = _StoreOutcome(store_id=store.id)
        collector = SubtreeCollector(index)

        with self.session_factory() as db:
            purger = StaleUrlPurger(db)
            regenerator = UrlRegenerator(db, index)

            for candidate in collector.candidates(category_ids, store):
                if cancel_event is not None and cancel_event.is_set():
                    logger.info(f"Url regeneration cancelled in store {store.id}")
                    outcome.cancelled = True
                    break

                subtree_ids = collector.expand([candidate.id], store)
                outcome.rewrites_purged += purger.purge_url_rewrites(subtree_ids, store.id)
                db.commit()

                outcome.results.append(regenerator.regenerate(candidate.id, store))

        return outcome
