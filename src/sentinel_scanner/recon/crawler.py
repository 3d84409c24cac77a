"""Breadth-first spider that maps a site's internal link graph."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence

from ..core.artifacts import CrawlResult
from ..core.config import CrawlConfig
from ..core.errors import TransientNetworkError
from ..core.executor import BoundedExecutor
from ..core.fetch import PageFetcher
from ..core.retry import retry_call
from .links import LinkExtractor
from .state import CrawlState
from .urls import normalize_url


class SpiderPhase(enum.Enum):
    INIT = "init"
    CRAWLING = "crawling"
    DONE = "done"


def chunked(items: Sequence[str], size: int) -> List[List[str]]:
    return [list(items[index : index + size]) for index in range(0, len(items), size)]


@dataclass
class Spider:
    """Crawls from ``config.seed`` layer by layer up to ``config.max_depth``.

    Each layer is split into batches of ``config.concurrency`` URLs. Batches
    run one after another through the bounded executor; the URLs inside a
    batch are fetched concurrently. Discovered links join ``visited`` and the
    next frontier only once their batch has finished, on the calling thread.
    """

    config: CrawlConfig
    fetcher: Optional[PageFetcher] = None
    extractor: Optional[LinkExtractor] = None
    executor: Optional[BoundedExecutor] = None
    logger: logging.Logger = field(default_factory=lambda: logging.getLogger(__name__))
    on_layer_complete: Optional[Callable[[int, CrawlState], None]] = None

    def __post_init__(self) -> None:
        self._owns_fetcher = self.fetcher is None
        if self.fetcher is None:
            self.fetcher = PageFetcher(
                self.config.timeout_ms,
                self.config.max_retries,
                user_agent=self.config.user_agent,
                logger=self.logger,
            )
        if self.extractor is None:
            self.extractor = LinkExtractor(
                origin=self.config.seed,
                ignore_external_links=self.config.ignore_external_links,
                logger=self.logger,
            )
        if self.executor is None:
            self.executor = BoundedExecutor(self.config.concurrency, logger=self.logger)

        self._state = CrawlState()
        self._phase = SpiderPhase.INIT
        self.logger.info(
            "Spider created for %s (depth=%d, concurrency=%d, retries=%d, timeout=%dms)",
            self.config.seed,
            self.config.max_depth,
            self.config.concurrency,
            self.config.max_retries,
            self.config.timeout_ms,
        )

    @property
    def phase(self) -> SpiderPhase:
        return self._phase

    @property
    def runtime_state(self) -> CrawlState:
        """Return the current mutable crawl state for observability tools."""

        return self._state

    # ------------------------------------------------------------------
    # Core workflow
    # ------------------------------------------------------------------
    def scan(self) -> CrawlResult:
        self.logger.info("Starting scan...")
        self._state = CrawlState()
        self._phase = SpiderPhase.INIT
        seed = normalize_url(self.config.seed, self.config.seed) or self.config.seed
        self._state.frontier.add(seed)

        self._phase = SpiderPhase.CRAWLING
        try:
            while self._state.frontier and self._state.depth < self.config.max_depth:
                self._crawl_layer()
        finally:
            if self._owns_fetcher and self.fetcher is not None:
                self.fetcher.close()

        self._phase = SpiderPhase.DONE
        self.logger.info(
            "Crawl finished at depth %d with %d URL(s) visited (%d left in frontier)",
            self._state.depth,
            len(self._state.visited),
            len(self._state.frontier),
        )
        return CrawlResult(seed=self.config.seed, urls=list(self._state.visited))

    def _crawl_layer(self) -> None:
        depth = self._state.depth
        layer = sorted(self._state.frontier)
        self.logger.info("Processing depth %d with %d URL(s)", depth, len(layer))

        for batch in chunked(layer, self.config.concurrency):
            retry_call(
                self._process_batch,
                batch,
                max_retries=self.config.max_retries,
                log=self.logger,
            )

        self._state.depth += 1
        self.logger.debug("Processed depth %d", depth)
        if self.on_layer_complete is not None:
            self.on_layer_complete(depth, self._state)

    def _process_batch(self, batch: List[str]) -> None:
        self._state.mark_visited(batch)

        assert self.executor is not None
        results = self.executor.run(self._make_task(url) for url in batch)

        discovered = [url for links in results for url in links]
        admitted = self._state.admit(discovered)
        self._state.retire(batch)
        self.logger.info(
            "Processed %d URL(s); %d new URL(s) queued", len(batch), len(admitted)
        )

    def _make_task(self, url: str) -> Callable[[], List[str]]:
        return lambda: self._process_url(url)

    def _process_url(self, url: str) -> List[str]:
        assert self.fetcher is not None and self.extractor is not None
        self.logger.debug("Processing URL: %s", url)

        try:
            content = self.fetcher.fetch_page(url)
        except TransientNetworkError as exc:
            self.logger.warning("Giving up on %s: %s", url, exc)
            return []

        if content is None:
            self.logger.warning("Failed to fetch URL: %s", url)
            return []

        links = self.extractor.extract(content, url)
        self.logger.info("Extracted %d URL(s) from %s", len(links), url)
        return links
