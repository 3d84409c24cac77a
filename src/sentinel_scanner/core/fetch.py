"""HTTP page fetching with a hard deadline and retries."""

from __future__ import annotations

import concurrent.futures
import logging
import threading
from typing import Optional

import requests

from .errors import TransientNetworkError
from .retry import retry_call


class PageFetcher:
    """Fetches page bodies for the spider.

    Every attempt races the GET against ``timeout_ms``. When the deadline
    wins the attempt yields ``None`` and the request thread is abandoned;
    its late result is discarded. Non-2xx responses also yield ``None``.
    Network failures raise :class:`TransientNetworkError` and are retried up
    to ``max_retries`` times before propagating.
    """

    def __init__(
        self,
        timeout_ms: int,
        max_retries: int,
        *,
        session: Optional[requests.Session] = None,
        user_agent: Optional[str] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.timeout_seconds = timeout_ms / 1000
        self.max_retries = max_retries
        self._session = session or requests.Session()
        if user_agent:
            self._session.headers["User-Agent"] = user_agent
        self._logger = logger or logging.getLogger(__name__)

    def fetch_page(self, url: str) -> Optional[str]:
        return retry_call(
            self._fetch_with_deadline,
            url,
            max_retries=self.max_retries,
            log=self._logger,
        )

    def close(self) -> None:
        self._session.close()

    def __enter__(self) -> "PageFetcher":
        return self

    def __exit__(self, *_exc_info: object) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Single attempt
    # ------------------------------------------------------------------
    def _fetch_with_deadline(self, url: str) -> Optional[str]:
        self._logger.info("Fetching URL: %s", url)
        outcome: concurrent.futures.Future = concurrent.futures.Future()

        def worker() -> None:
            try:
                outcome.set_result(self._get(url))
            except BaseException as exc:  # handed to the waiting caller
                outcome.set_exception(exc)

        threading.Thread(target=worker, name=f"fetch:{url}", daemon=True).start()

        try:
            return outcome.result(timeout=self.timeout_seconds)
        except concurrent.futures.TimeoutError:
            self._logger.warning("Timed out after %.1fs fetching %s", self.timeout_seconds, url)
            return None

    def _get(self, url: str) -> Optional[str]:
        try:
            response = self._session.get(
                url,
                timeout=self.timeout_seconds,
                allow_redirects=True,
            )
        except requests.RequestException as exc:
            raise TransientNetworkError(f"GET {url} failed: {exc}") from exc

        if not 200 <= response.status_code < 300:
            self._logger.warning("Failed to fetch URL (%s): %s", response.status_code, url)
            return None

        return response.text
