"""Security header audit over the URLs found by the spider."""

from __future__ import annotations

import logging
from typing import Callable, Iterable, List, Mapping, Optional, Tuple

import requests
from requests.structures import CaseInsensitiveDict

from ...core.artifacts import CrawlResult, Finding
from ...core.config import HeaderScanConfig, load_header_scan_configuration
from ...core.errors import MalformedInputError, TransientNetworkError
from ...core.executor import BoundedExecutor
from ...core.retry import retry_with_backoff
from ...core.scoring import score_vector
from .rules import (
    INFORMATION_LEAK_RULES,
    INFORMATION_LEAK_VECTOR,
    MISCONFIGURED_HEADER_VECTOR,
    SECURITY_HEADER_RULES,
)

Scorer = Callable[[str], Tuple[float, str]]


def check_headers(
    headers: Mapping[str, str],
    url: str,
    scorer: Scorer = score_vector,
) -> List[Finding]:
    """Applies the header rule tables to one response."""

    received = CaseInsensitiveDict(headers)
    findings: List[Finding] = []

    misconfigured_score, misconfigured_label = scorer(MISCONFIGURED_HEADER_VECTOR)
    for rule in SECURITY_HEADER_RULES:
        value = received.get(rule.name)
        if value is None or not value.strip():
            description = (
                f"Header {rule.name} was not found. {rule.description} "
                f"Recommendation: {rule.recommendation}"
            )
        elif not rule.check(value):
            description = (
                f"Header {rule.name} has the insecure value {value!r}. {rule.description} "
                f"Recommendation: {rule.recommendation}"
            )
        else:
            continue
        findings.append(
            Finding(
                type=misconfigured_label,
                severity=misconfigured_score,
                url=url,
                description=description,
            )
        )

    leak_score, leak_label = scorer(INFORMATION_LEAK_VECTOR)
    for rule in INFORMATION_LEAK_RULES:
        value = received.get(rule.name)
        if value is None or rule.check(value):
            continue
        findings.append(
            Finding(
                type=leak_label,
                severity=leak_score,
                url=url,
                description=(
                    f"Header {rule.name} was found with value {value!r}. {rule.description} "
                    f"Recommendation: {rule.recommendation}"
                ),
            )
        )

    return findings


class HeaderScanner:
    """Fetches each URL's response headers and audits them concurrently."""

    def __init__(
        self,
        urls: Iterable[str],
        config: HeaderScanConfig,
        *,
        session: Optional[requests.Session] = None,
        executor: Optional[BoundedExecutor] = None,
        scorer: Scorer = score_vector,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.urls = list(dict.fromkeys(urls))
        self.config = config
        self._logger = logger or logging.getLogger(__name__)
        self._session = session or requests.Session()
        self._session.headers.setdefault("User-Agent", config.user_agent)
        self._executor = executor or BoundedExecutor(config.concurrency, logger=self._logger)
        self._scorer = scorer

    def scan(self) -> List[Finding]:
        self._logger.info("Auditing security headers on %d URL(s)", len(self.urls))
        findings: List[Finding] = []
        for url_findings in self._executor.iter_completed(
            self._make_task(url) for url in self.urls
        ):
            findings.extend(url_findings)
        self._logger.info("Header audit produced %d finding(s)", len(findings))
        return findings

    def _make_task(self, url: str) -> Callable[[], List[Finding]]:
        return lambda: self.scan_url(url)

    def scan_url(self, url: str) -> List[Finding]:
        try:
            headers = retry_with_backoff(
                self.fetch_headers,
                url,
                max_retries=self.config.max_retries,
                base_delay=self.config.backoff_base_seconds,
                retry_on=(TransientNetworkError,),
                log=self._logger,
            )
        except TransientNetworkError as exc:
            self._logger.error("Error scanning headers for %s: %s", url, exc)
            return []
        return check_headers(headers, url, self._scorer)

    def fetch_headers(self, url: str) -> CaseInsensitiveDict:
        try:
            response = self._session.get(
                url,
                timeout=self.config.timeout_seconds,
                allow_redirects=True,
                stream=True,
            )
        except requests.RequestException as exc:
            raise TransientNetworkError(f"GET {url} failed: {exc}") from exc
        try:
            return CaseInsensitiveDict(response.headers)
        finally:
            response.close()


def run_header_scanner(
    crawl: CrawlResult,
    *,
    concurrency: Optional[int] = None,
    max_retries: Optional[int] = None,
    timeout_ms: Optional[int] = None,
) -> List[Finding]:
    if not crawl.urls:
        raise MalformedInputError("Spider results contain no URLs to scan")

    config = load_header_scan_configuration(
        concurrency=concurrency,
        max_retries=max_retries,
        timeout_ms=timeout_ms,
    )
    return HeaderScanner(crawl.urls, config).scan()
