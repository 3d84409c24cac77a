"""Open port discovery over the hosts found by the spider."""

from __future__ import annotations

import logging
from typing import Callable, Iterable, List, Optional, Tuple

from ...core.artifacts import CrawlResult, Finding
from ...core.config import PortScanConfig, load_port_scan_configuration
from ...core.errors import MalformedInputError
from ...core.executor import BoundedExecutor
from ...core.scoring import score_vector
from .probe import grab_banner, hosts_from_urls, probe_port
from .signatures import UNKNOWN_SERVICE, classify_banner

Scorer = Callable[[str], Tuple[float, str]]
PortProbe = Callable[[str, int, float], bool]
BannerReader = Callable[[str, int, float], str]


class PortScanner:
    """TCP connect scan of ``config.candidate_ports`` on every host.

    One task per (host, port) runs through the bounded executor. An open port
    always produces exactly one :class:`Finding`, identified or not.
    """

    def __init__(
        self,
        config: PortScanConfig,
        *,
        executor: Optional[BoundedExecutor] = None,
        scorer: Scorer = score_vector,
        probe: PortProbe = probe_port,
        banner_reader: BannerReader = grab_banner,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.config = config
        self._logger = logger or logging.getLogger(__name__)
        self._executor = executor or BoundedExecutor(config.concurrency, logger=self._logger)
        self._scorer = scorer
        self._probe = probe
        self._banner_reader = banner_reader
        self._ports = config.candidate_ports
        self._logger.info(
            "PortsScanner initialized with %d host(s) and %d port(s) to scan (%d-%d)",
            len(config.hosts),
            len(self._ports),
            config.from_port,
            config.to_port,
        )

    def scan(self, on_finding: Optional[Callable[[Finding], None]] = None) -> List[Finding]:
        """Returns findings in the order their probes completed."""

        self._logger.info("Starting port scan")
        findings: List[Finding] = []
        for finding in self._executor.iter_completed(self._tasks()):
            if finding is None:
                continue
            findings.append(finding)
            if on_finding is not None:
                on_finding(finding)
        self._logger.info("Port scan finished with %d open port(s)", len(findings))
        return findings

    def _tasks(self) -> Iterable[Callable[[], Optional[Finding]]]:
        for host in sorted(self.config.hosts):
            for port in self._ports:
                yield self._make_task(host, port)

    def _make_task(self, host: str, port: int) -> Callable[[], Optional[Finding]]:
        return lambda: self.scan_port(host, port)

    def scan_port(self, host: str, port: int) -> Optional[Finding]:
        timeout = self.config.timeout_seconds
        self._logger.debug("Scanning port %d on %s", port, host)
        try:
            is_open = self._probe(host, port, timeout)
        except Exception:
            self._logger.warning("Error scanning port %d on %s", port, host, exc_info=True)
            return None

        if not is_open:
            return None

        self._logger.info("Port %d is open on %s", port, host)
        finding = self.build_finding(host, port, self._banner_reader(host, port, timeout))
        self._logger.info(
            "Vulnerability found: %s - %s - %s - %s",
            finding.severity,
            finding.description,
            finding.url,
            finding.type,
        )
        return finding

    def build_finding(self, host: str, port: int, banner: str) -> Finding:
        signature = classify_banner(banner)
        score, label = self._scorer(signature.cvss_vector)
        if signature is UNKNOWN_SERVICE:
            description = signature.description.format(port=port, banner=banner)
        else:
            description = signature.description
        return Finding(type=label, severity=score, url=f"{host}:{port}", description=description)


def run_port_scanner(
    crawl: CrawlResult,
    *,
    from_port: int = 1,
    to_port: int = 65535,
    allow_list: Optional[Iterable[int]] = None,
    concurrency: Optional[int] = None,
    timeout_ms: Optional[int] = None,
    on_finding: Optional[Callable[[Finding], None]] = None,
) -> List[Finding]:
    """Builds the scan configuration from spider results and runs it."""

    if not crawl.urls:
        raise MalformedInputError("Spider results contain no URLs to scan")

    hosts = hosts_from_urls(crawl.urls)
    if not hosts:
        raise MalformedInputError("No valid hostnames could be derived from the spider results")

    config = load_port_scan_configuration(
        hosts,
        from_port=from_port,
        to_port=to_port,
        allow_list=allow_list,
        concurrency=concurrency,
        timeout_ms=timeout_ms,
    )
    return PortScanner(config).scan(on_finding=on_finding)
