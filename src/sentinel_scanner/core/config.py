"""Configuration loading and validation utilities."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Iterable, List, Optional
from urllib.parse import urlsplit

from dotenv import load_dotenv

from .errors import ValidationError

MAX_CRAWL_DEPTH = 250
MAX_CRAWL_CONCURRENCY = 30
MAX_PROBE_CONCURRENCY = 20
MAX_HEADER_CONCURRENCY = 20
MAX_RETRIES = 10
MAX_CRAWL_TIMEOUT_MS = 60_000
MAX_PROBE_TIMEOUT_MS = 25_000

DEFAULT_TIMEOUT_MS = 5000
DEFAULT_MAX_RETRIES = 3
DEFAULT_PROBE_CONCURRENCY = 10
DEFAULT_ALLOW_LIST = frozenset({22, 80, 443})
DEFAULT_USER_AGENT = "sentinel-scanner/1.0"


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _check_range(
    violations: List[str],
    name: str,
    value: object,
    minimum: int,
    maximum: int,
) -> None:
    if not _is_int(value):
        violations.append(f"{name} must be an integer, got {value!r}")
    elif not minimum <= value <= maximum:  # type: ignore[operator]
        violations.append(f"{name} must be between {minimum} and {maximum}, got {value}")


def candidate_ports(from_port: int, to_port: int, allow_list: Iterable[int]) -> List[int]:
    """Every port in ``[from_port, to_port]`` that is not allow-listed."""

    allowed = set(allow_list)
    return [port for port in range(from_port, to_port + 1) if port not in allowed]


def validate_seed(seed: object) -> List[str]:
    if not isinstance(seed, str) or not seed.strip():
        return ["seed must be a non-empty URL"]
    try:
        parsed = urlsplit(seed.strip())
        hostname = parsed.hostname
    except ValueError:
        return [f"seed is not a valid URL: {seed}"]
    if parsed.scheme not in {"http", "https"} or not hostname:
        return [f"seed must be an absolute http(s) URL: {seed}"]
    return []


def validate_crawl_options(
    *,
    seed: object,
    max_depth: object,
    concurrency: object,
    max_retries: object,
    timeout_ms: object,
    ignore_external_links: object,
) -> List[str]:
    """Returns every violation found in the crawl options (empty when valid)."""

    violations = validate_seed(seed)
    _check_range(violations, "max_depth", max_depth, 1, MAX_CRAWL_DEPTH)
    _check_range(violations, "concurrency", concurrency, 1, MAX_CRAWL_CONCURRENCY)
    _check_range(violations, "max_retries", max_retries, 0, MAX_RETRIES)
    _check_range(violations, "timeout_ms", timeout_ms, 1, MAX_CRAWL_TIMEOUT_MS)
    if not isinstance(ignore_external_links, bool):
        violations.append("ignore_external_links must be a boolean")
    return violations


def validate_port_options(
    *,
    hosts: Iterable[object],
    from_port: object,
    to_port: object,
    allow_list: Iterable[object],
    concurrency: object,
    timeout_ms: object,
) -> List[str]:
    violations: List[str] = []
    host_list = list(hosts)
    if not host_list:
        violations.append("at least one host is required")
    if any(not isinstance(host, str) or not host for host in host_list):
        violations.append("hosts must be non-empty strings")
    _check_range(violations, "from_port", from_port, 1, 65535)
    _check_range(violations, "to_port", to_port, 1, 65535)
    if _is_int(from_port) and _is_int(to_port) and from_port > to_port:  # type: ignore[operator]
        violations.append(f"from_port ({from_port}) must not exceed to_port ({to_port})")
    if any(not _is_int(port) for port in allow_list):
        violations.append("allow_list must contain only integers")
    _check_range(violations, "concurrency", concurrency, 1, MAX_PROBE_CONCURRENCY)
    _check_range(violations, "timeout_ms", timeout_ms, 1, MAX_PROBE_TIMEOUT_MS)
    return violations


@dataclass(frozen=True, slots=True)
class CrawlConfig:
    """Holds validated options for a single crawl."""

    seed: str
    max_depth: int = MAX_CRAWL_DEPTH
    concurrency: int = MAX_CRAWL_CONCURRENCY
    max_retries: int = DEFAULT_MAX_RETRIES
    timeout_ms: int = DEFAULT_TIMEOUT_MS
    ignore_external_links: bool = True
    user_agent: str = DEFAULT_USER_AGENT

    def __post_init__(self) -> None:
        violations = validate_crawl_options(
            seed=self.seed,
            max_depth=self.max_depth,
            concurrency=self.concurrency,
            max_retries=self.max_retries,
            timeout_ms=self.timeout_ms,
            ignore_external_links=self.ignore_external_links,
        )
        if violations:
            raise ValidationError(violations)

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_ms / 1000


@dataclass(frozen=True, slots=True)
class PortScanConfig:
    """Options for the TCP connect scan."""

    hosts: frozenset[str]
    from_port: int = 1
    to_port: int = 65535
    allow_list: frozenset[int] = DEFAULT_ALLOW_LIST
    concurrency: int = DEFAULT_PROBE_CONCURRENCY
    timeout_ms: int = DEFAULT_TIMEOUT_MS

    def __post_init__(self) -> None:
        # Accept any iterable from callers but store frozensets.
        object.__setattr__(self, "hosts", frozenset(self.hosts))
        object.__setattr__(self, "allow_list", frozenset(self.allow_list))
        violations = validate_port_options(
            hosts=self.hosts,
            from_port=self.from_port,
            to_port=self.to_port,
            allow_list=self.allow_list,
            concurrency=self.concurrency,
            timeout_ms=self.timeout_ms,
        )
        if violations:
            raise ValidationError(violations)

    @property
    def candidate_ports(self) -> List[int]:
        return candidate_ports(self.from_port, self.to_port, self.allow_list)

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_ms / 1000


@dataclass(frozen=True, slots=True)
class HeaderScanConfig:
    """Options for the security header audit."""

    concurrency: int = DEFAULT_PROBE_CONCURRENCY
    max_retries: int = DEFAULT_MAX_RETRIES
    timeout_ms: int = DEFAULT_TIMEOUT_MS
    user_agent: str = DEFAULT_USER_AGENT
    backoff_base_seconds: float = 1.0

    def __post_init__(self) -> None:
        violations: List[str] = []
        _check_range(violations, "concurrency", self.concurrency, 1, MAX_HEADER_CONCURRENCY)
        _check_range(violations, "max_retries", self.max_retries, 0, MAX_RETRIES)
        _check_range(violations, "timeout_ms", self.timeout_ms, 1, MAX_PROBE_TIMEOUT_MS)
        if self.backoff_base_seconds < 0:
            violations.append("backoff_base_seconds must not be negative")
        if violations:
            raise ValidationError(violations)

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_ms / 1000


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValidationError([f"{name} must be an integer, got {raw!r}"]) from exc


def load_crawl_configuration(
    seed: str,
    *,
    max_depth: int = MAX_CRAWL_DEPTH,
    concurrency: Optional[int] = None,
    max_retries: Optional[int] = None,
    timeout_ms: Optional[int] = None,
    ignore_external_links: bool = True,
) -> CrawlConfig:
    """Builds a ``CrawlConfig`` from CLI input and environment variables."""

    load_dotenv()  # Loads .env values if present

    return CrawlConfig(
        seed=seed.strip(),
        max_depth=max_depth,
        concurrency=concurrency
        if concurrency is not None
        else _env_int("SENTINEL_CONCURRENCY", MAX_CRAWL_CONCURRENCY),
        max_retries=max_retries
        if max_retries is not None
        else _env_int("SENTINEL_MAX_RETRIES", DEFAULT_MAX_RETRIES),
        timeout_ms=timeout_ms
        if timeout_ms is not None
        else _env_int("SENTINEL_TIMEOUT_MS", DEFAULT_TIMEOUT_MS),
        ignore_external_links=ignore_external_links,
        user_agent=os.getenv("SENTINEL_USER_AGENT") or DEFAULT_USER_AGENT,
    )


def load_port_scan_configuration(
    hosts: Iterable[str],
    *,
    from_port: int = 1,
    to_port: int = 65535,
    allow_list: Optional[Iterable[int]] = None,
    concurrency: Optional[int] = None,
    timeout_ms: Optional[int] = None,
) -> PortScanConfig:
    load_dotenv()

    return PortScanConfig(
        hosts=frozenset(hosts),
        from_port=from_port,
        to_port=to_port,
        allow_list=frozenset(allow_list) if allow_list is not None else DEFAULT_ALLOW_LIST,
        concurrency=concurrency
        if concurrency is not None
        else _env_int("SENTINEL_CONCURRENCY", DEFAULT_PROBE_CONCURRENCY),
        timeout_ms=timeout_ms
        if timeout_ms is not None
        else _env_int("SENTINEL_TIMEOUT_MS", DEFAULT_TIMEOUT_MS),
    )


def load_header_scan_configuration(
    *,
    concurrency: Optional[int] = None,
    max_retries: Optional[int] = None,
    timeout_ms: Optional[int] = None,
) -> HeaderScanConfig:
    load_dotenv()

    return HeaderScanConfig(
        concurrency=concurrency
        if concurrency is not None
        else _env_int("SENTINEL_CONCURRENCY", DEFAULT_PROBE_CONCURRENCY),
        max_retries=max_retries
        if max_retries is not None
        else _env_int("SENTINEL_MAX_RETRIES", DEFAULT_MAX_RETRIES),
        timeout_ms=timeout_ms
        if timeout_ms is not None
        else _env_int("SENTINEL_TIMEOUT_MS", DEFAULT_TIMEOUT_MS),
        user_agent=os.getenv("SENTINEL_USER_AGENT") or DEFAULT_USER_AGENT,
    )
