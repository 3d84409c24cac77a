"""Centralized imports for the sentinel scanner package used in tests."""

from sentinel_scanner import cli  # type: ignore[import]
from sentinel_scanner.core.artifacts import CrawlResult, Finding  # type: ignore[import]
from sentinel_scanner.core.config import (  # type: ignore[import]
    CrawlConfig,
    HeaderScanConfig,
    PortScanConfig,
)
from sentinel_scanner.core.errors import (  # type: ignore[import]
    FatalIOError,
    MalformedInputError,
    TransientNetworkError,
    ValidationError,
)
from sentinel_scanner.core.executor import BoundedExecutor  # type: ignore[import]
from sentinel_scanner.recon.crawler import Spider, SpiderPhase  # type: ignore[import]
from sentinel_scanner.recon.links import LinkExtractor  # type: ignore[import]

__all__ = [
    "BoundedExecutor",
    "CrawlConfig",
    "CrawlResult",
    "FatalIOError",
    "Finding",
    "HeaderScanConfig",
    "LinkExtractor",
    "MalformedInputError",
    "PortScanConfig",
    "Spider",
    "SpiderPhase",
    "TransientNetworkError",
    "ValidationError",
    "cli",
]
