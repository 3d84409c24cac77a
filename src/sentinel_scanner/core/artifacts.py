"""Artifact data structures exchanged between the crawler and the probes."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from .errors import FatalIOError, MalformedInputError
from .scoring import SEVERITY_LABELS


@dataclass
class CrawlResult:
    """Seed URL plus every URL the spider visited."""

    seed: str = ""
    urls: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"seed": self.seed, "urls": list(self.urls)}

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2)

    def save(self, path: Path) -> None:
        try:
            path.write_text(self.to_json(), encoding="utf-8")
        except OSError as exc:
            raise FatalIOError(f"Could not write crawl results to {path}: {exc}") from exc

    @property
    def url_set(self) -> frozenset[str]:
        return frozenset(self.urls)

    @classmethod
    def from_dict(cls, raw: Any) -> "CrawlResult":
        if not isinstance(raw, dict):
            raise MalformedInputError("Spider results must be a JSON object")

        seed = raw.get("seed")
        urls = raw.get("urls")
        if not isinstance(seed, str):
            raise MalformedInputError("Spider results field 'seed' must be a string")
        if not isinstance(urls, list):
            raise MalformedInputError("Spider results field 'urls' must be an array")
        if any(not isinstance(url, str) for url in urls):
            raise MalformedInputError("Spider results 'urls' must contain only strings")
        return cls(seed=seed, urls=list(urls))

    @classmethod
    def from_json(cls, text: str) -> "CrawlResult":
        try:
            raw = json.loads(text)
        except json.JSONDecodeError as exc:
            raise MalformedInputError(f"Spider results are not valid JSON: {exc}") from exc
        return cls.from_dict(raw)

    @classmethod
    def load(cls, path: Path) -> "CrawlResult":
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise FatalIOError(f"Could not read spider results from {path}: {exc}") from exc
        return cls.from_json(text)


@dataclass(frozen=True)
class Finding:
    """A single vulnerability record emitted by a probe."""

    type: str
    severity: float
    url: str
    description: str
    payloads: Optional[Tuple[str, ...]] = None

    def __post_init__(self) -> None:
        if self.type not in SEVERITY_LABELS:
            raise ValueError(f"Unknown severity label: {self.type}")
        if not 0.0 <= self.severity <= 10.0:
            raise ValueError(f"Severity must be within [0, 10], got {self.severity}")
        if self.payloads is not None:
            object.__setattr__(self, "payloads", tuple(self.payloads))

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "type": self.type,
            "severity": self.severity,
            "url": self.url,
            "description": self.description,
        }
        if self.payloads is not None:
            data["payloads"] = list(self.payloads)
        return data

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "Finding":
        payloads = raw.get("payloads")
        return cls(
            type=raw["type"],
            severity=float(raw["severity"]),
            url=raw["url"],
            description=raw["description"],
            payloads=tuple(payloads) if payloads is not None else None,
        )


def findings_to_json(findings: Iterable[Finding]) -> str:
    return json.dumps([finding.to_dict() for finding in findings], indent=2)


def save_findings(findings: Sequence[Finding], path: Path) -> None:
    try:
        path.write_text(findings_to_json(findings), encoding="utf-8")
    except OSError as exc:
        raise FatalIOError(f"Could not write findings to {path}: {exc}") from exc
