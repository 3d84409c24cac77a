from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List


@dataclass(slots=True)
class CrawlState:
    """Mutable bookkeeping owned by a single spider run."""

    visited: set[str] = field(default_factory=set)
    frontier: set[str] = field(default_factory=set)
    depth: int = 0

    def mark_visited(self, urls: Iterable[str]) -> None:
        self.visited.update(urls)

    def admit(self, urls: Iterable[str]) -> List[str]:
        """Adds unseen URLs to ``visited`` and the frontier; returns them."""

        admitted: List[str] = []
        for url in urls:
            if url in self.visited:
                continue
            self.visited.add(url)
            self.frontier.add(url)
            admitted.append(url)
        return admitted

    def retire(self, urls: Iterable[str]) -> None:
        self.frontier.difference_update(urls)
