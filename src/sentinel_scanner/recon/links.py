from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from bs4 import BeautifulSoup

from .urls import is_fetchable, is_internal, normalize_url

LINK_TAGS = ("a", "link", "area", "base")


@dataclass(slots=True)
class LinkExtractor:
    """Collects normalized, in-scope links from static HTML markup."""

    origin: str
    ignore_external_links: bool = True
    logger: logging.Logger = field(default_factory=lambda: logging.getLogger(__name__))

    def extract(self, html: str, base_url: str) -> List[str]:
        soup = BeautifulSoup(html, "html.parser")
        # dict keeps first-occurrence order
        extracted: Dict[str, None] = {}

        for element in soup.find_all(LINK_TAGS):
            normalized = self.normalize(base_url, element.get("href"))
            if not normalized or normalized in extracted:
                continue
            if self.ignore_external_links and not is_internal(normalized, self.origin):
                self.logger.debug("Ignoring external URL: %s", normalized)
                continue
            extracted[normalized] = None

        return list(extracted)

    def normalize(self, base_url: str, href: Optional[str]) -> Optional[str]:
        if not href:
            return None

        normalized = normalize_url(base_url, href)
        if normalized is None:
            self.logger.debug("Skipping malformed link %r on %s", href, base_url)
            return None
        if not is_fetchable(normalized):
            return None
        return normalized
