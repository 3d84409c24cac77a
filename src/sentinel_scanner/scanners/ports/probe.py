"""Raw TCP helpers: connect probes, banner capture and target derivation."""

from __future__ import annotations

import logging
import socket
import time
from typing import Iterable, List, Set

from ...core.config import candidate_ports
from ...core.errors import MalformedInputError
from ...recon.urls import hostname_of

logger = logging.getLogger(__name__)

BANNER_CHUNK_SIZE = 4096


def hosts_from_urls(urls: Iterable[str]) -> Set[str]:
    hosts: Set[str] = set()
    for url in urls:
        try:
            hosts.add(host_from_url(url))
        except MalformedInputError as exc:
            logger.warning("Skipping URL without a usable host: %s", exc)
    return hosts


def host_from_url(url: str) -> str:
    hostname = hostname_of(url) if isinstance(url, str) else None
    if not hostname:
        raise MalformedInputError(f"Cannot derive a hostname from {url!r}")
    return hostname


def probe_port(host: str, port: int, timeout: float) -> bool:
    """TCP connect check. Refused, unreachable and timed out are all "not open"."""

    try:
        with socket.create_connection((host, port), timeout=timeout):
            return True
    except OSError as exc:
        logger.debug("Port %d on %s not open: %s", port, host, exc)
        return False


def grab_banner(host: str, port: int, timeout: float) -> str:
    """Reads from a fresh connection until EOF, the deadline, or an error.

    Whatever arrived before that point is returned, possibly an empty string.
    """

    deadline = time.monotonic() + timeout
    chunks: List[bytes] = []

    try:
        with socket.create_connection((host, port), timeout=timeout) as sock:
            while True:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    break
                sock.settimeout(remaining)
                data = sock.recv(BANNER_CHUNK_SIZE)
                if not data:
                    break
                chunks.append(data)
    except OSError as exc:
        # socket.timeout is an OSError subclass
        logger.debug("Banner read on %s:%d stopped: %s", host, port, exc)

    return b"".join(chunks).decode("utf-8", errors="replace")
