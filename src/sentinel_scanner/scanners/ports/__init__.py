"""TCP port discovery and service fingerprinting."""

from .probe import candidate_ports, grab_banner, hosts_from_urls, probe_port
from .runner import PortScanner, run_port_scanner
from .signatures import SERVICE_SIGNATURES, UNKNOWN_SERVICE, ServiceSignature, classify_banner

__all__ = [
    "PortScanner",
    "SERVICE_SIGNATURES",
    "ServiceSignature",
    "UNKNOWN_SERVICE",
    "candidate_ports",
    "classify_banner",
    "grab_banner",
    "hosts_from_urls",
    "probe_port",
    "run_port_scanner",
]
