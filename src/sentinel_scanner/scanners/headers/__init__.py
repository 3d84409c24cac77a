"""Security header audit."""

from .rules import INFORMATION_LEAK_RULES, SECURITY_HEADER_RULES, HeaderRule
from .runner import HeaderScanner, check_headers, run_header_scanner

__all__ = [
    "HeaderRule",
    "HeaderScanner",
    "INFORMATION_LEAK_RULES",
    "SECURITY_HEADER_RULES",
    "check_headers",
    "run_header_scanner",
]
