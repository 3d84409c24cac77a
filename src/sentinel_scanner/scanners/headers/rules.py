"""Header policy tables for the security header audit."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Tuple

MISCONFIGURED_HEADER_VECTOR = "CVSS:3.1/AV:N/AC:L/PR:N/UI:N/S:U/C:L/I:N/A:N"
INFORMATION_LEAK_VECTOR = "CVSS:3.1/AV:N/AC:H/PR:N/UI:N/S:U/C:L/I:N/A:N"


@dataclass(frozen=True)
class HeaderRule:
    name: str
    description: str
    recommendation: str
    check: Callable[[str], bool]


def _equals(*accepted: str) -> Callable[[str], bool]:
    lowered = {value.lower() for value in accepted}
    return lambda value: value.strip().lower() in lowered


def _present(value: str) -> bool:
    return bool(value.strip())


def _frame_options(value: str) -> bool:
    normalized = value.strip().upper()
    return normalized in {"DENY", "SAMEORIGIN"} or normalized.startswith("ALLOW-FROM")


def _hsts(value: str) -> bool:
    lowered = value.lower()
    return "max-age=" in lowered and "includesubdomains" in lowered


SECURITY_HEADER_RULES: Tuple[HeaderRule, ...] = (
    HeaderRule(
        "X-Content-Type-Options",
        "Prevents MIME-type sniffing.",
        "nosniff",
        _equals("nosniff"),
    ),
    HeaderRule(
        "X-Frame-Options",
        "Mitigates clickjacking attacks.",
        "DENY or SAMEORIGIN",
        _frame_options,
    ),
    HeaderRule(
        "Strict-Transport-Security",
        "Enforces HTTPS and prevents downgrade attacks.",
        "max-age=31536000; includeSubDomains; preload",
        _hsts,
    ),
    HeaderRule(
        "Content-Security-Policy",
        "Prevents cross-site scripting (XSS) and data injection attacks.",
        "script-src 'self'; object-src 'none'",
        _present,
    ),
    HeaderRule(
        "Referrer-Policy",
        "Controls how much referrer information is included with requests.",
        "no-referrer or strict-origin",
        _equals("no-referrer", "strict-origin", "strict-origin-when-cross-origin"),
    ),
    HeaderRule(
        "Permissions-Policy",
        "Manages permissions of APIs (e.g., camera, geolocation).",
        "default settings for better privacy",
        _present,
    ),
    HeaderRule(
        "Cross-Origin-Embedder-Policy",
        "Prevents a document from loading cross-origin resources that don't explicitly grant permission.",
        "require-corp",
        _equals("require-corp"),
    ),
    HeaderRule(
        "Cross-Origin-Opener-Policy",
        "Prevents other domains from taking control of your context via window.opener.",
        "same-origin",
        _equals("same-origin"),
    ),
    HeaderRule(
        "Cross-Origin-Resource-Policy",
        "Prevents your resources from being used by other sites.",
        "same-origin",
        _equals("same-origin", "same-site"),
    ),
)

# Any non-empty value of these headers leaks implementation details.
_LEAKS = (
    ("Server", "Reveals server software information.", "Remove or obfuscate this header."),
    ("X-Powered-By", "Reveals information about the framework (e.g., Express, PHP).", "Remove or set to a generic value."),
    ("X-AspNet-Version", "Reveals ASP.NET version.", "Remove this header."),
    ("X-AspNetMvc-Version", "Reveals ASP.NET MVC version.", "Remove this header."),
    ("X-PHP-Version", "Reveals PHP version.", "Disable or remove this header."),
    ("X-Generator", "Reveals information about CMS (e.g., WordPress, Joomla).", "Remove this header."),
    ("X-Drupal-Dynamic-Cache", "Reveals Drupal cache status.", "Remove this header."),
    ("X-Runtime", "Reveals the application's runtime environment.", "Remove this header."),
    ("X-Backend-Server", "Leaks information about backend server infrastructure.", "Remove or obfuscate this header."),
    ("Via", "Reveals intermediate proxies and gateways.", "Remove or obfuscate this header."),
    ("X-Cache", "Indicates if a resource was served from cache.", "Remove this header."),
    ("X-CF-Powered-By", "Reveals that the app is behind Cloudflare.", "Remove this header."),
    ("X-Edge-IP", "Leaks edge server IP addresses.", "Remove or obfuscate this header."),
    ("X-Edge-Location", "Reveals the physical location of edge servers.", "Remove this header."),
)

INFORMATION_LEAK_RULES: Tuple[HeaderRule, ...] = tuple(
    HeaderRule(name, description, recommendation, lambda value: not value.strip())
    for name, description, recommendation in _LEAKS
)
