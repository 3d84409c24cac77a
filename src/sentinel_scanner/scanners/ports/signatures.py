"""Banner markers used to fingerprint services on open ports."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Tuple


@dataclass(frozen=True)
class ServiceSignature:
    name: str
    marker: str
    cvss_vector: str
    description: str


# Checked in order; the first marker found in the banner wins. "HTTP" sits
# before "HTTPS", so a banner naming HTTPS is reported as HTTP.
SERVICE_SIGNATURES: Tuple[ServiceSignature, ...] = (
    ServiceSignature(
        name="SSH",
        marker="SSH",
        cvss_vector="CVSS:3.0/AV:N/AC:L/PR:H/UI:N/S:U/C:H/I:H/A:H",
        description="SSH service detected. Ensure strong credentials.",
    ),
    ServiceSignature(
        name="HTTP",
        marker="HTTP",
        cvss_vector="CVSS:3.0/AV:N/AC:L/PR:N/UI:N/S:U/C:N/I:N/A:N",
        description="HTTP service detected. Check for outdated software or misconfigurations.",
    ),
    ServiceSignature(
        name="HTTPS",
        marker="HTTPS",
        cvss_vector="CVSS:3.0/AV:N/AC:L/PR:N/UI:N/S:U/C:N/I:N/A:N",
        description="HTTPS service detected. Ensure SSL/TLS is properly configured.",
    ),
    ServiceSignature(
        name="MySQL",
        marker="MySQL",
        cvss_vector="CVSS:3.0/AV:N/AC:L/PR:H/UI:N/S:U/C:H/I:H/A:H",
        description="MySQL service detected. Verify access restrictions and secure configurations.",
    ),
    ServiceSignature(
        name="SMTP",
        marker="SMTP",
        cvss_vector="CVSS:3.0/AV:N/AC:L/PR:L/UI:N/S:U/C:L/I:L/A:L",
        description="SMTP service detected. Verify access restrictions and secure configurations.",
    ),
    ServiceSignature(
        name="FTP",
        marker="FTP",
        cvss_vector="CVSS:3.0/AV:N/AC:L/PR:L/UI:N/S:U/C:H/I:H/A:H",
        description="FTP service detected. Verify access restrictions and secure configurations.",
    ),
)

UNKNOWN_SERVICE = ServiceSignature(
    name="unknown",
    marker="",
    cvss_vector="CVSS:3.0/AV:N/AC:H/PR:N/UI:N/S:U/C:L/I:N/A:N",
    description="Unknown service on port {port}. Investigate further. Banner of the service: {banner}",
)


def classify_banner(
    banner: str,
    signatures: Sequence[ServiceSignature] = SERVICE_SIGNATURES,
) -> ServiceSignature:
    """Returns the first signature whose marker occurs in ``banner`` (case-sensitive)."""

    for signature in signatures:
        if signature.marker and signature.marker in banner:
            return signature
    return UNKNOWN_SERVICE
