"""CVSS v3.x base scores and severity labels used to grade findings."""

from __future__ import annotations

from typing import Tuple

from cvss import CVSS3
from cvss.exceptions import CVSS3Error

SEVERITY_LABELS = ("Critical", "High", "Medium", "Low", "Info")


def base_score(vector: str) -> float:
    if not isinstance(vector, str) or not vector.startswith("CVSS:3"):
        raise ValueError(f"Invalid CVSS vector: {vector!r}")
    try:
        return float(CVSS3(vector).scores()[0])
    except CVSS3Error as exc:
        raise ValueError(f"Invalid CVSS vector {vector!r}: {exc}") from exc


def severity_label(score: float) -> str:
    """Maps a numeric score to Critical/High/Medium/Low/Info."""

    if 9.0 <= score <= 10.0:
        return "Critical"
    if 7.0 <= score < 9.0:
        return "High"
    if 4.0 <= score < 7.0:
        return "Medium"
    if 0.1 <= score < 4.0:
        return "Low"
    return "Info"


def score_vector(vector: str) -> Tuple[float, str]:
    score = base_score(vector)
    return score, severity_label(score)
