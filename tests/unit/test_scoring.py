import pytest

from sentinel_scanner.core.scoring import (  # type: ignore[import]
    base_score,
    score_vector,
    severity_label,
)


@pytest.mark.parametrize(
    "vector, expected",
    [
        ("CVSS:3.1/AV:N/AC:L/PR:N/UI:N/S:U/C:H/I:H/A:H", (9.8, "Critical")),
        ("CVSS:3.1/AV:N/AC:L/PR:N/UI:N/S:C/C:H/I:H/A:H", (10.0, "Critical")),
        ("CVSS:3.1/AV:N/AC:L/PR:N/UI:R/S:C/C:L/I:L/A:N", (6.1, "Medium")),
        ("CVSS:3.0/AV:N/AC:L/PR:H/UI:N/S:U/C:H/I:H/A:H", (7.2, "High")),
        ("CVSS:3.0/AV:N/AC:L/PR:L/UI:N/S:U/C:H/I:H/A:H", (8.8, "High")),
        ("CVSS:3.0/AV:N/AC:H/PR:N/UI:N/S:U/C:L/I:N/A:N", (3.7, "Low")),
        ("CVSS:3.1/AV:N/AC:L/PR:N/UI:N/S:U/C:L/I:N/A:N", (5.3, "Medium")),
        ("CVSS:3.0/AV:N/AC:L/PR:N/UI:N/S:U/C:N/I:N/A:N", (0.0, "Info")),
    ],
)
def test_score_vector_matches_reference_scores(vector, expected):
    assert score_vector(vector) == expected


@pytest.mark.parametrize(
    "score, label",
    [(10.0, "Critical"), (9.0, "Critical"), (8.9, "High"), (7.0, "High"),
     (6.9, "Medium"), (4.0, "Medium"), (3.9, "Low"), (0.1, "Low"), (0.0, "Info")],
)
def test_severity_label_boundaries(score, label):
    assert severity_label(score) == label


@pytest.mark.parametrize(
    "vector",
    [
        "",
        "AV:N/AC:L/PR:N/UI:N/S:U/C:L/I:N/A:N",
        "CVSS:2.0/AV:N/AC:L/PR:N/UI:N/S:U/C:L/I:N/A:N",
        "CVSS:3.1/AV:N/AC:L/PR:N/UI:N/S:U/C:L/I:N",
        "CVSS:3.1/AV:N/AC:L/PR:N/UI:N/S:U/C:L/I:N/A:N/A:N",
        "CVSS:3.1/AV:X/AC:L/PR:N/UI:N/S:U/C:L/I:N/A:N",
        "CVSS:3.1/AV:N/AC:L/PR:N/UI:N/S:Q/C:L/I:N/A:N",
        "CVSS:3.1/AV:N/AC:L/PR:N/UI:N/S:U/C:L/I:N/A",
    ],
)
def test_invalid_vectors_raise(vector):
    with pytest.raises(ValueError):
        base_score(vector)
