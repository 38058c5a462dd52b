"""Star normalisation, dedupe, threshold filtering and top-N selection."""

from __future__ import annotations

import math
from typing import Iterable

from .models import Dependent, RankResult, RawRecord

UNKNOWN_STARS = -1.0


def _parse_float(text: str) -> float:
    try:
        value = float(text)
    except ValueError:
        return 0.0
    return value if math.isfinite(value) else 0.0


def stars_to_number(stars_text: str) -> float:
    """Convert displayed star text ("1.2k", "1,234", "N/A") to a number; never raises."""

    if stars_text == "N/A":
        return UNKNOWN_STARS
    text = stars_text.strip()
    if not text:
        return 0.0
    lowered = text.lower()
    # "k" must be handled before comma stripping: "1.2k" is not "1.2".
    if "k" in lowered:
        return _parse_float(lowered.replace("k", "")) * 1000
    return _parse_float(text.replace(",", ""))


def dedupe_keep_max(records: Iterable[RawRecord]) -> list[RawRecord]:
    """Keep one record per key, the one with the strictly highest stars; first seen wins ties."""

    best: dict[str, tuple[RawRecord, float]] = {}
    for record in records:
        value = stars_to_number(record.stars_text)
        current = best.get(record.key)
        if current is None or value > current[1]:
            best[record.key] = (record, value)
    return [record for record, _ in best.values()]


def rank(records: Iterable[RawRecord], min_stars: float, top_n: int) -> RankResult:
    unique = dedupe_keep_max(records)
    scored = [(record, stars_to_number(record.stars_text)) for record in unique]
    above = [(record, value) for record, value in scored if value >= min_stars]
    ordered = sorted(above, key=lambda item: item[1], reverse=True)
    selected = [
        Dependent(key=record.key, stars_text=record.stars_text)
        for record, _ in ordered[: max(top_n, 0)]
    ]
    return RankResult(
        selected=selected,
        total_distinct_count=len(unique),
        above_threshold_count=len(above),
    )


__all__ = ["UNKNOWN_STARS", "dedupe_keep_max", "rank", "stars_to_number"]
