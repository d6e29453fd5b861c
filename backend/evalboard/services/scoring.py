from __future__ import annotations

from collections.abc import Iterable, Mapping
from enum import Enum

from evalboard.models.evaluation import Evaluation
from evalboard.models.report import RatingDistribution


class RatingBand(str, Enum):
    EXCELLENT = "excellent"
    VERY_GOOD = "very_good"
    GOOD = "good"
    ACCEPTABLE = "acceptable"
    POOR = "poor"


# Lower bounds, checked top-down; the first bound met wins.
BAND_THRESHOLDS: list[tuple[RatingBand, float]] = [
    (RatingBand.EXCELLENT, 4.5),
    (RatingBand.VERY_GOOD, 3.5),
    (RatingBand.GOOD, 2.5),
    (RatingBand.ACCEPTABLE, 1.5),
]

BAND_ORDER: list[RatingBand] = [band for band, _ in BAND_THRESHOLDS] + [RatingBand.POOR]

BAND_LABELS: dict[str, dict[RatingBand, str]] = {
    "en": {
        RatingBand.EXCELLENT: "Excellent",
        RatingBand.VERY_GOOD: "Very good",
        RatingBand.GOOD: "Good",
        RatingBand.ACCEPTABLE: "Acceptable",
        RatingBand.POOR: "Poor",
    },
    "ar": {
        RatingBand.EXCELLENT: "ممتاز (4.5-5)",
        RatingBand.VERY_GOOD: "جيد جدًا (3.5-4.5)",
        RatingBand.GOOD: "جيد (2.5-3.5)",
        RatingBand.ACCEPTABLE: "مقبول (1.5-2.5)",
        RatingBand.POOR: "ضعيف (1-1.5)",
    },
}


def composite_rating(criteria: Mapping[str, float]) -> float:
    """Mean of the criterion scores; 0.0 for an empty score map.

    Scores are averaged as given, without range checks.
    """
    values = list(criteria.values())
    if not values:
        return 0.0
    return sum(values) / len(values)


def mean_rating(evaluations: Iterable[Evaluation]) -> float:
    ratings = [composite_rating(e.criteria) for e in evaluations]
    if not ratings:
        return 0.0
    return sum(ratings) / len(ratings)


def rating_band(rating: float) -> RatingBand:
    for band, lower in BAND_THRESHOLDS:
        if rating >= lower:
            return band
    return RatingBand.POOR


def band_label(band: RatingBand, locale: str = "en") -> str:
    return BAND_LABELS.get(locale, BAND_LABELS["en"])[band]


def rating_distribution(evaluations: Iterable[Evaluation], locale: str = "en") -> RatingDistribution:
    counts: dict[RatingBand, int] = {band: 0 for band in BAND_ORDER}
    for evaluation in evaluations:
        counts[rating_band(composite_rating(evaluation.criteria))] += 1

    return RatingDistribution(
        labels=[band_label(band, locale) for band in BAND_ORDER],
        data=[counts[band] for band in BAND_ORDER],
    )
