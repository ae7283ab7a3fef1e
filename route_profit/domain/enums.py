"""Domain enumerations and profitability thresholds."""

import enum


class FuelType(str, enum.Enum):
    DIESEL = "diesel"
    GASOLINE = "gasoline"


class ProfitabilityStatus(str, enum.Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    LOW = "low"


# Minimum margin (%) for each status, checked top-down
PROFITABILITY_THRESHOLDS: tuple[tuple[float, ProfitabilityStatus], ...] = (
    (30.0, ProfitabilityStatus.EXCELLENT),
    (20.0, ProfitabilityStatus.GOOD),
    (10.0, ProfitabilityStatus.FAIR),
)


def profitability_status(margin: float) -> ProfitabilityStatus:
    for threshold, status in PROFITABILITY_THRESHOLDS:
        if margin >= threshold:
            return status
    return ProfitabilityStatus.LOW


# Bands for the average margin across the whole history
FLEET_MARGIN_THRESHOLDS: tuple[tuple[float, ProfitabilityStatus], ...] = (
    (25.0, ProfitabilityStatus.EXCELLENT),
    (15.0, ProfitabilityStatus.GOOD),
)


def fleet_margin_status(margin: float) -> ProfitabilityStatus:
    for threshold, status in FLEET_MARGIN_THRESHOLDS:
        if margin >= threshold:
            return status
    return ProfitabilityStatus.FAIR


class SuggestionType(str, enum.Enum):
    PRICING = "pricing"
    COST = "cost"
    EFFICIENCY = "efficiency"
    VOLUME = "volume"


class Difficulty(str, enum.Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"
