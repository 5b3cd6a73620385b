"""Statutory fractions for regime progression and conditional release."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from fractions import Fraction
from typing import Iterable, Mapping

from .durations import to_days
from .types import Classification, Crime, NextRegime, Regime, SentenceData


@dataclass(slots=True, frozen=True)
class FractionPair:
    progression: Fraction
    release: Fraction


# The two entry paths of the calculator disagree on repeat_offender
# progression (1/5 vs 1/4) and heinous_primary release (2/3 vs 3/5).
# Both are kept verbatim until the legal team settles on one table.
SIMPLE_ENTRY_FRACTIONS: Mapping[Classification, FractionPair] = {
    "primary": FractionPair(Fraction(1, 6), Fraction(1, 3)),
    "repeat_offender": FractionPair(Fraction(1, 5), Fraction(1, 2)),
    "heinous_primary": FractionPair(Fraction(2, 5), Fraction(2, 3)),
    "heinous_repeat": FractionPair(Fraction(3, 5), Fraction(4, 5)),
}

MULTI_OFFENSE_FRACTIONS: Mapping[Classification, FractionPair] = {
    "primary": FractionPair(Fraction(1, 6), Fraction(1, 3)),
    "repeat_offender": FractionPair(Fraction(1, 4), Fraction(1, 2)),
    "heinous_primary": FractionPair(Fraction(2, 5), Fraction(3, 5)),
    "heinous_repeat": FractionPair(Fraction(3, 5), Fraction(4, 5)),
}

REGIMES: set[str] = {"closed", "semi_open", "open"}

NEXT_REGIME: dict[str, NextRegime] = {
    "closed": "semi_open",
    "semi_open": "open",
    "open": "conditional_release",
}


def fractions_for(
    classification: Classification,
    table: Mapping[Classification, FractionPair] = MULTI_OFFENSE_FRACTIONS,
) -> FractionPair:
    try:
        return table[classification]
    except KeyError:
        raise ValueError(f"Unknown classification: {classification}") from None


def effective_fractions(
    crimes: Iterable[Crime],
    table: Mapping[Classification, FractionPair] = MULTI_OFFENSE_FRACTIONS,
) -> FractionPair:
    """Most restrictive fractions across all crimes of one sentence."""
    pairs = [fractions_for(crime.classification, table) for crime in crimes]
    if not pairs:
        raise ValueError("At least one crime is required")
    return FractionPair(
        progression=max(pair.progression for pair in pairs),
        release=max(pair.release for pair in pairs),
    )


def next_regime(initial_regime: Regime) -> NextRegime:
    return NEXT_REGIME[initial_regime]


def validate_sentence_input(crimes: list[Crime], initial_regime: str | None) -> list[str]:
    errors: list[str] = []

    if not crimes:
        errors.append("at least one crime must be added to the sentence")
    if not initial_regime:
        errors.append("initial_regime is required")
    elif initial_regime not in REGIMES:
        errors.append(f"initial_regime must be one of {sorted(REGIMES)}")

    for crime in crimes:
        if crime.classification not in MULTI_OFFENSE_FRACTIONS:
            errors.append(f"crime {crime.id}: unknown classification {crime.classification}")
        if crime.years < 0 or crime.months < 0 or crime.days < 0:
            errors.append(f"crime {crime.id}: penalty duration must be non-negative")

    return errors


def build_sentence(
    crimes: list[Crime],
    initial_regime: Regime,
    table: Mapping[Classification, FractionPair] = MULTI_OFFENSE_FRACTIONS,
    theoretical_start_date: date | None = None,
    case_number: str | None = None,
    court: str | None = None,
    judge: str | None = None,
    final_judgment_date: date | None = None,
    notes: str = "",
) -> SentenceData:
    errors = validate_sentence_input(crimes, initial_regime)
    if errors:
        raise ValueError("; ".join(errors))

    fractions = effective_fractions(crimes, table)
    total_days = sum(to_days(crime.years, crime.months, crime.days) for crime in crimes)

    return SentenceData(
        crimes=tuple(crimes),
        total_days=total_days,
        initial_regime=initial_regime,
        progression_fraction=fractions.progression,
        release_fraction=fractions.release,
        theoretical_start_date=theoretical_start_date,
        case_number=case_number,
        court=court,
        judge=judge,
        final_judgment_date=final_judgment_date,
        notes=notes,
    )
