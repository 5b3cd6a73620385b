"""Sentence execution calculator: progression, release and end dates."""

from __future__ import annotations

import logging
from datetime import date
from fractions import Fraction

from .durations import DEFAULT_TIMEZONE, add_days, days_between, round_days, to_local_date
from .fraction_table import SIMPLE_ENTRY_FRACTIONS, build_sentence, next_regime
from .timeline import build_sentence_events
from .types import (
    Classification,
    Crime,
    CustodyEpisode,
    CustodyStatus,
    Regime,
    RemissionCredit,
    SentenceData,
    SentenceResult,
)

logger = logging.getLogger(__name__)

PROGRESSION = "progression"
RELEASE = "release"
TERMINATION = "termination"


def validate_timeline(episodes: list[CustodyEpisode], remissions: list[RemissionCredit]) -> list[str]:
    errors: list[str] = []

    for episode in episodes:
        if episode.end is not None and episode.start > episode.end:
            errors.append(f"episode {episode.id}: start must be on or before end")
    for remission in remissions:
        if remission.days < 0:
            errors.append(f"remission {remission.id}: days must be non-negative")

    return errors


def days_served_until(
    episodes: list[CustodyEpisode],
    until: date,
    include_release_day: bool = False,
) -> int:
    total = 0

    for episode in episodes:
        if not episode.countable or episode.start > until:
            continue

        released = episode.end is not None and episode.end <= until
        end = episode.end if released else until
        served = days_between(episode.start, end)
        if include_release_day and released:
            served += 1
        total += max(0, served)

    return total


def remission_until(remissions: list[RemissionCredit], until: date) -> int:
    return sum(remission.days for remission in remissions if remission.credit_date <= until)


def custody_status(episodes: list[CustodyEpisode], as_of: date) -> CustodyStatus:
    """Custody at ``as_of``; an episode's end day already counts as liberty."""
    for episode in episodes:
        if not episode.countable:
            continue
        if episode.start <= as_of and (episode.end is None or episode.end > as_of):
            return "in_custody"
    return "at_liberty"


def required_days(sentence: SentenceData) -> dict[str, Fraction]:
    total = Fraction(sentence.total_days)
    required = {PROGRESSION: sentence.progression_fraction * total}
    if sentence.release_fraction is not None:
        required[RELEASE] = sentence.release_fraction * total
    required[TERMINATION] = total
    return required


def simulate_thresholds(
    sentence: SentenceData,
    episodes: list[CustodyEpisode],
    remissions: list[RemissionCredit],
    as_of: date,
    include_release_day: bool = False,
    tz: str = DEFAULT_TIMEZONE,
) -> dict[str, date]:
    """Walk the timeline once and date every threshold it crosses.

    Thresholds crossed while in custody are interpolated from the previous
    event; thresholds crossed at liberty take the date of the event (a credit
    or the restart of custody). When custody is still open after the last
    event, pending thresholds are projected along it. Otherwise termination
    is projected from the state left by the last event, never earlier than
    ``as_of``, so it can never precede a date the pass already assigned.
    """
    required = required_days(sentence)
    reached: dict[str, date] = {name: as_of for name, days in required.items() if days <= 0}

    def pending() -> list[tuple[str, Fraction]]:
        return [(name, days) for name, days in required.items() if name not in reached]

    events = build_sentence_events(episodes, remissions)
    logger.debug(f"Simulating {len(events)} timeline events for {sentence.total_days} days")

    active = 0
    served = 0
    remission = 0
    previous = events[0].date if events else as_of

    for event in events:
        if TERMINATION in reached:
            break

        if active > 0 and event.date > previous:
            elapsed = days_between(previous, event.date)
            if include_release_day and event.kind == "episode_end":
                elapsed += 1
            accrued = served + remission
            # Interpolated even when the interval closes on an episode_end,
            # rather than dated on the release day itself.
            for name, days in pending():
                if accrued + elapsed >= days:
                    crossing = add_days(previous, round_days(days - accrued), tz)
                    reached[name] = min(crossing, event.date)
            served += elapsed

        if event.kind == "remission_credit":
            remission += event.value
        else:
            active += event.value

        for name, days in pending():
            if served + remission >= days:
                reached[name] = event.date

        previous = event.date

    if TERMINATION not in reached:
        accrued = served + remission
        if active > 0:
            for name, days in pending():
                reached[name] = add_days(previous, round_days(days - accrued), tz)
        else:
            # At liberty: the rest is served from the later of as_of and the last event.
            restart = max(as_of, previous)
            reached[TERMINATION] = add_days(restart, round_days(required[TERMINATION] - accrued), tz)

    return reached


def compute_sentence_dates(
    sentence: SentenceData,
    episodes: list[CustodyEpisode],
    remissions: list[RemissionCredit],
    as_of: date,
    include_release_day: bool = False,
    tz: str = DEFAULT_TIMEZONE,
) -> SentenceResult:
    errors = validate_timeline(episodes, remissions)
    if errors:
        raise ValueError("; ".join(errors))

    as_of = to_local_date(as_of, tz)
    required = required_days(sentence)
    reached = simulate_thresholds(sentence, episodes, remissions, as_of, include_release_day, tz)

    served_today = days_served_until(episodes, as_of, include_release_day)
    remission_today = remission_until(remissions, as_of)
    accrued_today = served_today + remission_today

    def remaining(days: Fraction) -> int:
        return round_days(max(Fraction(0), days - accrued_today))

    termination_date = reached[TERMINATION]

    release_days = required.get(RELEASE)

    result = SentenceResult(
        termination_date=termination_date,
        days_served_today=served_today,
        remission_today=remission_today,
        days_to_progression=remaining(required[PROGRESSION]),
        days_to_termination=remaining(required[TERMINATION]),
        progression_days_required=required[PROGRESSION],
        termination_days_required=sentence.total_days,
        custody_status=custody_status(episodes, as_of),
        next_regime=next_regime(sentence.initial_regime),
        progression_date=reached.get(PROGRESSION),
        release_date=reached.get(RELEASE),
        days_to_release=remaining(release_days) if release_days is not None else None,
        release_days_required=release_days,
    )
    logger.info(
        f"Sentence calculated: total={sentence.total_days} served={served_today} "
        f"remission={remission_today} termination={termination_date.isoformat()}"
    )
    return result


def simple_sentence_case(
    years: int,
    months: int,
    days: int,
    classification: Classification,
    initial_regime: Regime,
    days_already_served: int,
    base_date: date,
    still_in_custody: bool = True,
    tz: str = DEFAULT_TIMEZONE,
) -> tuple[SentenceData, list[CustodyEpisode]]:
    """Sentence and custody built by the single-offense shortcut.

    ``days_already_served`` becomes one countable episode ending on
    ``base_date`` (detração). With ``still_in_custody`` the episode stays
    open so the remaining dates are projected from it.
    """
    if days_already_served < 0:
        raise ValueError("days_already_served must be non-negative")

    base = to_local_date(base_date, tz)
    crime = Crime(
        description="Crime informado",
        article="",
        years=years,
        months=months,
        days=days,
        classification=classification,
    )
    sentence = build_sentence(
        [crime],
        initial_regime,
        table=SIMPLE_ENTRY_FRACTIONS,
        theoretical_start_date=base,
    )

    episodes: list[CustodyEpisode] = []
    if still_in_custody:
        episodes.append(
            CustodyEpisode(
                start=add_days(base, -days_already_served, tz),
                kind="sentence_serving",
                note="Detração (dias já cumpridos)",
            )
        )
    elif days_already_served > 0:
        episodes.append(
            CustodyEpisode(
                start=add_days(base, -days_already_served, tz),
                end=base,
                kind="sentence_serving",
                note="Detração (dias já cumpridos)",
            )
        )

    return sentence, episodes


def compute_simple_sentence(
    years: int,
    months: int,
    days: int,
    classification: Classification,
    initial_regime: Regime,
    days_already_served: int,
    base_date: date,
    still_in_custody: bool = True,
    tz: str = DEFAULT_TIMEZONE,
) -> SentenceResult:
    """Single-offense shortcut using the simple-entry fraction table."""
    sentence, episodes = simple_sentence_case(
        years,
        months,
        days,
        classification,
        initial_regime,
        days_already_served,
        base_date,
        still_in_custody=still_in_custody,
        tz=tz,
    )
    return compute_sentence_dates(sentence, episodes, [], to_local_date(base_date, tz), tz=tz)
