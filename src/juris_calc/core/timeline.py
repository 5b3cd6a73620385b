"""Ordered event streams consumed by the accrual simulators."""

from __future__ import annotations

import calendar
from datetime import date, timedelta
from itertools import takewhile
from typing import Iterator

from dateutil.relativedelta import relativedelta

from .types import AlimonyObligation, CustodyEpisode, DueDate, RemissionCredit, TimelineEvent

SATURDAY = 5
SUNDAY = 6


def build_sentence_events(
    episodes: list[CustodyEpisode],
    remissions: list[RemissionCredit],
) -> list[TimelineEvent]:
    """Signed point events for countable custody and remission credits.

    Events on the same day keep insertion order: episode boundaries in
    episode order, then remission credits.
    """
    events: list[TimelineEvent] = []

    for episode in episodes:
        if not episode.countable:
            continue
        events.append(TimelineEvent(episode.start, "episode_start", 1, episode.id))
        if episode.end is not None:
            events.append(TimelineEvent(episode.end, "episode_end", -1, episode.id))

    for remission in remissions:
        events.append(TimelineEvent(remission.credit_date, "remission_credit", remission.days, remission.id))

    # list.sort is stable
    events.sort(key=lambda event: event.date)
    return events


def adjust_to_business_day(value: date) -> date:
    weekday = value.weekday()
    if weekday == SATURDAY:
        return value + timedelta(days=2)
    if weekday == SUNDAY:
        return value + timedelta(days=1)
    return value


def clamp_day(year: int, month: int, day: int) -> date:
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day, last_day))


def iter_due_dates(obligation: AlimonyObligation) -> Iterator[DueDate]:
    """Every due-date of the obligation, in order.

    Unbounded when the obligation has no end date.
    """
    first_month = obligation.start_date.replace(day=1)
    offset = 0
    while True:
        month = first_month + relativedelta(months=offset)
        offset += 1
        nominal = clamp_day(month.year, month.month, obligation.due_day)
        if nominal < obligation.start_date:
            continue
        if obligation.end_date is not None and nominal > obligation.end_date:
            return
        yield DueDate(nominal=nominal, adjusted=adjust_to_business_day(nominal))


def monthly_due_dates(obligation: AlimonyObligation, until: date) -> list[DueDate]:
    """Due-dates that have matured by ``until`` (business-day adjusted)."""
    return list(takewhile(lambda due: due.adjusted <= until, iter_due_dates(obligation)))


def next_due_date(obligation: AlimonyObligation, after: date) -> DueDate | None:
    for due in iter_due_dates(obligation):
        if due.adjusted > after:
            return due
    return None
