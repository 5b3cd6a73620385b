"""Core types shared by the calculators, the API and the CLI."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from fractions import Fraction
from typing import Literal

Classification = Literal[
    "primary",
    "repeat_offender",
    "heinous_primary",
    "heinous_repeat",
]

Regime = Literal["closed", "semi_open", "open"]

NextRegime = Literal["semi_open", "open", "conditional_release"]

EpisodeKind = Literal[
    "flagrante",
    "preventive",
    "temporary",
    "sentence_serving",
    "house_arrest",
    "hospitalization",
    "other",
]

RemissionReason = Literal["work", "study", "reading", "other"]

EventKind = Literal["episode_start", "episode_end", "remission_credit"]

CustodyStatus = Literal["in_custody", "at_liberty"]


def new_id() -> str:
    return str(uuid.uuid4())


@dataclass(slots=True, frozen=True)
class Crime:
    description: str
    article: str
    years: int
    months: int
    days: int
    classification: Classification
    notes: str = ""
    id: str = field(default_factory=new_id)


@dataclass(slots=True, frozen=True)
class SentenceData:
    crimes: tuple[Crime, ...]
    total_days: int
    initial_regime: Regime
    progression_fraction: Fraction
    release_fraction: Fraction | None = None
    theoretical_start_date: date | None = None
    case_number: str | None = None
    court: str | None = None
    judge: str | None = None
    final_judgment_date: date | None = None
    notes: str = ""


@dataclass(slots=True, frozen=True)
class CustodyEpisode:
    start: date
    end: date | None = None
    kind: EpisodeKind = "sentence_serving"
    countable: bool = True
    note: str = ""
    id: str = field(default_factory=new_id)


@dataclass(slots=True, frozen=True)
class RemissionCredit:
    credit_date: date
    days: int
    reason: RemissionReason = "work"
    note: str = ""
    id: str = field(default_factory=new_id)


@dataclass(slots=True, frozen=True)
class TimelineEvent:
    date: date
    kind: EventKind
    value: int
    source_id: str


@dataclass(slots=True, frozen=True)
class SentenceResult:
    termination_date: date
    days_served_today: int
    remission_today: int
    days_to_progression: int
    days_to_termination: int
    progression_days_required: Fraction
    termination_days_required: int
    custody_status: CustodyStatus
    next_regime: NextRegime
    progression_date: date | None = None
    release_date: date | None = None
    days_to_release: int | None = None
    release_days_required: Fraction | None = None


@dataclass(slots=True, frozen=True)
class AlimonyObligation:
    monthly_amount: Decimal
    due_day: int
    start_date: date
    end_date: date | None = None


@dataclass(slots=True, frozen=True)
class Payment:
    payment_date: date
    amount: Decimal
    note: str = ""


@dataclass(slots=True, frozen=True)
class DueDate:
    nominal: date
    adjusted: date


@dataclass(slots=True, frozen=True)
class DueDateStatement:
    due_date: DueDate
    amount_owed: Decimal
    amount_paid: Decimal
    shortfall: Decimal
    months_late: int
    penalty: Decimal
    interest: Decimal


@dataclass(slots=True, frozen=True)
class AlimonyResult:
    statements: tuple[DueDateStatement, ...]
    total_owed: Decimal
    total_paid: Decimal
    outstanding_balance: Decimal
    total_penalty: Decimal
    total_interest: Decimal
    advance_credit: Decimal
    next_due_date: DueDate | None = None
    next_due_amount: Decimal | None = None
    report: str = ""
