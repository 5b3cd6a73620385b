"""Pydantic API schemas."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

Classification = Literal[
    "primary",
    "repeat_offender",
    "heinous_primary",
    "heinous_repeat",
]

Regime = Literal["closed", "semi_open", "open"]

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

FractionTableName = Literal["multi_offense", "simple_entry"]


class CrimeIn(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: str | None = None
    description: str = ""
    article: str = ""
    years: int = Field(default=0, ge=0)
    months: int = Field(default=0, ge=0)
    days: int = Field(default=0, ge=0)
    classification: Classification
    notes: str = ""


class CustodyEpisodeIn(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: str | None = None
    start: date
    end: date | None = None
    kind: EpisodeKind = "sentence_serving"
    countable: bool = True
    note: str = ""

    @model_validator(mode="after")
    def validate_interval(self) -> "CustodyEpisodeIn":
        if self.end is not None and self.start > self.end:
            raise ValueError("start must be on or before end")
        return self


class RemissionCreditIn(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: str | None = None
    credit_date: date
    days: int = Field(ge=0)
    reason: RemissionReason = "work"
    note: str = ""


class CalculateSentenceRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    crimes: list[CrimeIn] = Field(default_factory=list)
    initial_regime: Regime | None = None
    fraction_table: FractionTableName = "multi_offense"

    episodes: list[CustodyEpisodeIn] = Field(default_factory=list)
    remissions: list[RemissionCreditIn] = Field(default_factory=list)

    as_of: date | None = None
    include_release_day: bool | None = None

    theoretical_start_date: date | None = None
    case_number: str | None = None
    court: str | None = None
    judge: str | None = None
    final_judgment_date: date | None = None
    notes: str = ""


class SimpleSentenceRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    years: int = Field(default=0, ge=0)
    months: int = Field(default=0, ge=0)
    days: int = Field(default=0, ge=0)
    classification: Classification = "primary"
    initial_regime: Regime
    days_already_served: int = Field(default=0, ge=0)
    base_date: date | None = None
    still_in_custody: bool = True


class SentenceResponse(BaseModel):
    total_days: int
    initial_regime: str
    next_regime: str
    progression_fraction: str
    release_fraction: str | None
    progression_days_required: float
    release_days_required: float | None
    termination_days_required: int
    progression_date: date | None
    release_date: date | None
    termination_date: date
    days_served_today: int
    remission_today: int
    days_to_progression: int
    days_to_release: int | None
    days_to_termination: int
    custody_status: str
    report: str


class CustodyStatusRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    episodes: list[CustodyEpisodeIn] = Field(default_factory=list)
    as_of: date | None = None


class CustodyStatusResponse(BaseModel):
    as_of: date
    status: str


class PaymentIn(BaseModel):
    model_config = ConfigDict(extra="forbid")

    payment_date: date
    amount: Decimal = Field(gt=0)
    note: str = ""


class CalculateAlimonyRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    monthly_amount: Decimal | None = Field(default=None, gt=0)

    income: Decimal | None = Field(default=None, ge=0)
    children: int | None = Field(default=None, ge=1)
    child_age: int | None = Field(default=None, ge=0, le=120)
    percentage: Decimal | None = Field(default=None, gt=0, le=100)

    due_day: int = Field(ge=1, le=31)
    start_date: date
    end_date: date | None = None
    payments: list[PaymentIn] = Field(default_factory=list)
    as_of: date | None = None

    @model_validator(mode="after")
    def validate_amount_source(self) -> "CalculateAlimonyRequest":
        if self.monthly_amount is None and self.income is None:
            raise ValueError("Provide either monthly_amount or income")
        if self.monthly_amount is None and self.percentage is None and self.children is None:
            raise ValueError("Income mode needs percentage or children")
        return self


class DueDateOut(BaseModel):
    nominal: date
    adjusted: date


class DueDateStatementOut(BaseModel):
    due_date: DueDateOut
    amount_owed: Decimal
    amount_paid: Decimal
    shortfall: Decimal
    months_late: int
    penalty: Decimal
    interest: Decimal


class AlimonyResponse(BaseModel):
    monthly_amount: Decimal
    income_percentage: Decimal | None = None
    statements: list[DueDateStatementOut]
    total_owed: Decimal
    total_paid: Decimal
    outstanding_balance: Decimal
    total_penalty: Decimal
    total_interest: Decimal
    advance_credit: Decimal
    next_due_date: DueDateOut | None = None
    next_due_amount: Decimal | None = None
    report: str
