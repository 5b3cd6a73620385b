"""FastAPI entrypoint for the legal calculators."""

from __future__ import annotations

import logging
from dataclasses import asdict
from decimal import Decimal
from fractions import Fraction

from fastapi import FastAPI, HTTPException

from juris_calc.api.schemas import (
    AlimonyResponse,
    CalculateAlimonyRequest,
    CalculateSentenceRequest,
    CustodyEpisodeIn,
    CustodyStatusRequest,
    CustodyStatusResponse,
    DueDateOut,
    DueDateStatementOut,
    RemissionCreditIn,
    SentenceResponse,
    SimpleSentenceRequest,
)
from juris_calc.config import Settings, get_settings
from juris_calc.core.alimony import compute_alimony_arrears, monthly_amount_from_income, suggested_percentage
from juris_calc.core.durations import today
from juris_calc.core.fraction_table import MULTI_OFFENSE_FRACTIONS, SIMPLE_ENTRY_FRACTIONS, build_sentence
from juris_calc.core.report import format_fraction, render_sentence_report
from juris_calc.core.sentence import (
    compute_sentence_dates,
    custody_status,
    simple_sentence_case,
)
from juris_calc.core.types import (
    AlimonyObligation,
    AlimonyResult,
    Crime,
    CustodyEpisode,
    Payment,
    RemissionCredit,
    SentenceData,
    SentenceResult,
    new_id,
)

logger = logging.getLogger(__name__)

app = FastAPI(title="Juris Calc API", version="0.1.0")

FRACTION_TABLES = {
    "multi_offense": MULTI_OFFENSE_FRACTIONS,
    "simple_entry": SIMPLE_ENTRY_FRACTIONS,
}


def to_episodes(items: list[CustodyEpisodeIn]) -> list[CustodyEpisode]:
    return [
        CustodyEpisode(
            start=item.start,
            end=item.end,
            kind=item.kind,
            countable=item.countable,
            note=item.note,
            id=item.id or new_id(),
        )
        for item in items
    ]


def to_remissions(items: list[RemissionCreditIn]) -> list[RemissionCredit]:
    return [
        RemissionCredit(
            credit_date=item.credit_date,
            days=item.days,
            reason=item.reason,
            note=item.note,
            id=item.id or new_id(),
        )
        for item in items
    ]


def optional_float(value: Fraction | None) -> float | None:
    return float(value) if value is not None else None


def to_sentence_response(sentence: SentenceData, result: SentenceResult, report: str) -> SentenceResponse:
    return SentenceResponse(
        total_days=sentence.total_days,
        initial_regime=sentence.initial_regime,
        next_regime=result.next_regime,
        progression_fraction=format_fraction(sentence.progression_fraction),
        release_fraction=format_fraction(sentence.release_fraction) if sentence.release_fraction else None,
        progression_days_required=float(result.progression_days_required),
        release_days_required=optional_float(result.release_days_required),
        termination_days_required=result.termination_days_required,
        progression_date=result.progression_date,
        release_date=result.release_date,
        termination_date=result.termination_date,
        days_served_today=result.days_served_today,
        remission_today=result.remission_today,
        days_to_progression=result.days_to_progression,
        days_to_release=result.days_to_release,
        days_to_termination=result.days_to_termination,
        custody_status=result.custody_status,
        report=report,
    )


def run_sentence(req: CalculateSentenceRequest, settings: Settings) -> SentenceResponse:
    crimes = [
        Crime(
            description=item.description,
            article=item.article,
            years=item.years,
            months=item.months,
            days=item.days,
            classification=item.classification,
            notes=item.notes,
            id=item.id or new_id(),
        )
        for item in req.crimes
    ]
    sentence = build_sentence(
        crimes,
        req.initial_regime,
        table=FRACTION_TABLES[req.fraction_table],
        theoretical_start_date=req.theoretical_start_date,
        case_number=req.case_number,
        court=req.court,
        judge=req.judge,
        final_judgment_date=req.final_judgment_date,
        notes=req.notes,
    )

    as_of = req.as_of or today(settings.timezone)
    include_release_day = (
        req.include_release_day if req.include_release_day is not None else settings.include_release_day
    )
    result = compute_sentence_dates(
        sentence,
        to_episodes(req.episodes),
        to_remissions(req.remissions),
        as_of,
        include_release_day=include_release_day,
        tz=settings.timezone,
    )
    return to_sentence_response(sentence, result, render_sentence_report(sentence, result, as_of))


def run_simple_sentence(req: SimpleSentenceRequest, settings: Settings) -> SentenceResponse:
    base_date = req.base_date or today(settings.timezone)
    sentence, episodes = simple_sentence_case(
        req.years,
        req.months,
        req.days,
        req.classification,
        req.initial_regime,
        req.days_already_served,
        base_date,
        still_in_custody=req.still_in_custody,
        tz=settings.timezone,
    )
    result = compute_sentence_dates(sentence, episodes, [], base_date, tz=settings.timezone)
    return to_sentence_response(sentence, result, render_sentence_report(sentence, result, base_date))


def to_alimony_response(
    obligation: AlimonyObligation,
    result: AlimonyResult,
    percentage: Decimal | None = None,
) -> AlimonyResponse:
    next_due = None
    if result.next_due_date is not None:
        next_due = DueDateOut(**asdict(result.next_due_date))

    return AlimonyResponse(
        monthly_amount=obligation.monthly_amount,
        income_percentage=percentage,
        statements=[DueDateStatementOut(**asdict(statement)) for statement in result.statements],
        total_owed=result.total_owed,
        total_paid=result.total_paid,
        outstanding_balance=result.outstanding_balance,
        total_penalty=result.total_penalty,
        total_interest=result.total_interest,
        advance_credit=result.advance_credit,
        next_due_date=next_due,
        next_due_amount=result.next_due_amount,
        report=result.report,
    )


def run_alimony(req: CalculateAlimonyRequest, settings: Settings) -> AlimonyResponse:
    percentage = None
    monthly_amount = req.monthly_amount
    if monthly_amount is None:
        percentage = req.percentage or suggested_percentage(req.children, req.child_age)
        monthly_amount = monthly_amount_from_income(req.income, percentage)
        if monthly_amount <= 0:
            raise ValueError("income yields a zero monthly amount")

    obligation = AlimonyObligation(
        monthly_amount=monthly_amount,
        due_day=req.due_day,
        start_date=req.start_date,
        end_date=req.end_date,
    )
    payments = [Payment(payment_date=p.payment_date, amount=p.amount, note=p.note) for p in req.payments]
    as_of = req.as_of or today(settings.timezone)

    result = compute_alimony_arrears(
        obligation,
        payments,
        as_of,
        penalty_rate=settings.alimony_penalty_rate,
        monthly_interest_rate=settings.alimony_monthly_interest_rate,
    )
    return to_alimony_response(obligation, result, percentage)


@app.get("/v1/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.post("/v1/sentence/calculate", response_model=SentenceResponse)
def calculate_sentence_endpoint(req: CalculateSentenceRequest) -> SentenceResponse:
    try:
        return run_sentence(req, get_settings())
    except ValueError as exc:
        logger.warning(f"Rejected sentence calculation: {exc}")
        raise HTTPException(status_code=422, detail=str(exc)) from exc


@app.post("/v1/sentence/simple", response_model=SentenceResponse)
def simple_sentence_endpoint(req: SimpleSentenceRequest) -> SentenceResponse:
    try:
        return run_simple_sentence(req, get_settings())
    except ValueError as exc:
        logger.warning(f"Rejected simple sentence calculation: {exc}")
        raise HTTPException(status_code=422, detail=str(exc)) from exc


@app.post("/v1/sentence/status", response_model=CustodyStatusResponse)
def custody_status_endpoint(req: CustodyStatusRequest) -> CustodyStatusResponse:
    as_of = req.as_of or today(get_settings().timezone)
    return CustodyStatusResponse(as_of=as_of, status=custody_status(to_episodes(req.episodes), as_of))


@app.post("/v1/alimony/calculate", response_model=AlimonyResponse)
def calculate_alimony_endpoint(req: CalculateAlimonyRequest) -> AlimonyResponse:
    try:
        return run_alimony(req, get_settings())
    except ValueError as exc:
        logger.warning(f"Rejected alimony calculation: {exc}")
        raise HTTPException(status_code=422, detail=str(exc)) from exc
