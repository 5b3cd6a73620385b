"""Alimony arrears calculator.

Dues are generated month by month from the obligation and matched against
the payment ledger in due-date order: a payment settles the oldest open due
first, whatever its own date. Each unpaid remainder is charged a flat penalty
and simple monthly interest on that remainder only.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date
from decimal import ROUND_HALF_UP, Decimal

from dateutil.relativedelta import relativedelta

from .report import render_alimony_report
from .timeline import monthly_due_dates, next_due_date
from .types import AlimonyObligation, AlimonyResult, DueDate, DueDateStatement, Payment

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")
ZERO = Decimal("0")

DEFAULT_PENALTY_RATE = Decimal("0.02")
DEFAULT_MONTHLY_INTEREST_RATE = Decimal("0.01")

# Share of the paying parent's income, by number of children.
SUGGESTED_PERCENTAGES: dict[int, Decimal] = {
    1: Decimal("30"),
    2: Decimal("25"),
    3: Decimal("20"),
    4: Decimal("15"),
}
LARGE_FAMILY_PERCENTAGE = Decimal("12")
UNIVERSITY_BONUS = Decimal("5")
UNIVERSITY_AGES = range(18, 25)


def to_cents(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def suggested_percentage(children: int, child_age: int | None = None) -> Decimal:
    if children < 1:
        raise ValueError("children must be at least 1")
    percentage = SUGGESTED_PERCENTAGES.get(children, LARGE_FAMILY_PERCENTAGE)
    if child_age is not None and child_age in UNIVERSITY_AGES:
        percentage += UNIVERSITY_BONUS
    return percentage


def monthly_amount_from_income(income: Decimal, percentage: Decimal) -> Decimal:
    if income < 0:
        raise ValueError("income must be non-negative")
    return to_cents(income * percentage / Decimal(100))


def months_late(due: date, as_of: date) -> int:
    """Whole months between ``due`` and ``as_of``, any started month counts."""
    if as_of <= due:
        return 0
    delta = relativedelta(as_of, due)
    months = delta.years * 12 + delta.months
    if delta.days:
        months += 1
    return months


def validate_alimony_input(obligation: AlimonyObligation, payments: list[Payment]) -> list[str]:
    errors: list[str] = []

    if obligation.monthly_amount <= 0:
        errors.append("monthly_amount must be positive")
    if not (1 <= obligation.due_day <= 31):
        errors.append("due_day must be between 1 and 31")
    if obligation.end_date is not None and obligation.end_date < obligation.start_date:
        errors.append("end_date must be on or after start_date")
    for index, payment in enumerate(payments):
        if payment.amount <= 0:
            errors.append(f"payment {index}: amount must be positive")

    return errors


def settle_due(pool: tuple[Decimal, ...], amount: Decimal) -> tuple[Decimal, tuple[Decimal, ...]]:
    """Draw ``amount`` from the payment pool, oldest payment first.

    Returns what was paid and the new pool; the given pool is left untouched.
    """
    paid = ZERO
    remaining: list[Decimal] = []
    for balance in pool:
        draw = min(balance, amount - paid)
        paid += draw
        remaining.append(balance - draw)
    return paid, tuple(remaining)


def charges_on(
    shortfall: Decimal,
    due: DueDate,
    as_of: date,
    penalty_rate: Decimal,
    monthly_interest_rate: Decimal,
) -> tuple[int, Decimal, Decimal]:
    if shortfall <= 0:
        return 0, ZERO, ZERO
    late = months_late(due.adjusted, as_of)
    penalty = to_cents(shortfall * penalty_rate)
    interest = to_cents(shortfall * monthly_interest_rate * late)
    return late, penalty, interest


def compute_alimony_arrears(
    obligation: AlimonyObligation,
    payments: list[Payment],
    as_of: date,
    penalty_rate: Decimal = DEFAULT_PENALTY_RATE,
    monthly_interest_rate: Decimal = DEFAULT_MONTHLY_INTEREST_RATE,
) -> AlimonyResult:
    errors = validate_alimony_input(obligation, payments)
    if errors:
        raise ValueError("; ".join(errors))

    logger.info(f"Starting alimony calculation from {obligation.start_date.isoformat()} to {as_of.isoformat()}")

    considered = sorted((p for p in payments if p.payment_date <= as_of), key=lambda p: p.payment_date)
    ignored = len(payments) - len(considered)
    if ignored:
        logger.debug(f"Ignoring {ignored} payment(s) dated after {as_of.isoformat()}")

    dues = monthly_due_dates(obligation, as_of)
    pool = tuple(payment.amount for payment in considered)

    statements: list[DueDateStatement] = []
    for due in dues:
        paid, pool = settle_due(pool, obligation.monthly_amount)
        shortfall = obligation.monthly_amount - paid
        late, penalty, interest = charges_on(shortfall, due, as_of, penalty_rate, monthly_interest_rate)
        statements.append(
            DueDateStatement(
                due_date=due,
                amount_owed=obligation.monthly_amount,
                amount_paid=paid,
                shortfall=shortfall,
                months_late=late,
                penalty=penalty,
                interest=interest,
            )
        )

    total_owed = sum((s.amount_owed for s in statements), ZERO)
    total_paid = sum((p.amount for p in considered), ZERO)
    outstanding = sum((s.shortfall for s in statements), ZERO)
    advance_credit = sum(pool, ZERO)

    upcoming = next_due_date(obligation, as_of)
    upcoming_amount = None
    if upcoming is not None:
        carried = ZERO
        for statement in statements:
            _, penalty, interest = charges_on(
                statement.shortfall,
                statement.due_date,
                upcoming.adjusted,
                penalty_rate,
                monthly_interest_rate,
            )
            carried += statement.shortfall + penalty + interest
        upcoming_amount = max(ZERO, obligation.monthly_amount - advance_credit) + carried

    result = AlimonyResult(
        statements=tuple(statements),
        total_owed=total_owed,
        total_paid=total_paid,
        outstanding_balance=outstanding,
        total_penalty=sum((s.penalty for s in statements), ZERO),
        total_interest=sum((s.interest for s in statements), ZERO),
        advance_credit=advance_credit,
        next_due_date=upcoming,
        next_due_amount=upcoming_amount,
    )

    logger.info(
        f"Alimony calculation finished: {len(statements)} dues, owed={total_owed} "
        f"paid={total_paid} outstanding={outstanding}"
    )
    return replace(result, report=render_alimony_report(obligation, result, as_of))
