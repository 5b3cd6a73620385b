"""
Legal calculators command line

Runs the sentence execution and alimony arrears calculators on a JSON input
file shaped like the matching API request body.

Usage:
    juris-calc sentence case.json               # Multi-offense sentence dates
    juris-calc simple simple.json               # Single-offense shortcut
    juris-calc alimony pension.json             # Alimony arrears
    juris-calc alimony pension.json --report    # Also print the memorandum
    juris-calc sentence case.json --as-of 2024-06-30
"""

import argparse
import logging
import sys
from datetime import date
from pathlib import Path

from pydantic import BaseModel, ValidationError
from rich.console import Console
from rich.table import Table

from juris_calc.api.main import run_alimony, run_sentence, run_simple_sentence
from juris_calc.api.schemas import (
    AlimonyResponse,
    CalculateAlimonyRequest,
    CalculateSentenceRequest,
    SentenceResponse,
    SimpleSentenceRequest,
)
from juris_calc.config import get_settings
from juris_calc.core.report import format_brl, format_date_br

console = Console()

COMMANDS = {
    "sentence": (CalculateSentenceRequest, run_sentence, "as_of"),
    "simple": (SimpleSentenceRequest, run_simple_sentence, "base_date"),
    "alimony": (CalculateAlimonyRequest, run_alimony, "as_of"),
}


def setup_logging(verbose: bool = False):
    level = logging.DEBUG if verbose else getattr(logging, get_settings().log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def load_request(path: Path, model: type[BaseModel], date_field: str, as_of: date | None) -> BaseModel:
    """Read and validate a request body, overriding its calculation date."""
    request = model.model_validate_json(path.read_text(encoding="utf-8"))
    if as_of is not None:
        request = request.model_copy(update={date_field: as_of})
    return request


def show_sentence(response: SentenceResponse):
    table = Table(title="Execução Penal")
    table.add_column("Item", style="cyan")
    table.add_column("Valor", style="green")

    table.add_row("Pena total", f"{response.total_days} dias")
    table.add_row("Frações", f"{response.progression_fraction} / {response.release_fraction or '—'}")
    table.add_row("Situação", response.custody_status)
    table.add_row("Dias cumpridos", str(response.days_served_today))
    table.add_row("Dias remidos", str(response.remission_today))
    table.add_row("Progressão", format_date_br(response.progression_date))
    table.add_row("Livramento", format_date_br(response.release_date))
    table.add_row("Término", format_date_br(response.termination_date))
    table.add_row("Faltam p/ término", f"{response.days_to_termination} dias")
    console.print(table)


def show_alimony(response: AlimonyResponse):
    table = Table(title=f"Pensão Alimentícia - {format_brl(response.monthly_amount)}/mês")
    table.add_column("Vencimento", style="cyan")
    table.add_column("Devido", justify="right")
    table.add_column("Pago", justify="right", style="green")
    table.add_column("Em aberto", justify="right", style="red")
    table.add_column("Multa", justify="right", style="yellow")
    table.add_column("Juros", justify="right", style="yellow")

    for statement in response.statements:
        table.add_row(
            format_date_br(statement.due_date.adjusted),
            format_brl(statement.amount_owed),
            format_brl(statement.amount_paid),
            format_brl(statement.shortfall),
            format_brl(statement.penalty),
            format_brl(statement.interest),
        )
    console.print(table)

    console.print(f"  Total devido: {format_brl(response.total_owed)}")
    console.print(f"  Total pago: {format_brl(response.total_paid)}")
    console.print(f"  Saldo em aberto: [bold]{format_brl(response.outstanding_balance)}[/]")
    if response.advance_credit > 0:
        console.print(f"  Crédito antecipado: {format_brl(response.advance_credit)}")
    if response.next_due_date and response.next_due_amount is not None:
        console.print(
            f"  Próximo vencimento: {format_date_br(response.next_due_date.adjusted)} "
            f"({format_brl(response.next_due_amount)})"
        )


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Legal calculators: sentence execution and alimony arrears")
    parser.add_argument("command", choices=sorted(COMMANDS), help="Calculator to run")
    parser.add_argument("input", type=Path, help="JSON request body")
    parser.add_argument("--as-of", type=date.fromisoformat, default=None, help="Calculation date (YYYY-MM-DD)")
    parser.add_argument("--report", action="store_true", help="Print the full text memorandum")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args(argv)

    setup_logging(args.verbose)
    model, runner, date_field = COMMANDS[args.command]

    try:
        request = load_request(args.input, model, date_field, args.as_of)
        response = runner(request, get_settings())
    except (OSError, ValidationError, ValueError) as e:
        console.print(f"[red]Calculation failed:[/] {e}")
        return 1

    if isinstance(response, AlimonyResponse):
        show_alimony(response)
    else:
        show_sentence(response)

    if args.report:
        console.print()
        console.print(response.report, highlight=False, markup=False)
    return 0


if __name__ == "__main__":
    sys.exit(main())
