"""Plain-text pt-BR memoranda for calculation results."""

from __future__ import annotations

from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from fractions import Fraction

from .types import AlimonyObligation, AlimonyResult, SentenceData, SentenceResult

REGIME_LABELS = {
    "closed": "Fechado",
    "semi_open": "Semiaberto",
    "open": "Aberto",
    "conditional_release": "Livramento Condicional",
}

CLASSIFICATION_LABELS = {
    "primary": "Primário",
    "repeat_offender": "Reincidente",
    "heinous_primary": "Hediondo primário",
    "heinous_repeat": "Hediondo reincidente",
}

STATUS_LABELS = {
    "in_custody": "Em custódia",
    "at_liberty": "Em liberdade",
}

ALIMONY_LEGAL_NOTES = [
    "A pensão alimentícia é devida até que o filho complete 18 anos, podendo se estender até os 24 anos "
    "se estiver cursando ensino superior",
    "Vencimentos em sábado ou domingo são prorrogados para o primeiro dia útil seguinte",
    "Pagamentos quitam primeiro o vencimento mais antigo em aberto",
    "Em caso de atraso, aplicam-se multa de 2% e juros de 1% ao mês sobre o saldo de cada vencimento",
    "O valor pode ser revisado a qualquer tempo mediante comprovação de mudança na situação financeira",
]


def format_brl(value: Decimal) -> str:
    amount = Decimal(value).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    text = f"{amount:,.2f}".replace(",", "_").replace(".", ",").replace("_", ".")
    return f"R$ {text}"


def format_date_br(value: date | None) -> str:
    return value.strftime("%d/%m/%Y") if value else "—"


def format_fraction(value: Fraction | None) -> str:
    if value is None:
        return "—"
    return f"{value.numerator}/{value.denominator}"


def format_days(value: Fraction | int | None) -> str:
    if value is None:
        return "—"
    value = Fraction(value)
    if value.denominator == 1:
        return f"{value.numerator} dias"
    rounded = Decimal(value.numerator) / Decimal(value.denominator)
    return f"{rounded.quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)}".replace(".", ",") + " dias"


def render_alimony_report(obligation: AlimonyObligation, result: AlimonyResult, as_of: date) -> str:
    lines = [
        "CÁLCULO DE PENSÃO ALIMENTÍCIA EM ATRASO",
        "",
        "Dados da Obrigação:",
        f"- Valor Mensal: {format_brl(obligation.monthly_amount)}",
        f"- Dia de Vencimento: {obligation.due_day}",
        f"- Data de Início: {format_date_br(obligation.start_date)}",
    ]
    if obligation.end_date:
        lines.append(f"- Data de Fim: {format_date_br(obligation.end_date)}")
    lines.append(f"- Data-base do Cálculo: {format_date_br(as_of)}")
    lines.append("")

    if result.statements:
        lines.append("Vencimentos:")
    else:
        lines.append("Nenhum vencimento até a data-base.")

    for number, statement in enumerate(result.statements, start=1):
        due = statement.due_date
        header = f"{number}. {format_date_br(due.adjusted)}"
        if due.adjusted != due.nominal:
            header += f" (vencimento original {format_date_br(due.nominal)}, prorrogado para dia útil)"
        lines.append(header)
        lines.append(f"   Devido: {format_brl(statement.amount_owed)}")
        lines.append(f"   Pago: {format_brl(statement.amount_paid)}")
        if statement.shortfall > 0:
            lines.append(f"   Saldo em Aberto: {format_brl(statement.shortfall)}")
            lines.append(f"   Multa: {format_brl(statement.penalty)}")
            lines.append(f"   Juros ({statement.months_late} meses): {format_brl(statement.interest)}")
        else:
            lines.append("   Quitado")

    updated_total = result.outstanding_balance + result.total_penalty + result.total_interest
    lines.extend(
        [
            "",
            "Totais:",
            f"- Total Devido: {format_brl(result.total_owed)}",
            f"- Total Pago: {format_brl(result.total_paid)}",
            f"- Saldo em Aberto: {format_brl(result.outstanding_balance)}",
            f"- Multa Total: {format_brl(result.total_penalty)}",
            f"- Juros Totais: {format_brl(result.total_interest)}",
            f"- Total Atualizado: {format_brl(updated_total)}",
        ]
    )

    if result.advance_credit > 0:
        lines.append("")
        lines.append(
            f"Crédito Antecipado: {format_brl(result.advance_credit)} pagos além do devido, "
            "a abater dos próximos vencimentos."
        )

    if result.next_due_date is not None and result.next_due_amount is not None:
        lines.append("")
        lines.append(
            f"Próximo Vencimento: {format_date_br(result.next_due_date.adjusted)} - "
            f"valor projetado {format_brl(result.next_due_amount)}"
        )

    lines.append("")
    lines.append("Observações Legais:")
    lines.extend(f"- {note}" for note in ALIMONY_LEGAL_NOTES)
    return "\n".join(lines)


def render_sentence_report(sentence: SentenceData, result: SentenceResult, as_of: date) -> str:
    lines = ["MEMÓRIA DE CÁLCULO DE EXECUÇÃO PENAL", ""]

    case_fields = [
        ("Processo", sentence.case_number),
        ("Vara", sentence.court),
        ("Juiz(a)", sentence.judge),
        ("Trânsito em Julgado", format_date_br(sentence.final_judgment_date) if sentence.final_judgment_date else None),
    ]
    case_lines = [f"- {label}: {value}" for label, value in case_fields if value]
    if case_lines:
        lines.append("Dados do Processo:")
        lines.extend(case_lines)
        lines.append("")

    lines.append("Crimes:")
    for number, crime in enumerate(sentence.crimes, start=1):
        article = f" ({crime.article})" if crime.article else ""
        lines.append(
            f"{number}. {crime.description}{article}: {crime.years} anos, {crime.months} meses e "
            f"{crime.days} dias - {CLASSIFICATION_LABELS[crime.classification]}"
        )

    lines.extend(
        [
            "",
            "Parâmetros:",
            f"- Pena Total: {format_days(sentence.total_days)}",
            f"- Regime Inicial: {REGIME_LABELS[sentence.initial_regime]}",
            f"- Fração para Progressão: {format_fraction(sentence.progression_fraction)} "
            f"({format_days(result.progression_days_required)})",
            f"- Fração para Livramento: {format_fraction(sentence.release_fraction)} "
            f"({format_days(result.release_days_required)})",
            "",
            f"Situação em {format_date_br(as_of)}: {STATUS_LABELS[result.custody_status]}",
            f"- Dias Cumpridos: {result.days_served_today}",
            f"- Dias Remidos: {result.remission_today}",
            f"- Faltam para Progressão: {result.days_to_progression} dias",
        ]
    )
    if result.days_to_release is not None:
        lines.append(f"- Faltam para Livramento: {result.days_to_release} dias")
    lines.append(f"- Faltam para o Término: {result.days_to_termination} dias")

    lines.extend(
        [
            "",
            "Datas-chave:",
            f"- Progressão para {REGIME_LABELS[result.next_regime]}: {format_date_br(result.progression_date)}",
            f"- Livramento Condicional: {format_date_br(result.release_date)}",
            f"- Término da Pena: {format_date_br(result.termination_date)}",
        ]
    )

    if sentence.notes:
        lines.append("")
        lines.append(f"Observações: {sentence.notes}")
    return "\n".join(lines)
