"""
Display Formatting

The engines return structured results; this module turns them into the
Portuguese text the application shows. Nothing here feeds back into a
calculation.
"""

from decimal import Decimal
from typing import Optional, Sequence

from finance_engine.config import EngineSettings, get_settings
from finance_engine.models.ledger import OWNER_ID, TripParticipant, participant_key
from finance_engine.models.report import ConsistencyReport, Settlement, SettlementPlan
from finance_engine.money import round2

CURRENCY_SYMBOLS = {
    "BRL": "R$",
    "USD": "US$",
    "EUR": "€",
    "GBP": "£",
}


def format_currency(amount: Decimal, currency: str = "BRL") -> str:
    """
    Format an amount the pt-BR way: "R$ 1.234,56".

    Unknown currencies are prefixed with their ISO code.
    """
    value = round2(amount)
    sign = "-" if value < 0 else ""
    grouped = f"{abs(value):,.2f}"
    # 1,234.56 -> 1.234,56
    localized = grouped.replace(",", "_").replace(".", ",").replace("_", ".")
    symbol = CURRENCY_SYMBOLS.get(currency.upper(), currency.upper())
    return f"{sign}{symbol} {localized}"


def participant_name(
    participant_id: str,
    participants: Sequence[TripParticipant],
    settings: Optional[EngineSettings] = None,
) -> str:
    """Display name for a settlement participant id."""
    settings = settings or get_settings().engine
    key = participant_key(participant_id)
    if key == OWNER_ID:
        return settings.owner_display_name
    for participant in participants:
        if participant.id == key:
            return participant.name
    return settings.unknown_participant_name


def describe_settlement(
    settlement: Settlement,
    participants: Sequence[TripParticipant],
    settings: Optional[EngineSettings] = None,
) -> str:
    """One instruction, e.g. "Bob deve pagar R$ 40,00 para Você"."""
    settings = settings or get_settings().engine
    debtor = participant_name(settlement.debtor_id, participants, settings)
    creditor = participant_name(settlement.creditor_id, participants, settings)
    amount = format_currency(settlement.amount, settings.reference_currency)
    return f"{debtor} deve pagar {amount} para {creditor}"


def settlement_lines(
    plan: SettlementPlan,
    participants: Sequence[TripParticipant],
    settings: Optional[EngineSettings] = None,
) -> list[str]:
    """
    All instructions of a plan, in order.

    A plan with nothing to pay yields exactly one sentinel line.
    """
    settings = settings or get_settings().engine
    if plan.is_settled:
        return [settings.all_settled_message]
    return [
        describe_settlement(settlement, participants, settings)
        for settlement in plan.settlements
    ]


def consistency_summary(report: ConsistencyReport) -> str:
    """
    A short summary of a consistency report for the settings screen.
    """
    if report.is_consistent:
        return "✅ Nenhuma inconsistência encontrada."

    lines = [f"⚠️ {len(report.issues)} inconsistência(s) encontrada(s):"]
    for issue in report.issues:
        lines.append(f"   • {issue.message}")
    return "\n".join(lines)
