"""Session statistics — the single computed view handed to reporting and UI."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from iseor_diagnostic.services.aggregation import (
    compute_domain_distribution,
    compute_flag_distribution,
    compute_frequency_distribution,
    compute_indicator_component_table,
)
from iseor_diagnostic.services.cost_engine import HUNDRED, ZERO, to_decimal

CENT = Decimal("0.01")


def compute_session_statistics(
    session: dict[str, Any],
    dysfunctions: list[dict[str, Any]],
) -> dict[str, Any]:
    """Assemble totals and distributions for one session.

    Args:
        session: The session record (economic inputs and derived rate).
        dysfunctions: Every dysfunction owned by the session.

    Returns:
        Dict with dysfunction_count, costed_count, total_annual_cost,
        cost_to_revenue_ratio (None without a positive scope revenue),
        average_cost_per_dysfunction (None when there are no dysfunctions),
        the domain, frequency and flag distributions, the 5x4 table and a
        plain English summary.
    """
    count = len(dysfunctions)
    annual_costs = [to_decimal(d.get("annual_cost")) for d in dysfunctions]
    costed_count = sum(1 for cost in annual_costs if cost is not None)
    total = sum((cost for cost in annual_costs if cost is not None), ZERO)

    revenue = to_decimal(session.get("scope_revenue"))
    ratio = total * HUNDRED / revenue if revenue is not None and revenue > 0 else None
    average = total / count if count else None

    hourly_rate = to_decimal(session.get("hourly_rate"))

    return {
        "session_id": session.get("id", ""),
        "hourly_rate": hourly_rate,
        "dysfunction_count": count,
        "costed_count": costed_count,
        "total_annual_cost": total,
        "cost_to_revenue_ratio": ratio,
        "average_cost_per_dysfunction": average,
        "domain_distribution": compute_domain_distribution(dysfunctions),
        "frequency_distribution": compute_frequency_distribution(dysfunctions),
        "indicator_component_table": compute_indicator_component_table(dysfunctions),
        "flag_distribution": compute_flag_distribution(dysfunctions),
        "summary": _summarise(count, costed_count, total, ratio, hourly_rate),
    }


def format_amount(value: Decimal) -> str:
    """Round to cents for display, e.g. Decimal('156000') -> '156,000.00'."""
    return f"{value.quantize(CENT, rounding=ROUND_HALF_UP):,.2f}"


def _summarise(
    count: int,
    costed_count: int,
    total: Decimal,
    ratio: Decimal | None,
    hourly_rate: Decimal | None,
) -> str:
    """Generate a plain English summary of a session's hidden costs."""
    if count == 0:
        return "No dysfunctions have been recorded for this session yet."

    if hourly_rate is None:
        return (
            f"{count} dysfunction(s) recorded. Hidden costs are not available until "
            f"scope revenue, gross margin and hours worked per year are provided."
        )

    summary = (
        f"{count} dysfunction(s) recorded with a total annual hidden cost of "
        f"{format_amount(total)}"
    )
    if ratio is not None:
        summary += f", or {ratio.quantize(Decimal('0.1'), rounding=ROUND_HALF_UP):.1f}% of scope revenue"
    summary += "."

    uncosted = count - costed_count
    if uncosted:
        summary += f" {uncosted} dysfunction(s) have no computed cost yet."
    return summary
