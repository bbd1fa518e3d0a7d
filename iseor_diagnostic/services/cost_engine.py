"""Hidden-cost engine — hourly rate (PRISM) and per-dysfunction costs.

All monetary arithmetic uses :class:`decimal.Decimal`. Values are never
rounded here; rounding belongs to whoever presents them.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any

from iseor_diagnostic.enums import Frequency

ZERO = Decimal("0")
HUNDRED = Decimal("100")
MINUTES_PER_HOUR = Decimal("60")

# Occurrences per year for each frequency (daily counts working days)
FREQUENCY_MULTIPLIERS = {
    Frequency.DAILY: 250,
    Frequency.WEEKLY: 52,
    Frequency.MONTHLY: 12,
    Frequency.QUARTERLY: 4,
    Frequency.YEARLY: 1,
    Frequency.ONE_OFF: 1,
}

# Session fields the hourly rate is derived from
RATE_INPUT_FIELDS = ("scope_revenue", "gross_margin_percent", "hours_worked_per_year")


class CostComputationError(ValueError):
    """Raised when a cost input cannot be interpreted as a number or frequency."""


def to_decimal(value: Any) -> Decimal | None:
    """Convert a stored amount to Decimal, passing None through.

    Floats go through ``str`` so that 0.1 becomes Decimal("0.1") rather than
    its binary expansion.
    """
    if value is None:
        return None
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, bool):
        raise CostComputationError(f"Expected a numeric amount, got boolean {value!r}")
    else:
        try:
            result = Decimal(str(value))
        except InvalidOperation as exc:
            raise CostComputationError(f"Expected a numeric amount, got {value!r}") from exc
    if not result.is_finite():
        raise CostComputationError(f"Expected a finite amount, got {value!r}")
    return result


def compute_hourly_rate(
    scope_revenue: Any,
    gross_margin_percent: Any,
    hours_worked_per_year: Any,
) -> Decimal | None:
    """Compute the hourly monetary rate (PRISM) of a session.

    ``rate = scope_revenue * (gross_margin_percent / 100) / hours_worked_per_year``

    Args:
        scope_revenue: Revenue of the studied scope.
        gross_margin_percent: Gross margin as a percentage (0-100).
        hours_worked_per_year: Hours worked annually across the scope.

    Returns:
        The rate, or None when any input is missing, zero or negative.
        No partial or fallback rate is ever produced.
    """
    revenue = to_decimal(scope_revenue)
    margin = to_decimal(gross_margin_percent)
    hours = to_decimal(hours_worked_per_year)

    if revenue is None or margin is None or hours is None:
        return None
    if revenue <= 0 or margin <= 0 or hours <= 0:
        return None

    return revenue * (margin / HUNDRED) / hours


def derive_session_rate(session: dict[str, Any]) -> Decimal | None:
    """Compute the hourly rate from a session record's economic inputs."""
    return compute_hourly_rate(*(session.get(field) for field in RATE_INPUT_FIELDS))


def occurrence_multiplier(frequency: Frequency | str) -> int:
    """Return how many times per year a dysfunction of this frequency occurs."""
    try:
        return FREQUENCY_MULTIPLIERS[Frequency(frequency)]
    except ValueError as exc:
        raise CostComputationError(f"Unknown frequency {frequency!r}") from exc


def compute_dysfunction_costs(
    dysfunction: dict[str, Any],
    hourly_rate: Any,
) -> tuple[Decimal | None, Decimal | None]:
    """Compute the unit and annual cost of one dysfunction.

    ``unit = minutes * hourly_rate * people_affected / 60 + direct_cost``
    ``annual = unit * occurrence_multiplier(frequency)``

    Args:
        dysfunction: Dysfunction record with already-validated inputs.
        hourly_rate: The owning session's current rate, or None.

    Returns:
        ``(unit_cost, annual_cost)``. Both are None when the session has no
        rate: the direct cost alone never produces a partial value.
    """
    rate = to_decimal(hourly_rate)
    if rate is None:
        return None, None

    minutes = to_decimal(dysfunction.get("minutes_per_occurrence"))
    people = to_decimal(dysfunction.get("people_affected"))
    if minutes is None or people is None:
        raise CostComputationError(
            "Dysfunction is missing minutes_per_occurrence or people_affected"
        )
    direct_cost = to_decimal(dysfunction.get("direct_cost")) or ZERO

    # Divide last: minutes / 60 alone may not terminate
    unit_cost = minutes * rate * people / MINUTES_PER_HOUR + direct_cost
    annual_cost = unit_cost * occurrence_multiplier(dysfunction.get("frequency"))
    return unit_cost, annual_cost


def apply_dysfunction_costs(dysfunction: dict[str, Any], hourly_rate: Any) -> dict[str, Any]:
    """Store freshly derived ``unit_cost`` and ``annual_cost`` on the record.

    Stale values are cleared when the rate is undefined.
    """
    unit_cost, annual_cost = compute_dysfunction_costs(dysfunction, hourly_rate)
    dysfunction["unit_cost"] = unit_cost
    dysfunction["annual_cost"] = annual_cost
    return dysfunction
