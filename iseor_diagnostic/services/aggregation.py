"""Aggregation engine — domain, frequency and indicator x component views.

Every function here is a pure function of the dysfunction records it is
given. A record whose ``annual_cost`` is missing contributes zero cost but is
still counted.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Iterable

from iseor_diagnostic.enums import DOMAIN_TITLES, Component, Domain, Frequency, Indicator
from iseor_diagnostic.services.cost_engine import ZERO, CostComputationError, to_decimal

# Canonical ordering for frequency buckets
FREQUENCY_ORDER = {f.value: position for position, f in enumerate(Frequency)}


def _annual_cost(dysfunction: dict[str, Any]) -> Decimal:
    return to_decimal(dysfunction.get("annual_cost")) or ZERO


def _frequency_token(value: Any) -> str:
    """Return the stored frequency string exactly as recorded."""
    if isinstance(value, Frequency):
        return value.value
    return str(value)


def _domain_of(dysfunction: dict[str, Any]) -> Domain | None:
    value = dysfunction.get("domain")
    if value is None:
        return None
    try:
        return Domain(int(value))
    except (TypeError, ValueError) as exc:
        raise CostComputationError(f"Unknown domain {value!r}") from exc


def compute_domain_distribution(dysfunctions: Iterable[dict[str, Any]]) -> list[dict[str, Any]]:
    """Count dysfunctions and sum annual cost for each of the six domains.

    Dysfunctions without a domain are left out; there is no "unclassified"
    bucket. All six buckets are always returned, in domain order.
    """
    buckets = {
        domain: {
            "domain": int(domain),
            "title": DOMAIN_TITLES[domain],
            "count": 0,
            "annual_cost": ZERO,
        }
        for domain in Domain
    }

    for dysfunction in dysfunctions:
        domain = _domain_of(dysfunction)
        if domain is None:
            continue
        bucket = buckets[domain]
        bucket["count"] += 1
        bucket["annual_cost"] += _annual_cost(dysfunction)

    return [buckets[domain] for domain in Domain]


def compute_frequency_distribution(
    dysfunctions: Iterable[dict[str, Any]],
) -> dict[str, dict[str, Any]]:
    """Group dysfunctions by their stored frequency token.

    Only frequencies actually present get an entry. Entries are ordered from
    most to least frequent so the output does not depend on input order.
    """
    distribution: dict[str, dict[str, Any]] = {}

    for dysfunction in dysfunctions:
        token = _frequency_token(dysfunction.get("frequency"))
        entry = distribution.setdefault(token, {"count": 0, "annual_cost": ZERO})
        entry["count"] += 1
        entry["annual_cost"] += _annual_cost(dysfunction)

    ordered = sorted(distribution, key=lambda t: (FREQUENCY_ORDER.get(t, len(FREQUENCY_ORDER)), t))
    return {token: distribution[token] for token in ordered}


def empty_indicator_component_table() -> dict[str, dict[str, Decimal]]:
    """Return the 5x4 grid with every cell at zero."""
    return {
        indicator.value: {component.value: ZERO for component in Component}
        for indicator in Indicator
    }


def compute_indicator_component_table(
    dysfunctions: Iterable[dict[str, Any]],
) -> dict[str, dict[str, Decimal]]:
    """Cross-tabulate annual cost by indicator (rows) and component (columns).

    A dysfunction adds its full annual cost to every cell where both the
    indicator and the component flag are set. Costs are not split between
    cells, so the grid total can exceed the sum of annual costs.
    """
    table = empty_indicator_component_table()

    for dysfunction in dysfunctions:
        indicators = [i for i in Indicator if dysfunction.get(i.field)]
        components = [c for c in Component if dysfunction.get(c.field)]
        if not indicators or not components:
            continue

        cost = _annual_cost(dysfunction)
        for indicator in indicators:
            row = table[indicator.value]
            for component in components:
                row[component.value] += cost

    return table


def table_total(table: dict[str, dict[str, Decimal]]) -> Decimal:
    """Sum every cell of an indicator x component table."""
    return sum((cell for row in table.values() for cell in row.values()), ZERO)


def compute_flag_distribution(dysfunctions: Iterable[dict[str, Any]]) -> dict[str, dict[str, int]]:
    """Count how many dysfunctions carry each indicator and each component flag."""
    indicators = {indicator.value: 0 for indicator in Indicator}
    components = {component.value: 0 for component in Component}

    for dysfunction in dysfunctions:
        for indicator in Indicator:
            if dysfunction.get(indicator.field):
                indicators[indicator.value] += 1
        for component in Component:
            if dysfunction.get(component.field):
                components[component.value] += 1

    return {"indicators": indicators, "components": components}
