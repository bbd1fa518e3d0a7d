"""ISEOR reference catalog: the static dysfunction templates, grouped by domain."""

from __future__ import annotations

import uuid
from typing import Any

import structlog

from iseor_diagnostic.enums import (
    DOMAIN_TITLES,
    Component,
    Domain,
    EntryMode,
    Frequency,
    Indicator,
    Priority,
)
from iseor_diagnostic.store import DataStore

logger = structlog.get_logger()

# Placeholder values for dysfunctions created from catalog items; the
# consultant refines them afterwards.
PLACEHOLDER_FREQUENCY = Frequency.MONTHLY
PLACEHOLDER_MINUTES = 30
PLACEHOLDER_PEOPLE = 1

MIN_SEARCH_LENGTH = 3

# Stable namespace so catalog ids survive reseeding
CATALOG_NAMESPACE = uuid.UUID("5b0e7c1e-2a4d-4f3b-9d59-1f0c6a2e8b71")

_I = Indicator
_C = Component

# (code, title, description, guiding questions, examples, default indicators, default components)
ISEOR_CATALOG: list[tuple[str, str, str, list[str], list[str], list[Indicator], list[Component]]] = [
    # Domain 1: Working conditions
    ("101", "Layout and fitting-out of premises",
     "Spatial and functional organisation of work spaces",
     ["Are the premises suited to the activities?", "Does the layout ease circulation?"],
     ["Cramped spaces", "Poor circulation", "No break areas"],
     [], []),
    ("102", "Equipment and supplies",
     "Availability and quality of tools, equipment and supplies",
     ["Is the equipment suited to the tasks?", "Is equipment maintained?"],
     ["Obsolete equipment", "Stock shortages", "Unsuitable tools"],
     [_I.DEFECTS, _I.PRODUCTIVITY_GAPS], [_C.EXCESS_TIME, _C.EXCESS_CONSUMPTION]),
    ("103", "Nuisances",
     "Disruptive environmental factors",
     ["Is there noise nuisance?", "Do nuisances affect concentration?"],
     ["Excessive noise", "Chemical odours", "Vibrations"],
     [], []),
    ("104", "Physical working conditions",
     "Physical environment: temperature, lighting, ventilation",
     ["Is the temperature comfortable?", "Is the lighting sufficient?"],
     ["Excessive heat", "Insufficient lighting", "Stale air"],
     [_I.ABSENTEEISM, _I.DEFECTS], [_C.EXCESS_TIME, _C.NON_PRODUCTION]),
    ("105", "Physical workload",
     "Physical effort required and ergonomics",
     ["Are workstations ergonomic?", "Are heavy loads carried?"],
     ["Awkward postures", "Heavy loads", "Repetitive movements"],
     [_I.ACCIDENTS], [_C.EXCESS_TIME, _C.NON_PRODUCTION]),
    ("106", "Working hours",
     "Temporal organisation of work",
     ["Are working hours suitable?", "Is there flexibility?"],
     ["Rigid hours", "Excessive overtime"],
     [_I.ABSENTEEISM, _I.PRODUCTIVITY_GAPS], [_C.EXCESS_TIME]),
    ("107", "Working atmosphere",
     "Social and relational climate",
     ["Is the atmosphere good?", "Are there tensions?"],
     ["Tension between colleagues", "Lack of solidarity"],
     [], []),
    # Domain 2: Work organisation
    ("201", "Distribution of tasks, missions and functions",
     "Distribution and balancing of responsibilities",
     ["Is the distribution fair?", "Are missions clear?"],
     ["Some positions overloaded", "Poorly defined missions", "Duplicated tasks"],
     [_I.PRODUCTIVITY_GAPS, _I.TURNOVER], [_C.EXCESS_TIME, _C.NON_PRODUCTION]),
    ("202", "Regulation of absenteeism",
     "Handling of absences and their impact",
     ["How are absences handled?", "Are absent staff replaced?"],
     ["No replacements", "Overload during absences"],
     [_I.ABSENTEEISM], [_C.EXCESS_TIME, _C.NON_PRODUCTION]),
    ("203", "Interest in the work",
     "Motivation and engagement",
     ["Is the work stimulating?", "Are there career prospects?"],
     ["Monotonous tasks", "No prospects"],
     [], []),
    ("204", "Autonomy at work",
     "Degree of independence and empowerment",
     ["Is there room for manoeuvre?", "Can people take initiatives?"],
     ["Excessive control", "Lack of initiative"],
     [], []),
    ("205", "Workload",
     "Volume and intensity of tasks",
     ["Is the workload realistic?", "Are deadlines achievable?"],
     ["Chronic overload", "Impossible deadlines"],
     [_I.PRODUCTIVITY_GAPS, _I.TURNOVER], [_C.EXCESS_TIME, _C.OVERPRODUCTION]),
    ("206", "Rules and procedures",
     "Clarity and relevance of rules",
     ["Are procedures clear?", "Are they appropriate?"],
     ["Obsolete procedures", "Excessive bureaucracy"],
     [_I.DEFECTS, _I.PRODUCTIVITY_GAPS], [_C.EXCESS_TIME, _C.OVERPRODUCTION]),
    ("207", "Organisation chart",
     "Hierarchical and functional structure",
     ["Is the organisation chart clear?", "Are there power conflicts?"],
     ["Unclear organisation chart", "Dual reporting lines"],
     [], []),
    # Domain 3: Communication-coordination-cooperation
    ("301", "Communication within the department",
     "Communication, coordination and cooperation within the department",
     ["Does internal communication flow?", "Are there regular meetings?"],
     ["Too few meetings", "Blocked information"],
     [_I.DEFECTS, _I.PRODUCTIVITY_GAPS], [_C.EXCESS_TIME, _C.NON_PRODUCTION]),
    ("302", "Relations with neighbouring departments",
     "Coordination between departments",
     ["Are inter-departmental relations good?", "Are there conflicts?"],
     ["Conflicts between departments", "Excessive silos"],
     [_I.PRODUCTIVITY_GAPS, _I.DEFECTS], [_C.EXCESS_TIME, _C.OVERPRODUCTION]),
    ("303", "Communication between network and head office",
     "Communication between central and local structures",
     ["Are exchanges regular?", "Is feedback heard?"],
     ["Head office does not listen", "Top-down communication only"],
     [], []),
    ("305", "Communication between parent company and subsidiary",
     "Relations and coordination within groups",
     ["Are group relations harmonious?", "Is there enough autonomy?"],
     ["Excessive group control", "Lack of autonomy"],
     [], []),
    ("306", "Communication within the management team",
     "Coordination within management",
     ["Is the management team united?", "Are decisions collective?"],
     ["Conflicts in management", "Contradictory decisions"],
     [], []),
    ("307", "Communication between elected officials and civil servants",
     "Relations between elected officials and the administration",
     ["Are relations healthy?", "Is there political interference?"],
     ["Political interference", "Poorly defined roles"],
     [], []),
    ("308", "Communication arrangements",
     "Communication tools and methods",
     ["Are communication tools effective?", "Are there consultation bodies?"],
     ["Unsuitable tools", "Non-functional bodies"],
     [_I.PRODUCTIVITY_GAPS], [_C.EXCESS_TIME, _C.NON_PRODUCTION]),
    ("309", "Transmission of information",
     "Circulation and sharing of information",
     ["Does information arrive on time?", "Is it complete?"],
     ["Late information", "Incomplete data"],
     [_I.DEFECTS, _I.PRODUCTIVITY_GAPS], [_C.EXCESS_TIME, _C.NON_PRODUCTION]),
    ("310", "Vertical communication",
     "Communication along the hierarchy",
     ["Does hierarchical communication work?", "Can issues be raised?"],
     ["One-way communication", "Inaccessible management"],
     [], []),
    ("311", "Horizontal communication",
     "Communication between peers",
     ["Is collaboration between colleagues good?", "Is there mutual help?"],
     ["Lack of collaboration", "Excessive individualism"],
     [], []),
    # Domain 4: Time management
    ("401", "Meeting deadlines",
     "Ability to meet due dates",
     ["Are deadlines met?", "Are there recurring delays?"],
     ["Systematic delays", "Unrealistic deadlines"],
     [_I.PRODUCTIVITY_GAPS], [_C.EXCESS_TIME, _C.NON_PRODUCTION]),
    ("402", "Planning and scheduling of activities",
     "Temporal organisation of tasks",
     ["Is there any planning?", "Are priorities defined?"],
     ["No planning", "Shifting priorities"],
     [_I.PRODUCTIVITY_GAPS], [_C.EXCESS_TIME, _C.OVERPRODUCTION]),
    ("403", "Poorly performed tasks",
     "Neglected or postponed activities",
     ["Are some tasks neglected?", "Are tasks constantly postponed?"],
     ["Postponed tasks", "Responsibilities not assumed"],
     [_I.PRODUCTIVITY_GAPS, _I.TURNOVER], [_C.EXCESS_TIME, _C.OVERPRODUCTION]),
    ("404", "Factors disrupting time management",
     "Elements that disorganise planning",
     ["What are the disruptors?", "Are there too many interruptions?"],
     ["Constant interruptions", "False emergencies"],
     [_I.PRODUCTIVITY_GAPS], [_C.EXCESS_TIME, _C.NON_PRODUCTION]),
    # Domain 5: Integrated training
    ("501", "Training-job fit",
     "Match between training and the position",
     ["Does training match the position?", "Are there skill gaps?"],
     ["Unsuitable training", "Skill gaps"],
     [_I.DEFECTS, _I.TURNOVER], [_C.EXCESS_TIME, _C.NON_PRODUCTION]),
    ("502", "Training needs",
     "Identification of training needs",
     ["Are needs identified?", "Are requests listened to?"],
     ["Unidentified needs", "Ignored requests"],
     [_I.DEFECTS, _I.PRODUCTIVITY_GAPS], [_C.EXCESS_TIME, _C.NON_PRODUCTION]),
    ("503", "Available skills",
     "Inventory and recognition of skills",
     ["Are skills known?", "Are talents recognised?"],
     ["Unknown skills", "Unrecognised talent"],
     [_I.TURNOVER, _I.DEFECTS], [_C.EXCESS_TIME, _C.NON_PRODUCTION]),
    ("504", "Training arrangements",
     "Organisation and means of training",
     ["Are arrangements suitable?", "Are there enough resources?"],
     ["Unsuitable arrangements", "Insufficient resources"],
     [], []),
    ("505", "Training and technical change",
     "Support for technological change",
     ["Are changes supported?", "Is training provided beforehand?"],
     ["Unsupported changes", "Late training"],
     [], []),
    # Domain 6: Strategic implementation
    ("601", "Strategic orientations",
     "Definition and communication of the strategy",
     ["Is the strategy clear?", "Is there a shared vision?"],
     ["Vague strategy", "Vision not shared"],
     [_I.PRODUCTIVITY_GAPS], [_C.NON_PRODUCTION, _C.OVERPRODUCTION]),
    ("602", "Authors of the strategy",
     "Strategy-making process",
     ["Who takes part in drafting it?", "Are stakeholders involved?"],
     ["Drafted behind closed doors", "Lack of consultation"],
     [_I.PRODUCTIVITY_GAPS], [_C.EXCESS_TIME, _C.NON_PRODUCTION]),
    ("603", "Cascading and organisation of strategic implementation",
     "Deployment of the strategy",
     ["Is the strategy cascaded?", "Is there a deployment plan?"],
     ["No cascading", "Haphazard deployment"],
     [_I.PRODUCTIVITY_GAPS], [_C.NON_PRODUCTION, _C.OVERPRODUCTION]),
    ("604", "Tools for strategic implementation",
     "Strategic steering instruments",
     ["Which steering tools exist?", "Are there dashboards?"],
     ["Unsuitable tools", "No dashboards"],
     [], []),
    ("605", "Information system",
     "Information infrastructure",
     ["Does the information system perform?", "Is the data reliable?"],
     ["Obsolete system", "Unreliable data"],
     [], []),
    ("606", "Means of strategic implementation",
     "Resources allocated to the strategy",
     ["Are the means sufficient?", "Is there a dedicated budget?"],
     ["Insufficient means", "Inadequate budget"],
     [], []),
    ("607", "Personnel management",
     "Human resources policy",
     ["Is HR management aligned with the strategy?", "Are practices fair?"],
     ["HR not aligned", "Vague HR policy"],
     [_I.TURNOVER, _I.ABSENTEEISM], [_C.EXCESS_TIME, _C.NON_PRODUCTION]),
    ("608", "Management style",
     "Managerial style and practices",
     ["Is management appropriate?", "Is there delegation?"],
     ["Authoritarian management", "No delegation"],
     [], []),
]


def build_reference_items(version: str = "1.0") -> list[dict[str, Any]]:
    """Build catalog records from :data:`ISEOR_CATALOG`.

    Ids are derived from the item code, so reseeding keeps them stable.
    """
    items = []
    order_by_domain: dict[int, int] = {}
    for code, title, description, questions, examples, indicators, components in ISEOR_CATALOG:
        domain = int(code[0])
        order_by_domain[domain] = order_by_domain.get(domain, 0) + 1
        items.append({
            "id": str(uuid.uuid5(CATALOG_NAMESPACE, code)),
            "code": code,
            "domain": domain,
            "title": title,
            "description": description,
            "guiding_questions": list(questions),
            "examples": list(examples),
            "default_indicators": [i.value for i in indicators],
            "default_components": [c.value for c in components],
            "display_order": order_by_domain[domain],
            "active": True,
            "version": version,
        })
    return items


def group_by_domain(items: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Group catalog items under the six domains; empty domains are kept."""
    return [
        {
            "domain": int(domain),
            "title": DOMAIN_TITLES[domain],
            "items": [i for i in items if i["domain"] == domain],
        }
        for domain in Domain
    ]


def search_items(items: list[dict[str, Any]], query: str, include_code: bool = True) -> list[dict[str, Any]]:
    """Case-insensitive substring search over title, description and code."""
    needle = query.strip().lower()
    fields = ("title", "description", "code") if include_code else ("title", "description")
    return [
        item for item in items
        if any(needle in (item.get(field) or "").lower() for field in fields)
    ]


def build_dysfunction_from_item(item: dict[str, Any], session_id: str) -> dict[str, Any]:
    """Pre-fill a dysfunction from a catalog item.

    Domain and default classification flags come from the item; frequency,
    duration and people affected are placeholders.
    """
    indicators = set(item.get("default_indicators") or [])
    components = set(item.get("default_components") or [])

    record: dict[str, Any] = {
        "session_id": session_id,
        "reference_item_id": item["id"],
        "description": item.get("description") or f"Dysfunction related to: {item['title']}",
        "frequency": PLACEHOLDER_FREQUENCY.value,
        "minutes_per_occurrence": PLACEHOLDER_MINUTES,
        "people_affected": PLACEHOLDER_PEOPLE,
        "domain": item["domain"],
        "entry_mode": EntryMode.REFERENCE.value,
        "priority": Priority.MEDIUM.value,
    }
    for indicator in Indicator:
        record[indicator.field] = indicator.value in indicators
    for component in Component:
        record[component.field] = component.value in components
    return record


def load_reference_catalog(store: DataStore, version: str = "1.0") -> int:
    """Seed (or reseed) the store with the official catalog; returns the item count."""
    items = build_reference_items(version)
    store.load_reference_items(items)
    logger.info("reference_catalog_loaded", item_count=len(items), version=version)
    return len(items)
