"""Closed enumerations shared by models, schemas, services and routers."""

from __future__ import annotations

from enum import Enum, IntEnum


class Frequency(str, Enum):
    """How often a dysfunction occurs."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"
    ONE_OFF = "one_off"


class Domain(IntEnum):
    """The six ISEOR analysis domains."""

    WORKING_CONDITIONS = 1
    WORK_ORGANISATION = 2
    COMMUNICATION = 3
    TIME_MANAGEMENT = 4
    INTEGRATED_TRAINING = 5
    STRATEGIC_IMPLEMENTATION = 6


DOMAIN_TITLES = {
    Domain.WORKING_CONDITIONS: "Working conditions",
    Domain.WORK_ORGANISATION: "Work organisation",
    Domain.COMMUNICATION: "Communication-coordination-cooperation",
    Domain.TIME_MANAGEMENT: "Time management",
    Domain.INTEGRATED_TRAINING: "Integrated training",
    Domain.STRATEGIC_IMPLEMENTATION: "Strategic implementation",
}


class Indicator(str, Enum):
    """Outcome signals a dysfunction may be tagged with (rows of the 5x4 table)."""

    ABSENTEEISM = "absenteeism"
    ACCIDENTS = "accidents"
    TURNOVER = "turnover"
    DEFECTS = "defects"
    PRODUCTIVITY_GAPS = "productivity_gaps"

    @property
    def field(self) -> str:
        return f"indicator_{self.value}"


class Component(str, Enum):
    """Cost mechanisms a dysfunction may be tagged with (columns of the 5x4 table)."""

    EXCESS_TIME = "excess_time"
    EXCESS_CONSUMPTION = "excess_consumption"
    OVERPRODUCTION = "overproduction"
    NON_PRODUCTION = "non_production"

    @property
    def field(self) -> str:
        return f"component_{self.value}"


INDICATOR_FIELDS = [i.field for i in Indicator]
COMPONENT_FIELDS = [c.field for c in Component]


class Priority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class SessionStatus(str, Enum):
    PREPARATION = "preparation"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    ARCHIVED = "archived"


class InterviewMode(str, Enum):
    FREE = "free"
    GUIDED = "guided"
    MIXED = "mixed"


class EntryMode(str, Enum):
    FREE = "free"
    GUIDED = "guided"
    REFERENCE = "reference"


class CallerRole(str, Enum):
    CONSULTANT = "consultant"
    ADMIN = "admin"
