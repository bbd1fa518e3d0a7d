"""Database models for the ISEOR diagnostic service."""

from iseor_diagnostic.models.base import Base
from iseor_diagnostic.models.session import DiagnosticSession
from iseor_diagnostic.models.reference import ReferenceItem
from iseor_diagnostic.models.dysfunction import Dysfunction

__all__ = [
    "Base",
    "DiagnosticSession",
    "ReferenceItem",
    "Dysfunction",
]
