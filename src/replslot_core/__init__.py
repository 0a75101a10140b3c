"""Replication slot core - on-disk layout and decoded slot model."""
from .models import (
    Persistency,
    ScanReport,
    SlotDescriptor,
    SlotFailure,
    SlotOutcome,
    SlotType,
    format_lsn,
    persistency_label,
)

__all__ = [
    "Persistency",
    "ScanReport",
    "SlotDescriptor",
    "SlotFailure",
    "SlotOutcome",
    "SlotType",
    "format_lsn",
    "persistency_label",
]
