"""Report renderers: the classic text listing and canonical JSON."""
from __future__ import annotations

import json

from replslot_core.models import (
    ScanReport,
    SlotDescriptor,
    SlotFailure,
    SlotType,
    format_lsn,
    persistency_label,
)

from .const import ERRORS

CANONICAL_JSON_KW = {"sort_keys": True, "separators": (",", ":"), "ensure_ascii": False}

NO_SLOTS = "No replication slots found"


def _render_slot(slot: SlotDescriptor) -> list[str]:
    lines = [slot.name, "-" * len(slot.name)]
    if slot.slot_type is SlotType.PHYSICAL:
        lines.append("  Type: physical")
    else:
        lines.append(f"  Type: logical; DB oid: {slot.database}")
        lines.append(f"  Plugin: {slot.plugin or ''}")
    lines.append(f"  Persistency: {persistency_label(slot.persistency)}")
    lines.append(f"  Version: {slot.version}")
    lines.append(f"  Length: {slot.length}")
    lines.append(f"  Restart LSN: {format_lsn(slot.restart_lsn)}")
    return lines


def _render_failure(failure: SlotFailure) -> list[str]:
    return [f'Unable to parse slot "{failure.slot_dir}":', failure.reason]


def render_text(report: ScanReport) -> str:
    if report.is_empty:
        return NO_SLOTS

    lines = [f"{report.count} replication slot(s) found", ""]
    for outcome in report:
        if isinstance(outcome, SlotFailure):
            lines.extend(_render_failure(outcome))
        else:
            lines.extend(_render_slot(outcome))
    lines.append("")
    return "\n".join(lines)


def outcome_to_dict(outcome) -> dict:
    if isinstance(outcome, SlotFailure):
        return {
            "slot_dir": outcome.slot_dir,
            "status": "FAILED",
            "code": outcome.code,
            "message": ERRORS[outcome.code],
            "error": outcome.reason,
        }
    return {
        "slot_dir": outcome.slot_dir,
        "status": "PARSED",
        "name": outcome.name,
        "type": outcome.slot_type.value,
        "persistency": persistency_label(outcome.persistency),
        "version": outcome.version,
        "length": outcome.length,
        "database": outcome.database,
        "plugin": outcome.plugin,
        "xmin": outcome.xmin,
        "catalog_xmin": outcome.catalog_xmin,
        "restart_lsn": format_lsn(outcome.restart_lsn),
        "confirmed_flush": format_lsn(outcome.confirmed_flush),
    }


def render_json(report: ScanReport) -> str:
    doc = {
        "slot_root": str(report.slot_root),
        "count": report.count,
        "parsed": len(report.parsed),
        "failed": len(report.failures),
        "slots": [outcome_to_dict(o) for o in report],
    }
    return json.dumps(doc, **CANONICAL_JSON_KW)
