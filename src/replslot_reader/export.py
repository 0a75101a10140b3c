"""Write a scan report as a Parquet table."""
from __future__ import annotations

from pathlib import Path

import pandas as pd
import pyarrow as pa
import pyarrow.parquet as pq

from replslot_core.models import ScanReport, SlotFailure, persistency_label

REPORT_SCHEMA = pa.schema(
    [
        ("slot_dir", pa.string()),
        ("status", pa.string()),
        ("name", pa.string()),
        ("slot_type", pa.string()),
        ("persistency", pa.string()),
        ("version", pa.int32()),
        ("length", pa.int32()),
        ("database", pa.int64()),
        ("plugin", pa.string()),
        ("restart_lsn", pa.uint64()),
        ("confirmed_flush", pa.uint64()),
        ("error_code", pa.string()),
        ("error", pa.string()),
    ]
)


def _row(outcome) -> dict:
    if isinstance(outcome, SlotFailure):
        return {
            "slot_dir": outcome.slot_dir,
            "status": "FAILED",
            "error_code": outcome.code,
            "error": outcome.reason,
        }
    return {
        "slot_dir": outcome.slot_dir,
        "status": "PARSED",
        "name": outcome.name,
        "slot_type": outcome.slot_type.value,
        "persistency": persistency_label(outcome.persistency),
        "version": outcome.version,
        "length": outcome.length,
        "database": outcome.database,
        "plugin": outcome.plugin,
        "restart_lsn": outcome.restart_lsn,
        "confirmed_flush": outcome.confirmed_flush,
    }


# Nullable dtypes keep missing cells null without widening ints to float.
_PANDAS_DTYPES = {
    "version": "Int32",
    "length": "Int32",
    "database": "Int64",
    "restart_lsn": "UInt64",
    "confirmed_flush": "UInt64",
}


def write_report_parquet(report: ScanReport, out_path: Path) -> bool:
    """Write one row per outcome, in scan order. Returns False for an empty report."""
    if report.is_empty:
        return False

    rows = [_row(o) for o in report]
    df = pd.DataFrame(
        {
            col: pd.array([r.get(col) for r in rows], dtype=_PANDAS_DTYPES.get(col, "string"))
            for col in REPORT_SCHEMA.names
        }
    )

    out_path = Path(out_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    table = pa.Table.from_pandas(df, schema=REPORT_SCHEMA, preserve_index=False)
    pq.write_table(table, out_path)
    return True
