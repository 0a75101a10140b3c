"""Query an exported slot report - list logical slots and unparsable slots."""
from __future__ import annotations

import sys
from pathlib import Path

import duckdb


def main() -> None:
    if len(sys.argv) < 2:
        print("Usage: python query.py <report.parquet>")
        print("Example: pg-replslot-reader -D $PGDATA --parquet slots.parquet && python query.py slots.parquet")
        sys.exit(1)

    report = Path(sys.argv[1])

    con = duckdb.connect(":memory:")
    con.execute(f"CREATE VIEW slots AS SELECT * FROM '{report}'")

    print("--- Logical slots by database ---\n")
    df = con.execute(
        """
        SELECT database, name, plugin, persistency
        FROM slots
        WHERE status = 'PARSED' AND slot_type = 'logical'
        ORDER BY database, name
        """
    ).fetchdf()
    if df.empty:
        print("No logical slots.")
    else:
        for _, row in df.iterrows():
            print(f"DB {row['database']}: {row['name']} ({row['plugin']}, {row['persistency']})")

    print("\n--- Unparsable slots ---\n")
    df = con.execute(
        "SELECT slot_dir, error_code, error FROM slots WHERE status = 'FAILED' ORDER BY slot_dir"
    ).fetchdf()
    if df.empty:
        print("None.")
    else:
        for _, row in df.iterrows():
            print(f"{row['slot_dir']}: {row['error_code']}")
            print(f"  {row['error'][:80]}")


if __name__ == "__main__":
    main()
