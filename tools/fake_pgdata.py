"""Generate a synthetic PostgreSQL data directory with replication slots.

Usage:
    python tools/fake_pgdata.py OUT_DIR [--damaged] [--pg-version 16]

Writes PG_VERSION and pg_replslot/<slot>/state files in the host byte
order, the same layout the server writes. With --damaged, adds one slot per
kind of damage the reader knows how to report.
"""
import struct
import sys
from pathlib import Path

from replslot_core.protocol import (
    NAMEDATALEN,
    PAYLOAD_V2_FMT,
    PAYLOAD_V2_LEN,
    PG_VERSION_FILE,
    PREFIX_FMT,
    SLOT_MAGIC,
    SLOT_ROOT_DIR,
    STATE_FILE,
)

PERSISTENT, EPHEMERAL = 0, 1


def pack_name(name: str) -> bytes:
    raw = name.encode("utf-8")
    if len(raw) >= NAMEDATALEN:
        raise ValueError(f"name too long: {name!r}")
    return raw.ljust(NAMEDATALEN, b"\x00")


def pack_state(
    name,
    database=0,
    persistency=PERSISTENT,
    plugin="",
    xmin=0,
    catalog_xmin=0,
    restart_lsn=0,
    confirmed_flush=0,
    magic=SLOT_MAGIC,
    version=2,
    length=PAYLOAD_V2_LEN,
    checksum=0,
):
    """Build a complete state record. Checksum is written as given, never computed."""
    payload = struct.pack(
        PAYLOAD_V2_FMT,
        pack_name(name),
        database,
        persistency,
        xmin,
        catalog_xmin,
        restart_lsn,
        confirmed_flush,
        pack_name(plugin),
    )
    return struct.pack(PREFIX_FMT, magic, checksum, version, length) + payload


def write_slot(root, dirname, data):
    slot = Path(root) / SLOT_ROOT_DIR / dirname
    slot.mkdir(parents=True, exist_ok=True)
    (slot / STATE_FILE).write_bytes(data)
    return slot


def generate(out_dir, damaged=False, pg_version="16"):
    root = Path(out_dir)
    (root / SLOT_ROOT_DIR).mkdir(parents=True, exist_ok=True)
    (root / PG_VERSION_FILE).write_text(pg_version + "\n")

    write_slot(root, "standby_1", pack_state("standby_1", restart_lsn=0x0000000103000060))
    write_slot(
        root,
        "cdc_orders",
        pack_state(
            "cdc_orders",
            database=16384,
            plugin="pgoutput",
            catalog_xmin=742,
            restart_lsn=0x0000000103000028,
            confirmed_flush=0x0000000103000060,
        ),
    )

    if damaged:
        write_slot(root, "empty", b"")
        write_slot(root, "bad_magic", pack_state("bad_magic", magic=0))
        write_slot(root, "future", pack_state("future", version=99))
        write_slot(root, "short_len", pack_state("short_len", length=PAYLOAD_V2_LEN - 8))
        write_slot(root, "torn", pack_state("torn")[:100])
        # Stray file, not a slot
        (root / SLOT_ROOT_DIR / "README").write_text("not a slot\n")

    print(f"GENERATED: {root}")
    return root


if __name__ == "__main__":
    args = [a for a in sys.argv[1:] if a]

    damaged = "--damaged" in args
    args = [a for a in args if a != "--damaged"]

    pg_version = "16"
    if "--pg-version" in args:
        i = args.index("--pg-version")
        if i + 1 >= len(args):
            raise SystemExit("--pg-version requires a value")
        pg_version = args[i + 1]
        args = args[:i] + args[i + 2:]

    if not args:
        raise SystemExit("Usage: fake_pgdata.py OUT_DIR [--damaged] [--pg-version N]")

    generate(args[0], damaged=damaged, pg_version=pg_version)
