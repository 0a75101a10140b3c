"""Slot state file decoder.

One call per slot directory, one outcome per call. Damage in a state file is
returned as a SlotFailure, never raised, so the directory scan always reaches
the next slot.
"""
from __future__ import annotations

import struct
from pathlib import Path
from typing import BinaryIO
from warnings import warn

from replslot_core.models import (
    Persistency,
    SlotDescriptor,
    SlotFailure,
    SlotOutcome,
    SlotType,
)
from replslot_core.protocol import (
    INVALID_OID,
    MAX_SLOT_VERSION,
    MIN_SLOT_VERSION,
    PAYLOAD_FORMATS,
    PAYLOAD_SIZES,
    PREFIX_FMT,
    PREFIX_LEN,
    SLOT_MAGIC,
    STATE_FILE,
)


class _BadNameBlock(ValueError):
    pass


def _decode_name(block: bytes, field: str) -> str:
    """Text up to the first NUL; anything after the terminator is ignored."""
    end = block.find(b"\x00")
    if end == -1:
        raise _BadNameBlock(f"{field} is not NUL-terminated within {len(block)} bytes")
    return block[:end].decode("utf-8", errors="replace")


def _persistency(raw: int, path: Path) -> Persistency | int:
    # The server never range-checks this field on load; pass unknown values through.
    try:
        return Persistency(raw)
    except ValueError:
        warn(f"Unknown persistency value {raw} in {path}")
        return raw


def decode_state(fp: BinaryIO, path: Path, slot_dir: str | None = None) -> SlotOutcome:
    """Decode one state record from an open binary stream.

    Stages run in order and stop at the first violation: prefix read, magic,
    version range, declared length, payload read.
    """
    path = Path(path)
    if slot_dir is None:
        slot_dir = path.parent.name

    def fail(code: str, reason: str) -> SlotFailure:
        return SlotFailure(slot_dir=slot_dir, code=code, reason=reason, path=path)

    try:
        # 1. Version independent part
        prefix = fp.read(PREFIX_LEN)
        if len(prefix) != PREFIX_LEN:
            return fail(
                "E_SLOT_TRUNCATED",
                f'could not read file "{path}", read {len(prefix)} of {PREFIX_LEN}',
            )

        magic, checksum, version, length = struct.unpack(PREFIX_FMT, prefix)

        # 2. Sanity checks
        if magic != SLOT_MAGIC:
            return fail(
                "E_SLOT_MAGIC",
                f'replication slot file "{path}" has wrong magic number: '
                f"{magic} instead of {SLOT_MAGIC}",
            )
        if version < MIN_SLOT_VERSION or version > MAX_SLOT_VERSION:
            return fail(
                "E_SLOT_VERSION",
                f'replication slot file "{path}" has unsupported version {version}',
            )
        expected_len = PAYLOAD_SIZES.get(version)
        if length != expected_len:
            return fail(
                "E_SLOT_LENGTH",
                f'replication slot file "{path}" has corrupted length {length}',
            )

        # 3. Payload read, never past the declared boundary
        payload = fp.read(length)
        if len(payload) != length:
            return fail(
                "E_SLOT_TRUNCATED",
                f'could not read file "{path}", read {len(payload)} of {length}',
            )
    except OSError as e:
        return fail(
            "E_SLOT_UNREADABLE",
            f"Unable to read replication slot file {path}:\n{e.strerror or e}",
        )

    (
        name_block,
        database,
        persistency,
        xmin,
        catalog_xmin,
        restart_lsn,
        confirmed_flush,
        plugin_block,
    ) = struct.unpack(PAYLOAD_FORMATS[version], payload)

    try:
        name = _decode_name(name_block, "slot name")
        plugin = _decode_name(plugin_block, "plugin name")
    except _BadNameBlock as e:
        return fail("E_SLOT_NAME", f'replication slot file "{path}": {e}')

    if database == INVALID_OID:
        slot_type, db_oid = SlotType.PHYSICAL, None
    else:
        slot_type, db_oid = SlotType.LOGICAL, int(database)

    return SlotDescriptor(
        slot_dir=slot_dir,
        name=name,
        slot_type=slot_type,
        version=int(version),
        length=int(length),
        persistency=_persistency(persistency, path),
        database=db_oid,
        checksum=int(checksum),
        xmin=int(xmin),
        catalog_xmin=int(catalog_xmin),
        restart_lsn=int(restart_lsn),
        confirmed_flush=int(confirmed_flush),
        plugin=plugin or None,
    )


def read_slot_dir(slot_dir: Path) -> SlotOutcome:
    """Decode <slot_dir>/state into a SlotDescriptor or a SlotFailure."""
    slot_dir = Path(slot_dir)
    path = slot_dir / STATE_FILE
    try:
        f = open(path, "rb")
    except OSError as e:
        return SlotFailure(
            slot_dir=slot_dir.name,
            code="E_SLOT_UNREADABLE",
            reason=f"Unable to open replication slot file {path}:\n{e.strerror or e}",
            path=path,
        )
    with f:
        return decode_state(f, path, slot_dir.name)
