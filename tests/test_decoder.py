import io
import struct
from pathlib import Path

import pytest

from fake_pgdata import EPHEMERAL, pack_name, pack_state
from replslot_core.models import Persistency, SlotDescriptor, SlotFailure, SlotType
from replslot_core.protocol import (
    PAYLOAD_V2_FMT,
    PAYLOAD_V2_LEN,
    PREFIX_FMT,
    PREFIX_LEN,
    SLOT_MAGIC,
)
from replslot_reader.decoder import decode_state, read_slot_dir

STATE = Path("/data/pg_replslot/foo/state")


def decode(data: bytes):
    return decode_state(io.BytesIO(data), STATE)


def test_record_size_matches_server_layout():
    assert struct.calcsize(PREFIX_FMT) == PREFIX_LEN == 16
    assert struct.calcsize(PAYLOAD_V2_FMT) == PAYLOAD_V2_LEN == 160


def test_physical_slot():
    out = decode(pack_state("foo", restart_lsn=0x16B3748, checksum=0xDEADBEEF))
    assert isinstance(out, SlotDescriptor)
    assert out.ok
    assert out.slot_dir == "foo"
    assert out.name == "foo"
    assert out.slot_type is SlotType.PHYSICAL
    assert out.database is None
    assert out.persistency is Persistency.PERSISTENT
    assert out.version == 2
    assert out.length == 160
    assert out.restart_lsn == 0x16B3748
    assert out.plugin is None
    # Stored, not verified
    assert out.checksum == 0xDEADBEEF


def test_logical_slot():
    out = decode(
        pack_state(
            "cdc",
            database=16384,
            persistency=EPHEMERAL,
            plugin="test_decoding",
            xmin=0,
            catalog_xmin=742,
            confirmed_flush=0x103000060,
        )
    )
    assert out.slot_type is SlotType.LOGICAL
    assert out.database == 16384
    assert out.persistency is Persistency.EPHEMERAL
    assert out.plugin == "test_decoding"
    assert out.catalog_xmin == 742
    assert out.confirmed_flush == 0x103000060


def test_descriptor_is_immutable():
    out = decode(pack_state("foo"))
    with pytest.raises(AttributeError):
        out.name = "bar"


def test_truncated_prefix():
    out = decode(pack_state("foo")[:10])
    assert isinstance(out, SlotFailure)
    assert out.code == "E_SLOT_TRUNCATED"
    assert "read 10 of 16" in out.reason


def test_empty_file():
    out = decode(b"")
    assert out.code == "E_SLOT_TRUNCATED"
    assert "read 0 of 16" in out.reason


def test_bad_magic_reports_both_values():
    out = decode(pack_state("foo", magic=0))
    assert out.code == "E_SLOT_MAGIC"
    assert f"0 instead of {SLOT_MAGIC}" in out.reason


def test_unsupported_version():
    out = decode(pack_state("foo", version=99))
    assert out.code == "E_SLOT_VERSION"
    assert "unsupported version 99" in out.reason


def test_version_one_is_unsupported():
    out = decode(pack_state("foo", version=1))
    assert out.code == "E_SLOT_VERSION"


def test_corrupt_length():
    out = decode(pack_state("foo", length=PAYLOAD_V2_LEN + 4))
    assert out.code == "E_SLOT_LENGTH"
    assert f"corrupted length {PAYLOAD_V2_LEN + 4}" in out.reason


def test_magic_checked_before_version_and_length():
    out = decode(pack_state("foo", magic=1, version=99, length=0))
    assert out.code == "E_SLOT_MAGIC"


def test_truncated_payload():
    out = decode(pack_state("foo")[:100])
    assert out.code == "E_SLOT_TRUNCATED"
    assert "read 84 of 160" in out.reason


def test_reads_stop_at_declared_length():
    data = pack_state("foo") + b"trailing junk"
    buf = io.BytesIO(data)
    out = decode_state(buf, STATE)
    assert out.ok
    assert buf.tell() == PREFIX_LEN + PAYLOAD_V2_LEN


def test_name_ignores_bytes_after_terminator():
    payload = struct.pack(
        PAYLOAD_V2_FMT,
        b"foo\x00garbage".ljust(64, b"\x00"),
        0, 0, 0, 0, 0, 0,
        pack_name(""),
    )
    data = struct.pack(PREFIX_FMT, SLOT_MAGIC, 0, 2, PAYLOAD_V2_LEN) + payload
    assert decode(data).name == "foo"


def test_unterminated_name_is_rejected():
    payload = struct.pack(PAYLOAD_V2_FMT, b"x" * 64, 0, 0, 0, 0, 0, 0, pack_name(""))
    data = struct.pack(PREFIX_FMT, SLOT_MAGIC, 0, 2, PAYLOAD_V2_LEN) + payload
    out = decode(data)
    assert out.code == "E_SLOT_NAME"
    assert "slot name is not NUL-terminated" in out.reason


def test_unknown_persistency_passes_through():
    with pytest.warns(UserWarning, match="Unknown persistency value 7"):
        out = decode(pack_state("foo", persistency=7))
    assert out.ok
    assert out.persistency == 7
    assert not isinstance(out.persistency, Persistency)


def test_read_slot_dir_missing_state(tmp_path):
    slot = tmp_path / "foo"
    slot.mkdir()
    out = read_slot_dir(slot)
    assert out.code == "E_SLOT_UNREADABLE"
    assert out.slot_dir == "foo"
    assert "No such file or directory" in out.reason


def test_read_slot_dir_state_is_directory(tmp_path):
    (tmp_path / "foo" / "state").mkdir(parents=True)
    out = read_slot_dir(tmp_path / "foo")
    assert out.code == "E_SLOT_UNREADABLE"


def test_read_slot_dir_uses_directory_name(tmp_path):
    slot = tmp_path / "dirname"
    slot.mkdir()
    (slot / "state").write_bytes(pack_state("slotname"))
    out = read_slot_dir(slot)
    assert out.slot_dir == "dirname"
    assert out.name == "slotname"


@pytest.mark.parametrize(
    "data, code",
    [
        (pack_state("foo"), None),
        (pack_state("foo", magic=0), "E_SLOT_MAGIC"),
        (pack_state("foo", version=99), "E_SLOT_VERSION"),
        (pack_state("foo", length=12), "E_SLOT_LENGTH"),
        (pack_state("foo")[:10], "E_SLOT_TRUNCATED"),
        (pack_state("foo")[:100], "E_SLOT_TRUNCATED"),
        (
            struct.pack(PREFIX_FMT, SLOT_MAGIC, 0, 2, PAYLOAD_V2_LEN)
            + struct.pack(PAYLOAD_V2_FMT, b"x" * 64, 0, 0, 0, 0, 0, 0, pack_name("")),
            "E_SLOT_NAME",
        ),
    ],
)
def test_state_file_closed_on_every_path(tmp_path, monkeypatch, data, code):
    import replslot_reader.decoder as decoder

    opened = []

    def tracking_open(*args, **kwargs):
        f = open(*args, **kwargs)
        opened.append(f)
        return f

    monkeypatch.setattr(decoder, "open", tracking_open, raising=False)

    slot = tmp_path / "foo"
    slot.mkdir()
    (slot / "state").write_bytes(data)

    out = read_slot_dir(slot)
    assert (out.code if not out.ok else None) == code
    assert len(opened) == 1
    assert opened[0].closed
