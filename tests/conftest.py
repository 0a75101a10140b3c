from pathlib import Path

import pytest

from fake_pgdata import pack_state, write_slot
from replslot_core.protocol import PG_VERSION_FILE, SLOT_ROOT_DIR


@pytest.fixture
def pgdata(tmp_path) -> Path:
    """Empty data directory: PG_VERSION plus an empty pg_replslot."""
    root = tmp_path / "pgdata"
    (root / SLOT_ROOT_DIR).mkdir(parents=True)
    (root / PG_VERSION_FILE).write_text("16\n")
    return root


@pytest.fixture
def add_slot(pgdata):
    """Write pg_replslot/<dirname>/state; bytes default to a valid physical slot."""
    def _add(dirname: str, data: bytes | None = None, **fields) -> Path:
        if data is None:
            data = pack_state(fields.pop("name", dirname), **fields)
        return write_slot(pgdata, dirname, data)
    return _add
