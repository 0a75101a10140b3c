"""Walk pg_replslot and decode every slot directory found there."""
from __future__ import annotations

import os
import stat
from pathlib import Path

from replslot_core.models import ScanReport
from replslot_core.protocol import SLOT_ROOT_DIR

from .decoder import read_slot_dir
from .errors import SlotDirectoryError


def _is_candidate(entry: os.DirEntry) -> bool:
    # Only entries we can positively identify as non-directories are skipped;
    # if stat itself fails the decoder gets to report why.
    try:
        st = os.stat(entry.path)
    except OSError:
        return True
    return stat.S_ISDIR(st.st_mode)


def scan_slots(data_dir: Path) -> ScanReport:
    """Decode every slot under <data_dir>/pg_replslot.

    Outcomes keep the order the directory listing returns them in. A slot
    that fails to decode is recorded and the scan moves on.
    """
    slot_root = Path(data_dir) / SLOT_ROOT_DIR
    report = ScanReport(slot_root=slot_root)

    try:
        it = os.scandir(slot_root)
    except OSError as e:
        raise SlotDirectoryError(
            f"Unable to open directory '{slot_root}': {e.strerror or e}"
        ) from e

    with it:
        for entry in it:
            if not _is_candidate(entry):
                continue
            report.append(read_slot_dir(Path(entry.path)))

    return report
