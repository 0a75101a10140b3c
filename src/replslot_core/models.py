"""In-memory view of decoded replication slots and scan results."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from pathlib import Path


class SlotType(Enum):
    PHYSICAL = "physical"
    LOGICAL = "logical"


class Persistency(IntEnum):
    """Slot behaviour on release or crash.

    PERSISTENT slots are crash-safe; EPHEMERAL slots are dropped when released
    or after a restart.
    """

    PERSISTENT = 0
    EPHEMERAL = 1


def persistency_label(value: Persistency | int) -> str:
    if isinstance(value, Persistency):
        return value.name.lower()
    return f"unknown ({int(value)})"


def format_lsn(lsn: int) -> str:
    """Render a log position the way the server does: high/low 32 bits in hex."""
    return f"{lsn >> 32:X}/{lsn & 0xFFFFFFFF:X}"


@dataclass(frozen=True)
class SlotDescriptor:
    """A successfully decoded slot state file."""

    slot_dir: str
    name: str
    slot_type: SlotType
    version: int
    length: int
    persistency: Persistency | int
    database: int | None = None
    checksum: int = 0
    xmin: int = 0
    catalog_xmin: int = 0
    restart_lsn: int = 0
    confirmed_flush: int = 0
    plugin: str | None = None

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class SlotFailure:
    """A slot directory whose state file could not be decoded."""

    slot_dir: str
    code: str
    reason: str
    path: Path | None = None

    @property
    def ok(self) -> bool:
        return False


SlotOutcome = SlotDescriptor | SlotFailure


@dataclass
class ScanReport:
    """Outcomes of one scan, in directory enumeration order.

    Append-only: one outcome per visited slot directory.
    """

    slot_root: Path
    outcomes: list[SlotOutcome] = field(default_factory=list)

    def append(self, outcome: SlotOutcome) -> None:
        self.outcomes.append(outcome)

    @property
    def count(self) -> int:
        return len(self.outcomes)

    @property
    def is_empty(self) -> bool:
        return not self.outcomes

    @property
    def parsed(self) -> list[SlotDescriptor]:
        return [o for o in self.outcomes if isinstance(o, SlotDescriptor)]

    @property
    def failures(self) -> list[SlotFailure]:
        return [o for o in self.outcomes if isinstance(o, SlotFailure)]

    def __iter__(self):
        return iter(self.outcomes)

    def __len__(self) -> int:
        return len(self.outcomes)
