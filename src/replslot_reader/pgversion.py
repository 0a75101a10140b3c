"""PG_VERSION gate: refuse directories that are not PostgreSQL 9.4 or later."""
from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

from replslot_core.protocol import (
    MIN_SERVER_VERSION,
    MIN_SERVER_VERSION_NUM,
    PG_VERSION_FILE,
)

from .errors import DataDirectoryError, UnsupportedServerVersion

# "9.6" up to release 9.6, a bare major number from 10 on
_VERSION_RE = re.compile(r"\s*(\d+)(?:\.(\d+))?")


@dataclass(frozen=True)
class PgVersion:
    major: int
    minor: int

    @property
    def num(self) -> int:
        return self.major * 10000 + self.minor * 100

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}"


def parse_pg_version(text: str) -> PgVersion | None:
    m = _VERSION_RE.match(text)
    if m is None:
        return None
    return PgVersion(int(m.group(1)), int(m.group(2) or 0))


def check_pg_version(data_dir: Path) -> PgVersion:
    """Read <data_dir>/PG_VERSION and check replication slots can exist there."""
    data_dir = Path(data_dir)
    path = data_dir / PG_VERSION_FILE

    if not path.exists():
        raise DataDirectoryError(f"{data_dir} is not a PostgreSQL directory")

    try:
        text = path.read_text(encoding="ascii", errors="replace")
    except OSError as e:
        raise DataDirectoryError(f"Unable to read PG_VERSION file in {data_dir}") from e

    version = parse_pg_version(text)
    if version is None:
        raise DataDirectoryError(
            f"PG_VERSION file in {data_dir} does not contain a valid version number"
        )

    if version.num < MIN_SERVER_VERSION_NUM:
        raise UnsupportedServerVersion(
            data_dir,
            version,
            f"This data directory is for PostgreSQL {version}; "
            f"replication slots require {MIN_SERVER_VERSION} or later",
        )

    return version
