"""Fatal conditions. Anything raised from here ends the run."""


class ReplslotError(Exception):
    """Base class for conditions that abort a scan."""


class DataDirectoryError(ReplslotError):
    """The data directory is missing, unreadable or not a PostgreSQL directory."""


class SlotDirectoryError(ReplslotError):
    """pg_replslot could not be opened; there is nothing to scan."""


class UnsupportedServerVersion(ReplslotError):
    """The data directory predates replication slots.

    Not a failure of the tool: the CLI reports it and exits 0.
    """

    def __init__(self, data_dir, version, message: str):
        self.data_dir = data_dir
        self.version = version
        super().__init__(message)
