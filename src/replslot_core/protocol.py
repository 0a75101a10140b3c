"""Replication slot on-disk protocol constants.

Single source of truth for the slot state file layout and the directory
names the reader relies on. Mirrors ReplicationSlotOnDisk from the server's
src/include/replication/slot.h; keep it in step with the format versions
listed in PAYLOAD_SIZES.
"""

# Record magic ("format identifier")
SLOT_MAGIC = 0x1051CA1

# Format version 1 was withdrawn before 9.4 shipped; 2 is the only one on disk.
MIN_SLOT_VERSION = 2
MAX_SLOT_VERSION = 2

# Version independent prefix: [Magic(4) | Checksum(4) | Version(4) | Length(4)] = 16 bytes
# Host byte order, the server never byte-swaps this file.
PREFIX_FMT = "=IIII"
PREFIX_LEN = 16

NAMEDATALEN = 64

# Version 2 payload:
# [Name(64) | Database(4) | Persistency(4) | Xmin(4) | CatalogXmin(4)
#  | RestartLSN(8) | ConfirmedFlush(8) | Plugin(64)] = 160 bytes
PAYLOAD_V2_FMT = "=64sIiIIQQ64s"
PAYLOAD_V2_LEN = 160

# Payload layout per format version; a new version only needs an entry here
# and a bump of MAX_SLOT_VERSION.
PAYLOAD_FORMATS = {2: PAYLOAD_V2_FMT}
PAYLOAD_SIZES = {2: PAYLOAD_V2_LEN}

INVALID_OID = 0

# Data directory layout
SLOT_ROOT_DIR = "pg_replslot"
STATE_FILE = "state"
PG_VERSION_FILE = "PG_VERSION"

# Replication slots exist from 9.4 on
MIN_SERVER_VERSION = "9.4"
MIN_SERVER_VERSION_NUM = 90400
