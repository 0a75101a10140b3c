ERRORS = {
  "E_SLOT_UNREADABLE": "Slot state file could not be opened or read",
  "E_SLOT_TRUNCATED": "Slot state file is shorter than its record",
  "E_SLOT_MAGIC": "Slot state file has the wrong magic number",
  "E_SLOT_VERSION": "Slot state file has an unsupported format version",
  "E_SLOT_LENGTH": "Slot state file declares a corrupted payload length",
  "E_SLOT_NAME": "Slot name block is not NUL-terminated",
}
