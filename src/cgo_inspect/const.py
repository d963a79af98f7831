ERRORS = {
  "E_ARCHIVE_MISSING": "Archive file missing",
  "E_ARCHIVE_INVALID": "Archive is not a readable zip",
  "E_ENTRY_SET": "Entry names added or dropped",
  "E_ENTRY_ORDER": "Entry order differs from reference",
  "E_PAYLOAD_MISMATCH": "Copied entry payload differs from reference",
  "E_SUBSTITUTION": "Expected exactly one substituted entry",
  "E_COMPRESSION": "Entry is not deflate-tagged at stored level",
  "E_RECORD_FORMAT": "Substituted payload is not a readable record",
}
