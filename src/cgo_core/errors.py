"""Error kinds raised by the swap pipeline."""


class FormatError(ValueError):
    """Record buffer too short or undecodable at a required offset."""


class NotFoundError(LookupError):
    """No archive entry matches the requested prefix or name."""


class ArchiveIOError(OSError):
    """Archive could not be opened, read or written."""
