"""Champion Go core - record layout, error kinds and record mutation."""
from .errors import ArchiveIOError, FormatError, NotFoundError
from .record import flip_board, flip_to_computer, saved_date, started_date, summarize

__all__ = [
    "ArchiveIOError",
    "FormatError",
    "NotFoundError",
    "flip_board",
    "flip_to_computer",
    "saved_date",
    "started_date",
    "summarize",
]
