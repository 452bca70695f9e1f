"""Row normalization and import-log annotation."""

import logging
from typing import Any, Iterable, Optional, Sequence

from .models import ImportLogEntry, Row

logger = logging.getLogger(__name__)


def normalize_rows(raw_rows: Iterable[Sequence[Any]]) -> list[Row]:
    """
    Normalize uploaded rows for display.

    Missing values become empty strings; everything else is passed through
    as is, without trimming or type coercion.
    """
    return [["" if cell is None else cell for cell in row] for row in raw_rows]


def serial_number(row: Sequence[Any]) -> Any:
    """Return the serial number of a row, or None for a row without cells."""
    if not row:
        return None
    return row[0]


def same_serial(a: Any, b: Any) -> bool:
    """Exact serial number equality: ``1``, ``1.0``, ``True`` and ``"1"`` all differ."""
    return type(a) is type(b) and a == b


def _serial_key(serial_no: Any) -> Optional[tuple[type, Any]]:
    """Set key for a serial number, or None if it cannot be hashed."""
    try:
        hash(serial_no)
    except TypeError:
        return None
    return (type(serial_no), serial_no)


def was_imported(row: Sequence[Any], import_log: Iterable[ImportLogEntry]) -> bool:
    """Check whether a previous import attempt reported the row as imported."""
    serial_no = serial_number(row)
    if serial_no is None:
        return False
    for log in import_log:
        if log.success and any(same_serial(serial_no, other) for other in log.row_indexes):
            return True
    return False


class ImportLogIndex:
    """
    Lookup of successfully imported serial numbers.

    Built once per refresh so that annotating a row does not rescan the
    whole import log.
    """

    def __init__(self, import_log: Iterable[ImportLogEntry] = ()):
        self._imported: list[Any] = []
        self._hashed: set[tuple[type, Any]] = set()
        entries = 0

        for log in import_log:
            entries += 1
            if not log.success:
                continue
            for serial_no in log.row_indexes:
                key = _serial_key(serial_no)
                if key is None:
                    self._imported.append(serial_no)
                else:
                    self._hashed.add(key)

        self.entry_count = entries
        logger.debug(
            f"Indexed {len(self._hashed) + len(self._imported)} imported rows "
            f"from {entries} log entries"
        )

    def was_imported(self, row: Sequence[Any]) -> bool:
        serial_no = serial_number(row)
        if serial_no is None:
            return False
        key = _serial_key(serial_no)
        if key is not None:
            return key in self._hashed
        return any(same_serial(serial_no, other) for other in self._imported)

    def __len__(self) -> int:
        return len(self._hashed) + len(self._imported)
