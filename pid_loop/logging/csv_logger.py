"""
CSV step log for closed-loop runs.

One row per fixed step, written with csv.DictWriter. Rows are held in a
buffer and written once it reaches buffer_size or when flush_interval
seconds have passed since the last write.
"""

from typing import List, Dict, Any, TYPE_CHECKING
from pathlib import Path
import csv
import time
import threading

from pid_loop.utils.validators import InvalidConfig, validate_positive

if TYPE_CHECKING:
    from pid_loop.simulation.driver import StepRecord


STEP_COLUMNS = [
    'step', 'time', 'setpoint', 'position', 'velocity', 'output',
    'p_term', 'i_term', 'd_term', 'error', 'disturbance',
]

# StepRecord fields whose log column has a different name
_TERM_COLUMNS = {
    'proportional': 'p_term',
    'integral': 'i_term',
    'derivative': 'd_term',
}


def step_row(step: int, record: 'StepRecord') -> Dict[str, Any]:
    """Map a driver step record onto the log columns."""
    row = {_TERM_COLUMNS.get(field, field): value
           for field, value in record.to_dict().items()}
    row['step'] = step
    return row


class CSVLogger:
    """
    Buffered CSV writer for simulator steps.

    Example:
        >>> with CSVLogger("run.csv") as log:
        ...     for i, record in enumerate(driver.advance(1.0)):
        ...         log.log_step(i, record)
    """

    def __init__(
        self,
        file_path: str,
        columns: List[str] = STEP_COLUMNS,
        buffer_size: int = 100,
        flush_interval: float = 1.0
    ):
        """
        Open the file and write the header row.

        Args:
            file_path: Destination CSV path; parent directories are created
            columns: Column order of the file
            buffer_size: Rows held before a write
            flush_interval: Seconds after which a pending buffer is written
        """
        if not columns:
            raise InvalidConfig("columns cannot be empty")
        if buffer_size < 1:
            raise InvalidConfig(f"buffer_size must be at least 1, got {buffer_size}")

        self._columns = list(columns)
        self._buffer_size = buffer_size
        self._flush_interval = validate_positive(flush_interval, "flush_interval")

        self._lock = threading.Lock()
        self._pending: List[Dict[str, Any]] = []
        self._last_write = time.monotonic()
        self._rows_logged = 0
        self._closed = False

        path = Path(file_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        self._file = open(path, 'w', newline='')
        self._writer = csv.DictWriter(self._file, fieldnames=self._columns,
                                      restval='', extrasaction='ignore')
        self._writer.writeheader()

    def log_step(self, step: int, record: 'StepRecord') -> None:
        """Log one driver step under its step index."""
        self.log(step_row(step, record))

    def log(self, row: Dict[str, Any]) -> None:
        """
        Queue one row.

        Missing columns are written empty and keys outside the columns
        are ignored.
        """
        if self._closed:
            raise RuntimeError("Logger is closed")

        with self._lock:
            self._pending.append(row)
            self._rows_logged += 1
            due = (len(self._pending) >= self._buffer_size or
                   time.monotonic() - self._last_write >= self._flush_interval)

        if due:
            self.flush()

    def flush(self) -> None:
        """Write pending rows. On failure they are kept for the next flush."""
        with self._lock:
            if self._closed or not self._pending:
                return
            rows, self._pending = self._pending, []
            self._last_write = time.monotonic()

        try:
            self._writer.writerows(rows)
            self._file.flush()
        except OSError as e:
            with self._lock:
                self._pending[:0] = rows
            raise RuntimeError(f"Failed to write to CSV: {e}") from e

    def close(self) -> None:
        """Write what is pending and close the file, even if the write fails."""
        if self._closed:
            return
        try:
            self.flush()
        finally:
            with self._lock:
                self._closed = True
                self._file.close()

    @property
    def rows_logged(self) -> int:
        return self._rows_logged

    @property
    def buffer_count(self) -> int:
        """Rows waiting to be written."""
        return len(self._pending)

    @property
    def closed(self) -> bool:
        return self._closed

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
