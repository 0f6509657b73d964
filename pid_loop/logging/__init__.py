"""Step logging components."""

from pid_loop.logging.csv_logger import CSVLogger, STEP_COLUMNS, step_row

__all__ = [
    "CSVLogger",
    "STEP_COLUMNS",
    "step_row",
]
