# Exporter utilities
from .logging import (
    log, logWarning, logError, logDebug, init_logging, close_logging, print_summary,
    get_warnings, get_errors, reset_counts,
)
from .binary import write_length_prefixed, read_length_prefixed, LENGTH_PREFIX_SIZE
