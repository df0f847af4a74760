"""A print-based logger for interactive simulation work.

Standard Python logging disappears in Jupyter notebooks unless carefully
configured. This module provides a simple alternative: print to stdout
with timestamps and level labels. Unsophisticated, but visible.

Simulation objects accept any object with the same interface as their
``log`` argument, so callers can inject their own sink (or silence one
with ``null_logger()``).

Usage:
    from lifnet.utils import get_logger
    log = get_logger("my_module")
    log.info("Built network with %s neurons", 100)
"""

import sys
from datetime import datetime

LEVELS = {"DEBUG": 10, "INFO": 20, "WARNING": 30, "ERROR": 40}


def get_logger(name, out=None, level="DEBUG", stdout=True):
    """Create a print-based logger.

    Parameters
    ----------
    name : str
        Logger name, displayed in every message header.
    out : file-like, optional
        Additional output stream (e.g., an open log file).
    level : str
        Lowest level that is printed.
    stdout : bool
        If False, only ``out`` receives messages.

    Returns
    -------
    callable
        A log function with .debug, .info, .warning, .error methods.
    """
    if level not in LEVELS:
        raise ValueError(f"Unknown log level '{level}'. Use one of {list(LEVELS)}.")

    prefix = f"lifnet:{name}"
    line_length = 72
    outputs = ([sys.stdout] if stdout else []) + ([out] if out else [])
    floor = LEVELS[level]

    def _header(level):
        now = datetime.now().strftime("%H:%M:%S")
        for dest in outputs:
            print(f"{'_' * line_length}", file=dest)
            print(f"{prefix} {level} [{now}]", file=dest)

    def log(level, msg, args):
        if LEVELS[level] < floor:
            return
        _header(level)
        for dest in outputs:
            try:
                print(msg % args, file=dest)
            except TypeError:
                print(msg, file=dest)

    log.debug = lambda msg, *args: log("DEBUG", msg, args)
    log.info = lambda msg, *args: log("INFO", msg, args)
    log.warning = lambda msg, *args: log("WARNING", msg, args)
    log.error = lambda msg, *args: log("ERROR", msg, args)

    return log


def null_logger():
    """A logger with the get_logger interface that prints nothing."""
    def log(level, msg, args):
        return None

    log.debug = lambda msg, *args: None
    log.info = lambda msg, *args: None
    log.warning = lambda msg, *args: None
    log.error = lambda msg, *args: None

    return log
