"""A print-based logger for interactive sessions.

Standard Python logging disappears in notebooks and `panel serve` consoles
unless carefully configured. This module prints to stdout with timestamps
and level labels instead. A minimum level keeps per-tick chatter quiet:
pass `level=` or set the LIFSCOPE_LOG_LEVEL environment variable.

Usage:
    from lifscope.utils import get_logger
    log = get_logger("simulation.engine")
    log.info("Spike at t=%d", 12)
"""

import os
import sys
from datetime import datetime

LEVELS = {"DEBUG": 10, "INFO": 20, "WARNING": 30, "ERROR": 40}


def _resolve_level(level):
    if level is None:
        level = os.environ.get("LIFSCOPE_LOG_LEVEL", "INFO")
    if isinstance(level, int):
        return level
    try:
        return LEVELS[str(level).upper()]
    except KeyError:
        raise ValueError(
            f"Unknown log level {level!r}; expected one of {sorted(LEVELS)}"
        )


def get_logger(name, out=None, level=None):
    """Create a print-based logger.

    Parameters
    ----------
    name : str
        Logger name, displayed in every message header.
    out : file-like, optional
        Additional output stream (e.g., an open log file).
    level : str or int, optional
        Minimum level to print. Defaults to LIFSCOPE_LOG_LEVEL, else INFO.
        Read once, when the logger is created.

    Returns
    -------
    callable
        A log function with .debug, .info, .warning, .error methods.
    """
    prefix = f"lifscope:{name}"
    line_length = 72
    outputs = [sys.stdout] + ([out] if out else [])
    threshold = _resolve_level(level)

    def _header(label):
        now = datetime.now().strftime("%H:%M:%S")
        for dest in outputs:
            print(f"{'_' * line_length}", file=dest)
            print(f"{prefix} {label} [{now}]", file=dest)

    def log(label, msg, args):
        if LEVELS[label] < threshold:
            return
        _header(label)
        for dest in outputs:
            try:
                print(msg % args, file=dest)
            except TypeError:
                print(msg, file=dest)

    log.level = threshold
    log.debug = lambda msg, *args: log("DEBUG", msg, args)
    log.info = lambda msg, *args: log("INFO", msg, args)
    log.warning = lambda msg, *args: log("WARNING", msg, args)
    log.error = lambda msg, *args: log("ERROR", msg, args)

    return log
