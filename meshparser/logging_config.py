"""
Console logging for the `meshparser` command.

Summaries go to stdout; log records go to stderr so a report piped to a
file stays clean.
"""
import logging
import sys
from typing import Optional

CONSOLE_FORMAT = "%(levelname)s: %(message)s"
FILE_FORMAT = "%(asctime)s %(name)s %(levelname)s: %(message)s"


def setup_logging(verbose: bool = False, log_file: Optional[str] = None) -> logging.Logger:
    """
    Install handlers on the 'meshparser' logger.

    Args:
        verbose: show section counts and other DEBUG records on the console
            (otherwise only warnings, such as an unexpected format version)
        log_file: also write every record, DEBUG included, to this file

    Returns:
        The configured 'meshparser' logger.
    """
    logger = logging.getLogger("meshparser")
    logger.handlers.clear()
    logger.setLevel(logging.DEBUG if verbose or log_file else logging.WARNING)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(logging.DEBUG if verbose else logging.WARNING)
    console.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    logger.addHandler(console)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="w", encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        logger.addHandler(file_handler)
    return logger
