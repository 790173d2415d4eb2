"""
Logging Configuration
Sets up the 'mathwiki' logger for the command line.

Results are printed to stdout, so log records go to stderr and the listing
stays pipeable. The console shows a compact line; the optional log file keeps
full timestamps.
"""
import logging
import sys
from typing import Optional

CONSOLE_FORMAT = '%(levelname)s %(name)s: %(message)s'
FILE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(level: int = logging.WARNING, log_file: Optional[str] = None) -> logging.Logger:
    """
    Configures the logger for the 'mathwiki' namespace.

    Args:
        level: Logging level; WARNING keeps a normal run quiet.
        log_file: Optional path to save logs to a file.

    Returns:
        The configured package logger.
    """
    logger = logging.getLogger("mathwiki")
    logger.setLevel(level)

    # Repeated setup (e.g. tests calling main() twice) must not duplicate output
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    # 1. Console Handler (stderr)
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    logger.addHandler(console_handler)

    # 2. File Handler (Optional)
    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
        logger.addHandler(file_handler)

    logger.debug("Logging initialized.")
    return logger
