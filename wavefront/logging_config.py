"""
Handler setup for scripts built on the wavefront package.

Package modules only ask for ``logging.getLogger(__name__)`` and never attach
handlers; a driver script calls ``setup_logging`` once to route everything
under the ``wavefront`` namespace to stdout and, optionally, to a file.
"""
import logging
import sys
from typing import Optional

LOG_FORMAT = '%(asctime)s %(levelname)-7s %(name)s: %(message)s'
DATE_FORMAT = '%H:%M:%S'


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> logging.Logger:
    """Route ``wavefront.*`` records to stdout (and ``log_file`` if given).

    Safe to call repeatedly: previous handlers are replaced, not stacked.
    """
    logger = logging.getLogger("wavefront")
    logger.setLevel(level)
    for old in list(logger.handlers):
        logger.removeHandler(old)
        old.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode='w', encoding='utf-8'))
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.debug("log output: stdout%s", f" + {log_file}" if log_file else "")
    return logger
