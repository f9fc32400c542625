"""Application-wide logger.

Everything logs through ``selfmanager_logger``; modules import it as
``logger``. The level comes from ``LOG_LEVEL`` and ``DEBUG=true`` forces
debug output.
"""

import logging
import os
import sys

LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').upper()
DEBUG = os.getenv('DEBUG', 'False').lower() in ['true', '1', 'yes']

if DEBUG:
    LOG_LEVEL = 'DEBUG'

LOG_FORMAT = '%(asctime)s - %(name)s:%(levelname)s: %(filename)s:%(lineno)s - %(message)s'


def get_console_handler(log_level: int = logging.INFO) -> logging.StreamHandler:
    """Return a console handler writing to stderr."""
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    return console_handler


selfmanager_logger = logging.getLogger('selfmanager')
current_log_level = logging.getLevelName(LOG_LEVEL)
if not isinstance(current_log_level, int):
    current_log_level = logging.INFO
selfmanager_logger.setLevel(current_log_level)

if not selfmanager_logger.handlers:
    selfmanager_logger.addHandler(get_console_handler(current_log_level))
selfmanager_logger.propagate = False
