"""
Manifest core library containing logging helper functionality
"""

import logging


class NoDebugFilter(logging.Filter):
    """
    Logging filter that filters out any DEBUG message for the specified logger

    Records of other loggers pass unchanged, which allows attaching this
    filter to handlers that serve the whole logger hierarchy.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if super().filter(record):
            return record.levelno > logging.DEBUG
        return True
