"""
Logging configuration for the Fair Minutes entry points.

Library modules only create named loggers; handlers are installed here by the
scripts that launch the application.
"""
import logging
from typing import Union

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: Union[int, str] = logging.INFO) -> None:
    """
    Install a basic stream handler on the root logger.

    Args:
        level: Logging level as a number or a name such as ``"DEBUG"``
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    logging.basicConfig(level=level, format=LOG_FORMAT)
