"""
Logging setup for print-tiler.
"""

import logging
from typing import Union


def setup_logging(log_level: Union[int, str] = logging.INFO) -> None:
    """Setup basic logging configuration."""
    if isinstance(log_level, str):
        log_level = logging.getLevelName(log_level.upper())
        if not isinstance(log_level, int):
            log_level = logging.INFO
    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )
