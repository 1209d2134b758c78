"""
Utilities package for the Fair Minutes allocation engine.

This package contains constants and logging helpers used throughout the application.
"""
from .constants import (
    APP_TITLE, MIN_SQUAD_SIZE, MAX_SQUAD_SIZE, SUB_LABEL
)
from .logging_setup import configure_logging

__all__ = [
    "APP_TITLE", "MIN_SQUAD_SIZE", "MAX_SQUAD_SIZE", "SUB_LABEL", "configure_logging"
]
