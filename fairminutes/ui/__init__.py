"""
UI package for the Fair Minutes allocation engine.

This package contains the Flask JSON API used by the lineup editor.
"""
from .web_app import create_app, run_web_app

__all__ = ["create_app", "run_web_app"]
