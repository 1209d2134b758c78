#!/usr/bin/env python3
"""
Main entry point for the Fair Minutes JSON API.

This script launches the Flask-based web server. Settings come from the
environment: FAIRMINUTES_HOST, FAIRMINUTES_PORT, FAIRMINUTES_RULES_FILE and
FAIRMINUTES_LOG_LEVEL.
"""
import os

from fairminutes.services import RulesService
from fairminutes.ui.web_app import run_web_app
from fairminutes.utils import configure_logging
from fairminutes.utils.constants import DEFAULT_API_HOST, DEFAULT_API_PORT

if __name__ == "__main__":
    configure_logging(os.environ.get("FAIRMINUTES_LOG_LEVEL", "INFO"))
    run_web_app(
        host=os.environ.get("FAIRMINUTES_HOST", DEFAULT_API_HOST),
        port=int(os.environ.get("FAIRMINUTES_PORT", DEFAULT_API_PORT)),
        rules_service=RulesService(os.environ.get("FAIRMINUTES_RULES_FILE")),
    )
