"""
Rules store for the Fair Minutes allocation engine.

Formation rules can be overridden by a JSON file. The service only reads and
writes that file; callers pass the resulting :class:`FormationConfig` into
each engine call.
"""
import json
import logging
import os
from typing import Optional

from ..models import DEFAULT_FORMATION, FormationConfig, FormationError
from ..utils.constants import DEFAULT_RULES_FILE

logger = logging.getLogger(__name__)


class RulesService:
    """Loads, persists and resets the formation rules override."""

    def __init__(self, override_path: Optional[str] = None):
        """
        Initialize the rules service.

        Args:
            override_path: JSON file holding the override (camelCase keys)
        """
        self.override_path = override_path or DEFAULT_RULES_FILE

    def get_rules(self) -> FormationConfig:
        """
        Return the active rules.

        Missing keys in the override fall back to the defaults. An unreadable
        or invalid override is ignored and the defaults are returned.
        """
        if not os.path.exists(self.override_path):
            return DEFAULT_FORMATION

        try:
            with open(self.override_path, "r", encoding="utf-8") as f:
                data = json.load(f)
            if not isinstance(data, dict):
                raise FormationError("rules override must be a JSON object")
            return FormationConfig.from_dict(data)
        except (OSError, ValueError) as e:
            logger.warning("Ignoring rules override %s: %s", self.override_path, e)
            return DEFAULT_FORMATION

    def persist_rules(self, config: FormationConfig) -> None:
        """
        Write the rules override.

        Raises:
            OSError: If the file cannot be written
        """
        directory = os.path.dirname(self.override_path)
        if directory and not os.path.exists(directory):
            os.makedirs(directory)
        with open(self.override_path, "w", encoding="utf-8") as f:
            json.dump(config.to_dict(), f, indent=2)
        logger.info("Saved rules override to %s", self.override_path)

    def reset_rules(self) -> None:
        """Remove the override so the defaults apply again."""
        if os.path.exists(self.override_path):
            os.remove(self.override_path)
            logger.info("Removed rules override %s", self.override_path)
