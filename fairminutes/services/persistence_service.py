"""
Persistence service for the Fair Minutes allocation engine.

This module saves allocations to and loads them from JSON files, using the
same ``{quarters, summary, warnings}`` shape as a stored match record.
"""
import datetime
import json
import logging
import os
from typing import List, Optional, Tuple

from ..models import Allocation

logger = logging.getLogger(__name__)


class PersistenceService:
    """Service for persisting allocations to JSON files."""

    @staticmethod
    def save_allocation_to_file(allocation: Allocation, file_path: str) -> None:
        """
        Save an allocation to a JSON file.

        Args:
            allocation: The allocation to save
            file_path: Path where to save the file

        Raises:
            OSError: If the file cannot be written
        """
        directory = os.path.dirname(file_path)
        if directory and not os.path.exists(directory):
            os.makedirs(directory)

        with open(file_path, "w", encoding="utf-8") as f:
            json.dump(allocation.to_dict(), f, indent=2)
        logger.info("Saved allocation to %s", file_path)

    @staticmethod
    def load_allocation_from_file(file_path: str) -> Allocation:
        """
        Load an allocation from a JSON file.

        Args:
            file_path: Path to the JSON file to load

        Returns:
            Allocation loaded from file

        Raises:
            FileNotFoundError: If file doesn't exist
            ValueError: If the file is not valid JSON or not an allocation
        """
        if not os.path.exists(file_path):
            raise FileNotFoundError(f"Allocation file not found: {file_path}")

        with open(file_path, "r", encoding="utf-8") as f:
            data = json.load(f)

        if not isinstance(data, dict):
            raise ValueError(f"Allocation file {file_path} does not contain an object")
        return Allocation.from_dict(data)

    @staticmethod
    def auto_save(allocation: Allocation, auto_save_dir: str = "autosave") -> Optional[str]:
        """
        Save an allocation under a timestamped file name.

        Args:
            allocation: Allocation to save
            auto_save_dir: Directory for auto-save files

        Returns:
            Path to saved file, or None if save failed
        """
        timestamp = datetime.datetime.now().strftime("%Y%m%d_%H%M%S")
        file_path = os.path.join(auto_save_dir, f"allocation_autosave_{timestamp}.json")
        try:
            PersistenceService.save_allocation_to_file(allocation, file_path)
        except OSError:
            logger.warning("Auto-save to %s failed", file_path, exc_info=True)
            return None
        return file_path

    @staticmethod
    def get_recent_saves(save_dir: str = ".", limit: int = 10) -> List[Tuple[str, float]]:
        """
        Get list of recent save files.

        Args:
            save_dir: Directory to search for save files
            limit: Maximum number of files to return

        Returns:
            List of tuples (filename, modification_time) sorted by newest first
        """
        if not os.path.exists(save_dir):
            return []

        try:
            json_files = []
            for filename in os.listdir(save_dir):
                if filename.endswith('.json'):
                    file_path = os.path.join(save_dir, filename)
                    if os.path.isfile(file_path):
                        json_files.append((filename, os.path.getmtime(file_path)))

            json_files.sort(key=lambda x: x[1], reverse=True)
            return json_files[:limit]
        except OSError:
            logger.warning("Could not list saves in %s", save_dir, exc_info=True)
            return []
