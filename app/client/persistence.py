"""
Small JSON state files for client stores.

Example content of a relevant-notes file:
{
  "relevant_notes": {"12": 1730653200000, "7": 1730653260000}
}
"""
import os
import json
import tempfile
import logging
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


class JsonStateFile:
    """Load/save a JSON object at a fixed path, with atomic replace on save."""

    def __init__(self, path):
        self.path = Path(path)

    def load(self) -> dict:
        """Return the stored object, or {} if the file is missing or unreadable."""
        if not self.path.exists():
            logger.debug("No state file found at %s", self.path)
            return {}

        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            logger.error("Invalid JSON in state file %s: %s", self.path, e)
            return {}
        except OSError as e:
            logger.error("Failed to read state file %s: %s", self.path, e)
            return {}

        if not isinstance(data, dict):
            logger.error("State file %s does not contain an object", self.path)
            return {}
        return data

    def save(self, data: dict) -> None:
        """Write data atomically. Raises OSError on failure."""
        self.path.parent.mkdir(parents=True, exist_ok=True)

        tmp_path: Optional[Path] = None
        try:
            with tempfile.NamedTemporaryFile(
                "w",
                dir=str(self.path.parent),
                delete=False,
                encoding="utf-8",
            ) as tmp:
                tmp_path = Path(tmp.name)
                json.dump(data, tmp, indent=2, sort_keys=True)
                tmp.flush()
                os.fsync(tmp.fileno())

            os.replace(tmp_path, self.path)
            tmp_path = None
        finally:
            if tmp_path is not None:
                try:
                    tmp_path.unlink()
                except FileNotFoundError:
                    pass
