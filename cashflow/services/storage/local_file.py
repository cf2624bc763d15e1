"""
Local JSON persistence of the whole application state.

The local copy is the source of truth between sessions; the remote tables
only mirror it. Loading, syncing and error flags are never written.
"""

from pathlib import Path
from typing import Optional, Union

import structlog
from pydantic import ValidationError

from cashflow.config import get_settings
from cashflow.state.app_state import AppState
from cashflow.services.storage.interface import StorageError

logger = structlog.get_logger("cashflow.storage")


class LocalStateFile:
    """Reads and writes AppState as a single JSON document."""

    def __init__(self, path: Optional[Union[str, Path]] = None):
        self.path = Path(path) if path else get_settings().app.state_path

    def exists(self) -> bool:
        return self.path.exists()

    def load(self) -> Optional[AppState]:
        """
        Rehydrate the saved state.

        Returns:
            The saved state, or None if nothing was saved yet

        Raises:
            StorageError: If the file exists but can't be parsed
        """
        if not self.path.exists():
            return None
        try:
            state = AppState.model_validate_json(self.path.read_text(encoding="utf-8"))
        except (OSError, ValidationError) as e:
            raise StorageError(f"Failed to read state file {self.path}: {e}")
        logger.debug("state loaded", path=str(self.path), **state.record_counts())
        return state

    def save(self, state: AppState) -> None:
        """Write the state, replacing the previous file in one rename."""
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(state.to_persisted_json(), encoding="utf-8")
            tmp.replace(self.path)
        except OSError as e:
            raise StorageError(f"Failed to write state file {self.path}: {e}")

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)
