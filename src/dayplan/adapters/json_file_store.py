"""File-based state storage adapter."""

import json
import logging
import os
import tempfile
from pathlib import Path

from dayplan.core.state import AppState
from dayplan.errors import StorageError

logger = logging.getLogger(__name__)


class JsonFileStateStore:
    """
    Single-file JSON state storage.

    Implements StateStore protocol. The whole state lives in one document;
    saves go through a temp file and an atomic rename so readers never see
    a partial write.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path).expanduser()

    def load(self) -> AppState:
        """Load state from disk. A missing file is an empty state, not an error."""
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return AppState()
        except OSError as e:
            raise StorageError(f"Failed to read {self.path}: {e}") from e
        except UnicodeDecodeError as e:
            raise StorageError(f"Corrupt state file {self.path}: {e}") from e

        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise StorageError(f"Corrupt state file {self.path}: {e}") from e
        return AppState.from_dict(data)

    def save(self, state: AppState) -> None:
        """Write state to a temp file in the same directory, then rename over the target."""
        content = json.dumps(state.to_dict(), indent=2, ensure_ascii=False) + "\n"
        temp_path = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, temp_path = tempfile.mkstemp(dir=self.path.parent, prefix=".tmp_", suffix=".json")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(content)
                f.flush()
                os.fsync(f.fileno())
            os.replace(temp_path, self.path)
        except OSError as e:
            if temp_path and os.path.exists(temp_path):
                os.unlink(temp_path)
            raise StorageError(f"Failed to write {self.path}: {e}") from e
        logger.debug(f"Saved state to {self.path} ({len(content)} bytes)")

    def exists(self) -> bool:
        return self.path.exists()
