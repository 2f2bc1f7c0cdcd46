"""JSON-file implementation of the local session cache."""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import List, Optional

from fitfocus.domain.errors import SessionDecodeError, StorageUnavailableError
from fitfocus.domain.sessions.models import BJJSession

logger = logging.getLogger(__name__)

DEFAULT_FILE_NAME = "bjj_sessions.json"


class FileSessionPersistence:
    """
    Stores the session list as one JSON array in the app's document directory.

    Every save rewrites the whole file (write to a temp file, then rename).
    """

    def __init__(self, directory: Optional[Path], file_name: str = DEFAULT_FILE_NAME):
        self._directory = Path(directory).expanduser() if directory is not None else None
        self._file_name = file_name

    @property
    def file_path(self) -> Optional[Path]:
        if self._directory is None:
            return None
        return self._directory / self._file_name

    def _require_file_path(self) -> Path:
        path = self.file_path
        if path is None:
            raise StorageUnavailableError("Could not resolve file location for BJJ sessions storage")
        return path

    def get_sessions(self) -> List[BJJSession]:
        path = self.file_path
        if path is None:
            return []

        try:
            if not path.exists():
                return []
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
            if not isinstance(data, list):
                raise SessionDecodeError(f"Expected a JSON array, got {type(data).__name__}")
            return [BJJSession.from_dict(item) for item in data]
        # ValueError covers both JSON and UTF-8 decode failures
        except (OSError, ValueError, SessionDecodeError) as e:
            logger.warning("Error loading sessions from %s: %s", path, e)
            return []

    def save_sessions(self, sessions: List[BJJSession]) -> None:
        path = self._require_file_path()
        payload = json.dumps([s.to_dict() for s in sessions])

        tmp_name = None
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w", encoding="utf-8", dir=path.parent, prefix=f".{path.name}.", suffix=".tmp", delete=False
            ) as tmp:
                tmp_name = tmp.name
                tmp.write(payload)
            os.replace(tmp_name, path)
        except OSError as e:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise StorageUnavailableError(f"Could not write sessions to {path}: {e}") from e
        logger.debug("Saved %d sessions to %s", len(sessions), path)

    def clear_sessions(self) -> None:
        path = self._require_file_path()
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            raise StorageUnavailableError(f"Could not remove {path}: {e}") from e
