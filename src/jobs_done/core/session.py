"""Persistence of the "last checked" checkpoint between invocations."""

import json
import logging
import os
import tempfile
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any

from jobs_done.utils.validation import to_local_naive

logger = logging.getLogger(__name__)

STATE_FORMAT_VERSION = 1


@dataclass(frozen=True)
class SessionState:
    """Timestamp of the last successful run, tagged with the user it served."""

    last_invocation_time: datetime
    owner_user: str

    def to_dict(self) -> dict[str, Any]:
        """Convert state to a JSON-serialisable dictionary."""
        return {
            "version": STATE_FORMAT_VERSION,
            "last_invocation_time": self.last_invocation_time.isoformat(),
            "owner_user": self.owner_user,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SessionState":
        """Create state from a dictionary.

        Unknown keys are ignored so newer files stay readable.

        Raises:
            ValueError: If a required key is missing or malformed
        """
        if not isinstance(data, dict):
            raise ValueError("session state must be a JSON object")

        raw_time = data.get("last_invocation_time")
        owner = data.get("owner_user")
        if not isinstance(raw_time, str) or not raw_time:
            raise ValueError("missing last_invocation_time")
        if not isinstance(owner, str) or not owner:
            raise ValueError("missing owner_user")

        return cls(
            last_invocation_time=to_local_naive(datetime.fromisoformat(raw_time)),
            owner_user=owner,
        )


class SessionStateStore:
    """Loads and atomically saves the session checkpoint file."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def load(self) -> SessionState | None:
        """Read the stored checkpoint.

        Returns:
            The stored state, or None if the file is missing or unusable.
            A broken file is reported as a warning, never as an error.
        """
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            logger.debug(f"No session state at {self.path}")
            return None
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.warning(f"Ignoring unreadable session state {self.path}: {e}")
            return None

        try:
            return SessionState.from_dict(data)
        except (TypeError, ValueError) as e:
            logger.warning(f"Ignoring malformed session state {self.path}: {e}")
            return None

    def save(self, state: SessionState) -> None:
        """Write the checkpoint atomically.

        The state is written to a temporary file in the destination directory
        and renamed over the target, so readers never see a partial file.

        Raises:
            OSError: If the directory or file cannot be written
        """
        self.path.parent.mkdir(parents=True, exist_ok=True)

        fd, temp_path = tempfile.mkstemp(
            dir=self.path.parent,
            prefix=f".{self.path.name}.",
            suffix=".tmp",
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(state.to_dict(), f, indent=2)
                f.flush()
                os.fsync(f.fileno())
            os.replace(temp_path, self.path)
        except BaseException:
            try:
                os.unlink(temp_path)
            except FileNotFoundError:
                pass
            raise

        logger.debug(f"Saved session state to {self.path}")
