"""
session.py – Client-local authentication marker with a sliding expiry.

The marker is a small JSON file holding ``{"timestamp": <epoch ms>,
"username": <str>}``. It is a convenience gate for the console, not a
security boundary: the backend never sees it.
"""

import json
import logging
import math
import time
from pathlib import Path
from typing import Callable, Optional

from .notifier import Notifier

logger = logging.getLogger(__name__)

_HOUR_MS = 60 * 60 * 1000

ACTIVITY_EVENTS = frozenset({"pointer", "key", "scroll", "touch"})


class SessionManager:
    """Reads, writes and expires the session marker at *path*."""

    def __init__(
        self,
        path: Path,
        notifier: Optional[Notifier] = None,
        max_age_hours: float = 24,
        warning_hours: float = 23,
        clock: Callable[[], float] = time.time,
    ):
        self.path = Path(path)
        self.notifier = notifier or Notifier()
        self.max_age_ms = max_age_hours * _HOUR_MS
        self.warning_ms = warning_hours * _HOUR_MS
        self._clock = clock

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def check_session(self) -> bool:
        """Return True while a marker younger than the maximum age exists.

        Warns when fewer than ``max_age - warning`` hours remain.
        """
        data = self._load()
        if data is None:
            return False

        age = self._now_ms() - data["timestamp"]
        if age > self.max_age_ms:
            logger.info("Session for %s expired", data.get("username"))
            self.clear_session()
            return False

        if age > self.warning_ms:
            hours_left = max(1, math.ceil((self.max_age_ms - age) / _HOUR_MS))
            self.notifier.warning(f"Session expires in {hours_left} hour(s)")
        return True

    def save_session(self, username: str) -> None:
        self._write({"timestamp": self._now_ms(), "username": username})

    def refresh_session(self) -> None:
        """Slide the expiry window forward; does nothing without a marker."""
        data = self._load()
        if data is None:
            return
        data["timestamp"] = self._now_ms()
        self._write(data)

    def clear_session(self) -> None:
        try:
            self.path.unlink()
        except FileNotFoundError:
            pass
        except OSError as exc:
            logger.warning("Could not remove session file %s: %s", self.path, exc)

    @property
    def username(self) -> Optional[str]:
        data = self._load()
        return data.get("username") if data else None

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _load(self) -> Optional[dict]:
        """Return the stored marker, or None (discarding it) when unusable."""
        if not self.path.exists():
            return None
        try:
            data = json.loads(self.path.read_text())
            if not isinstance(data, dict):
                raise ValueError("marker is not an object")
            data["timestamp"] = int(data["timestamp"])
            if data["timestamp"] > self._now_ms():
                raise ValueError("timestamp lies in the future")
        except (OSError, ValueError, KeyError, TypeError, OverflowError) as exc:
            logger.warning("Discarding malformed session marker %s: %s", self.path, exc)
            self.clear_session()
            return None
        return data

    def _write(self, data: dict) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(data))
        except OSError as exc:
            logger.error("Could not write session file %s: %s", self.path, exc)


class ActivityObserver:
    """Refreshes the session on operator activity while attached."""

    def __init__(self, session: SessionManager):
        self.session = session
        self.attached = False

    def attach(self) -> None:
        self.attached = True

    def detach(self) -> None:
        self.attached = False

    def notify(self, event: str) -> bool:
        """Report an activity event; return True when it refreshed the session."""
        if not self.attached or event not in ACTIVITY_EVENTS:
            return False
        self.session.refresh_session()
        return True
