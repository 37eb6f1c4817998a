"""
Session state persistence for the console.

A SessionState is what a browser keeps in localStorage: a handful of named
stores ("auth-storage", "ui-storage", "theme-storage") plus the pending toast
queue. The web console keys one state per session cookie; the CLI keeps one for
the whole shell.
"""

import json
import logging
import os
import re
import threading
import time
import uuid
from collections import OrderedDict
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Tuple, cast

logger = logging.getLogger(__name__)

_SESSION_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]{8,64}$")

DEFAULT_IDLE_SECONDS = 60 * 60 * 24 * 30
DEFAULT_MAX_SESSIONS = 10000


class SessionState:
    """
    Key/value state for one console session.
    """

    def __init__(self, session_id: Optional[str] = None):
        """
        Initialize session state with optional ID.

        Args:
            session_id: Unique session identifier
        """
        self.session_id: str = session_id or uuid.uuid4().hex
        self.created_at: str = datetime.now().isoformat()
        self.last_updated: str = self.created_at
        self.data: Dict[str, Any] = {}
        # Id this session had before rotate_id(), until the store drops it
        self.rotated_from: Optional[str] = None

    def rotate_id(self) -> str:
        """
        Give the session a new id, keeping its data.

        Returns:
            The new session id
        """
        if self.rotated_from is None:
            self.rotated_from = self.session_id
        self.session_id = uuid.uuid4().hex
        return self.session_id

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get value from session state.

        Args:
            key: Data key
        Returns:
            Value associated with key or default
        """
        return self.data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        """
        Set value in session state.

        Args:
            key: Data key
            value: Data value (must be JSON serialisable)
        """
        self.data[key] = value
        self.last_updated = datetime.now().isoformat()

    def update(self, values: Dict[str, Any]) -> None:
        """
        Update multiple values in session state.

        Args:
            values: Dictionary of key-value pairs to update
        """
        self.data.update(values)
        self.last_updated = datetime.now().isoformat()

    def delete(self, key: str) -> None:
        """
        Delete key from session state.

        Args:
            key: Data key to delete
        """
        if key in self.data:
            del self.data[key]
            self.last_updated = datetime.now().isoformat()

    def clear(self) -> None:
        """Clear all session data."""
        self.data = {}
        self.last_updated = datetime.now().isoformat()

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert session state to dictionary.

        Returns:
            Dict containing session state
        """
        return {
            "session_id": self.session_id,
            "created_at": self.created_at,
            "last_updated": self.last_updated,
            "data": self.data,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SessionState':
        """
        Create SessionState from dictionary.

        Args:
            data: Dictionary containing session data

        Returns:
            SessionState instance
        """
        session = cls(str(data["session_id"]) if data.get("session_id") else None)

        if data.get("created_at"):
            session.created_at = str(data["created_at"])
        if data.get("last_updated"):
            session.last_updated = str(data["last_updated"])

        raw_data = data.get("data")
        if isinstance(raw_data, dict):
            session.data = {str(k): v for k, v in cast(Dict[Any, Any], raw_data).items() if k is not None}

        return session

    def to_json(self) -> str:
        """
        Convert session state to JSON.

        Returns:
            JSON string representation of session state
        """
        return json.dumps(self.to_dict(), default=str)

    @classmethod
    def from_json(cls, json_str: str) -> 'SessionState':
        """
        Create SessionState from JSON string.

        A corrupt payload yields a fresh session rather than an error: losing
        UI preferences is preferable to locking the user out.

        Args:
            json_str: JSON string containing session data

        Returns:
            SessionState instance
        """
        try:
            data = json.loads(json_str)
        except json.JSONDecodeError:
            logger.warning("Discarding unreadable session payload")
            return cls()
        if not isinstance(data, dict):
            return cls()
        return cls.from_dict(cast(Dict[str, Any], data))


def is_valid_session_id(session_id: Optional[str]) -> bool:
    """Session ids come from cookies; only accept the shape we generate."""
    return bool(session_id) and bool(_SESSION_ID_PATTERN.match(session_id or ""))


class SessionStore:
    """
    In-memory session persistence.

    Sessions idle for longer than idle_seconds are dropped, and past
    max_sessions the least recently used one is evicted.
    """

    def __init__(self, idle_seconds: float = DEFAULT_IDLE_SECONDS, max_sessions: int = DEFAULT_MAX_SESSIONS,
                 clock: Callable[[], float] = time.time):
        self.idle_seconds = idle_seconds
        self.max_sessions = max_sessions
        self._clock = clock
        self._sessions: "OrderedDict[str, Tuple[float, str]]" = OrderedDict()
        self._lock = threading.Lock()

    def load(self, session_id: Optional[str]) -> SessionState:
        """
        Load a session, starting a new one when the id is unknown or invalid.

        Ids the store did not issue are never adopted.

        Args:
            session_id: Session id from the client, may be None

        Returns:
            SessionState instance
        """
        if not is_valid_session_id(session_id):
            return SessionState()
        payload = self._read(cast(str, session_id))
        if payload is None:
            return SessionState()
        state = SessionState.from_json(payload)
        state.session_id = cast(str, session_id)
        return state

    def save(self, state: SessionState) -> None:
        """Persist a session, dropping the one it was rotated from."""
        if state.rotated_from:
            self.delete(state.rotated_from)
            state.rotated_from = None
        self._write(state.session_id, state.to_json())

    def delete(self, session_id: str) -> None:
        """Forget a session."""
        with self._lock:
            self._sessions.pop(session_id, None)

    def session_ids(self) -> List[str]:
        """Ids of all persisted sessions."""
        with self._lock:
            return list(self._sessions.keys())

    def _is_expired(self, touched_at: float) -> bool:
        return self._clock() - touched_at > self.idle_seconds

    def _read(self, session_id: str) -> Optional[str]:
        with self._lock:
            entry = self._sessions.get(session_id)
            if entry is None:
                return None
            if self._is_expired(entry[0]):
                del self._sessions[session_id]
                return None
            self._sessions.move_to_end(session_id)
            return entry[1]

    def _write(self, session_id: str, payload: str) -> None:
        with self._lock:
            self._sessions[session_id] = (self._clock(), payload)
            self._sessions.move_to_end(session_id)
            self._prune()

    def _prune(self) -> None:
        expired = [sid for sid, (touched_at, _) in self._sessions.items() if self._is_expired(touched_at)]
        for sid in expired:
            del self._sessions[sid]
        while len(self._sessions) > self.max_sessions:
            self._sessions.popitem(last=False)


class FileSessionStore(SessionStore):
    """Session persistence with one JSON file per session; idle files are removed on read."""

    def __init__(self, storage_dir: str, idle_seconds: float = DEFAULT_IDLE_SECONDS,
                 clock: Callable[[], float] = time.time):
        super().__init__(idle_seconds=idle_seconds, clock=clock)
        self.storage_dir = os.path.expanduser(storage_dir)
        os.makedirs(self.storage_dir, exist_ok=True)
        logger.info(f"Persisting console sessions in {self.storage_dir}")

    def _path(self, session_id: str) -> str:
        return os.path.join(self.storage_dir, f"{session_id}.json")

    def _read(self, session_id: str) -> Optional[str]:
        path = self._path(session_id)
        if not os.path.exists(path):
            return None
        if self._is_expired(os.path.getmtime(path)):
            self.delete(session_id)
            return None
        with open(path, "r", encoding="utf-8") as f:
            return f.read()

    def _write(self, session_id: str, payload: str) -> None:
        path = self._path(session_id)
        tmp_path = f"{path}.tmp"
        with self._lock:
            with open(tmp_path, "w", encoding="utf-8") as f:
                f.write(payload)
            os.replace(tmp_path, path)

    def delete(self, session_id: str) -> None:
        path = self._path(session_id)
        if os.path.exists(path):
            os.remove(path)

    def session_ids(self) -> List[str]:
        return [
            name[:-len(".json")]
            for name in os.listdir(self.storage_dir)
            if name.endswith(".json")
        ]


def create_session_store(config: Dict[str, Any]) -> SessionStore:
    """
    Build the session store named by the `session` config section.

    Args:
        config: Full console configuration

    Returns:
        FileSessionStore when `session.storage_dir` is set, else in-memory
    """
    session_config = config.get("session", {})
    idle_seconds = float(session_config.get("idle_seconds", DEFAULT_IDLE_SECONDS))
    storage_dir = session_config.get("storage_dir")
    if storage_dir:
        return FileSessionStore(storage_dir, idle_seconds=idle_seconds)
    return SessionStore(
        idle_seconds=idle_seconds,
        max_sessions=int(session_config.get("max_sessions", DEFAULT_MAX_SESSIONS)),
    )
