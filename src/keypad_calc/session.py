"""
In-memory calculator sessions.

Each browser (or CLI run) owns one CalculatorSession holding the current
engine state plus the history panel flag. Sessions live only as long as the
process.
"""

import logging
import os
import threading
import uuid
from collections import OrderedDict
from typing import List, Optional, TypedDict

from . import engine
from .engine import CalculatorState
from .keys import TOGGLE_HISTORY, UnknownActionError, classify_key, dispatch
from .numbers import format_display

logger = logging.getLogger(__name__)

MAX_SESSIONS = int(os.environ.get("KEYPAD_CALC_MAX_SESSIONS", "500"))


class Snapshot(TypedDict):
    """What the presentation layer draws."""
    display: str
    raw_display: str
    expression: str
    history: List[str]
    show_history: bool
    waiting_for_operand: bool


class CalculatorSession:
    """Calculator state for one user, updated one event at a time."""

    def __init__(self, session_id: Optional[str] = None):
        self.session_id = session_id or str(uuid.uuid4())
        self.state: CalculatorState = engine.initial_state()
        self.show_history = False
        self._lock = threading.Lock()

    def press(self, action: str, value: Optional[str] = None) -> Snapshot:
        """
        Apply one action and return the resulting snapshot.

        Args:
            action: Action name (see keys.ACTIONS)
            value: Digit or operator for actions that take one

        Raises:
            UnknownActionError: If the action cannot be applied
        """
        with self._lock:
            if action == TOGGLE_HISTORY:
                self.show_history = not self.show_history
            self.state = dispatch(self.state, action, value)
            logger.debug(
                "Session %s: %s %s -> %r", self.session_id, action, value or "", self.state.display
            )
            return self._snapshot()

    def press_key(self, key: str) -> Optional[Snapshot]:
        """Apply a keyboard key; returns None when the key is ignored."""
        classified = classify_key(key)
        if classified is None:
            return None
        action, value = classified
        return self.press(action, value)

    def toggle_history(self) -> Snapshot:
        return self.press(TOGGLE_HISTORY)

    def snapshot(self) -> Snapshot:
        with self._lock:
            return self._snapshot()

    def _snapshot(self) -> Snapshot:
        return Snapshot(
            display=format_display(self.state.display),
            raw_display=self.state.display,
            expression=engine.staged_expression(self.state),
            history=list(self.state.history),
            show_history=self.show_history,
            waiting_for_operand=self.state.waiting_for_operand,
        )


# In-memory session storage, oldest first
_sessions: "OrderedDict[str, CalculatorSession]" = OrderedDict()
_sessions_lock = threading.Lock()


def get_or_create_session(session_id: Optional[str] = None) -> CalculatorSession:
    """
    Fetch a session, creating it when the id is unknown or missing.

    Args:
        session_id: Session identifier, or None for a fresh session

    Returns:
        The session
    """
    with _sessions_lock:
        if session_id and session_id in _sessions:
            _sessions.move_to_end(session_id)
            return _sessions[session_id]

        session = CalculatorSession(session_id)
        _sessions[session.session_id] = session
        logger.info("Created calculator session %s", session.session_id)

        while len(_sessions) > MAX_SESSIONS:
            evicted_id, _ = _sessions.popitem(last=False)
            logger.info("Evicted calculator session %s", evicted_id)

        return session


__all__ = [
    "MAX_SESSIONS",
    "Snapshot",
    "CalculatorSession",
    "UnknownActionError",
    "get_or_create_session",
]
