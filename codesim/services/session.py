"""In-memory per-session state.

Each browser session owns one SessionState.  The selection is replaced
wholesale on every change (``SelectionSet`` is immutable), so a reader
holding the previous value never sees a partial update.
"""

from __future__ import annotations

import logging
from collections import OrderedDict
from dataclasses import dataclass, field

from codesim.models.code_file import CodeFile
from codesim.services.comparison import ComparisonPanel
from codesim.services.library import LibraryView
from codesim.services.selection import SelectionSet

logger = logging.getLogger(__name__)


@dataclass
class SessionState:
    """Selection, library view, and comparison panel shared by one session."""

    session_id: str
    library: LibraryView
    panel: ComparisonPanel = field(default_factory=ComparisonPanel)
    selection: SelectionSet = field(default_factory=SelectionSet)

    def toggle(self, file: CodeFile) -> SelectionSet:
        self.selection = self.selection.toggle(file)
        return self.selection

    def clear_selection(self) -> SelectionSet:
        self.selection = self.selection.clear()
        return self.selection


class SessionStore:
    """Creates and caches SessionState objects keyed by session id.

    At most ``max_sessions`` are kept; the least recently used one is
    evicted when a new session would exceed the cap.
    """

    def __init__(self, page_size: int = 10, max_sessions: int = 1000) -> None:
        self.page_size = page_size
        self.max_sessions = max_sessions
        self._sessions: OrderedDict[str, SessionState] = OrderedDict()

    def get(self, session_id: str) -> SessionState:
        state = self._sessions.get(session_id)
        if state is not None:
            self._sessions.move_to_end(session_id)
            return state

        state = SessionState(
            session_id=session_id, library=LibraryView(page_size=self.page_size)
        )
        self._sessions[session_id] = state
        logger.info("Created session %s", session_id)
        while len(self._sessions) > self.max_sessions:
            evicted, _ = self._sessions.popitem(last=False)
            logger.info("Evicted idle session %s", evicted)
        return state

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)
