"""Tests for per-session state and the bounded session store."""

from __future__ import annotations

from codesim.services.session import SessionStore


class TestSessionStore:
    def test_same_id_returns_same_state(self) -> None:
        store = SessionStore(page_size=3)
        assert store.get("a") is store.get("a")
        assert store.get("a").library.page_size == 3
        assert len(store) == 1

    def test_least_recently_used_session_is_evicted(self, make_file) -> None:
        store = SessionStore(max_sessions=3)
        store.get("a")
        store.get("b").toggle(make_file(1))
        store.get("c")
        store.get("a")

        store.get("d")

        assert len(store) == 3
        assert "b" not in store
        assert all(name in store for name in ("a", "c", "d"))
        # A returning session starts over
        assert store.get("b").selection.size() == 0
        assert "c" not in store
