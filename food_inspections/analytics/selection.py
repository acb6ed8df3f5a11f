"""Shared selected-community state for the linked views."""

from __future__ import annotations

from typing import Optional


class SelectionState:
    """Holds at most one selected community; selecting it again clears it."""

    def __init__(self, selected: Optional[str] = None) -> None:
        self._selected = selected or None

    @property
    def selected(self) -> Optional[str]:
        return self._selected

    def select(self, name: Optional[str]) -> Optional[str]:
        if not name or name == self._selected:
            self._selected = None
        else:
            self._selected = name
        return self._selected

    def clear(self) -> None:
        self._selected = None

    def is_selected(self, name: Optional[str]) -> bool:
        return self._selected is not None and name == self._selected

    def __repr__(self) -> str:
        return f"SelectionState(selected={self._selected!r})"
